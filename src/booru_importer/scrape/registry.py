"""Engine registry keyed on exact host matches."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .engine import Location, ScrapeEngine


class EngineRegistry:
    """Registry of engine instances, consulted in registration order."""

    def __init__(self) -> None:
        self._engines: list[ScrapeEngine] = []

    def register(self, engine: ScrapeEngine) -> None:
        """Register a configured engine instance."""
        self._engines.append(engine)

    @property
    def engines(self) -> list[ScrapeEngine]:
        return list(self._engines)

    def get_engines(self, location: Location) -> list[ScrapeEngine]:
        """All engines that can import the given URL or document."""
        return [e for e in self._engines if e.can_import(location)]

    def get_engine(self, location: Location) -> ScrapeEngine | None:
        """Find the first engine that can import the given URL or document."""
        for engine in self._engines:
            if engine.can_import(location):
                return engine
        return None
