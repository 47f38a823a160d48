"""GET /engines and POST /scrape endpoint handlers."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from booru_importer.api.schemas import EngineInfo, ScrapeRequest, ScrapeResponse
from booru_importer.auth.dependencies import require_api_key
from booru_importer.scrape import EngineRegistry, PageDocument, scrape

router = APIRouter(dependencies=[Depends(require_api_key)])


def _get_registry(request: Request) -> EngineRegistry:
    return request.app.state.registry


@router.get("/engines", response_model=list[EngineInfo])
async def list_engines(registry: EngineRegistry = Depends(_get_registry)):
    return [
        EngineInfo(
            name=e.name,
            features=[f.value for f in e.features],
            notes=list(e.notes),
            supported_hosts=list(e.supported_hosts),
        )
        for e in registry.engines
    ]


@router.post("/scrape", response_model=ScrapeResponse)
async def scrape_page(
    body: ScrapeRequest,
    registry: EngineRegistry = Depends(_get_registry),
):
    if registry.get_engine(body.url) is None:
        raise HTTPException(status_code=422, detail="No engine supports this host")

    document = PageDocument.from_html(body.html, body.url)
    results = await scrape(document, registry)
    return results.to_dict()
