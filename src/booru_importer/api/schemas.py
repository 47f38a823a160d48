"""Request/response Pydantic models."""

from pydantic import BaseModel


class ScrapeRequest(BaseModel):
    url: str
    html: str


class TagOut(BaseModel):
    name: str
    category: str | None = None


class NoteOut(BaseModel):
    text: str
    polygon: list[list[float]]


class PostOut(BaseModel):
    content_url: str
    page_url: str = ""
    content_type: str = "image"
    resolution: list[int] | None = None
    rating: str = "safe"
    tags: list[TagOut] = []
    notes: list[NoteOut] = []
    sources: list[str] = []
    referrer: str | None = None


class ResultOut(BaseModel):
    engine: str
    description: str = ""
    posts: list[PostOut] = []


class ScrapeResponse(BaseModel):
    results: list[ResultOut] = []
    posts: list[PostOut] = []


class EngineInfo(BaseModel):
    name: str
    features: list[str]
    notes: list[str] = []
    supported_hosts: list[str]
