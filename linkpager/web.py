"""HTTP front end: FastAPI app rendering pages of the entry store."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import urlsplit

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse
from jinja2 import select_autoescape
from pydantic import BaseModel
from starlette.templating import Jinja2Templates

from ._version import __version__
from .config import PACKAGE_TEMPLATES_DIR
from .logger import PageNotFound, get_logger, safe_int
from .pagination import PageView, build_page
from .store import EntryStore

logger = get_logger(__name__)

NOT_FOUND_PATH = "/404"
LINK_SCHEMES = frozenset({"http", "https"})


class EntryModel(BaseModel):
    url: str
    owner: str


class PageResponse(BaseModel):
    items: List[EntryModel]
    page: int
    has_next: bool
    next_page: int
    has_prev: bool
    prev_page: int

    @classmethod
    def from_view(cls, view: PageView) -> "PageResponse":
        return cls(
            items=[EntryModel(url=e.url, owner=e.owner) for e in view.items],
            page=view.page,
            has_next=view.has_next,
            next_page=view.next_page,
            has_prev=view.has_prev,
            prev_page=view.prev_page,
        )


class HealthResponse(BaseModel):
    status: str
    entries: int
    skipped: int
    pages: int


def safe_href(url: str) -> str:
    """Return ``url`` for use in an href, or ``#`` unless it is http(s)."""
    try:
        scheme = urlsplit(url.strip()).scheme.lower()
    except ValueError:
        return "#"
    return url if scheme in LINK_SCHEMES else "#"


def _build_templates(template_dir: Union[str, Path]) -> Jinja2Templates:
    templates = Jinja2Templates(directory=str(template_dir))
    templates.env.autoescape = select_autoescape(enabled_extensions=("html", "xml"), default=True)
    templates.env.filters["safe_href"] = safe_href
    return templates


def create_app(store: EntryStore, template_dir: Optional[Union[str, Path]] = None) -> FastAPI:
    """Build the app around an already loaded ``store``."""
    templates = _build_templates(template_dir or PACKAGE_TEMPLATES_DIR)

    app = FastAPI(
        title="linkpager",
        description="Paginated view of a links file that reloads on change",
        version=__version__,
    )
    app.state.store = store

    @app.get("/", include_in_schema=False)
    def index(request: Request, page: Optional[str] = Query(default="0")):
        page_id = safe_int(page, 0)
        try:
            view = build_page(store, page_id)
        except PageNotFound:
            logger.debug("Page %d is empty, redirecting", page_id)
            return RedirectResponse(url=NOT_FOUND_PATH, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
        return templates.TemplateResponse(
            request,
            "index.html",
            {"title": "Links", "view": view, "page_count": store.page_count},
        )

    @app.get(NOT_FOUND_PATH, include_in_schema=False)
    def not_found(request: Request):
        return templates.TemplateResponse(
            request,
            "404.html",
            {"title": "Not found"},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    @app.get("/api/page", response_model=PageResponse, summary="One page of links as JSON")
    def api_page(page: Optional[str] = Query(default="0")):
        page_id = safe_int(page, 0)
        try:
            view = build_page(store, page_id)
        except PageNotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return PageResponse.from_view(view)

    @app.get("/health", response_model=HealthResponse, summary="Health check")
    def health():
        snap = store.snapshot
        return HealthResponse(
            status="ok",
            entries=len(snap.entries),
            skipped=snap.skipped,
            pages=snap.page_count,
        )

    return app


__all__ = ["create_app", "safe_href", "PageResponse", "HealthResponse", "EntryModel"]
