"""
Notely Backend: Index Page
==========================

What:  Serves the packaged single-page frontend at ``/``.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from notely.exceptions import NotFoundError

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter(tags=["Index"])


@router.get("/", include_in_schema=False)
async def handler_index() -> FileResponse:
    index = STATIC_DIR / "index.html"
    if not index.is_file():
        raise NotFoundError(resource="file", resource_id="index.html")
    return FileResponse(path=str(index), media_type="text/html")
