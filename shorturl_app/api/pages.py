from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from shorturl_app.config import settings

router = APIRouter(tags=["pages"])


@router.get("/", include_in_schema=False)
async def landing_page():
    """Serve the landing page; it reads `?message=` client-side."""
    return FileResponse(Path(settings.views_dir) / "index.html")
