import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from shorturl_app.dependencies import get_shortening_service
from shorturl_app.exceptions import NotFound
from shorturl_app.schemas.url import ErrorResponse, GreetingResponse, ShortURLResponse
from shorturl_app.services.url_service import ShorteningService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["shorturl"])

EMPTY_URL_MESSAGE = "URL field was empty."
CREATE_ERROR = "Invalid URL or internal server error"
NOT_FOUND_ERROR = "No short URL found for the given input"

# Largest value a signed 64-bit column (SQL INTEGER, BSON int64) can hold
MAX_SHORT_URL = 2 ** 63 - 1


def parse_short_url(segment: str) -> Optional[int]:
    """Return the short URL named by a path segment, or None if it cannot be one.

    Only plain ASCII digits are accepted; `int()` alone would also take
    signs, spaces, underscores and non-ASCII digits.
    """
    if not (segment.isascii() and segment.isdigit()):
        return None
    value = int(segment)
    return value if value <= MAX_SHORT_URL else None


async def read_url_field(request: Request) -> Optional[str]:
    """Read the `url` field from a form-encoded, multipart or JSON body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            return None
        url = body.get("url") if isinstance(body, dict) else None
    else:
        form = await request.form()
        url = form.get("url")
    return url if isinstance(url, str) else None


@router.get("/hello", response_model=GreetingResponse)
async def hello():
    return GreetingResponse(greeting="hello API")


@router.post(
    "/shorturl",
    response_model=ShortURLResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def create_short_url(
    request: Request,
    service: ShorteningService = Depends(get_shortening_service)
):
    """
    Shorten the submitted URL.

    An empty submission redirects back to the landing page with a message.
    Every failure (bad format, DNS, store) answers the same 400 envelope;
    the cause is only logged.
    """
    url = await read_url_field(request)

    if not url:
        return RedirectResponse(
            url=f"/?message={quote(EMPTY_URL_MESSAGE, safe='')}",
            status_code=status.HTTP_302_FOUND,
        )

    try:
        record = await service.shorten(url)
    except Exception:
        logger.exception("Could not shorten %r", url)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error=CREATE_ERROR).model_dump(),
        )

    return ShortURLResponse.from_record(record)


@router.get("/shorturl/{shorturl}")
async def redirect_to_original_url(
    shorturl: str,
    service: ShorteningService = Depends(get_shortening_service)
):
    """
    Redirect to the original URL.

    A miss answers 200 with an error body, not 404. A segment that is not
    a storable integer can never have been assigned, so it is a miss too.
    """
    short_url = parse_short_url(shorturl)
    if short_url is None:
        return ErrorResponse(error=NOT_FOUND_ERROR)

    try:
        original_url = await service.resolve(short_url)
    except NotFound:
        return ErrorResponse(error=NOT_FOUND_ERROR)

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
