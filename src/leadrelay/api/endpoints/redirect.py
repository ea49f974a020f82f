"""
Redirect token endpoints
"""
from typing import Optional
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, RedirectResponse
from rich.markup import escape

from leadrelay.core.config import settings
from leadrelay.core.dependencies import get_token_codec
from leadrelay.schemas.outcomes import TokenResponse
from leadrelay.services.token_service import TokenCodec
from leadrelay.utils.exceptions import DecryptionFailure, MissingTokenError
from leadrelay.utils.logging import get_logger

logger = get_logger(__name__)

# Mounted under the API prefix
token_router = APIRouter()
# Mounted at the site root, the URL handed to browsers
redirect_router = APIRouter()


def is_redirectable(url: str) -> bool:
    """Only absolute http(s) URLs may be used as a redirect target"""
    parts = urlsplit(url)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


@token_router.get("/token", response_model=TokenResponse)
async def issue_token(codec: TokenCodec = Depends(get_token_codec)):
    """Encrypt the configured destination into a redirect token"""
    destination = settings.token.destination_url
    token = codec.encrypt(destination)
    redirect_url = codec.redirect_url_for_token(token)
    return TokenResponse(token=token, redirectUrl=redirect_url)


@redirect_router.get("/redirect")
async def follow_token(
    token: Optional[str] = Query(None),
    codec: TokenCodec = Depends(get_token_codec)
):
    """
    Decrypt a token and redirect to the URL inside it.
    Any failure answers 400 and never redirects.
    """
    try:
        if not token:
            raise MissingTokenError()

        destination = codec.decrypt(token)
        if not is_redirectable(destination):
            raise DecryptionFailure("decrypted value is not an http(s) URL")

    except MissingTokenError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    except DecryptionFailure as e:
        logger.warning(f"[yellow]Rejected redirect token:[/yellow] {escape(str(e.reason))}")
        return JSONResponse({"error": e.message}, status_code=e.status_code)

    return RedirectResponse(destination, status_code=status.HTTP_302_FOUND)
