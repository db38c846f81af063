"""API key check for the task API and the OAuth-shaped endpoints used by chat integrations.

The OAuth flow is a pass-through: a user's stored API key is handed out as the
authorization code and accepted back as the access token.
"""

import logging
from urllib.parse import parse_qs, quote, urldefrag

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from gorevlerim.config import get_settings
from gorevlerim.exceptions import StoreError
from gorevlerim.models.auth import OAuthErrorResponse, TokenResponse
from gorevlerim.models.common import ErrorResponse
from gorevlerim.services.api_keys import api_key_exists

logger = logging.getLogger(__name__)

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "!~*'()"


# --- Static API key ---


class ApiKeyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return await call_next(request)
        key = request.headers.get("x-api-key") or request.query_params.get("api_key")
        if key != get_settings().todo_api_key:
            return JSONResponse(status_code=401, content=ErrorResponse(error="Unauthorized").model_dump())
        return await call_next(request)


# --- OAuth endpoints ---

router = APIRouter(tags=["auth"])


def _oauth_error(error: str, description: str | None = None, status_code: int = 400) -> JSONResponse:
    body = OAuthErrorResponse(error=error, error_description=description)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def _read_grant(request: Request) -> tuple[str | None, str | None]:
    """Return (grant_type, code) from a form-encoded or JSON body."""
    if "application/x-www-form-urlencoded" in request.headers.get("content-type", ""):
        params = parse_qs((await request.body()).decode())
        return params.get("grant_type", [None])[0], params.get("code", [None])[0]
    data = await request.json()
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    code = data.get("code")
    # stored keys are text
    if code is not None and not isinstance(code, str):
        code = str(code)
    return data.get("grant_type"), code


@router.post("/gpt-oauth")
async def token(request: Request):
    """Exchange an authorization code (a stored API key) for an access token (the same key)."""
    try:
        grant_type, code = await _read_grant(request)
    except (ValueError, UnicodeDecodeError) as e:
        return _oauth_error("server_error", str(e), status_code=500)

    if grant_type != "authorization_code":
        return _oauth_error("unsupported_grant_type")
    if not code:
        return _oauth_error("invalid_request", "code is required")

    try:
        valid = api_key_exists(code)
    except StoreError as e:
        logger.info("API key lookup failed: %s", e)
        valid = False
    if not valid:
        logger.info("Rejected token request with unknown code")
        return _oauth_error("invalid_grant", "Invalid authorization code")

    return TokenResponse(access_token=code)


@router.get("/gpt-auth")
def authorize(redirect_uri: str = "", state: str = "", client_id: str = ""):
    """Forward the OAuth parameters to the consent page in its URL fragment.

    The integration requires the authorization URL to share a domain with the
    API, so this endpoint only bounces the browser to the static consent page.
    """
    params = "&".join(
        f"{name}={quote(value, safe=_URI_COMPONENT_SAFE)}"
        for name, value in (("redirect_uri", redirect_uri), ("state", state), ("client_id", client_id))
    )
    base, _ = urldefrag(get_settings().consent_page_url)
    return RedirectResponse(f"{base}#/gpt-connect?{params}", status_code=302)
