"""Minimal client for the Supabase PostgREST API.

Only equality filters are supported; that is all the task queries need.
Calls ending in ``_one`` ask PostgREST for a single JSON object, so a
result with zero or several rows comes back as a store error.
"""

import logging

import requests

from gorevlerim.config import get_settings
from gorevlerim.exceptions import StoreError
from gorevlerim.http_client import get_session

logger = logging.getLogger(__name__)

SINGLE_OBJECT = "application/vnd.pgrst.object+json"


def _base_url() -> str:
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_service_key:
        raise StoreError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
    return f"{settings.supabase_url.rstrip('/')}/rest/v1"


def _headers(single: bool = False, returning: bool = False) -> dict:
    key = get_settings().supabase_service_key
    headers = {
        "apikey": key,
        "Authorization": f"Bearer {key}",
        "Accept": SINGLE_OBJECT if single else "application/json",
    }
    if returning:
        headers["Prefer"] = "return=representation"
    return headers


def _encode(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _filter_params(filters: dict | None) -> dict:
    return {column: f"eq.{_encode(value)}" for column, value in (filters or {}).items()}


def _handle_response(resp: requests.Response) -> dict | list:
    if resp.status_code >= 400:
        try:
            body = resp.json()
        except ValueError:
            body = None
        message = body.get("message") if isinstance(body, dict) else None
        message = message or resp.text
        logger.warning("Store error (HTTP %s): %s", resp.status_code, message)
        raise StoreError(message or f"Store error (HTTP {resp.status_code})")
    if resp.status_code == 204 or not resp.content:
        return []
    return resp.json()


def _request(
    method: str,
    table: str,
    params: dict | None = None,
    json: dict | list | None = None,
    single: bool = False,
    returning: bool = False,
) -> dict | list:
    url = f"{_base_url()}/{table}"
    logger.debug("%s %s %s", method, table, params)
    try:
        resp = get_session().request(
            method, url, params=params, json=json, headers=_headers(single, returning),
        )
    except requests.RequestException as e:
        raise StoreError(f"Store request failed: {e}") from e
    return _handle_response(resp)


# --- Reads ---


def select(
    table: str,
    filters: dict | None = None,
    columns: str = "*",
    order: str | None = None,
    limit: int | None = None,
) -> list[dict]:
    """Fetch rows matching every filter. ``order`` uses PostgREST syntax, e.g. 'sort_order.asc'."""
    params = {"select": columns, **_filter_params(filters)}
    if order:
        params["order"] = order
    if limit is not None:
        params["limit"] = str(limit)
    return _request("GET", table, params=params)


def select_maybe_one(table: str, filters: dict | None = None, columns: str = "*") -> dict | None:
    """Fetch the first matching row, or None when nothing matches."""
    rows = select(table, filters, columns=columns, limit=1)
    return rows[0] if rows else None


# --- Writes ---


def insert(table: str, rows: list[dict]) -> list[dict]:
    return _request("POST", table, json=rows, returning=True)


def insert_one(table: str, row: dict) -> dict:
    return _request("POST", table, json=row, single=True, returning=True)


def update(table: str, values: dict, filters: dict) -> list[dict]:
    return _request("PATCH", table, params=_filter_params(filters), json=values, returning=True)


def update_one(table: str, values: dict, filters: dict) -> dict:
    """Update exactly one row and return it; anything else is a StoreError."""
    return _request(
        "PATCH", table, params=_filter_params(filters), json=values, single=True, returning=True,
    )


def delete_one(table: str, filters: dict) -> dict:
    """Delete exactly one row and return it; anything else is a StoreError."""
    return _request("DELETE", table, params=_filter_params(filters), single=True, returning=True)
