from __future__ import annotations

import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

_URL_GETTER = None
_KEY_GETTER = None
_TIMEOUT = 10.0


class BackendError(RuntimeError):
    def __init__(self, message, status_code=None, detail=None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class BackendNotConfigured(BackendError):
    pass


def _build_session():
    session = requests.Session()
    retry = Retry(
        total=2,
        backoff_factor=0.5,
        status_forcelist=(502, 503, 504),
        allowed_methods=("GET", "POST", "PATCH", "DELETE"),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


_SESSION = _build_session()


def configure(url_getter, key_getter, timeout=None, session=None):
    global _URL_GETTER, _KEY_GETTER, _TIMEOUT, _SESSION
    _URL_GETTER = url_getter
    _KEY_GETTER = key_getter
    if timeout is not None:
        _TIMEOUT = float(timeout)
    if session is not None:
        _SESSION = session


def project_url():
    return str((_URL_GETTER() if _URL_GETTER else "") or "").strip().rstrip("/")


def anon_key():
    return str((_KEY_GETTER() if _KEY_GETTER else "") or "").strip()


def is_configured():
    return bool(project_url() and anon_key())


def _headers(prefer=None):
    key = anon_key()
    headers = {
        "apikey": key,
        "Authorization": f"Bearer {key}",
        "Content-Type": "application/json",
    }
    if prefer:
        headers["Prefer"] = prefer
    return headers


def _request(method: str, table: str, params: dict | None = None, json: Any = None, prefer: str | None = None) -> Any:
    base = project_url()
    if not base:
        raise BackendNotConfigured("SUPABASE_URL not configured")
    if not anon_key():
        raise BackendNotConfigured("SUPABASE_ANON_KEY not configured")
    url = f"{base}/rest/v1/{table}"
    try:
        response = _SESSION.request(
            method,
            url,
            params=params,
            json=json,
            headers=_headers(prefer),
            timeout=_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise BackendError(f"Backend unreachable: {exc}") from exc
    if not response.ok:
        try:
            detail = response.json()
        except ValueError:
            detail = response.text
        raise BackendError(
            f"Backend error {response.status_code} {response.reason}: {detail}",
            status_code=response.status_code,
            detail=detail,
        )
    if response.status_code == 204 or not response.content:
        return None
    return response.json()


def _eq_filters(filters: dict | None) -> dict:
    return {column: f"eq.{value}" for column, value in (filters or {}).items()}


def select(table: str, filters: dict | None = None, order: str | None = None, desc: bool = False) -> list[dict]:
    params = {"select": "*", **_eq_filters(filters)}
    if order:
        params["order"] = f"{order}.{'desc' if desc else 'asc'}"
    rows = _request("GET", table, params=params)
    return list(rows or [])


def select_one(table: str, filters: dict) -> dict | None:
    params = {"select": "*", "limit": 1, **_eq_filters(filters)}
    rows = _request("GET", table, params=params)
    return dict(rows[0]) if rows else None


def insert(table: str, row: dict) -> dict | None:
    rows = _request("POST", table, json=[row], prefer="return=representation")
    return dict(rows[0]) if rows else None


def update(table: str, row_id: str, patch: dict) -> dict | None:
    rows = _request(
        "PATCH",
        table,
        params={"id": f"eq.{row_id}"},
        json=patch,
        prefer="return=representation",
    )
    return dict(rows[0]) if rows else None


def delete(table: str, row_id: str) -> None:
    _request("DELETE", table, params={"id": f"eq.{row_id}"})


def upsert(table: str, row: dict, on_conflict: str) -> dict | None:
    rows = _request(
        "POST",
        table,
        params={"on_conflict": on_conflict},
        json=[row],
        prefer="resolution=merge-duplicates,return=representation",
    )
    return dict(rows[0]) if rows else None
