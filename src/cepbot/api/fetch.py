"""Authenticated HTTP client for Google APIs.

Resolves Application Default Credentials through google-auth (the blocking
refresh runs in a thread), attaches the quota project header, and turns
non-2xx responses into ``GoogleApiError``.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import aiohttp
import google.auth
import google.auth.transport.requests
from google.auth.credentials import Credentials

from cepbot.config import get_settings
from cepbot.constants import GRPC_PERMISSION_DENIED


class GoogleApiError(Exception):
    """Failed Google API response.

    ``code`` mirrors the HTTP status, except 403 which maps to the gRPC
    PERMISSION_DENIED code used by the enablement retry loop.
    """

    def __init__(self, status: int, body: str) -> None:
        super().__init__(body)
        self.status = status
        self.code = GRPC_PERMISSION_DENIED if status == 403 else status


_cached_credentials: Credentials | None = None
_fallback_quota_project: str | None = None
_token_lock: asyncio.Lock | None = None


# ---------------------------------------------------------------------------
# Credential provider
# ---------------------------------------------------------------------------


def load_adc_credentials() -> Credentials:
    """Fresh ADC credentials (blocking). Raises DefaultCredentialsError."""
    credentials, _project = google.auth.default()
    return credentials


def refresh_access_token(credentials: Credentials) -> str | None:
    """Refresh ``credentials`` and return the access token (blocking)."""
    credentials.refresh(google.auth.transport.requests.Request())
    return credentials.token


def credentials_quota_project(credentials: Credentials) -> str | None:
    return getattr(credentials, "quota_project_id", None) or None


def _refresh_lock() -> asyncio.Lock:
    global _token_lock
    if _token_lock is None:
        _token_lock = asyncio.Lock()
    return _token_lock


async def _get_credentials() -> Credentials:
    global _cached_credentials
    if _cached_credentials is None:
        _cached_credentials = await asyncio.to_thread(load_adc_credentials)
    return _cached_credentials


def reset_cached_auth() -> None:
    """Drop the cached credentials and fallback quota project.

    Called by ``retry_bootstrap`` so the next request re-reads ADC from disk.
    """
    global _cached_credentials, _fallback_quota_project, _token_lock
    _cached_credentials = None
    _token_lock = None
    _fallback_quota_project = None


def set_fallback_quota_project(project_id: str | None) -> None:
    """Quota project to bill when the ADC credentials carry none."""
    global _fallback_quota_project
    _fallback_quota_project = project_id


def get_fallback_quota_project() -> str | None:
    return _fallback_quota_project


async def _resolve_credentials(access_token: str | None) -> tuple[str, str | None]:
    """Return ``(token, quota_project)`` for a request.

    An explicit bearer token is used as-is, with no quota header.
    Cached ADC credentials are refreshed only once their token has expired.
    """
    if access_token:
        return access_token, None

    credentials = await _get_credentials()
    if not credentials.valid:
        async with _refresh_lock():
            if not credentials.valid:
                await asyncio.to_thread(refresh_access_token, credentials)
    token = credentials.token
    if not token:
        raise GoogleApiError(401, "Failed to obtain access token from ADC")
    return token, credentials_quota_project(credentials) or _fallback_quota_project


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


async def google_fetch(
    url: str,
    *,
    access_token: str | None = None,
    body: Any = None,
    method: str | None = None,
    params: dict[str, str] | None = None,
) -> Any:
    """Make an authenticated request to a Google API and return parsed JSON.

    ``method`` defaults to POST when a body is given, else GET. A 204
    response returns None.
    """
    token, quota_project = await _resolve_credentials(access_token)
    method = method or ("POST" if body is not None else "GET")

    headers = {"Authorization": f"Bearer {token}"}
    if quota_project:
        headers["x-goog-user-project"] = quota_project

    timeout = aiohttp.ClientTimeout(total=get_settings().http.timeout_seconds)
    async with (
        aiohttp.ClientSession(timeout=timeout) as session,
        session.request(method, url, headers=headers, json=body, params=params) as resp,
    ):
        if resp.status == 204:
            return None
        text = await resp.text()
        if resp.status >= 400:
            raise GoogleApiError(resp.status, text)
        return json.loads(text) if text else None
