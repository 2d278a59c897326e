"""Application Default Credentials verification and token scope introspection.

``verify_adc_credentials`` mints a fresh token from a fresh credentials
object (never the cached one in ``cepbot.api.fetch``). ``verify_token_scopes``
asks Google's tokeninfo endpoint which scopes that token carries and fails
open when the endpoint cannot answer.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Literal

import aiohttp

from cepbot.api.fetch import load_adc_credentials, refresh_access_token
from cepbot.config import get_settings
from cepbot.constants import TOKENINFO_URL, error_message
from cepbot.logger import logger


@dataclass(frozen=True)
class AdcOk:
    token: str
    ok: Literal[True] = True


@dataclass(frozen=True)
class AdcFailure:
    reason: str
    cause: object | None = None
    ok: Literal[False] = False


AdcResult = AdcOk | AdcFailure


@dataclass(frozen=True)
class TokenScopeResult:
    """Scopes granted on a live access token.

    ``source`` is "unavailable" when tokeninfo could not be consulted, in
    which case ``ok`` is True and both lists are empty.
    """

    granted: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    ok: bool = True
    source: Literal["tokeninfo", "unavailable"] = "tokeninfo"


async def verify_adc_credentials() -> AdcResult:
    """Check that ADC is configured and can produce an access token."""
    try:
        credentials = await asyncio.to_thread(load_adc_credentials)
        token = await asyncio.to_thread(refresh_access_token, credentials)
    except Exception as exc:
        return AdcFailure(reason=error_message(exc), cause=exc)

    if not token:
        return AdcFailure(reason="ADC produced no access token")
    return AdcOk(token=token)


async def _fetch_token_scopes(access_token: str) -> list[str]:
    timeout = aiohttp.ClientTimeout(total=get_settings().http.timeout_seconds)
    async with (
        aiohttp.ClientSession(timeout=timeout) as session,
        session.get(TOKENINFO_URL, params={"access_token": access_token}) as resp,
    ):
        if resp.status >= 400:
            body = await resp.text()
            raise RuntimeError(f"tokeninfo returned {resp.status}: {body}")
        data = await resp.json(content_type=None)

    scope = str(data.get("scope", "")) if isinstance(data, dict) else ""
    return [s for s in scope.split(" ") if s]


async def verify_token_scopes(access_token: str, required: list[str]) -> TokenScopeResult:
    """Compare the token's granted scopes against ``required``.

    Any introspection failure yields ``ok=True, source="unavailable"``.
    """
    try:
        granted = await _fetch_token_scopes(access_token)
    except Exception as exc:
        logger.debug("tokeninfo unavailable, skipping scope check", err=error_message(exc))
        return TokenScopeResult(granted=[], missing=[], ok=True, source="unavailable")

    granted_set = set(granted)
    missing = [scope for scope in required if scope not in granted_set]
    return TokenScopeResult(granted=granted, missing=missing, ok=not missing, source="tokeninfo")
