"""API enablement with exponential-backoff retry.

A newly created project (or a freshly granted role) takes a while to
propagate through IAM, so Service Usage calls return PERMISSION_DENIED for
a period. ``call_with_retry`` absorbs that window; every other error
propagates immediately.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from cepbot.clients import enable_service, get_service_state
from cepbot.constants import (
    BASE_BACKOFF_SECONDS,
    ENABLE_RETRY_SECONDS,
    FIRST_RETRY_SECONDS,
    GRPC_PERMISSION_DENIED,
    MAX_RETRY_ATTEMPTS,
    PREREQUISITE_APIS,
    error_message,
)
from cepbot.progress import ProgressCallback, ProgressMessage, noop_progress

T = TypeVar("T")


class ApiEnablementError(RuntimeError):
    """An API could not be confirmed ENABLED after the retry pass."""

    def __init__(self, api: str, message: str) -> None:
        super().__init__(message)
        self.api = api


def is_permission_denied(error: BaseException) -> bool:
    code = getattr(error, "code", None)
    return isinstance(code, int) and code == GRPC_PERMISSION_DENIED


def backoff_delay(retry: int) -> float:
    """Delay before retry number ``retry`` (1-based).

    The first retry waits FIRST_RETRY_SECONDS for IAM propagation; later
    ones double from BASE_BACKOFF_SECONDS.
    """
    if retry == 1:
        return FIRST_RETRY_SECONDS
    return BASE_BACKOFF_SECONDS * 2 ** (retry - 2)


async def call_with_retry(
    fn: Callable[[], Awaitable[T]],
    description: str,
    progress: ProgressCallback | None = None,
    *,
    is_retryable: Callable[[BaseException], bool] = is_permission_denied,
    delay_for: Callable[[int], float] = backoff_delay,
    max_attempts: int = MAX_RETRY_ATTEMPTS,
) -> T:
    """Await ``fn()``, retrying up to ``max_attempts`` times on retryable errors.

    Non-retryable errors, and the last retryable one once attempts are
    exhausted, are re-raised unchanged.
    """
    report = progress or noop_progress
    retries = 0

    while True:
        try:
            return await fn()
        except Exception as exc:
            if not is_retryable(exc) or retries >= max_attempts:
                raise

            retries += 1
            delay = delay_for(retries)
            report(
                ProgressMessage(
                    f'"{description}" got PERMISSION_DENIED, retrying in {delay:g}s '
                    f"({retries}/{max_attempts})",
                    "warn",
                )
            )
            await asyncio.sleep(delay)


async def _check_and_enable_api(
    project_id: str,
    api: str,
    progress: ProgressCallback,
    access_token: str | None,
) -> None:
    state = await call_with_retry(
        lambda: get_service_state(project_id, api, access_token),
        f"getService {api}",
        progress,
    )
    if state == "ENABLED":
        return

    progress(ProgressMessage(f"API [{api}] is not enabled. Enabling...", "info"))

    await call_with_retry(
        lambda: enable_service(project_id, api, access_token),
        f"enableService {api}",
        progress,
    )

    verified = await call_with_retry(
        lambda: get_service_state(project_id, api, access_token),
        f"verifyService {api}",
        progress,
    )
    if verified != "ENABLED":
        raise RuntimeError(
            f"API [{api}] was not ENABLED after enablement operation completed "
            f"(state: {verified})"
        )


async def enable_api_with_retry(
    project_id: str,
    api: str,
    progress: ProgressCallback | None = None,
    access_token: str | None = None,
) -> None:
    """Check/enable/verify ``api``, running the whole sequence at most twice."""
    report = progress or noop_progress
    try:
        await _check_and_enable_api(project_id, api, report, access_token)
    except Exception:
        report(
            ProgressMessage(
                f"Failed to check/enable {api}, retrying in {ENABLE_RETRY_SECONDS:g}s...", "warn"
            )
        )
        await asyncio.sleep(ENABLE_RETRY_SECONDS)

        try:
            await _check_and_enable_api(project_id, api, report, access_token)
        except Exception as retry_exc:
            message = (
                f"Failed to ensure API [{api}] is enabled after retry. Please check manually."
            )
            report(ProgressMessage(message, "error"))
            raise ApiEnablementError(api, message) from retry_exc


async def ensure_apis_enabled(
    project_id: str,
    apis: Sequence[str],
    progress: ProgressCallback | None = None,
    access_token: str | None = None,
) -> list[str]:
    """Enable the prerequisite APIs, then each of ``apis``.

    Returns the APIs that failed (empty on full success). A failed
    prerequisite fails every requested API without attempting it.
    """
    report = progress or noop_progress
    failed: list[str] = []

    for api in PREREQUISITE_APIS:
        try:
            await enable_api_with_retry(project_id, api, report, access_token)
        except Exception as exc:
            report(
                ProgressMessage(
                    f"Failed to enable prerequisite API [{api}]: {error_message(exc)}", "error"
                )
            )
            failed.append(api)

    if failed:
        report(
            ProgressMessage(
                "Skipping dependent APIs because prerequisite API enablement failed.", "error"
            )
        )
        return [*failed, *apis]

    report(ProgressMessage("Checking and enabling required APIs...", "info"))

    for api in apis:
        try:
            await enable_api_with_retry(project_id, api, report, access_token)
        except Exception as exc:
            report(ProgressMessage(f"Failed to enable API [{api}]: {error_message(exc)}", "error"))
            failed.append(api)

    if not failed:
        report(ProgressMessage("All required APIs are enabled.", "info"))

    return failed
