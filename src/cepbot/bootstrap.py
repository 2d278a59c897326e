"""Server initialization pipeline.

Runs, strictly in order and short-circuiting on the first failure:
gcloud → ADC → token scopes → GCP environment → quota project →
API enablement → customer-id prefetch.

``bootstrap()`` never raises: every failure is returned as a
``BootstrapFailure`` carrying exactly one ``BootstrapError``. It is safe to
call repeatedly; ``retry_bootstrap`` reuses it verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from cepbot import apis, auth, gcloud, gcp, quota
from cepbot.api import admin_sdk
from cepbot.api.fetch import set_fallback_quota_project
from cepbot.constants import REQUIRED_APIS, REQUIRED_SCOPES, error_message
from cepbot.errors import (
    BootstrapError,
    adc_credentials_error,
    api_enablement_error,
    gcloud_missing_error,
    quota_project_error,
    scope_missing_error,
    unknown_error,
)
from cepbot.progress import ProgressCallback, ProgressMessage, noop_progress


@dataclass(frozen=True)
class BootstrapSuccess:
    project_id: str
    region: str
    customer_id: str | None = None
    ok: Literal[True] = True


@dataclass(frozen=True)
class BootstrapFailure:
    error: BootstrapError
    ok: Literal[False] = False


BootstrapResult = BootstrapSuccess | BootstrapFailure


async def prefetch_customer_id(progress: ProgressCallback) -> str | None:
    """Best-effort customer id lookup; tools resolve it lazily on a miss."""
    progress(ProgressMessage("Pre-fetching customer ID...", "info"))
    customer = await admin_sdk.get_customer_id()
    if customer and customer.id:
        progress(ProgressMessage(f"Customer ID: {customer.id}", "info"))
        return customer.id

    progress(
        ProgressMessage(
            "Could not pre-fetch customer ID. Tools will resolve it on demand.", "warn"
        )
    )
    return None


async def bootstrap(progress: ProgressCallback | None = None) -> BootstrapResult:
    """Run the full initialization sequence."""
    log = progress or noop_progress
    try:
        return await _run_bootstrap(log)
    except Exception as exc:
        log(ProgressMessage(f"Bootstrap failed unexpectedly: {error_message(exc)}", "error"))
        return BootstrapFailure(error=unknown_error(error_message(exc), exc))


async def _run_bootstrap(log: ProgressCallback) -> BootstrapResult:
    required_scopes = list(REQUIRED_SCOPES)
    required_apis = list(REQUIRED_APIS)

    log(ProgressMessage("Checking gcloud installation...", "info"))
    gcloud_check = await gcloud.check_gcloud_installed()
    if not gcloud_check.ok:
        log(ProgressMessage(f"gcloud check failed: {gcloud_check.reason}", "error"))
        return BootstrapFailure(error=gcloud_missing_error(gcloud_check.reason))
    log(ProgressMessage("gcloud CLI found.", "info"))

    log(ProgressMessage("Verifying ADC credentials...", "info"))
    adc = await auth.verify_adc_credentials()
    if not adc.ok:
        log(ProgressMessage(f"ADC verification failed: {adc.reason}", "error"))
        return BootstrapFailure(error=adc_credentials_error(adc.reason))
    log(ProgressMessage("ADC credentials valid. Checking token scopes...", "info"))

    scopes = await auth.verify_token_scopes(adc.token, required_scopes)
    granted_text = ", ".join(scopes.granted) if scopes.granted else "(none)"
    log(ProgressMessage(f"Scope check source: {scopes.source}", "info"))
    log(
        ProgressMessage(
            f"Token scopes ({len(scopes.granted)}): {granted_text}",
            "info" if scopes.granted else "warn",
        )
    )
    if not scopes.ok:
        log(
            ProgressMessage(
                f"Missing scopes ({len(scopes.missing)}): {', '.join(scopes.missing)}", "error"
            )
        )
        return BootstrapFailure(error=scope_missing_error(scopes.missing, scopes.granted))

    log(ProgressMessage("Detecting environment...", "info"))
    gcp_env = await gcp.check_gcp()
    log(
        ProgressMessage(
            f"GCP environment detected: project={gcp_env.project}, region={gcp_env.region}"
            if gcp_env
            else "Not running on GCP (metadata server unreachable).",
            "info",
        )
    )

    log(ProgressMessage("Resolving quota project...", "info"))
    resolved = await quota.resolve_quota_project(gcp_env, log)
    if not resolved.ok:
        log(ProgressMessage(f"Quota project resolution failed: {resolved.reason}", "error"))
        return BootstrapFailure(error=quota_project_error(resolved.reason))
    log(
        ProgressMessage(
            f"Quota project resolved: {resolved.project_id} (region: {resolved.region})", "info"
        )
    )

    set_fallback_quota_project(resolved.project_id)

    log(
        ProgressMessage(
            f"Enabling required APIs on {resolved.project_id}: {', '.join(required_apis)}",
            "info",
        )
    )
    failed_apis = await apis.ensure_apis_enabled(resolved.project_id, required_apis, log)
    if failed_apis:
        log(ProgressMessage(f"API enablement failed for: {', '.join(failed_apis)}", "error"))
        return BootstrapFailure(error=api_enablement_error(failed_apis, resolved.project_id))

    customer_id = await prefetch_customer_id(log)
    return BootstrapSuccess(
        project_id=resolved.project_id,
        region=resolved.region,
        customer_id=customer_id,
    )
