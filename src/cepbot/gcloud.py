"""Local gcloud CLI state and the ADC credential file.

Verifies the CLI is installed, reads the scopes recorded in the ADC file,
and reads/persists the quota project. Expected failures come back as result
objects or ``None``; only ``set_quota_project`` raises, when nothing it
tried actually persisted the value.

All public functions are async; CLI calls run in a thread via
``asyncio.to_thread``.
"""

from __future__ import annotations

import asyncio
import json
import os
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from cepbot.config import get_settings
from cepbot.constants import error_message
from cepbot.logger import logger

_ADC_FILENAME = "application_default_credentials.json"


@dataclass(frozen=True)
class GcloudOk:
    ok: Literal[True] = True


@dataclass(frozen=True)
class GcloudFailure:
    reason: str
    cause: object | None = None
    ok: Literal[False] = False


GcloudResult = GcloudOk | GcloudFailure


@dataclass(frozen=True)
class ScopeResult:
    """Scopes recorded in the ADC file compared against a required set."""

    credential_type: str | None
    granted: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    ok: bool = True


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def adc_path() -> Path:
    """Platform-correct location of the ADC credentials file.

    Windows: %APPDATA%\\gcloud\\application_default_credentials.json
    Linux/macOS: ~/.config/gcloud/application_default_credentials.json
    """
    override = get_settings().gcloud.adc_path
    if override:
        return Path(override)
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA") or str(Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "gcloud" / _ADC_FILENAME
    return Path.home() / ".config" / "gcloud" / _ADC_FILENAME


def _read_adc_file() -> dict[str, Any] | None:
    """Parsed ADC file, or None when missing or unreadable."""
    try:
        data = json.loads(adc_path().read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None
    return data if isinstance(data, dict) else None


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _run_gcloud_sync(*args: str) -> subprocess.CompletedProcess[str]:
    """Run a gcloud CLI command (blocking, internal only).

    On Windows gcloud is a .cmd wrapper that needs a shell to launch.
    """
    s = get_settings()
    return subprocess.run(
        [s.gcloud.bin, *args],
        capture_output=True,
        text=True,
        timeout=s.gcloud.timeout_seconds,
        check=True,
        shell=sys.platform == "win32",
    )


async def run_gcloud(*args: str) -> subprocess.CompletedProcess[str]:
    """Run a gcloud CLI command without blocking the event loop."""
    return await asyncio.to_thread(_run_gcloud_sync, *args)


def _find_gcloud_on_windows() -> Path | None:
    """Well-known Cloud SDK install dirs, for fresh installs not yet on PATH."""
    for var in ("LOCALAPPDATA", "ProgramFiles", "ProgramFiles(x86)", "PROGRAMW6432"):
        base = os.environ.get(var)
        if not base:
            continue
        bin_dir = Path(base) / "Google" / "Cloud SDK" / "google-cloud-sdk" / "bin"
        if (bin_dir / "gcloud.cmd").exists():
            return bin_dir
    return None


def _failure_reason(exc: Exception) -> str:
    if isinstance(exc, subprocess.CalledProcessError):
        stderr = (exc.stderr or "").strip()
        return stderr or f"gcloud exited with status {exc.returncode}"
    return error_message(exc)


async def check_gcloud_installed() -> GcloudResult:
    """Check that ``gcloud --version`` runs successfully."""
    try:
        await run_gcloud("--version")
        return GcloudOk()
    except (OSError, subprocess.SubprocessError) as exc:
        if sys.platform == "win32" and (gcloud_dir := _find_gcloud_on_windows()):
            os.environ["PATH"] = f"{gcloud_dir}{os.pathsep}{os.environ.get('PATH', '')}"
            try:
                await run_gcloud("--version")
                return GcloudOk()
            except (OSError, subprocess.SubprocessError):
                pass  # report the original failure below
        return GcloudFailure(reason=_failure_reason(exc), cause=exc)


async def get_gcloud_project() -> str | None:
    """Active project from the gcloud config, or None when unset."""
    try:
        result = await run_gcloud("config", "get-value", "project")
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("gcloud config get-value project failed", err=_failure_reason(exc))
        return None
    value = result.stdout.strip()
    return value if value and value != "(unset)" else None


# ---------------------------------------------------------------------------
# ADC file
# ---------------------------------------------------------------------------


async def get_adc_scopes() -> list[str]:
    """Scopes recorded in the local ADC file (no network)."""
    creds = _read_adc_file() or {}
    return list(creds.get("scopes") or [])


async def verify_required_scopes(required: list[str]) -> ScopeResult:
    """Compare the ADC file's recorded scopes with ``required``.

    A best-effort diagnostic independent of the live token.
    """
    creds = _read_adc_file() or {}
    granted = list(creds.get("scopes") or [])
    granted_set = set(granted)
    missing = [scope for scope in required if scope not in granted_set]
    return ScopeResult(
        credential_type=creds.get("type"),
        granted=granted,
        missing=missing,
        ok=not missing,
    )


async def get_quota_project() -> str | None:
    """``quota_project_id`` from the ADC file, or None."""
    creds = _read_adc_file() or {}
    return creds.get("quota_project_id") or None


def _patch_adc_quota_project(project_id: str) -> None:
    path = adc_path()
    data = json.loads(path.read_text(encoding="utf-8"))
    data["quota_project_id"] = project_id
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


async def set_quota_project(project_id: str) -> None:
    """Persist the ADC quota project.

    Tries the gcloud CLI first, falls back to editing the ADC file directly,
    then re-reads the file. Raises RuntimeError if the value did not land.
    """
    try:
        await run_gcloud("auth", "application-default", "set-quota-project", project_id)
    except (OSError, subprocess.SubprocessError) as exc:
        logger.info(
            "gcloud set-quota-project failed, patching ADC file", err=_failure_reason(exc)
        )
        try:
            await asyncio.to_thread(_patch_adc_quota_project, project_id)
        except (OSError, json.JSONDecodeError) as patch_exc:
            logger.warning("Could not patch ADC file", err=str(patch_exc))

    persisted = await get_quota_project()
    if persisted != project_id:
        raise RuntimeError(
            "Failed to persist quota project to ADC file. "
            f'Expected "{project_id}", got "{persisted or "(none)"}".'
        )
