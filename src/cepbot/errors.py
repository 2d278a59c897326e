"""Bootstrap failure taxonomy and the agent-directive errors built for it.

Every failure path through bootstrap produces exactly one ``BootstrapError``.
The ``agent_action`` text is written so an agent (or operator) can act on it
verbatim and includes the exact recovery command where one exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from cepbot.constants import REQUIRED_SCOPES

BootstrapErrorType = Literal[
    "adc_credentials",
    "api_enablement",
    "gcloud_missing",
    "quota_project",
    "scope_missing",
    "unknown",
]

_ALL_SCOPES = ",".join(REQUIRED_SCOPES)

_LOGIN_COMMAND = f"  gcloud auth application-default login --scopes={_ALL_SCOPES}"

_SCOPES_FLAG_NOTE = (
    "IMPORTANT: The --scopes flag is required. Without it, gcloud only grants "
    "default scopes which do NOT include the Google Workspace Admin and Chrome "
    "Management scopes this server needs."
)


@dataclass(frozen=True)
class BootstrapError:
    """Structured bootstrap failure.

    ``problem`` is the human-readable description; ``agent_action`` is the
    literal instruction for the agent. ``cause`` is diagnostic only and
    ``api_failures`` is populated for ``api_enablement`` alone.
    """

    type: BootstrapErrorType
    problem: str
    agent_action: str
    cause: object | None = None
    api_failures: tuple[str, ...] | None = None


def gcloud_missing_error(reason: str | None = None) -> BootstrapError:
    return BootstrapError(
        type="gcloud_missing",
        problem=(
            "The gcloud CLI is not installed or not reachable. "
            "The server cannot authenticate without it."
        ),
        agent_action="\n".join(
            [
                "Tell the user: The Google Cloud CLI (gcloud) is not installed or not in your PATH.",
                "Offer to help them install it by directing them to: "
                "https://cloud.google.com/sdk/docs/install",
                "After installation, ask them to restart their terminal and try again.",
            ]
        ),
        cause=reason,
    )


def adc_credentials_error(reason: str) -> BootstrapError:
    return BootstrapError(
        type="adc_credentials",
        problem=f"Application Default Credentials are not configured: {reason}",
        agent_action="\n".join(
            [
                "Tell the user their Google Cloud credentials are not configured or invalid.",
                "",
                f"Raw error: {reason}",
                "",
                "The user MUST authenticate with ALL required scopes. "
                "Offer to run this EXACT command:",
                "",
                _LOGIN_COMMAND,
                "",
                _SCOPES_FLAG_NOTE,
            ]
        ),
        cause=reason,
    )


def scope_missing_error(missing: list[str], granted: list[str]) -> BootstrapError:
    granted_text = ", ".join(granted) if granted else "(none)"
    diagnostics = "\n".join(
        [
            f"Scopes on token ({len(granted)}): {granted_text}",
            f"Missing scopes ({len(missing)}): {', '.join(missing)}",
        ]
    )
    return BootstrapError(
        type="scope_missing",
        problem=(
            f"Credentials are missing {len(missing)} required OAuth scope(s).\n\n{diagnostics}"
        ),
        agent_action="\n".join(
            [
                "Tell the user their credentials are missing required OAuth scopes.",
                "",
                "DIAGNOSTIC INFO (from Google tokeninfo endpoint):",
                diagnostics,
                "",
                "The user MUST re-authenticate with ALL required scopes. "
                "Offer to run this EXACT command:",
                "",
                _LOGIN_COMMAND,
                "",
                _SCOPES_FLAG_NOTE,
            ]
        ),
    )


def quota_project_error(reason: str) -> BootstrapError:
    return BootstrapError(
        type="quota_project",
        problem=f"Could not resolve a quota project: {reason}",
        agent_action="\n".join(
            [
                "Tell the user a GCP quota project could not be resolved or created.",
                "Offer to run this command for the user:\n\n"
                "  gcloud auth application-default set-quota-project PROJECT_ID",
                "Ask the user for their GCP project ID if they have one.",
            ]
        ),
        cause=reason,
    )


def api_enablement_error(failed_apis: list[str], project_id: str) -> BootstrapError:
    api_list = " ".join(failed_apis)
    return BootstrapError(
        type="api_enablement",
        problem=(
            f"Failed to enable required APIs on project {project_id}: {', '.join(failed_apis)}"
        ),
        agent_action="\n".join(
            [
                "Tell the user that required Google APIs could not be enabled on their project.",
                "Offer to run this command for the user:\n\n"
                f"  gcloud services enable {api_list} --project={project_id}",
                "If permission is denied, the user may need to ask their GCP project "
                "admin to enable these APIs.",
            ]
        ),
        api_failures=tuple(failed_apis),
    )


def unknown_error(reason: str, cause: object | None = None) -> BootstrapError:
    return BootstrapError(
        type="unknown",
        problem=f"Server initialization failed unexpectedly: {reason}",
        agent_action="\n".join(
            [
                "Tell the user the server hit an unexpected error during initialization.",
                "",
                f"Raw error: {reason}",
                "",
                "Ask them to check their network connection and gcloud setup, "
                "then call `retry_bootstrap`.",
            ]
        ),
        cause=cause if cause is not None else reason,
    )


def format_degraded_mode_error(error: BootstrapError) -> str:
    """Render a BootstrapError as the text returned by blocked tool calls."""
    sections = [
        f"## Problem\n{error.problem}",
        f"## AGENT ACTION REQUIRED\n{error.agent_action}",
    ]

    if error.api_failures:
        sections.append(
            "## Failed APIs\n" + "\n".join(f"- {api}" for api in error.api_failures)
        )

    sections.append(
        "## Recovery\nAfter the user completes the action above, call the "
        "`retry_bootstrap` tool to re-initialize the server."
    )
    return "\n\n".join(sections)
