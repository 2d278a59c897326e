"""Quota project resolution.

Priority: GCP metadata → ADC file → gcloud config → newly created project.
Only project creation can fail the resolution; persisting a discovered id
back to the ADC file is best effort.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from cepbot import gcloud, projects
from cepbot.config import get_settings
from cepbot.constants import error_message
from cepbot.gcp import GCPEnvironment
from cepbot.progress import ProgressCallback, ProgressMessage, noop_progress


@dataclass(frozen=True)
class QuotaProjectOk:
    project_id: str
    region: str
    ok: Literal[True] = True


@dataclass(frozen=True)
class QuotaProjectFailure:
    reason: str
    ok: Literal[False] = False


QuotaProjectResult = QuotaProjectOk | QuotaProjectFailure


async def resolve_quota_project(
    gcp_env: GCPEnvironment | None,
    progress: ProgressCallback | None = None,
) -> QuotaProjectResult:
    report = progress or noop_progress
    region = gcp_env.region if gcp_env else get_settings().default_region

    if gcp_env:
        return QuotaProjectOk(project_id=gcp_env.project, region=region)

    project_id = await gcloud.get_quota_project()
    if project_id:
        return QuotaProjectOk(project_id=project_id, region=region)

    report(ProgressMessage("No quota project in ADC. Checking gcloud config...", "info"))
    project_id = await gcloud.get_gcloud_project()
    if project_id:
        report(ProgressMessage(f"Using gcloud config project: {project_id}", "info"))
        try:
            await gcloud.set_quota_project(project_id)
        except Exception as exc:
            report(
                ProgressMessage(
                    "Could not persist quota project to ADC. Continuing anyway. "
                    f"({error_message(exc)})",
                    "warn",
                )
            )
        return QuotaProjectOk(project_id=project_id, region=region)

    report(ProgressMessage("No quota project found anywhere. Creating one...", "info"))
    try:
        project_id = await projects.create_project()
        await gcloud.set_quota_project(project_id)
    except Exception as exc:
        return QuotaProjectFailure(reason=f"Failed to create quota project: {error_message(exc)}")

    report(ProgressMessage(f"Created and set quota project: {project_id}", "info"))
    return QuotaProjectOk(project_id=project_id, region=region)
