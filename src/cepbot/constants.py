"""Shared constants: API endpoints, OAuth scopes, service names, retry
and polling parameters, and DLP trigger mappings.

The retry schedule is empirically tuned for IAM propagation after a new
project is created. Keep these as literals.
"""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

ADMIN_BASE_URL: Final = "https://admin.googleapis.com"
CHROME_MANAGEMENT_BASE_URL: Final = "https://chromemanagement.googleapis.com/v1"
CHROME_POLICY_BASE_URL: Final = "https://chromepolicy.googleapis.com/v1"
CLOUD_IDENTITY_BASE_URL: Final = "https://cloudidentity.googleapis.com/v1beta1"
CLOUD_RESOURCE_MANAGER_BASE_URL: Final = "https://cloudresourcemanager.googleapis.com/v3"
GCP_METADATA_BASE_URL: Final = "http://metadata.google.internal"
SERVICE_USAGE_BASE_URL: Final = "https://serviceusage.googleapis.com/v1"
TOKENINFO_URL: Final = "https://oauth2.googleapis.com/tokeninfo"

# ---------------------------------------------------------------------------
# Services and scopes
# ---------------------------------------------------------------------------

# Services every tool depends on; enabled during bootstrap.
REQUIRED_APIS: Final[tuple[str, ...]] = (
    "admin.googleapis.com",
    "chromemanagement.googleapis.com",
    "chromepolicy.googleapis.com",
    "cloudidentity.googleapis.com",
)

# Must be enabled before any other service state can be read.
PREREQUISITE_APIS: Final[tuple[str, ...]] = ("serviceusage.googleapis.com",)

REQUIRED_SCOPES: Final[tuple[str, ...]] = (
    "https://www.googleapis.com/auth/admin.directory.customer.readonly",
    "https://www.googleapis.com/auth/admin.directory.orgunit.readonly",
    "https://www.googleapis.com/auth/admin.reports.audit.readonly",
    "https://www.googleapis.com/auth/chrome.management.policy",
    "https://www.googleapis.com/auth/chrome.management.profiles.readonly",
    "https://www.googleapis.com/auth/chrome.management.reports.readonly",
    "https://www.googleapis.com/auth/cloud-identity.policies",
    "https://www.googleapis.com/auth/cloud-platform",
)

# ---------------------------------------------------------------------------
# Retry / polling
# ---------------------------------------------------------------------------

FIRST_RETRY_SECONDS: Final = 15.0
BASE_BACKOFF_SECONDS: Final = 1.0
ENABLE_RETRY_SECONDS: Final = 1.0
MAX_RETRY_ATTEMPTS: Final = 7

POLL_INTERVAL_SECONDS: Final = 2.0
POLL_MAX_ATTEMPTS: Final = 30

# gRPC status code carried by GoogleApiError for HTTP 403.
GRPC_PERMISSION_DENIED: Final = 7

# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------

DEFAULT_REGION: Final = "us-central1"

PROJECT_ID_CONSONANTS: Final = "bcdfghjklmnpqrstvwxyz"
PROJECT_ID_VOWELS: Final = "aeiou"

ORG_UNIT_ID_PREFIX: Final = "id:"

# Chrome DLP trigger event strings, keyed by the simplified name tools accept.
CHROME_DLP_TRIGGERS: Final[dict[str, str]] = {
    "FILE_DOWNLOAD": "google.workspace.chrome.file.v1.download",
    "FILE_UPLOAD": "google.workspace.chrome.file.v1.upload",
    "PRINT": "google.workspace.chrome.page.v1.print",
    "NAVIGATION": "google.workspace.chrome.url.v1.navigation",
    "WEB_CONTENT_UPLOAD": "google.workspace.chrome.web_content.v1.upload",
}


def error_message(error: object) -> str:
    """Render any caught value as a message string."""
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)
