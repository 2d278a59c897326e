"""Prompt text shared by every slash-command prompt.

Each prompt is a single user-role message: the persona preamble followed by
the task instructions. Assistant-role prefill is avoided because MCP
clients handle it inconsistently.
"""

from __future__ import annotations

from mcp.types import GetPromptResult, PromptMessage, TextContent

PERSONA = (
    "You are a Chrome Enterprise Premium security expert. You have MCP tools "
    "available to query and configure the user's environment."
)

_OU_CHECKLIST = """\
- Is Chrome Browser Cloud Management (CBCM) enrollment active?
- Do browsers report to the admin console?
- Is the Chrome browser version current?
- Is an active Chrome Enterprise Premium license assigned?
- Are security connectors set to **Chrome Enterprise Premium**?
- Is **Delay file upload** configured for enforcement?
- Is **Enhanced Safe Browsing** enabled?
- Are Data Loss Prevention (DLP) rules enabled?
- Is reporting enabled for DLP events?"""

HEALTH_CHECK_STEPS = f"""\
Do not list your tools. Do not ask what the user wants. Begin executing a health check \
immediately by calling tools.

Step 1: Call `list_org_units` to get the organizational unit tree.
Step 2: For each organizational unit, call `get_connector_policy` to check security \
connector settings.
Step 3: Call `list_dlp_rules` to get DLP rule configurations.
Step 4: Call `count_browser_versions` to get browser version distribution.
Step 5: Call `list_customer_profiles` to get managed browser profiles.

For each organizational unit, evaluate:
{_OU_CHECKLIST}

Summarize findings by severity (critical → warning → info). For each issue, state what is \
misconfigured, the security impact, and the specific fix."""

DIAGNOSE_INSTRUCTIONS = f"""\
Do not list your tools. Do not ask what the user wants. Execute a comprehensive health \
check immediately, maximizing parallelism by calling independent tools simultaneously.

## Phase 1 — Gather baseline data (call all of these tools at the same time)
- `list_org_units` — get the organizational unit tree
- `list_dlp_rules` — get all DLP rule configurations
- `list_customer_profiles` — get managed Chrome browser profiles
- `count_browser_versions` — get browser version distribution

## Phase 2 — Per-OU security checks (call in parallel for each OU)
For each organizational unit returned in Phase 1, call `get_connector_policy`.

Using data from both phases, evaluate each OU against this checklist:
{_OU_CHECKLIST}

## Phase 3 — Report
Summarize findings by severity (critical → warning → info). For each issue found:
1. State what is misconfigured and in which OU
2. Explain the security impact
3. Recommend the specific fix"""

MATURITY_STEPS = """\
Do not ask what the user wants. Begin a DLP maturity assessment immediately by calling tools.

Step 1: Call `list_org_units` to get the organizational unit tree.
Step 2: Call `list_dlp_rules` to get all DLP rule configurations.
Step 3: Call `get_chrome_activity_log` to get DLP event telemetry.
Step 4: Analyze the DLP rule configuration and telemetry to determine the maturity stage.
Step 5: Recommend next steps to improve DLP maturity."""

NOISE_STEPS = """\
Do not ask what the user wants. Begin a DLP noise analysis immediately by calling tools.

Step 1: Call `list_dlp_rules` to get all DLP rule configurations.
Step 2: Call `get_chrome_activity_log` to get DLP event telemetry.
Step 3: Identify DLP rules with high false positive rates or override rates.
Step 4: Recommend optimization actions to reduce rule noise."""

SUB_COMMAND_HINT = """

After the health check, let the user know they can also run:
- **/cep:maturity** — assess DLP maturity level
- **/cep:noise** — analyze DLP rule noise and false positive rates"""


def build_prompt_result(
    task_instructions: str, description: str | None = None
) -> GetPromptResult:
    """Single user message combining the persona with ``task_instructions``."""
    return GetPromptResult(
        description=description,
        messages=[
            PromptMessage(
                role="user",
                content=TextContent(type="text", text=f"{PERSONA}\n\n{task_instructions}"),
            )
        ],
    )
