"""Tests for the Google API wrapper functions."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from cepbot.api import admin_sdk, chrome_management, chrome_policy, cloud_identity
from cepbot.api.fetch import GoogleApiError


class TestAdminSdk:
    @pytest.mark.asyncio
    async def test_get_customer_id(self):
        fetch = AsyncMock(return_value={"id": "C012345", "kind": "admin#directory#customer"})
        with patch("cepbot.api.admin_sdk.google_fetch", fetch):
            customer = await admin_sdk.get_customer_id("tok")

        assert customer == admin_sdk.Customer(id="C012345", kind="admin#directory#customer")
        assert fetch.await_args.args[0].endswith("/admin/directory/v1/customers/my_customer")
        assert fetch.await_args.kwargs["access_token"] == "tok"

    @pytest.mark.asyncio
    async def test_get_customer_id_swallows_errors(self):
        fetch = AsyncMock(side_effect=GoogleApiError(403, "not an admin"))
        with patch("cepbot.api.admin_sdk.google_fetch", fetch):
            assert await admin_sdk.get_customer_id() is None

    @pytest.mark.asyncio
    async def test_list_chrome_activities_query(self):
        fetch = AsyncMock(return_value={"items": [{"kind": "a"}]})
        with patch("cepbot.api.admin_sdk.google_fetch", fetch):
            items = await admin_sdk.list_chrome_activities(
                "user@example.com", customer_id="C1", event_name="FILE_UPLOAD", max_results=10
            )

        assert items == [{"kind": "a"}]
        assert fetch.await_args.args[0].endswith(
            "/activity/users/user%40example.com/applications/chrome"
        )
        assert fetch.await_args.kwargs["params"] == {
            "customerId": "C1",
            "eventName": "FILE_UPLOAD",
            "maxResults": "10",
        }

    @pytest.mark.asyncio
    async def test_list_org_units_defaults_to_my_customer(self):
        fetch = AsyncMock(return_value={})
        with patch("cepbot.api.admin_sdk.google_fetch", fetch):
            assert await admin_sdk.list_org_units() == []

        assert fetch.await_args.args[0].endswith("/customer/my_customer/orgunits")
        assert fetch.await_args.kwargs["params"] == {"type": "all"}


class TestChromeApis:
    @pytest.mark.asyncio
    async def test_count_browser_versions(self):
        fetch = AsyncMock(return_value={"browserVersions": [{"version": "1"}]})
        with patch("cepbot.api.chrome_management.google_fetch", fetch):
            versions = await chrome_management.count_browser_versions("C1", "ou")

        assert versions == [{"version": "1"}]
        assert fetch.await_args.args[0].endswith("/customers/C1/reports:countChromeVersions")
        assert fetch.await_args.kwargs["params"] == {"orgUnitId": "ou"}

    @pytest.mark.asyncio
    async def test_resolve_connector_policy_body(self):
        fetch = AsyncMock(return_value={"resolvedPolicies": []})
        with patch("cepbot.api.chrome_policy.google_fetch", fetch):
            await chrome_policy.get_connector_policy(
                "C1", "ou1", chrome_policy.CONNECTOR_WILDCARD
            )

        assert fetch.await_args.args[0].endswith("/customers/C1/policies:resolve")
        assert fetch.await_args.kwargs["body"] == {
            "policySchemaFilter": "chrome.users.EnterpriseConnectors.*",
            "policyTargetKey": {"targetResource": "orgunits/ou1"},
        }


class TestCloudIdentity:
    @pytest.mark.asyncio
    async def test_list_rules_filter(self):
        fetch = AsyncMock(return_value={"policies": [{"name": "policies/1"}]})
        with patch("cepbot.api.cloud_identity.google_fetch", fetch):
            policies = await cloud_identity.list_dlp_policies("rule", "C1")

        assert policies == [{"name": "policies/1"}]
        assert fetch.await_args.kwargs["params"] == {
            "filter": 'customer == "customers/C1" && setting.type == "settings/rule.dlp"'
        }

    @pytest.mark.asyncio
    async def test_list_detectors_filter_without_customer(self):
        fetch = AsyncMock(return_value={})
        with patch("cepbot.api.cloud_identity.google_fetch", fetch):
            await cloud_identity.list_dlp_policies("detector")

        assert fetch.await_args.kwargs["params"] == {
            "filter": 'setting.type.matches("settings/detector.*")'
        }

    @pytest.mark.asyncio
    async def test_create_rule_validate_only(self):
        fetch = AsyncMock(return_value={})
        with patch("cepbot.api.cloud_identity.google_fetch", fetch):
            await cloud_identity.create_dlp_rule("C1", "ou1", {"displayName": "r"}, True)

        assert fetch.await_args.kwargs["params"] == {"validateOnly": "true"}
        assert fetch.await_args.kwargs["body"] == {
            "customer": "customers/C1",
            "orgUnit": "orgunits/ou1",
            "setting": {"value": {"displayName": "r"}},
        }

    @pytest.mark.asyncio
    async def test_delete_rule(self):
        fetch = AsyncMock(return_value=None)
        with patch("cepbot.api.cloud_identity.google_fetch", fetch):
            await cloud_identity.delete_dlp_rule("policies/abc", "tok")

        assert fetch.await_args.args[0].endswith("/v1beta1/policies/abc")
        assert fetch.await_args.kwargs["method"] == "DELETE"
