"""
Tests for PatrolAPIClient against a fake guard-tour API (httpx.MockTransport).

Tests for:
- Sign-in and token refresh
- Request helper error mapping (401, 5xx, timeouts)
- Site / guard lookups and every façade operation
- test_connection and probe_endpoints
"""

import json
from datetime import datetime

import httpx
import pytest

from askari.environments.base import APIError, AuthenticationError, PatrolAPIError
from askari.environments.guardtour.auth import StaticTokenAuth
from askari.environments.guardtour.client import (
    ERROR_PATROL_REPORTS,
    ERROR_STATS,
    PatrolAPIClient,
    unwrap,
    unwrap_list,
)

from conftest import ATOM_SITE, BASE_URL, SHERATON_SITE, make_jwt, sample_patrols


# ===========================================================================
# PAYLOAD HELPERS
# ===========================================================================

class TestUnwrap:

    def test_unwrap_data_envelope(self):
        assert unwrap({"data": {"id": 1}}) == {"id": 1}

    def test_unwrap_plain_payload(self):
        assert unwrap({"id": 1}) == {"id": 1}

    def test_unwrap_list_variants(self):
        assert unwrap_list([{"id": 1}]) == [{"id": 1}]
        assert unwrap_list({"data": [{"id": 2}]}) == [{"id": 2}]
        assert unwrap_list(None) == []


# ===========================================================================
# AUTHENTICATION
# ===========================================================================

class TestAuthentication:

    @pytest.mark.asyncio
    async def test_authenticate_returns_token(self, api_client, fake_api):
        token = await api_client.authenticate("ops-bot", "secret")

        assert token == fake_api.signin_token
        signin = fake_api.requests_to("/auth/signin")[0]
        assert json.loads(signin.content) == {"username": "ops-bot", "password": "secret"}
        assert "authorization" not in signin.headers

    @pytest.mark.asyncio
    async def test_authenticate_rejected(self, api_client, fake_api):
        fake_api.signin_status = 401

        with pytest.raises(AuthenticationError):
            await api_client.authenticate("ops-bot", "wrong")

    @pytest.mark.asyncio
    async def test_first_request_signs_in_and_caches(self, make_refreshing_client, fake_api, token_store):
        fake_api.add("GET", "/stats", {"totalSites": 3})
        client = make_refreshing_client()

        await client.get_system_stats()
        await client.get_system_stats()

        assert len(fake_api.requests_to("/auth/signin")) == 1
        assert await token_store.read() == fake_api.signin_token
        stats_request = fake_api.requests_to("/stats")[0]
        assert stats_request.headers["authorization"] == f"Bearer {fake_api.signin_token}"

    @pytest.mark.asyncio
    async def test_expired_token_triggers_new_sign_in(self, make_refreshing_client, fake_api, token_store):
        await token_store.save(make_jwt(expires_in=-60))
        fake_api.add("GET", "/stats", {"totalSites": 3})

        await make_refreshing_client().get_system_stats()

        assert len(fake_api.requests_to("/auth/signin")) == 1

    @pytest.mark.asyncio
    async def test_unauthorized_response_clears_stored_token(self, make_refreshing_client, fake_api, token_store):
        fake_api.add("GET", "/stats", status_code=401)
        client = make_refreshing_client()

        with pytest.raises(PatrolAPIError):
            await client.get_system_stats()

        assert await token_store.read() is None


# ===========================================================================
# REQUEST HELPER
# ===========================================================================

class TestMakeRequest:

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self, api_client, fake_api, static_token):
        fake_api.add("GET", "/stats", {})

        await api_client._get("/stats")

        assert fake_api.requests[-1].headers["authorization"] == f"Bearer {static_token}"

    @pytest.mark.asyncio
    async def test_server_error_raises_api_error(self, api_client, fake_api):
        fake_api.add("GET", "/stats", {"message": "boom"}, status_code=500)

        with pytest.raises(APIError) as exc_info:
            await api_client._get("/stats")
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_timeout_raises_api_error(self, api_client, fake_api):
        fake_api.fail("GET", "/stats", httpx.ConnectTimeout("timed out"))

        with pytest.raises(APIError):
            await api_client._get("/stats")


# ===========================================================================
# LOOKUPS
# ===========================================================================

class TestLookups:

    @pytest.mark.asyncio
    async def test_find_site_exact_match_only(self, api_client, fake_api):
        fake_api.add("GET", "/sites", [{"id": 1, "name": "Atom Annex"}, ATOM_SITE])

        site = await api_client.find_site_by_name("  atom ")

        assert site.id == 7
        assert fake_api.requests_to("/sites")[0].url.params["search"] == "atom"

    @pytest.mark.asyncio
    async def test_find_site_partial_match_is_none(self, api_client, fake_api):
        fake_api.add("GET", "/sites", {"data": [{"id": 1, "name": "Atom Annex"}]})

        assert await api_client.find_site_by_name("Atom") is None

    @pytest.mark.asyncio
    async def test_find_site_request_failure_is_none(self, api_client, fake_api):
        fake_api.add("GET", "/sites", status_code=503)

        assert await api_client.find_site_by_name("Atom") is None

    @pytest.mark.asyncio
    async def test_find_site_ignores_longer_names(self, api_client, fake_api):
        fake_api.add("GET", "/sites", [{"id": 2, "name": "Test Site 2"}, {"id": 1, "name": "Test Site"}])

        site = await api_client.find_site_by_name("Test Site")

        assert site.id == 1

    @pytest.mark.asyncio
    async def test_guard_lookup_substring_match(self, api_client, fake_api):
        fake_api.add("GET", "/users/security-guards", [
            {"id": 1, "firstName": "Mary", "lastName": "Akello"},
            {"id": 2, "firstName": "Walker", "lastName": "Adams"},
        ])

        guard = await api_client.get_guard_by_name("walker")

        assert guard.id == 2
        params = fake_api.requests_to("/users/security-guards")[0].url.params
        assert params["search"] == "walker"
        assert params["limit"] == "50"

    @pytest.mark.asyncio
    async def test_guard_lookup_matches_inside_full_name(self, api_client, fake_api):
        fake_api.add("GET", "/users/security-guards", [
            {"id": 4, "firstName": "Rebecca", "lastName": "Nakato"},
        ])

        guard = await api_client.get_guard_by_name("becca")

        assert guard.id == 4


# ===========================================================================
# SITE OPERATIONS
# ===========================================================================

class TestSiteOperations:

    @pytest.mark.asyncio
    async def test_get_site_info(self, api_client, fake_api):
        fake_api.add("GET", "/sites", [ATOM_SITE])
        fake_api.add("GET", "/sites/7", {"data": ATOM_SITE})

        result = await api_client.get_site_info("Atom")

        assert result.has_data is True
        assert "*Name:* Atom" in result.message
        assert "*Location:* Plot 4, Kampala Road" in result.message

    @pytest.mark.asyncio
    async def test_get_site_info_not_found(self, api_client, fake_api):
        fake_api.add("GET", "/sites", [])

        result = await api_client.get_site_info("Nowhere")

        assert result.has_data is False
        assert result.message == 'Site "Nowhere" not found. Please check the site name and try again.'
        assert fake_api.requests_to("/sites/None") == []

    @pytest.mark.asyncio
    async def test_get_site_info_detail_failure(self, api_client, fake_api):
        fake_api.add("GET", "/sites", [ATOM_SITE])
        fake_api.add("GET", "/sites/7", status_code=500)

        with pytest.raises(PatrolAPIError):
            await api_client.get_site_info("Atom")

    @pytest.mark.asyncio
    async def test_list_sites(self, api_client, fake_api):
        fake_api.add("GET", "/sites", [ATOM_SITE, SHERATON_SITE])

        result = await api_client.list_sites()

        assert result.count == 2
        assert "1. Atom (active)" in result.message
        assert "2. Sheraton Hotel" in result.message

    @pytest.mark.asyncio
    async def test_get_patrol_reports_with_date_filter(self, api_client, fake_api):
        fake_api.add("GET", "/sites", [ATOM_SITE])
        fake_api.add("GET", "/sites/7/patrols", sample_patrols(7))

        result = await api_client.get_patrol_reports("Atom", "2025-01-30")

        assert result.count == 7
        assert "Showing 5 of 7 patrol reports." in result.message
        params = fake_api.requests_to("/sites/7/patrols")[0].url.params
        assert params["filter.date"] == "$gte:2025-01-30T00:00:00.000Z"

    @pytest.mark.asyncio
    async def test_get_patrol_reports_without_date(self, api_client, fake_api):
        fake_api.add("GET", "/sites", [ATOM_SITE])
        fake_api.add("GET", "/sites/7/patrols", [])

        result = await api_client.get_patrol_reports("Atom")

        assert result.message == "No patrol reports found for Atom."
        assert "filter.date" not in fake_api.requests_to("/sites/7/patrols")[0].url.params

    @pytest.mark.asyncio
    async def test_get_patrol_reports_failure_is_user_safe(self, api_client, fake_api):
        fake_api.add("GET", "/sites", [ATOM_SITE])
        fake_api.add("GET", "/sites/7/patrols", {"stack": "secret detail"}, status_code=500)

        with pytest.raises(PatrolAPIError) as exc_info:
            await api_client.get_patrol_reports("Atom")
        assert str(exc_info.value) == ERROR_PATROL_REPORTS

    @pytest.mark.asyncio
    async def test_site_performance_today_uses_day_endpoint(self, api_client, fake_api):
        now = datetime.now()
        path = f"/sites/7/{now.year}/{now.month}/{now.day}/performance"
        fake_api.add("GET", "/sites", [ATOM_SITE])
        fake_api.add("GET", path, {"totalPatrols": 12, "completedPatrols": 10})

        result = await api_client.get_site_performance("Atom", "today")

        assert "Period: Today" in result.message
        assert "Total Patrols: 12" in result.message

    @pytest.mark.asyncio
    async def test_site_performance_month_uses_month_endpoint(self, api_client, fake_api):
        now = datetime.now()
        path = f"/sites/7/{now.year}/{now.month}/performance"
        fake_api.add("GET", "/sites", [ATOM_SITE])
        fake_api.add("GET", path, {"totalPatrols": 300})

        result = await api_client.get_site_performance("Atom", "month")

        assert "Period: This Month" in result.message
        assert len(fake_api.requests_to(path)) == 1

    @pytest.mark.asyncio
    async def test_guards_for_site_filters_by_current_site(self, api_client, fake_api):
        fake_api.add("GET", "/sites", [ATOM_SITE])
        fake_api.add("GET", "/users/security-guards", [
            {"id": 1, "firstName": "Mary", "lastName": "Akello", "currentSite": {"id": 7, "name": "Atom"}},
            {"id": 2, "firstName": "Walker", "lastName": "Adams", "currentSite": {"id": 9}},
            {"id": 3, "firstName": "Avo", "lastName": "Yiga", "currentSite": "Atom"},
        ])

        result = await api_client.get_guards_for_site("Atom")

        assert result.count == 2
        assert "Mary Akello" in result.message
        assert "Avo Yiga" in result.message
        assert "Walker" not in result.message

    @pytest.mark.asyncio
    async def test_guards_for_site_flags_full_guard_page(self, fake_api):
        fake_api.add("GET", "/sites", [ATOM_SITE])
        fake_api.add("GET", "/users/security-guards", [
            {"id": 1, "firstName": "Mary", "lastName": "Akello", "currentSite": {"id": 7}},
            {"id": 2, "firstName": "Walker", "lastName": "Adams", "currentSite": {"id": 9}},
        ])
        client = PatrolAPIClient(
            base_url=BASE_URL,
            auth=StaticTokenAuth(make_jwt()),
            transport=fake_api.transport,
            guard_search_limit=2,
        )

        try:
            result = await client.get_guards_for_site("Atom")
        finally:
            await client.aclose()

        assert result.count == 1
        assert result.message.endswith("_Only the first 2 guards were checked; this list may be incomplete._")
        assert fake_api.requests_to("/users/security-guards")[0].url.params["limit"] == "2"


# ===========================================================================
# GUARD & SYSTEM OPERATIONS
# ===========================================================================

class TestGuardAndSystemOperations:

    @pytest.mark.asyncio
    async def test_get_guard_info(self, api_client, fake_api):
        fake_api.add("GET", "/users/security-guards", [
            {"id": 2, "firstName": "Walker", "lastName": "Adams", "email": "w@example.com", "isActive": True},
        ])

        result = await api_client.get_guard_info("Walker Adams")

        assert "*Name:* Walker Adams" in result.message
        assert "*Status:* ✅ Active" in result.message

    @pytest.mark.asyncio
    async def test_get_guard_info_not_found(self, api_client, fake_api):
        fake_api.add("GET", "/users/security-guards", [])

        result = await api_client.get_guard_info("Nobody")

        assert result.has_data is False
        assert "Nobody" in result.message

    @pytest.mark.asyncio
    async def test_get_system_stats(self, api_client, fake_api):
        fake_api.add("GET", "/stats", {"data": {"totalSites": 3, "totalGuards": 41}})

        result = await api_client.get_system_stats()

        assert "Total Sites: 3" in result.message
        assert "Total Guards: 41" in result.message

    @pytest.mark.asyncio
    async def test_get_system_stats_failure(self, api_client, fake_api):
        fake_api.add("GET", "/stats", status_code=502)

        with pytest.raises(PatrolAPIError, match=ERROR_STATS):
            await api_client.get_system_stats()

    @pytest.mark.asyncio
    async def test_test_connection(self, api_client, fake_api):
        fake_api.add("GET", "/stats", {})
        assert await api_client.test_connection() == {"success": True, "message": "API connection successful"}

    @pytest.mark.asyncio
    async def test_test_connection_failure_never_raises(self, api_client, fake_api):
        fake_api.fail("GET", "/stats", httpx.ConnectError("refused"))
        result = await api_client.test_connection()
        assert result == {"success": False, "message": "API connection failed"}

    @pytest.mark.asyncio
    async def test_probe_endpoints(self, api_client, fake_api):
        fake_api.add("GET", "/stats", {})
        fake_api.add("GET", "/sites", [])

        results = await api_client.probe_endpoints(["/stats", "/sites", "/tags"])

        assert [r["success"] for r in results] == [True, True, False]
        assert results[2]["status_code"] == 404
