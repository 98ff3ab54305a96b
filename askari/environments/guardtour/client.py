"""
Guard Tour API Client - Typed façade over the remote patrol REST service.

This client wraps every outbound call the assistant makes to the
guard-tour service and turns raw JSON into chat-ready QueryResults.

Key Features:
=============
1. Two HTTP configurations: a public one for sign-in and an authorized
   one that sends ``Authorization: Bearer <token>`` on every request
2. Pluggable authentication (static token or sign-in with refresh)
3. Exact-name site lookup and substring guard lookup
4. Fixed, user-safe error messages; internal detail goes to the log

API Reference:
==============
    POST /auth/signin                               {username, password} → {access_token}
    GET  /sites                                     ?search=
    GET  /sites/{id}
    GET  /sites/{id}/patrols                        ?filter.date=$gte:<ISO instant>
    GET  /sites/{id}/{year}/{month}/{day}/performance
    GET  /sites/{id}/{year}/{month}/performance
    GET  /users/security-guards                     ?search=&limit=
    GET  /stats

Usage Example:
==============
    client = PatrolAPIClient(
        base_url="https://guardtour.example.com",
        auth=RefreshingTokenAuth(TokenStore("data/auth_token.json"), "bot", "pw"),
    )
    result = await client.get_site_info("Main Gate")
    print(result.message)
    await client.aclose()
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import ValidationError

from askari.environments.base import (
    APIError,
    AuthStrategy,
    AuthenticationError,
    GuardTourError,
    PatrolAPIError,
)
from askari.environments.guardtour.formatter import ResponseFormatter
from askari.environments.guardtour.schemas import Guard, QueryResult, Site, TokenResponse


logger = logging.getLogger("askari.guardtour")


# ---------------------------------------------------------------------------
# ERROR MESSAGES
# ---------------------------------------------------------------------------
ERROR_PATROL_REPORTS = "Failed to fetch patrol reports. Please try again."
ERROR_SITE_INFO = "Failed to fetch site information. Please try again."
ERROR_GUARD_INFO = "Failed to fetch guard information. Please try again."
ERROR_SITE_GUARDS = "Failed to fetch guards for this site. Please try again."
ERROR_PERFORMANCE = "Failed to fetch site performance data. Please try again."
ERROR_SITES = "Failed to fetch sites list. Please try again."
ERROR_STATS = "Failed to fetch system statistics. Please try again."

DEFAULT_TIMEOUT = 10.0
DEFAULT_GUARD_SEARCH_LIMIT = 50

# Endpoints checked by probe_endpoints (the CLI "check" command)
PROBE_ENDPOINTS = (
    "/stats",
    "/sites",
    "/users/security-guards",
    "/users/company-admins",
    "/users/site-admins",
    "/companies",
    "/tags",
)


def site_not_found(site_name: str) -> QueryResult:
    return QueryResult(
        message=f'Site "{site_name}" not found. Please check the site name and try again.',
        has_data=False,
    )


def guard_not_found(guard_name: str) -> QueryResult:
    return QueryResult(
        message=f'Guard "{guard_name}" not found. Please check the name and try again.',
        has_data=False,
    )


def unwrap(payload: Any) -> Any:
    """Strip the ``{"data": ...}`` envelope some endpoints use."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def unwrap_list(payload: Any) -> List[Dict[str, Any]]:
    """Unwrap a collection payload and keep only dict items."""
    items = unwrap(payload)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


class PatrolAPIClient:
    """
    Guard-tour REST client.

    Attributes:
        base_url: Root URL of the guard-tour service
        auth: Strategy that supplies bearer tokens
        formatter: Renders payloads into QueryResults
        guard_search_limit: Page size for guard searches
    """

    def __init__(
        self,
        base_url: str,
        auth: AuthStrategy,
        timeout: float = DEFAULT_TIMEOUT,
        formatter: Optional[ResponseFormatter] = None,
        guard_search_limit: int = DEFAULT_GUARD_SEARCH_LIMIT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Root URL of the guard-tour service
            auth: StaticTokenAuth or RefreshingTokenAuth
            timeout: Per-request timeout in seconds
            formatter: Optional formatter override
            guard_search_limit: ``limit`` sent with guard searches
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self.formatter = formatter or ResponseFormatter()
        self.guard_search_limit = guard_search_limit

        headers = {"Content-Type": "application/json", "Accept": "application/json"}

        # Unauthenticated configuration: sign-in only
        self._public_http = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, headers=headers, transport=transport
        )
        # Authorized configuration: bearer token injected per request
        self._http = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, headers=headers, transport=transport
        )

        logger.info(f"Guard tour client initialized for {self.base_url} (auth={auth.mode})")

    async def aclose(self) -> None:
        """Close both underlying connection pools."""
        await self._http.aclose()
        await self._public_http.aclose()

    # -------------------------------------------------------------------------
    # AUTHENTICATION
    # -------------------------------------------------------------------------

    async def authenticate(self, username: str, password: str) -> str:
        """
        Sign in and return a fresh access token.

        Raises:
            AuthenticationError: If the credentials are rejected or the
                service cannot be reached
        """
        logger.info("Signing in to guard tour API")

        try:
            response = await self._public_http.post(
                "/auth/signin",
                json={"username": username, "password": password},
            )
        except httpx.RequestError as e:
            logger.error(f"Network error during sign-in: {e}")
            raise AuthenticationError(f"Network error: {e}")

        if response.status_code not in (200, 201):
            logger.error(f"Sign-in failed: {response.status_code} - {response.text}")
            raise AuthenticationError(f"Sign-in failed with status {response.status_code}")

        try:
            token_response = TokenResponse(**response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Sign-in response missing access_token: {e}")
            raise AuthenticationError("Sign-in response did not contain an access token")

        logger.info("Successfully obtained guard tour access token")
        return token_response.access_token

    # -------------------------------------------------------------------------
    # HTTP REQUEST HELPER
    # -------------------------------------------------------------------------

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make an authorized request and return the parsed JSON body.

        Raises:
            AuthenticationError: If no token could be obtained
            APIError: On transport failure, timeout, or non-2xx status
        """
        token = await self.auth.get_token(self.authenticate)
        headers = {"Authorization": f"Bearer {token}"}

        logger.info(f"API Request: {method} {endpoint}")

        try:
            response = await self._http.request(
                method, endpoint, params=params, headers=headers
            )
        except httpx.TimeoutException as e:
            logger.error(f"Timeout calling {endpoint}: {e}")
            raise APIError(f"Timeout: {e}")
        except httpx.RequestError as e:
            logger.error(f"Network error calling {endpoint}: {e}")
            raise APIError(f"Network error: {e}")

        if response.status_code == 401:
            logger.error(f"API Response: 401 {endpoint} (token rejected)")
            await self.auth.invalidate()
            raise APIError("Unauthorized", status_code=401, response=response.text)

        if not response.is_success:
            logger.error(f"API Response: {response.status_code} {endpoint} - {response.text}")
            raise APIError(
                f"API request failed: {response.status_code}",
                status_code=response.status_code,
                response=response.text,
            )

        logger.info(f"API Response: {response.status_code} {endpoint}")

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {endpoint}: {e}")
            raise APIError("Invalid JSON response", status_code=response.status_code)

    async def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._make_request("GET", endpoint, params=params)

    # -------------------------------------------------------------------------
    # LOOKUPS
    # -------------------------------------------------------------------------

    async def find_site_by_name(self, site_name: str) -> Optional[Site]:
        """
        Find a site whose name equals ``site_name`` (case-insensitive, trimmed).

        The server-side search may return partial matches; only an exact
        match is accepted. Request failures resolve to None.
        """
        try:
            payload = await self._get("/sites", params={"search": site_name.strip()})
        except GuardTourError as e:
            logger.error(f"Error finding site '{site_name}': {e}")
            return None

        for item in unwrap_list(payload):
            try:
                site = Site(**item)
            except ValidationError:
                continue
            if site.matches_name(site_name):
                return site
        return None

    async def get_guard_by_name(self, guard_name: str) -> Optional[Guard]:
        """
        Return the first guard whose full name contains ``guard_name``.

        Raises:
            GuardTourError: If the guard search fails
        """
        payload = await self._get(
            "/users/security-guards",
            params={"search": guard_name.strip(), "limit": self.guard_search_limit},
        )

        for item in unwrap_list(payload):
            try:
                guard = Guard(**item)
            except ValidationError:
                continue
            if guard.name_contains(guard_name):
                return guard
        return None

    # -------------------------------------------------------------------------
    # SITE OPERATIONS
    # -------------------------------------------------------------------------

    async def get_site_info(self, site_name: str) -> QueryResult:
        try:
            site = await self.find_site_by_name(site_name)
            if not site:
                return site_not_found(site_name)

            payload = await self._get(f"/sites/{site.id}")
            return self.formatter.format_site_info(unwrap(payload))

        except GuardTourError as e:
            logger.error(f"Error fetching site info: {e}")
            raise PatrolAPIError(ERROR_SITE_INFO)

    async def get_all_sites(self) -> List[Site]:
        """Return the full site collection, unformatted."""
        try:
            payload = await self._get("/sites")
        except GuardTourError as e:
            logger.error(f"Error fetching sites: {e}")
            raise PatrolAPIError(ERROR_SITES)

        sites = []
        for item in unwrap_list(payload):
            try:
                sites.append(Site(**item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed site record: {e}")
        return sites

    async def list_sites(self) -> QueryResult:
        """All sites rendered as a numbered list."""
        sites = await self.get_all_sites()
        return self.formatter.format_site_list([site.to_payload() for site in sites])

    async def get_patrol_reports(self, site_name: str, date: Optional[str] = None) -> QueryResult:
        """
        Patrols for a site, optionally on or after ``date`` (YYYY-MM-DD).

        Only a lower bound is sent; the service returns most recent first.
        """
        try:
            site = await self.find_site_by_name(site_name)
            if not site:
                return site_not_found(site_name)

            params = None
            if date:
                params = {"filter.date": f"$gte:{date}T00:00:00.000Z"}

            payload = await self._get(f"/sites/{site.id}/patrols", params=params)
            return self.formatter.format_patrol_reports(unwrap_list(payload), site_name)

        except GuardTourError as e:
            logger.error(f"Error fetching patrol reports: {e}")
            raise PatrolAPIError(ERROR_PATROL_REPORTS)

    async def get_site_performance(
        self,
        site_name: str,
        timeframe: Optional[str] = "today",
    ) -> QueryResult:
        """
        Performance counts for today (``timeframe == "today"``) or the
        current month (anything else).
        """
        try:
            site = await self.find_site_by_name(site_name)
            if not site:
                return site_not_found(site_name)

            now = datetime.now()
            if timeframe == "today":
                endpoint = f"/sites/{site.id}/{now.year}/{now.month}/{now.day}/performance"
            else:
                endpoint = f"/sites/{site.id}/{now.year}/{now.month}/performance"

            payload = await self._get(endpoint)
            return self.formatter.format_performance_report(unwrap(payload), site_name, timeframe)

        except GuardTourError as e:
            logger.error(f"Error fetching site performance: {e}")
            raise PatrolAPIError(ERROR_PERFORMANCE)

    async def get_guards_for_site(self, site_name: str) -> QueryResult:
        """Guards whose current site is ``site_name``."""
        try:
            site = await self.find_site_by_name(site_name)
            if not site:
                return site_not_found(site_name)

            payload = await self._get(
                "/users/security-guards", params={"limit": self.guard_search_limit}
            )

            # The API has no site filter or paging, only a page size
            items = unwrap_list(payload)
            page_full = len(items) >= self.guard_search_limit
            if page_full:
                logger.warning(
                    f"Guard page full ({self.guard_search_limit}); guards for '{site_name}' may be missing"
                )

            assigned = []
            for item in items:
                try:
                    guard = Guard(**item)
                except ValidationError:
                    continue
                if guard.is_assigned_to(site):
                    assigned.append(guard.to_payload())

            return self.formatter.format_guard_list(
                assigned,
                site.name or site_name,
                scanned_limit=self.guard_search_limit if page_full else None,
            )

        except GuardTourError as e:
            logger.error(f"Error fetching guards for site: {e}")
            raise PatrolAPIError(ERROR_SITE_GUARDS)

    # -------------------------------------------------------------------------
    # GUARD OPERATIONS
    # -------------------------------------------------------------------------

    async def get_guard_info(self, guard_name: str) -> QueryResult:
        try:
            guard = await self.get_guard_by_name(guard_name)
            if not guard:
                return guard_not_found(guard_name)
            return self.formatter.format_guard_info(guard.to_payload())

        except GuardTourError as e:
            logger.error(f"Error fetching guard info: {e}")
            raise PatrolAPIError(ERROR_GUARD_INFO)

    # -------------------------------------------------------------------------
    # SYSTEM OPERATIONS
    # -------------------------------------------------------------------------

    async def get_system_stats(self) -> QueryResult:
        try:
            payload = await self._get("/stats")
            return self.formatter.format_system_stats(unwrap(payload))

        except GuardTourError as e:
            logger.error(f"Error fetching system stats: {e}")
            raise PatrolAPIError(ERROR_STATS)

    async def test_connection(self) -> Dict[str, Any]:
        """
        Probe the API with an authorized request. Never raises.

        Returns:
            {"success": bool, "message": str}
        """
        try:
            await self._get("/stats")
        except Exception as e:
            logger.error(f"API connection failed: {e}")
            return {"success": False, "message": "API connection failed"}

        logger.info("API connection successful")
        return {"success": True, "message": "API connection successful"}

    async def probe_endpoints(self, endpoints: Sequence[str] = PROBE_ENDPOINTS) -> List[Dict[str, Any]]:
        """
        GET each endpoint once and report which are reachable.

        Returns:
            One {"endpoint", "success", "status_code"} dict per endpoint
        """
        results = []
        for endpoint in endpoints:
            try:
                await self._get(endpoint)
                results.append({"endpoint": endpoint, "success": True, "status_code": 200})
            except GuardTourError as e:
                results.append({
                    "endpoint": endpoint,
                    "success": False,
                    "status_code": getattr(e, "status_code", None),
                })
        return results
