# =============================================================================
# File: employee_sync/infra/hr_service/adapter.py
# Description: HR Service Read API Adapter
# =============================================================================

import logging
from typing import Any, Dict, Optional

import httpx

from employee_sync.common.exceptions.exceptions import EmployeeNotFoundError, UpstreamUnavailableError
from employee_sync.config.hr_service_config import HrServiceConfig

log = logging.getLogger("employee_sync.infra.hr_service")


class HrServiceClient:
    """Adapter for the HR service employee read API"""

    def __init__(self, config: HrServiceConfig, client: Optional[httpx.AsyncClient] = None):
        self._config = config
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self):
        """Close HTTP client (only when created here)"""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        client = await self._get_client()
        try:
            response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            log.error(f"HR service timeout for {url}")
            raise UpstreamUnavailableError(f"HR service timed out: {url}") from e
        except httpx.HTTPError as e:
            log.error(f"HR service unreachable for {url}: {e}")
            raise UpstreamUnavailableError(f"HR service unreachable: {e}") from e

        if response.status_code == 404:
            return None

        if response.status_code != 200:
            log.error(f"HR service error: {response.status_code} {response.text[:200]}")
            raise UpstreamUnavailableError(
                f"HR service returned {response.status_code} for {url}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(f"HR service returned invalid JSON for {url}") from e

    async def get_employees(
            self,
            country: Optional[str] = None,
            page: int = 1,
            per_page: int = 15
    ) -> Dict[str, Any]:
        """
        Fetch one page of employees.

        Args:
            country: Country filter (omitted when None)
            page: 1-based page number
            per_page: Page size

        Returns:
            {"data": [...], "meta": {...}}
        """
        params: Dict[str, Any] = {"page": page, "per_page": per_page}
        if country is not None:
            params["country"] = country

        log.debug(f"Fetching employees page {page} (per_page={per_page}, country={country})")
        payload = await self._get_json(self._config.employees_url, params)
        if not isinstance(payload, dict):
            raise UpstreamUnavailableError("HR service returned an unexpected employee page")
        return payload

    async def get_employee(self, employee_id: int, country: Optional[str] = None) -> Dict[str, Any]:
        """
        Fetch a single employee.

        Returns:
            The employee attributes (``data`` unwrapped)
        """
        params = {"country": country} if country is not None else {}
        payload = await self._get_json(self._config.employee_url(employee_id), params)
        if payload is None:
            raise EmployeeNotFoundError(employee_id, country)

        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            return payload["data"]
        return payload
