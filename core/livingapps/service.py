"""
LivingApps HTTP Service.

Low-level HTTP client for the LivingApps REST record API.

Design Principles:
    LivingAppsService requires httpx.AsyncClient via EXPLICIT dependency injection.
    It does NOT fetch clients from global state.
    The HTTP client lifecycle is managed by the caller.

    Errors are logged and re-raised as LivingAppsError subclasses. The service
    never swallows a failure and never retries.

    Usage in FastAPI routes:
        @router.get("/data")
        async def get_data(livingapps: LivingAppsServiceDep):
            return await livingapps.get_records(app_id)

    Usage outside a request:
        async with HttpClientManager() as client:
            service = LivingAppsService(http_client=client)
            await service.get_records(app_id)
"""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from core.app_context import ConfigLoader
from core.livingapps.exceptions import LivingAppsAPIError, LivingAppsConnectionError
from core.livingapps.references import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)


class LivingAppsService:
    """
    LivingApps REST API client.

    Provides list/create/update/delete for the records of any app.
    Higher-level operations should use LivingAppsRepository.

    Args:
        http_client: Shared httpx.AsyncClient (required).
        base_url: LivingApps REST base URL. If not provided, loads from config.
        timeout: HTTP request timeout in seconds. If not provided, loads from config.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if http_client is None:
            raise ValueError(
                "http_client is required. Use dependency injection via LivingAppsServiceDep "
                "in FastAPI routes, or HttpClientManager outside a request."
            )

        self._client = http_client

        if not base_url or timeout is None:
            config = ConfigLoader()
            config.load()
            base_url = base_url or config.get("livingapps.base_url", DEFAULT_BASE_URL)
            timeout = timeout if timeout is not None else config.get("livingapps.timeout", 30.0)

        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        """The REST base URL, also used to build reference URLs."""
        return self._base_url

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for LivingApps API requests."""
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _build_url(self, app_id: str, record_id: Optional[str] = None) -> str:
        """Build API URL for an app's records or a single record."""
        url = f"{self._base_url}/apps/{app_id}/records"
        if record_id:
            url = f"{url}/{record_id}"
        return url

    async def _request(
        self,
        method: str,
        url: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Send a request and translate failures.

        Raises:
            LivingAppsAPIError: Non-2xx response.
            LivingAppsConnectionError: Transport level failure.
        """
        try:
            response = await self._client.request(
                method,
                url,
                json=json,
                headers=self._get_headers(),
                timeout=self._timeout,
            )
            response.raise_for_status()
            return response

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            body = e.response.text[:500]
            logger.error(f"LivingApps API error: {method} {url} -> {status_code} - {body}")
            raise LivingAppsAPIError(
                f"LivingApps API error {status_code} for {method} {url}",
                status_code=status_code,
                body=body,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"LivingApps request failed: {method} {url}: {e}")
            raise LivingAppsConnectionError(f"LivingApps request failed: {e}") from e

    @staticmethod
    def _json_or_none(response: httpx.Response) -> Optional[Any]:
        """Decode a JSON body; empty bodies yield None."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    # =========================================================================
    # Health
    # =========================================================================

    async def check_connection(self) -> dict:
        """
        Check LivingApps API connectivity for dashboard health monitoring.

        Returns:
            dict: Health check result with structure:
                {
                    "status": "healthy" | "warning" | "error",
                    "message": "Description of the status",
                    "details": {"Latency": "123ms", "Base URL": "..."}
                }
        """
        try:
            start_time = time.time()
            response = await self._client.get(
                self._base_url,
                headers=self._get_headers(),
                timeout=10.0,
            )
            latency_ms = int((time.time() - start_time) * 1000)
            details = {"Latency": f"{latency_ms}ms", "Base URL": self._base_url}

            if response.status_code < 400:
                return {"status": "healthy", "message": "Connected", "details": details}
            if response.status_code in (401, 403):
                return {
                    "status": "error",
                    "message": "Authentication failed",
                    "details": {**details, "Error": f"HTTP {response.status_code}"},
                }
            return {
                "status": "warning",
                "message": f"HTTP {response.status_code}",
                "details": details,
            }

        except httpx.HTTPError as e:
            logger.error(f"LivingApps health check failed: {e}")
            return {
                "status": "error",
                "message": "Connection failed",
                "details": {"Base URL": self._base_url, "Error": str(e)[:50]},
            }

    # =========================================================================
    # CRUD Operations
    # =========================================================================

    async def get_records(self, app_id: str) -> List[Dict[str, Any]]:
        """
        Fetch all records of an app.

        LivingApps returns an object keyed by record id. The records are
        returned as a list in backend order, each with "record_id" set.

        Args:
            app_id: The app (collection) id.

        Returns:
            List of record dictionaries ({"record_id", "createdat", "updatedat", "fields"}).
        """
        response = await self._request("GET", self._build_url(app_id))
        data = self._json_or_none(response)

        if isinstance(data, dict):
            records = []
            for record_id, record in data.items():
                if isinstance(record, dict):
                    records.append({**record, "record_id": record_id})
            return records
        if isinstance(data, list):
            return data
        return []

    async def get_record(self, app_id: str, record_id: str) -> Dict[str, Any]:
        """
        Fetch a single record by id.

        Args:
            app_id: The app id.
            record_id: The record id.

        Returns:
            Record dictionary with "record_id" set.
        """
        response = await self._request("GET", self._build_url(app_id, record_id))
        data = self._json_or_none(response) or {}
        return {**data, "record_id": record_id}

    async def create_record(
        self,
        app_id: str,
        fields: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """
        Create a new record.

        Args:
            app_id: The app id.
            fields: Field values by field name.

        Returns:
            The backend response (may be None when the backend sends no body).
        """
        response = await self._request("POST", self._build_url(app_id), json={"fields": fields})
        result = self._json_or_none(response)
        logger.debug(f"Record created in app {app_id}")
        return result

    async def update_record(
        self,
        app_id: str,
        record_id: str,
        fields: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """
        Update an existing record. Only the given fields change.

        Args:
            app_id: The app id.
            record_id: The record id to update.
            fields: Changed field values.
        """
        response = await self._request(
            "PATCH", self._build_url(app_id, record_id), json={"fields": fields}
        )
        logger.debug(f"Record {record_id} updated successfully")
        return self._json_or_none(response)

    async def delete_record(self, app_id: str, record_id: str) -> None:
        """
        Delete a record.

        Args:
            app_id: The app id.
            record_id: The record id to delete.
        """
        await self._request("DELETE", self._build_url(app_id, record_id))
        logger.debug(f"Record {record_id} deleted successfully")

