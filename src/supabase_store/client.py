"""Async HTTP client for the hosted Postgres REST interface (PostgREST)."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .exceptions import StoreConnectionError, StoreError, error_from_payload
from .models import StoreConfig

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Async client for the `/rest/v1` table interface.

    Only the handful of verbs the scheduler needs are implemented: select,
    insert, update and delete with equality filters.

    Attributes:
        config: StoreConfig with project URL and anon key
        client: httpx.AsyncClient bound to the REST base URL

    Example:
        >>> config = StoreConfig(url="https://abc.supabase.co", anon_key="eyJ...")
        >>> async with SupabaseClient(config) as store:
        ...     rows = await store.select("playlists", columns="id, name", limit=10)
    """

    def __init__(self, config: StoreConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the store client.

        Args:
            config: StoreConfig with project URL and credentials
            transport: Optional transport override (used by tests)
        """
        self.config = config
        self._base_url = f"{config.url.rstrip('/')}/rest/v1"

        self.client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "apikey": config.anon_key,
                "Authorization": f"Bearer {config.anon_key}",
                "Accept-Profile": config.schema,
                "Content-Profile": config.schema,
            },
            timeout=httpx.Timeout(config.timeout_seconds),
            transport=transport,
        )

        logger.info(f"Initialized store client for {self._base_url}")

    async def __aenter__(self) -> "SupabaseClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    @staticmethod
    def _eq_filters(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
        return {column: f"eq.{value}" for column, value in (filters or {}).items()}

    def _handle_response(self, response: httpx.Response) -> Any:
        """Parse a PostgREST response, raising StoreError on failure.

        Raises:
            StoreError: Most specific subclass for the returned error code, or
                code "invalid_response" when a success body is not JSON
        """
        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = {"message": response.text}
            if not isinstance(payload, dict):
                payload = {"message": str(payload)}
            error = error_from_payload(payload, response.status_code)
            logger.error(f"Store request {response.request.method} {response.request.url} failed: {error}")
            raise error

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(
                f"Store request {response.request.method} {response.request.url} "
                f"returned a non-JSON body (HTTP {response.status_code})"
            )
            raise StoreError(
                "invalid_response", f"Expected JSON from the store, got: {response.text[:200]!r}"
            ) from e

    async def _request(self, method: str, table: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, f"/{table}", **kwargs)
        except httpx.HTTPError as e:
            raise StoreConnectionError("connection", f"{method} {table}: {e}") from e
        return self._handle_response(response)

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Read rows from a table.

        Args:
            table: Table name
            columns: PostgREST select expression (may embed related tables)
            filters: Column equality filters
            order: Order expression, e.g. "updated_at.desc"
            limit: Maximum rows to return

        Returns:
            List of row dictionaries
        """
        params = {"select": columns}
        params.update(self._eq_filters(filters))
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = str(limit)

        rows = await self._request("GET", table, params=params)
        logger.debug(f"Selected {len(rows or [])} rows from {table}")
        return rows or []

    async def insert(self, table: str, rows: Any) -> List[Dict[str, Any]]:
        """Insert one row (dict) or many (list of dicts) and return the stored rows."""
        created = await self._request(
            "POST", table, json=rows, headers={"Prefer": "return=representation"}
        )
        if not isinstance(created, list):
            raise StoreError("insert", f"Unexpected insert response for {table}: {created!r}")
        logger.debug(f"Inserted {len(created)} rows into {table}")
        return created

    async def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Update rows matching every equality filter."""
        if not filters:
            raise ValueError("update requires at least one filter")
        updated = await self._request(
            "PATCH",
            table,
            params=self._eq_filters(filters),
            json=values,
            headers={"Prefer": "return=representation"},
        )
        return updated or []

    async def delete(self, table: str, filters: Dict[str, Any]) -> None:
        """Delete rows matching every equality filter."""
        if not filters:
            raise ValueError("delete requires at least one filter")
        await self._request("DELETE", table, params=self._eq_filters(filters))

    async def ping(self) -> bool:
        """Check that the playlists table is reachable."""
        try:
            await self.select("playlists", columns="id", limit=1)
            return True
        except StoreError as e:
            logger.warning(f"Store connection test failed: {e}")
            return False
