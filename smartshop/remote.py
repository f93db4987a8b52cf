"""
Client for the remote table store (PostgREST / Supabase REST API).

Only two operations are needed: select-all ordered by a key, and
upsert-many with conflict resolution on the primary key.
"""
from typing import Optional

import httpx

from smartshop.core.exceptions import RemoteSyncFailure
from smartshop.logging_config import get_logger

logger = get_logger("remote")


class RemoteTableStore:
    """Async REST client for the `products` and `sales` tables."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def select_all(self, table: str, order_by: str, descending: bool = True) -> list[dict]:
        """Fetch every row of `table` ordered by `order_by`."""
        direction = "desc" if descending else "asc"
        try:
            response = await self._client.get(
                f"/{table}",
                params={"select": "*", "order": f"{order_by}.{direction}"},
            )
            response.raise_for_status()
            rows = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RemoteSyncFailure(table, str(e)) from e

        if not isinstance(rows, list):
            raise RemoteSyncFailure(table, f"expected a list of rows, got {type(rows).__name__}")
        return rows

    async def upsert(self, table: str, rows: list[dict]) -> None:
        """Insert rows, overwriting any existing row with the same id."""
        if not rows:
            return
        try:
            response = await self._client.post(
                f"/{table}",
                params={"on_conflict": "id"},
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
                json=rows,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RemoteSyncFailure(table, str(e)) from e
        logger.debug(f"[REMOTE] Upserted {len(rows)} row(s) into {table}")

    async def close(self) -> None:
        await self._client.aclose()
