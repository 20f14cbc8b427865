"""Requests for API namespace 'cmdb.category_info'."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from cmdbrpc.namespace import Namespace
from cmdbrpc.wire import Call


class CMDBCategoryInfo(Namespace):
    """Attribute definitions of categories."""

    async def read(self, category: str) -> dict[str, Any]:
        return await self.api.request("cmdb.category_info", {"category": category})

    async def batch_read(self, categories: Iterable[str]) -> list[dict[str, Any]]:
        """Fetch information about several categories in one round trip."""
        return await self.api.batch_request_values(
            Call("cmdb.category_info", {"category": category})
            for category in categories
        )
