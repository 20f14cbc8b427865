"""Requests for API namespace 'checkmk.statictag'."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from cmdbrpc.error import RpcError
from cmdbrpc.namespace import Namespace, ensure_id, ensure_success
from cmdbrpc.wire import Call

REQUIRED_TAG_ATTRIBUTES = ("tag", "title")


class CheckMKStaticTag(Namespace):
    """Static host tags exported to Check_MK."""

    async def create(
        self,
        tag: str,
        title: str,
        group: str | None = None,
        export: bool = True,
        description: str | None = None,
    ) -> int:
        """Create a static host tag and return its identifier."""
        data: dict[str, Any] = {
            "tag": tag,
            "title": title,
            "export": export,
        }
        if group is not None:
            data["group"] = group
        if description is not None:
            data["description"] = description

        result = await self.api.request("checkmk.statictag.create", {"data": data})
        ensure_success(result)
        return ensure_id(result)

    async def batch_create(self, tags: Iterable[Mapping[str, Any]]) -> list[Any]:
        """Create several tags.

        Args:
            tags: Attributes per tag; ``tag`` and ``title`` are required,
                ``group``, ``export`` and ``description`` optional

        Raises:
            InvalidArgument: If a tag misses a required attribute
        """
        calls = []
        for data in tags:
            for attribute in REQUIRED_TAG_ATTRIBUTES:
                if attribute not in data:
                    raise RpcError.invalid_argument(f'Missing attribute "{attribute}"')
            calls.append(Call("checkmk.statictag.create", {"data": dict(data)}))

        results = await self.api.batch_request_values(calls)
        return [ensure_success(result).get("id") for result in results]

    async def read(self) -> list[dict[str, Any]]:
        """Read all static host tags."""
        return await self.api.request("checkmk.statictag.read")

    async def read_by_id(self, tag_id: int) -> list[dict[str, Any]]:
        return await self.api.request("checkmk.statictag.read", {"id": tag_id})

    async def read_by_ids(self, tag_ids: Iterable[int]) -> list[dict[str, Any]]:
        return await self.api.request("checkmk.statictag.read", {"ids": list(tag_ids)})

    async def read_by_tag(self, tag: str) -> list[dict[str, Any]]:
        return await self.api.request("checkmk.statictag.read", {"tag": tag})

    async def update(self, tag_id: int, tag: Mapping[str, Any]) -> None:
        """Alter ``tag``, ``title``, ``group``, ``export`` or ``description``."""
        result = await self.api.request(
            "checkmk.statictag.update",
            {
                "id": tag_id,
                "data": dict(tag),
            },
        )
        ensure_success(result)

    async def delete(self, tag_id: int) -> None:
        result = await self.api.request("checkmk.statictag.delete", {"id": tag_id})
        ensure_success(result)

    async def batch_delete(self, tag_ids: Iterable[int]) -> None:
        results = await self.api.batch_request_values(
            Call("checkmk.statictag.delete", {"id": tag_id}) for tag_id in tag_ids
        )
        for result in results:
            ensure_success(result)

    async def delete_all(self) -> None:
        """Delete every static host tag (no request if there are none)."""
        tag_ids = [tag["id"] for tag in await self.read()]
        if tag_ids:
            await self.batch_delete(tag_ids)
