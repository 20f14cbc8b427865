"""Requests for API namespace 'cmdb.objects'."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Final

from cmdbrpc.error import RpcError
from cmdbrpc.namespace import Namespace, ensure_id, to_int
from cmdbrpc.wire import Call

SORT_ASCENDING: Final[str] = "ASC"
SORT_DESCENDING: Final[str] = "DESC"

STATUS_ARCHIVED: Final[str] = "C__RECORD_STATUS__ARCHIVED"
STATUS_DELETED: Final[str] = "C__RECORD_STATUS__DELETED"
STATUS_PURGE: Final[str] = "C__RECORD_STATUS__PURGE"


class CMDBObjects(Namespace):
    """Create, read, update and remove CMDB objects."""

    SORT_ASCENDING = SORT_ASCENDING
    SORT_DESCENDING = SORT_DESCENDING

    async def create(self, objects: Iterable[Mapping[str, Any]]) -> list[int]:
        """Create one or more objects in one batch.

        Args:
            objects: Attributes per object; ``type`` and ``title`` are
                mandatory, ``category``, ``purpose``, ``cmdb_status`` and
                ``description`` optional

        Returns:
            The new object identifiers, in input order
        """
        results = await self.api.batch_request_values(
            Call("cmdb.object.create", obj) for obj in objects
        )
        return [ensure_id(result) for result in results]

    async def read(
        self,
        filter: Mapping[str, Any] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        order_by: str | None = None,
        sort: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch objects.

        Args:
            filter: Any combination of ``ids``, ``type``, ``type_group``,
                ``status``, ``title``, ``type_title``, ``location``,
                ``sysid``, ``first_name``, ``last_name``, ``email``
            limit: Maximum number of objects
            offset: Skip this many objects (only used with ``limit``)
            order_by: Attribute to order by, e.g. ``title`` or ``id``
            sort: SORT_ASCENDING or SORT_DESCENDING
        """
        params: dict[str, Any] = {"filter": dict(filter) if filter else {}}

        if limit is not None:
            params["limit"] = f"{offset},{limit}" if offset is not None else limit
        if order_by is not None:
            params["order_by"] = order_by
        if sort is not None:
            params["sort"] = sort

        return await self.api.request("cmdb.objects.read", params)

    async def read_by_ids(self, object_ids: Iterable[int]) -> list[dict[str, Any]]:
        return await self.api.request(
            "cmdb.objects.read",
            {"filter": {"ids": list(object_ids)}},
        )

    async def read_by_type(self, object_type: str) -> list[dict[str, Any]]:
        return await self.api.request(
            "cmdb.objects.read",
            {"filter": {"type": object_type}},
        )

    async def read_archived(self, object_type: str | None = None) -> list[dict[str, Any]]:
        return await self._read_by_status(STATUS_ARCHIVED, object_type)

    async def read_deleted(self, object_type: str | None = None) -> list[dict[str, Any]]:
        return await self._read_by_status(STATUS_DELETED, object_type)

    async def _read_by_status(
        self,
        status: str,
        object_type: str | None,
    ) -> list[dict[str, Any]]:
        filter: dict[str, Any] = {"status": status}
        if object_type is not None:
            filter["type"] = object_type
        return await self.api.request("cmdb.objects.read", {"filter": filter})

    async def get_id(self, title: str, object_type: str | None = None) -> int:
        """Find the identifier of the single object with this title.

        Raises:
            ApplicationFault: If no object or more than one object matches
        """
        filter: dict[str, Any] = {"title": title}
        if object_type is not None:
            filter["type"] = object_type

        result = await self.read(filter)

        match len(result):
            case 0:
                raise RpcError.application("Object not found")
            case 1:
                if not isinstance(result[0], dict) or "id" not in result[0]:
                    raise RpcError.application("Bad result", data=result)
                return to_int(result[0]["id"])
            case count:
                raise RpcError.application(f"Found {count} objects")

    async def update(self, objects: Iterable[Mapping[str, Any]]) -> None:
        """Update one or more objects; each needs ``id`` and ``title``."""
        await self.api.batch_request_values(
            Call("cmdb.object.update", obj) for obj in objects
        )

    async def archive(self, object_ids: Iterable[int]) -> None:
        await self._set_status(object_ids, STATUS_ARCHIVED)

    async def delete(self, object_ids: Iterable[int]) -> None:
        await self._set_status(object_ids, STATUS_DELETED)

    async def purge(self, object_ids: Iterable[int]) -> None:
        await self._set_status(object_ids, STATUS_PURGE)

    async def _set_status(self, object_ids: Iterable[int], status: str) -> None:
        await self.api.batch_request_values(
            Call("cmdb.object.delete", {"id": object_id, "status": status})
            for object_id in object_ids
        )
