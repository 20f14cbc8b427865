"""Requests for API namespace 'cmdb.category'."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from cmdbrpc.error import RpcError
from cmdbrpc.namespace import Namespace, ensure_id, ensure_success, to_int
from cmdbrpc.wire import Call


class CMDBCategory(Namespace):
    """Category entries of objects.

    Works with both single- and multi-valued categories. Entries are
    addressed by object id, category constant (e.g. ``C__CATG__IP``) and,
    for multi-valued categories, the entry id.
    """

    async def create(
        self,
        object_id: int,
        category: str,
        attributes: Mapping[str, Any],
    ) -> int:
        """Create a category entry and return its identifier."""
        result = await self.api.request(
            "cmdb.category.create",
            {
                "objID": object_id,
                "data": dict(attributes),
                "category": category,
            },
        )
        ensure_success(result)
        return ensure_id(result)

    async def read(self, object_id: int, category: str) -> list[dict[str, Any]]:
        """Read all entries of a category for one object."""
        return await self.api.request(
            "cmdb.category.read",
            {
                "objID": object_id,
                "category": category,
            },
        )

    async def read_one_by_id(
        self,
        object_id: int,
        category: str,
        entry_id: int,
    ) -> dict[str, Any]:
        """Read one specific entry.

        Raises:
            ApplicationFault: If entries carry no id or none matches
        """
        for entry in await self.read(object_id, category):
            if "id" not in entry:
                raise RpcError.application(
                    f'Entries for category "{category}" contain no identifier'
                )
            if to_int(entry["id"]) == entry_id:
                return entry

        raise RpcError.application(
            f'No entry with identifier {entry_id} found in category "{category}" '
            f"for object {object_id}"
        )

    async def read_first(self, object_id: int, category: str) -> dict[str, Any] | None:
        """Read the first entry, or None if the category is empty."""
        entries = await self.read(object_id, category)
        return entries[0] if entries else None

    async def update(
        self,
        object_id: int,
        category: str,
        attributes: Mapping[str, Any],
        entry_id: int | None = None,
    ) -> None:
        """Update an entry; ``entry_id`` is only needed for multi-valued categories."""
        data = dict(attributes)
        if entry_id is not None:
            data["category_id"] = entry_id

        result = await self.api.request(
            "cmdb.category.update",
            {
                "objID": object_id,
                "category": category,
                "data": data,
            },
        )
        ensure_success(result)

    async def archive(self, object_id: int, category: str, entry_id: int) -> None:
        result = await self.api.request(
            "cmdb.category.delete",
            self._entry_params(object_id, category, entry_id),
        )
        ensure_success(result)

    async def delete(self, object_id: int, category: str, entry_id: int) -> None:
        """Mark an entry as deleted.

        The API has no separate delete call for entries: the first
        ``cmdb.category.delete`` archives the entry, the second one moves it
        from archived to deleted.
        """
        await self.archive(object_id, category, entry_id)
        await self.archive(object_id, category, entry_id)

    async def purge(self, object_id: int, category: str, entry_id: int) -> None:
        result = await self.api.request(
            "cmdb.category.quickpurge",
            self._entry_params(object_id, category, entry_id),
        )
        ensure_success(result)

    async def batch_create(
        self,
        object_ids: Iterable[int],
        category: str,
        attributes: Sequence[Mapping[str, Any]],
    ) -> list[int | None]:
        """Create entries for every combination of object and attribute set.

        Returns:
            Entry identifiers, ordered by object, then by attribute set
        """
        results = await self.api.batch_request_values(
            Call(
                "cmdb.category.create",
                {
                    "objID": object_id,
                    "data": dict(data),
                    "category": category,
                },
            )
            for object_id in object_ids
            for data in attributes
        )
        # Only check success here: some server versions send no id in batches.
        return [_entry_id(ensure_success(result)) for result in results]

    async def batch_read(
        self,
        object_ids: Iterable[int],
        categories: Sequence[str],
    ) -> list[list[dict[str, Any]]]:
        """Read several categories of several objects in one round trip.

        Returns:
            One list of entries per (object, category) pair, ordered by
            object, then by category
        """
        return await self.api.batch_request_values(
            Call(
                "cmdb.category.read",
                {
                    "objID": object_id,
                    "category": category,
                },
            )
            for object_id in object_ids
            for category in categories
        )

    async def batch_update(
        self,
        object_ids: Iterable[int],
        category: str,
        attributes: Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        """Update a single-valued category for several objects."""
        results = await self.api.batch_request_values(
            Call(
                "cmdb.category.update",
                {
                    "objID": object_id,
                    "category": category,
                    "data": dict(attributes),
                },
            )
            for object_id in object_ids
        )
        return [ensure_success(result) for result in results]

    async def clear(self, object_id: int, categories: Sequence[str]) -> int:
        """Archive every entry of the given categories of one object.

        Returns:
            Number of archived entries
        """
        batch = await self.batch_read([object_id], categories)

        calls = [
            Call(
                "cmdb.category.delete",
                self._entry_params(object_id, category, to_int(entry["id"])),
            )
            for category, entries in zip(categories, batch)
            for entry in entries
        ]
        if not calls:
            return 0

        for result in await self.api.batch_request_values(calls):
            ensure_success(result)
        return len(calls)

    @staticmethod
    def _entry_params(object_id: int, category: str, entry_id: int) -> dict[str, Any]:
        return {
            "objID": object_id,
            "category": category,
            "cateID": entry_id,
        }


def _entry_id(result: dict[str, Any]) -> int | None:
    value = result.get("id")
    return None if value is None else to_int(value)
