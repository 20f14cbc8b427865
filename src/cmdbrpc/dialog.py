"""Requests for API namespace 'cmdb.dialog'.

Dialog attributes are drop-down menus whose values are managed centrally.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cmdbrpc.namespace import Namespace, ensure_id
from cmdbrpc.wire import Call


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class CMDBDialog(Namespace):

    async def create(self, category: str, attribute: str, value: Any) -> int:
        """Add a value to a drop-down menu and return the entry identifier."""
        result = await self.api.request(
            "cmdb.dialog.create",
            {
                "category": category,
                "property": attribute,
                "value": value,
            },
        )
        return ensure_id(result, "entry_id")

    async def batch_create(self, values: Mapping[str, Mapping[str, Any]]) -> list[int]:
        """Add values to one or more drop-down menus.

        Args:
            values: ``{category: {attribute: value}}``; a value may also be a
                list of values for the same attribute

        Returns:
            Entry identifiers in the order the values were given
        """
        results = await self.api.batch_request_values(
            Call(
                "cmdb.dialog.create",
                {
                    "category": category,
                    "property": attribute,
                    "value": value,
                },
            )
            for category, pairs in values.items()
            for attribute, mixed in pairs.items()
            for value in _as_list(mixed)
        )
        return [ensure_id(result, "entry_id") for result in results]

    async def read(self, category: str, attribute: str) -> list[dict[str, Any]]:
        """Fetch the values of one drop-down menu."""
        return await self.api.request(
            "cmdb.dialog.read",
            {
                "category": category,
                "property": attribute,
            },
        )

    async def batch_read(self, attributes: Mapping[str, Any]) -> list[list[dict[str, Any]]]:
        """Fetch the values of several drop-down menus.

        Args:
            attributes: ``{category: attribute}`` or
                ``{category: [attribute, attribute]}``
        """
        return await self.api.batch_request_values(
            Call(
                "cmdb.dialog.read",
                {
                    "category": category,
                    "property": attribute,
                },
            )
            for category, mixed in attributes.items()
            for attribute in _as_list(mixed)
        )
