"""Requests for API namespace 'cmdb.location_tree'."""

from __future__ import annotations

import logging
from typing import Any

from cmdbrpc.namespace import Namespace, to_int
from cmdbrpc.wire import Call

logger = logging.getLogger(__name__)


class CMDBLocationTree(Namespace):
    """Walk the physical location hierarchy (building, room, rack, ...)."""

    async def read(self, object_id: int, status: int | None = None) -> list[dict[str, Any]]:
        """Fetch the objects located directly underneath an object.

        Args:
            object_id: Location object identifier
            status: Optional record status filter (e.g. 2 for normal)
        """
        return await self.api.request("cmdb.location_tree", self._params(object_id, status))

    async def read_recursively(
        self,
        object_id: int,
        status: int | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch the whole subtree below an object.

        Every node gets a ``children`` list. The tree is walked level by
        level with one batch request per level. A node that shows up a
        second time (cyclic location data) is kept but not expanded again.
        """
        tree = await self.read(object_id, status)
        seen = {object_id}
        level = self._expandable(tree, seen)
        depth = 1

        while level:
            logger.debug("Reading location tree level %d (%d nodes)", depth, len(level))
            children = await self.api.batch_request_values(
                Call("cmdb.location_tree", self._params(to_int(node["id"]), status))
                for node in level
            )
            next_level: list[dict[str, Any]] = []
            for node, nodes in zip(level, children):
                node["children"] = nodes
                next_level.extend(self._expandable(nodes, seen))
            level = next_level
            depth += 1

        return tree

    @staticmethod
    def _expandable(nodes: list[dict[str, Any]], seen: set[int]) -> list[dict[str, Any]]:
        result = []
        for node in nodes:
            node.setdefault("children", [])
            if "id" not in node:
                continue
            node_id = to_int(node["id"])
            if node_id in seen:
                continue
            seen.add(node_id)
            result.append(node)
        return result

    @staticmethod
    def _params(object_id: int, status: int | None) -> dict[str, Any]:
        params: dict[str, Any] = {"id": object_id}
        if status is not None:
            params["status"] = status
        return params
