"""Upload files and attach them to objects.

A file lives in its own object of type ``C__OBJTYPE__FILE``. Its content
is stored as a version entry (``C__CMDB__SUBCAT__FILE_VERSIONS``) and the
target object references it through its ``C__CATG__FILE`` category.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from cmdbrpc.category import CMDBCategory
from cmdbrpc.error import RpcError
from cmdbrpc.namespace import Namespace, ensure_success
from cmdbrpc.objects import CMDBObjects
from cmdbrpc.wire import Call

FILE_OBJECT_TYPE = "C__OBJTYPE__FILE"
FILE_VERSIONS_CATEGORY = "C__CMDB__SUBCAT__FILE_VERSIONS"
FILE_CATEGORY = "C__CATG__FILE"


class File(Namespace):

    async def add(self, object_id: int, file_path: str | Path, description: str) -> None:
        """Upload a file and attach it to an object."""
        await self.batch_add(object_id, {file_path: description})

    async def batch_add(self, object_id: int, files: Mapping[str | Path, str]) -> None:
        """Upload several files and attach them to an object.

        Three round trips regardless of the number of files: create the file
        objects, upload the contents, link them to the target object.

        Args:
            object_id: Target object identifier
            files: ``{file path: description}``
        """
        if not files:
            raise RpcError.invalid_argument("No files given")

        # Encode everything first so a missing file fails before anything is created.
        uploads = [
            (Path(path).name, description, self.encode(path))
            for path, description in files.items()
        ]

        file_object_ids = await CMDBObjects(self.api).create(
            {"type": FILE_OBJECT_TYPE, "title": description}
            for _, description, _ in uploads
        )

        results = await self.api.batch_request_values(
            Call(
                "cmdb.category.create",
                {
                    "objID": file_object_id,
                    "data": self._version(name, description, content),
                    "category": FILE_VERSIONS_CATEGORY,
                },
            )
            for file_object_id, (name, description, content) in zip(file_object_ids, uploads)
        )
        for result in results:
            ensure_success(result)

        await CMDBCategory(self.api).batch_create(
            [object_id],
            FILE_CATEGORY,
            [{"file": file_object_id} for file_object_id in file_object_ids],
        )

    @staticmethod
    def encode(file_path: str | Path) -> str:
        """Read a file and return its content base64 encoded.

        Raises:
            InvalidArgument: If the file cannot be read or is empty
        """
        path = Path(file_path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise RpcError.invalid_argument(f"Unable to read file {path}: {e}") from e
        if not content:
            raise RpcError.invalid_argument(f"File {path} is empty")
        return base64.b64encode(content).decode("ascii")

    @staticmethod
    def _version(name: str, description: str, content: str) -> dict[str, Any]:
        return {
            "file_content": content,
            "file_physical": name,
            "file_title": description,
            "version_description": description,
        }
