"""Local filesystem store for generated documents.

Drafts are written to <root>/<sanitized document type name>/<timestamp>.docx
using exclusive create, so concurrent writers never overwrite each other.
publish() renames a draft to its final name inside the same folder.
"""

from __future__ import annotations

import os
from pathlib import Path

import aiofiles
import aiofiles.os

from docfill.application.dtos.generation import DraftOutput, PublishedOutput
from docfill.core.constants import DOCX_EXTENSION
from docfill.domain.exceptions import IOFailureException, TemplateMissingException
from docfill.infrastructure.storage.path_allocator import ensure_unique_path
from docfill.shared.telemetry.logging import get_logger
from docfill.shared.utils.datetime import file_timestamp
from docfill.shared.utils.file_names import sanitize_folder_name

logger = get_logger(__name__)

# Attempts to find a free name when another writer takes the allocated path first.
_MAX_CREATE_ATTEMPTS = 20


class LocalOutputStore:
    """Writes, publishes and deletes generated files under output_root."""

    def __init__(self, output_root: str | Path) -> None:
        self._root = Path(output_root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    async def read_template(self, file_path: str) -> bytes:
        """Return template bytes. Raises TemplateMissingException if the file is absent."""
        path = Path(file_path)
        if not await aiofiles.os.path.isfile(path):
            raise TemplateMissingException(file_path)
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise TemplateMissingException(file_path) from e

    async def write_draft(
        self, document_type_name: str, data: bytes, extension: str = DOCX_EXTENSION
    ) -> DraftOutput:
        """Write data to a new file named by the current timestamp.

        Raises IOFailureException when the folder cannot be created or the file
        cannot be written.
        """
        folder = self._root / sanitize_folder_name(document_type_name)
        desired = f"{file_timestamp()}{extension}"
        last_error = ""
        for _ in range(_MAX_CREATE_ATTEMPTS):
            try:
                target = ensure_unique_path(folder, desired)
                async with aiofiles.open(target, "xb") as f:
                    await f.write(data)
                return DraftOutput(path=target)
            except FileExistsError as e:
                last_error = str(e)
                continue
            except OSError as e:
                raise IOFailureException(str(folder / desired), str(e)) from e
        raise IOFailureException(str(folder / desired), last_error or "no free file name")

    async def publish(self, draft: DraftOutput, file_name: str) -> PublishedOutput:
        """Rename draft to a unique file_name in its folder.

        The draft path is kept (warning logged) when the draft is missing or
        the rename fails; publishing never raises.
        """
        if not await aiofiles.os.path.exists(draft.path):
            logger.warning("Draft file %s is missing; keeping recorded path", draft.path)
            return PublishedOutput(path=draft.path, draft_path=draft.path)
        try:
            # No await between allocation and rename: no other job can claim the name.
            target = ensure_unique_path(draft.path.parent, file_name)
            os.replace(draft.path, target)
        except OSError as e:
            logger.warning("Could not rename %s to %s: %s", draft.path, file_name, e)
            return PublishedOutput(path=draft.path, draft_path=draft.path)
        return PublishedOutput(path=target, draft_path=draft.path)

    async def delete(self, path: str | Path) -> bool:
        """Remove a file. Best-effort: returns False (warning logged) instead of raising."""
        file_path = Path(path)
        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Could not delete %s: %s", file_path, e)
            return False
        return True
