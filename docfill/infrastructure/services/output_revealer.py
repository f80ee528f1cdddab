"""Output revealers: show the output folder to the operator (implements IOutputRevealer)."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from docfill.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class LoggingOutputRevealer:
    """Default revealer for headless runs: logs where the documents are."""

    async def reveal(self, path: Path) -> None:
        logger.info("Generated documents are in %s", path)


def file_manager_command(path: Path) -> list[str]:
    """Return the platform command that opens path in the desktop file manager."""
    if sys.platform.startswith("win"):
        return ["explorer", str(path)]
    if sys.platform == "darwin":
        return ["open", str(path)]
    return ["xdg-open", str(path)]


class FileManagerOutputRevealer:
    """Opens the folder in the desktop file manager. Best-effort: failures are logged."""

    async def reveal(self, path: Path) -> None:
        command = file_manager_command(path)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            await process.wait()
        except OSError as e:
            logger.warning("Could not open %s with %s: %s", path, command[0], e)
