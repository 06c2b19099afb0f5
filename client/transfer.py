"""Preparation of local files for transfer."""

from pathlib import Path, PurePath
from typing import Callable, Optional, Union
import asyncio
import os

from protocol.commands import File
from utils.logging import get_logger
from utils.exceptions import ReadFailure

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]
FileReader = Callable[[str], bytes]


def read_file_bytes(path: str) -> bytes:
    """Read a whole file into memory."""
    return Path(path).read_bytes()


class FileTransfer:
    """Turns a local file into a File command."""

    def __init__(self, read_file: Optional[FileReader] = None):
        """
        Args:
            read_file: Returns the bytes of a path; raises OSError on failure
        """
        self._read_file = read_file or read_file_bytes

    async def prepare(self, file_path: PathLike) -> File:
        """
        Read a file and wrap it in a File command.

        The whole file is held in memory. Only the final path segment
        is transmitted as the file name.

        Args:
            file_path: Path of the file to send

        Returns:
            File command carrying the raw bytes

        Raises:
            ReadFailure: If the file cannot be read
        """
        path = os.fspath(file_path)
        try:
            data = await asyncio.to_thread(self._read_file, path)
        except OSError as e:
            raise ReadFailure(path, e) from e

        file_name = PurePath(path).name
        logger.debug(f"Prepared {file_name} ({len(data)} bytes)")
        return File(payload=data, file_name=file_name)
