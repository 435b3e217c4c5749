"""Conversion of caller file inputs into multipart parts."""

import asyncio
import mimetypes
from pathlib import Path
from typing import IO, Any

from svgmaker.errors import SVGMakerError

__all__ = ["FileInput", "read_file_part", "to_file_part"]

# A filesystem path, raw bytes, or a binary file object.
FileInput = str | Path | bytes | bytearray | IO[bytes]

_DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _content_type(filename: str) -> str:
    guessed, _ = mimetypes.guess_type(filename)
    if guessed is None and filename.lower().endswith(".svg"):
        return "image/svg+xml"
    return guessed or _DEFAULT_CONTENT_TYPE


def to_file_part(file: FileInput, default_name: str = "file") -> tuple[str, bytes, str]:
    """Read ``file`` into a (filename, content, content type) tuple.

    Args:
        file: Path to an existing file, bytes, or a binary file object.
        default_name: Filename used when the input carries none.

    Raises:
        SVGMakerError: VALIDATION if the path does not exist or the input
            type is unsupported.
    """
    if isinstance(file, str | Path):
        path = Path(file)
        if not path.is_file():
            raise SVGMakerError.validation(f"File not found: {file}")
        return path.name, path.read_bytes(), _content_type(path.name)

    if isinstance(file, bytes | bytearray):
        return default_name, bytes(file), _DEFAULT_CONTENT_TYPE

    read: Any = getattr(file, "read", None)
    if callable(read):
        # Configured endpoints read the same object on every call.
        seekable = getattr(file, "seekable", None)
        if callable(seekable) and seekable():
            file.seek(0)
        content = read()
        if isinstance(content, str):
            raise SVGMakerError.validation(
                "File objects must be opened in binary mode"
            )
        name = Path(getattr(file, "name", "") or default_name).name
        return name, bytes(content), _content_type(name)

    raise SVGMakerError.validation(f"Unsupported file input: {type(file).__name__}")


async def read_file_part(
    file: FileInput, default_name: str = "file"
) -> tuple[str, bytes, str]:
    """``to_file_part`` with the read done in a worker thread."""
    return await asyncio.to_thread(to_file_part, file, default_name)
