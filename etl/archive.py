# WORKFLOW: In-memory ZIP codec for price uploads and downloads.
# Used by: Price transfer service (import and export pipelines)
# Functions:
# 1. extract_entry() - Locate one named entry in an uploaded archive and decompress it
# 2. build_entry() - Package one named entry into a new compressed archive
# 3. list_entries() - List entry names for diagnostics
#
# Import flow: Upload bytes -> ZipFile(BytesIO) -> data.csv bytes -> CSV reader
# Export flow: CSV text -> ZipFile(BytesIO, "w") -> response bytes
# Nothing touches the filesystem; both directions work on byte buffers.

"""
In-memory ZIP codec for price uploads and downloads.
"""

import io
import logging
import zipfile
import zlib
from typing import List, Union

from core.errors import EntryNotFound, InvalidArchive

logger = logging.getLogger(__name__)


def _open_archive(archive_bytes: bytes) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(io.BytesIO(archive_bytes), "r")
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as e:
        logger.error(f"Invalid ZIP archive ({len(archive_bytes)} bytes): {e}")
        raise InvalidArchive(f"Invalid ZIP file: {e}") from e


def list_entries(archive_bytes: bytes) -> List[str]:
    """
    List entry names in an archive.

    Args:
        archive_bytes: Raw archive content

    Returns:
        Entry names in archive order
    """
    with _open_archive(archive_bytes) as zip_ref:
        return zip_ref.namelist()


def extract_entry(archive_bytes: bytes, entry_name: str) -> bytes:
    """
    Extract one named entry from an in-memory ZIP archive.

    When the name occurs more than once the last occurrence wins.

    Args:
        archive_bytes: Raw archive content
        entry_name: Exact entry name to look for

    Returns:
        Decompressed entry bytes

    Raises:
        InvalidArchive: The buffer is not a readable archive or the entry is corrupt
        EntryNotFound: No entry has the requested name
    """
    with _open_archive(archive_bytes) as zip_ref:
        match = None
        for info in zip_ref.infolist():
            if info.filename == entry_name:
                match = info

        if match is None:
            logger.info(f"Entry {entry_name} not found among {len(zip_ref.infolist())} entries")
            raise EntryNotFound(f"Archive has no entry named {entry_name}")

        try:
            content = zip_ref.read(match)
        except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as e:
            logger.error(f"Failed to decompress {entry_name}: {e}")
            raise InvalidArchive(f"Failed to read {entry_name}: {e}") from e

    logger.info(f"Extracted {entry_name}: {len(content)} bytes")
    return content


def build_entry(entry_name: str, content: Union[str, bytes]) -> bytes:
    """
    Build a compressed archive holding exactly one entry.

    Args:
        entry_name: Name of the entry inside the archive
        content: Entry content; text is encoded as UTF-8

    Returns:
        Archive bytes
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zip_ref:
        zip_ref.writestr(entry_name, content)

    archive_bytes = buffer.getvalue()
    logger.info(f"Built archive with {entry_name}: {len(content)} -> {len(archive_bytes)} bytes")
    return archive_bytes
