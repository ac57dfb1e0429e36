"""Contents of files that the tool writes."""

from __future__ import annotations


def checksum(checksum: str, timestamp: int) -> bytes:
    """Return the contents of the checksum file for a config checksum and time."""
    return f"{checksum} {int(timestamp)}\n".encode()