"""Exceptions raised while decoding a VRAM snapshot."""

from __future__ import annotations


class VramDecodeError(Exception):
    """Base class for every fatal decode failure."""


class OutOfRangeError(VramDecodeError):
    """Raised when a decode step addresses past the end of its source region."""

    def __init__(self, region: str, index: int, length: int | None = None):
        self.region = region
        self.index = index
        self.length = length
        if length is None:
            message = f"{region}: index out of range: {index}"
        else:
            message = f"{region}: index out of range: {index} (length {length})"
        super().__init__(message)


class MissingResourceError(VramDecodeError):
    """Raised when a palette or tile index has no supplied data."""

    def __init__(self, kind: str, index: int, owner: str):
        self.kind = kind
        self.index = index
        self.owner = owner
        super().__init__(f"no {kind} found at {index} (referenced by {owner})")


class MalformedInputError(VramDecodeError):
    """Raised for input data whose shape does not match the hardware format."""
