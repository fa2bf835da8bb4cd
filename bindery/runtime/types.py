"""Runtime value types for generated client bindings."""

from dataclasses import dataclass
from typing import BinaryIO, Union


@dataclass(frozen=True, slots=True)
class NamedFile:
    """A named binary payload, sent as a side-channel part of a multi-part request."""

    file: BinaryIO | bytes
    name: str = ""

    def read(self) -> bytes:
        """Return the payload contents."""
        if isinstance(self.file, bytes):
            return self.file
        return self.file.read()


@dataclass(frozen=True, slots=True)
class RequestOpts:
    """Transport options for a single request.

    Generated code passes these through untouched; they only mean something
    to the transport implementing BotBase.request.
    """

    timeout: float | None = None
    api_url: str | None = None


# A file reference: a pre-uploaded file ID or URL, or a binary payload to upload.
InputFile = Union[str, NamedFile, BinaryIO]
