"""Storage backends that open the files being scanned."""

import os
from typing import BinaryIO, Protocol


class Storage(Protocol):
    """Opens locations as seekable binary streams."""

    def open(self, location: str) -> BinaryIO: ...

    def size(self, location: str) -> int: ...


class LocalStorage:
    """Storage backed by the local filesystem."""

    def open(self, location: str) -> BinaryIO:
        return open(location, "rb")  # noqa: SIM115

    def size(self, location: str) -> int:
        return os.stat(location).st_size
