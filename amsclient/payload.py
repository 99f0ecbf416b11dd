"""Upload payload preparation and request helpers."""

from __future__ import annotations

import hashlib
import os
from functools import partial
from typing import BinaryIO, Callable, Iterable, Optional
from urllib.parse import quote_plus

from amsclient.transport import API_VERSION, NotFoundError

_CHUNK_SIZE = 64 * 1024


class Uploader:
    """Readable wrapper reporting the number of bytes read to a callback."""

    def __init__(self, reader: BinaryIO, sent: Optional[Callable[[float], None]] = None):
        self._reader = reader
        self._sent = sent

    def read(self, size: int = -1) -> bytes:
        data = self._reader.read(size)
        if self._sent is not None:
            self._sent(float(len(data)))
        return data

    def close(self) -> None:
        self._reader.close()


def prepare_payload(path: str | os.PathLike) -> tuple[BinaryIO, str]:
    """Open ``path`` and return the file, positioned at its start, and its SHA-256 hex digest."""
    if not os.path.exists(path):
        raise NotFoundError("payload")
    f = open(path, "rb")
    try:
        hasher = hashlib.sha256()
        for chunk in iter(partial(f.read, _CHUNK_SIZE), b""):
            hasher.update(chunk)
        f.seek(0)
    except BaseException:
        f.close()
        raise
    return f, hasher.hexdigest()


def convert_filters_to_params(filters: Iterable[str]) -> dict[str, str]:
    """Turn ``key=value`` filter strings into query parameters."""
    params: dict[str, str] = {}
    for item in filters:
        key, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"invalid filter '{item}'")
        params[key] = value
    return params


def websocket_url(service_url: str, path: str) -> str:
    """Build the websocket URL for an API ``path`` on the given service."""
    if service_url.startswith("https://"):
        return f"wss://{service_url[len('https://'):]}/{API_VERSION}{path}"
    host = service_url[len("http://"):] if service_url.startswith("http://") else service_url
    return f"ws://{host}/{API_VERSION}{path}"


def operation_websocket_path(uuid: str, secret: str) -> str:
    """Build the API path of an operation's websocket."""
    path = f"/operations/{quote_plus(uuid)}/websocket"
    if secret:
        path = f"{path}?secret={quote_plus(secret)}"
    return path