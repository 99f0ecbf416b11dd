"""Abstract REST transport, operation handle and errors shared by the client."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, BinaryIO, Callable, Iterator, Mapping, Optional
from urllib.parse import quote

API_VERSION = "1.0"
EXTENDED_TRANSPORT_TIMEOUT = 300.0

QueryParams = Mapping[str, str]
Headers = Mapping[str, str]
Downloader = Callable[[Mapping[str, str], BinaryIO], None]
_Params = Optional[QueryParams]
_Headers = Optional[Headers]


class AMSError(Exception):
    """Base class for errors raised by the client."""


class InvalidArgumentError(AMSError, ValueError):
    """An argument passed to a client call is missing or invalid."""

    def __init__(self, argument: str):
        super().__init__(f"invalid argument: {argument}")
        self.argument = argument


class NotSupportedError(AMSError):
    """The connected service does not support the requested feature."""

    def __init__(self, feature: str):
        super().__init__(f"{feature} is not supported")
        self.feature = feature


class NotFoundError(AMSError, LookupError):
    """A requested object does not exist."""

    def __init__(self, what: str):
        super().__init__(f"{what} not found")
        self.what = what


def api_path(*args: str) -> str:
    """Build an API path such as ``/1.0/addons/name`` from its segments."""
    segments = [quote(str(arg), safe="") for arg in args if str(arg)]
    return "/".join([f"/{API_VERSION}", *segments])


class Operation(ABC):
    """Handle on an asynchronous operation running on the service."""

    @abstractmethod
    def get(self) -> dict[str, Any]:
        """Return the operation as reported by the service."""

    @abstractmethod
    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the operation is done; raise if it failed."""

    @property
    def id(self) -> str:
        return self.get().get("id", "")

    @property
    def metadata(self) -> dict[str, Any]:
        return self.get().get("metadata") or {}

    @property
    def resources(self) -> dict[str, list[str]]:
        return self.get().get("resources") or {}


class Transport(ABC):
    """Low-level REST connection to an AMS service."""

    def __init__(self, service_url: str, timeout: Optional[float] = None):
        self.service_url = service_url
        self.timeout = timeout

    @abstractmethod
    def query_struct(self, method: str, path: str, params: _Params = None, headers: _Headers = None, body: Any = None, etag: str = "") -> tuple[Any, str]:  # noqa: E501
        """Perform a synchronous request and return the decoded metadata and ETag."""

    @abstractmethod
    def query_operation(self, method: str, path: str, params: _Params = None, headers: _Headers = None, body: Any = None, etag: str = "") -> tuple[Operation, str]:  # noqa: E501
        """Perform a request that starts an operation and return it with the ETag."""

    @abstractmethod
    def call_api(self, method: str, path: str, params: _Params = None, headers: _Headers = None, body: Any = None, etag: str = "") -> tuple[dict[str, Any], str]:  # noqa: E501
        """Perform a request and return the raw response and ETag."""

    @abstractmethod
    def download_file(self, path: str, params: _Params, headers: _Headers, downloader: Downloader) -> None:  # noqa: E501
        """Fetch ``path`` and hand the response headers and body to ``downloader``."""

    @contextmanager
    def extended_timeout(self, seconds: float = EXTENDED_TRANSPORT_TIMEOUT) -> Iterator[None]:
        """Raise the transport timeout for the duration of the block."""
        previous = self.timeout
        self.timeout = seconds
        try:
            yield
        finally:
            self.timeout = previous