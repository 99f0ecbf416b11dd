"""Core client: service status, extensions, tasks, operations, registry and transfers."""

from __future__ import annotations

import json
import os
import zipfile
from typing import Any, Callable, Optional

from amsclient.payload import Uploader, prepare_payload
from amsclient.transport import (
    Downloader,
    Headers,
    NotSupportedError,
    Operation,
    QueryParams,
    Transport,
    api_path,
)

DEFAULT_APP_TYPE = "game"
"""Type given to newly created applications."""

_RECURSIVE: dict[str, str] = {"recursion": "1"}


def _is_zip(path: str | os.PathLike) -> bool:
    if os.fspath(path).lower().endswith(".zip"):
        return True
    try:
        return zipfile.is_zipfile(path)
    except OSError:
        return False


class BaseClient:
    """Talks to an AMS service through a :class:`Transport`."""

    def __init__(self, transport: Transport):
        self.transport = transport
        self._service_status: Optional[dict[str, Any]] = None

    def retrieve_service_status(self) -> tuple[dict[str, Any], str]:
        """Return the status of the AMS service and its ETag."""
        status, etag = self.transport.query_struct("GET", api_path(""))
        return status or {}, etag

    def has_extension(self, name: str) -> bool:
        """Return True if the connected service supports the API extension ``name``."""
        if self._service_status is None:
            self._service_status, _ = self.retrieve_service_status()
        return name in (self._service_status.get("api_extensions") or [])

    def list_tasks(self) -> list[dict[str, Any]]:
        """Return all tasks known to the service."""
        tasks, _ = self.transport.query_struct("GET", api_path("tasks"), dict(_RECURSIVE))
        return tasks or []

    def get_version(self) -> str:
        """Return the version of the AMS server (not the API version)."""
        data, _ = self.transport.query_struct("GET", api_path("version"))
        return (data or {}).get("version", "")

    def list_operations(self) -> dict[str, list[dict[str, Any]]]:
        """Return all operations arranged by their status."""
        ops, _ = self.transport.query_struct("GET", api_path("operations"), dict(_RECURSIVE))
        return ops or {}

    def show_operation(self, operation_id: str) -> Optional[dict[str, Any]]:
        """Return details about a single operation."""
        op, _ = self.transport.query_struct("GET", api_path("operations", operation_id))
        return op

    def cancel_operation(self, operation_id: str) -> None:
        """Cancel an operation if it supports it."""
        self.transport.call_api("DELETE", api_path("operations", operation_id))

    def list_applications_from_registry(self) -> list[dict[str, Any]]:
        """Return all applications available through the configured registry."""
        apps, _ = self.transport.query_struct("GET", api_path("registry", "applications"))
        return apps or []

    def push_application_to_registry(self, app_id: str) -> Operation:
        """Push an application to the configured registry."""
        op, _ = self.transport.query_operation(
            "POST", api_path("registry", "applications", app_id, "push")
        )
        return op

    def pull_application_from_registry(self, app_id: str) -> Operation:
        """Pull an application from the configured registry."""
        op, _ = self.transport.query_operation(
            "POST", api_path("registry", "applications", app_id, "pull")
        )
        return op

    def delete_application_from_registry(self, app_id: str) -> Operation:
        """Delete an application from the configured registry."""
        op, _ = self.transport.query_operation(
            "DELETE", api_path("registry", "applications", app_id)
        )
        return op

    def _upload(
        self,
        method: str,
        path: str,
        params: Optional[QueryParams],
        package_path: str | os.PathLike,
        details: Any,
        sent_bytes: Optional[Callable[[float], None]],
    ) -> Operation:
        """Upload a package with optional request metadata and return the started operation."""
        if not self.has_extension("zip_archive_support") and _is_zip(package_path):
            raise NotSupportedError('api extension "zip_archive_support"')
        f, fingerprint = prepare_payload(package_path)
        try:
            request = ""
            if details is not None:
                try:
                    request = json.dumps(details)
                except (TypeError, ValueError) as exc:
                    raise ValueError(f"could not marshal request metadata: {exc}") from exc
            headers: Headers = {
                "Content-Type": "application/octet-stream",
                "X-AMS-Fingerprint": fingerprint,
                "X-AMS-Request": request,
            }
            body = Uploader(f, sent_bytes)
            with self.transport.extended_timeout():
                op, _ = self.transport.query_operation(method, path, params, headers, body, "")
            return op
        finally:
            f.close()

    def _download(
        self,
        path: str,
        params: Optional[QueryParams],
        headers: Optional[Headers],
        downloader: Downloader,
    ) -> None:
        """Download ``path`` with an extended timeout, handing the response to ``downloader``."""
        with self.transport.extended_timeout():
            self.transport.download_file(path, params, headers, downloader)