"""Container, image and node calls of the AMS client."""

from __future__ import annotations

import json
import os
from typing import Any, Callable, Iterable, Mapping, Optional

from amsclient.payload import convert_filters_to_params
from amsclient.transport import (
    AMSError,
    Downloader,
    InvalidArgumentError,
    NotSupportedError,
    Operation,
    api_path,
)

IMAGE_TYPE_ANY = ""
"""Image type selecting images of any type."""

_JSON_HEADERS = {"Content-Type": "application/json"}


def _recursive(extra: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    params = dict(extra or {})
    params["recursion"] = "1"
    return params


def _encode(details: Any) -> bytes:
    return json.dumps(details).encode("utf-8")


def _no_wait(value: bool) -> dict[str, str]:
    return {"no_wait": "true" if value else "false"}


class ContainersMixin:
    """Container, image and node calls.

    Meant to be combined with :class:`amsclient.base.BaseClient`, which
    provides ``transport``, ``has_extension``, ``_upload`` and ``_download``.
    """

    # Containers

    def list_containers(self) -> list[dict[str, Any]]:
        """Return all containers the service currently manages."""
        containers, _ = self.transport.query_struct("GET", api_path("containers"), _recursive())
        return containers or []

    def list_containers_with_filters(self, filters: Iterable[str]) -> list[dict[str, Any]]:
        """Return containers matching ``key=value`` filters."""
        params = _recursive(convert_filters_to_params(filters))
        containers, _ = self.transport.query_struct("GET", api_path("containers"), params)
        return containers or []

    def launch_container(self, details: Mapping[str, Any], no_wait: bool = False) -> Operation:
        """Launch a single new container."""
        op, _ = self.transport.query_operation(
            "POST", api_path("containers"), _no_wait(no_wait), None, _encode(dict(details))
        )
        return op

    def retrieve_container_by_id(self, container_id: str) -> tuple[dict[str, Any], str]:
        """Return a single container and its ETag."""
        if not container_id:
            raise InvalidArgumentError("id")
        container, etag = self.transport.query_struct("GET", api_path("containers", container_id))
        return container or {}, etag

    def update_container_by_id(
        self, container_id: str, details: Mapping[str, Any], no_wait: bool = False
    ) -> Operation:
        """Update an existing container."""
        if not container_id:
            raise InvalidArgumentError("id")
        op, _ = self.transport.query_operation(
            "PATCH",
            api_path("containers", container_id),
            _no_wait(no_wait),
            None,
            _encode(dict(details)),
        )
        return op

    def delete_container_by_id(self, container_id: str, force: bool = False) -> Operation:
        """Delete a single container."""
        if not container_id:
            raise InvalidArgumentError("id")
        op, _ = self.transport.query_operation(
            "DELETE", api_path("containers", container_id), None, None, _encode({"force": force})
        )
        return op

    def delete_containers(self, ids: Iterable[str], force: bool = False) -> Operation:
        """Delete several containers in one operation."""
        id_list = list(ids)
        if not id_list:
            raise InvalidArgumentError("ids")
        op, _ = self.transport.query_operation(
            "DELETE",
            api_path("containers"),
            None,
            None,
            _encode({"ids": id_list, "force": force}),
        )
        return op

    def retrieve_container_log(
        self, container_id: str, name: str, downloader: Downloader
    ) -> None:
        """Download a log file of a container, handing headers and body to ``downloader``."""
        if not container_id:
            raise InvalidArgumentError("id")
        if not name:
            raise InvalidArgumentError("name")
        if not self.has_extension("container_logs"):
            raise NotSupportedError('api extension "container_logs"')
        self._download(api_path("containers", container_id, "logs", name), None, None, downloader)

    # Images

    def list_images(self) -> list[dict[str, Any]]:
        """Return all images the service currently has."""
        images, _ = self.transport.query_struct("GET", api_path("images"), _recursive())
        return images or []

    def add_image(
        self,
        name: str,
        package_path: str | os.PathLike,
        is_default: bool = False,
        sent_bytes: Optional[Callable[[float], None]] = None,
    ) -> Operation:
        """Add a new image and upload its package."""
        details = {"name": name, "default": is_default}
        return self._upload("POST", api_path("images"), None, package_path, details, sent_bytes)

    def import_image(self, name: str, path: str, is_default: bool = False) -> Operation:
        """Import a new image of any type from the image server."""
        return self.import_image_by_type(name, path, IMAGE_TYPE_ANY, is_default)

    def import_image_by_type(
        self, name: str, path: str, img_type: str, is_default: bool = False
    ) -> Operation:
        """Import a new image of the given type from the image server."""
        details = {"name": name, "path": path, "default": is_default, "type": img_type}
        try:
            body = _encode(details)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"could not marshal request body: {exc}") from exc
        op, _ = self.transport.query_operation(
            "POST", api_path("images"), None, dict(_JSON_HEADERS), body
        )
        return op

    def update_image(
        self,
        image_id: str,
        package_path: str | os.PathLike,
        sent_bytes: Optional[Callable[[float], None]] = None,
    ) -> Operation:
        """Upload a new version of an existing image."""
        return self._upload(
            "PATCH", api_path("images", image_id), None, package_path, {}, sent_bytes
        )

    def _patch_image(self, image_id: str, details: Mapping[str, Any]) -> None:
        op, _ = self.transport.query_operation(
            "PATCH", api_path("images", image_id), None, dict(_JSON_HEADERS), _encode(dict(details))
        )
        op.wait()

    def set_default_image(self, image_id: str) -> None:
        """Mark an image as the default one and wait for it to finish."""
        self._patch_image(image_id, {"default": True})

    def trigger_image_sync(self, image_id: str) -> None:
        """Force a synchronisation of an image and wait for it to finish."""
        self._patch_image(image_id, {"force_sync": True})

    def delete_image_by_id_or_name(
        self, image_id: str, force: bool = False, img_type: str = IMAGE_TYPE_ANY
    ) -> Operation:
        """Delete an image identified by its ID or name."""
        if not image_id:
            raise InvalidArgumentError("id")
        op, _ = self.transport.query_operation(
            "DELETE",
            api_path("images", image_id),
            {"type": img_type},
            None,
            _encode({"force": force}),
        )
        return op

    def delete_image_version(self, image_id: str, version: int) -> Operation:
        """Delete a single image version."""
        if not image_id:
            raise InvalidArgumentError("id")
        op, _ = self.transport.query_operation(
            "DELETE", api_path("images", image_id, str(version))
        )
        return op

    def retrieve_default_image(self) -> tuple[dict[str, Any], str]:
        """Return the default image and its ETag."""
        images, etag = self.transport.query_struct(
            "GET", api_path("images"), {"default": "true"}
        )
        images = images or []
        if len(images) != 1:
            raise AMSError("Failed to retrieve default image")
        return images[0], etag

    def retrieve_image_by_id_or_name(
        self, image_id: str, img_type: str = IMAGE_TYPE_ANY
    ) -> tuple[dict[str, Any], str]:
        """Return a single image, found by ID or name, and its ETag."""
        if not image_id:
            raise InvalidArgumentError("id")
        image, etag = self.transport.query_struct(
            "GET", api_path("images", image_id), {"type": img_type}
        )
        return image or {}, etag

    # Nodes

    def list_nodes(self) -> list[dict[str, Any]]:
        """Return all LXD nodes the service knows about."""
        nodes, _ = self.transport.query_struct("GET", api_path("nodes"), _recursive())
        return nodes or []

    def add_node(self, node: Mapping[str, Any]) -> Operation:
        """Add a new node."""
        op, _ = self.transport.query_operation(
            "POST", api_path("nodes"), None, None, _encode(dict(node))
        )
        return op

    def remove_node(
        self, name: str, force: bool = False, keep_in_cluster: bool = False
    ) -> Operation:
        """Remove a single node."""
        if not name:
            raise InvalidArgumentError("name")
        details = {"force": force, "keep_in_cluster": keep_in_cluster}
        op, _ = self.transport.query_operation(
            "DELETE", api_path("nodes", name), None, None, _encode(details)
        )
        return op

    def retrieve_node_by_name(self, name: str) -> tuple[dict[str, Any], str]:
        """Return a node and its ETag."""
        if not name:
            raise InvalidArgumentError("name")
        node, etag = self.transport.query_struct("GET", api_path("nodes", name))
        return node or {}, etag

    def update_node(self, name: str, details: Optional[Mapping[str, Any]]) -> Operation:
        """Update an existing node."""
        if not name:
            raise InvalidArgumentError("name")
        if details is None:
            raise InvalidArgumentError("details")
        op, _ = self.transport.query_operation(
            "PATCH", api_path("nodes", name), None, None, _encode(dict(details))
        )
        return op