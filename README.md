# amsclient

Building blocks for a Python client of the Anbox Management Service (AMS)
REST API: the request layer it talks through, the core calls (service status,
API extensions, tasks, version, operations, application registry), and the
calls for containers, images and nodes.

## Modules

- `amsclient.transport` – the abstract `Transport` and `Operation` classes,
  the `api_path` helper and the error classes.
- `amsclient.base` – `BaseClient`, which holds a transport and implements the
  core calls plus package upload and file download.
- `amsclient.containers` – `ContainersMixin`, with the container, image and
  node calls.
- `amsclient.payload` – `Uploader`, `prepare_payload`,
  `convert_filters_to_params`, `websocket_url` and `operation_websocket_path`.
- `amsclient.constants` – fixed values and name validators.

## Supplying a transport

`Transport` is abstract. Subclass it and implement `query_struct`,
`query_operation`, `call_api` and `download_file` on top of the HTTP library
of your choice. Each request method receives the HTTP method, a path built by
`api_path` (for example `api_path("nodes", "lxd0")` gives `/1.0/nodes/lxd0`),
optional query parameters, optional headers, an optional body and an ETag.
`query_struct` returns the decoded metadata with the ETag; `query_operation`
returns an `Operation` with the ETag.

`Transport.extended_timeout()` is a context manager that raises the
`timeout` attribute (to 300 seconds by default) for the duration of a block
and restores it afterwards; uploads and downloads run inside it.

`Operation` is abstract too: implement `get()`, returning the operation as the
service reports it, and `wait(timeout=None)`, which blocks until it is done and
raises if it failed. The `id`, `metadata` and `resources` properties read from
`get()`.

## Putting a client together

`ContainersMixin` relies on what `BaseClient` provides, so combine the two:

```python
from amsclient.base import BaseClient
from amsclient.containers import ContainersMixin


class Client(ContainersMixin, BaseClient):
    pass


client = Client(transport)
print(client.get_version())
for node in client.list_nodes():
    print(node["name"])
```

`has_extension(name)` fetches the service status once, caches it, and reports
whether the named API extension is listed.

Calls that change state return an `Operation`:

```python
op = client.delete_container_by_id("c1a2b3", force=True)
op.wait()
```

`set_default_image` and `trigger_image_sync` wait for their operation
themselves and return nothing.

## Uploading images

`add_image` and `update_image` upload a local file. The file's SHA-256
fingerprint is sent in the `X-AMS-Fingerprint` header and the request details
as JSON in `X-AMS-Request`. An optional callback receives the number of bytes
read for each chunk:

```python
op = client.add_image("base", "image.tar.xz", is_default=False,
                      sent_bytes=lambda n: print("sent", n))
op.wait()
```

A path that does not exist raises `NotFoundError`. A zip archive raises
`NotSupportedError` when the service lacks the `zip_archive_support`
extension.

## Filters

`list_containers_with_filters` takes `key=value` strings:

```python
containers = client.list_containers_with_filters(["status=running"])
```

A filter without `=` raises `ValueError`.

## Errors

All errors raised by the client derive from `AMSError`:

- `InvalidArgumentError` (also a `ValueError`) when a required id, name, list
  of ids or details is empty or missing;
- `NotSupportedError` when the service lacks the API extension a call needs,
  such as `container_logs` for `retrieve_container_log`;
- `NotFoundError` (also a `LookupError`) when a payload file does not exist;
- `AMSError` itself when `retrieve_default_image` does not find exactly one
  default image.

## Names

`amsclient.constants` checks names against the patterns the service uses:
`is_valid_application_name`, `is_valid_addon_name` and
`is_valid_android_package_name`. It also holds `DEFAULT_NETWORK_NAME`
(`amsbr0`) and `DEFAULT_NODE_BRIDGE_ADDRESS` (`192.168.100.1`).

## What this package does not do

- It has no concrete HTTP, TLS or websocket transport; you supply one by
  subclassing `Transport` and `Operation`.
- It has no calls for applications, addons, certificates, configuration or
  instances, and no command for running exec sessions inside containers.
- It installs no command-line tools.