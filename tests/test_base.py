import hashlib
import io
import json
import zipfile

import pytest

from amsclient.base import BaseClient
from amsclient.transport import (
    EXTENDED_TRANSPORT_TIMEOUT,
    NotFoundError,
    NotSupportedError,
    Operation,
    Transport,
)


class FakeOperation(Operation):
    def __init__(self, data):
        self.data = data

    def get(self):
        return self.data

    def wait(self, timeout=None):
        return None


class FakeTransport(Transport):
    def __init__(self, responses=None, extensions=()):
        super().__init__("https://ams.example.com", timeout=30.0)
        self.responses = dict(responses or {})
        self.responses.setdefault("/1.0", {"api_extensions": list(extensions)})
        self.calls = []
        self.uploaded = b""
        self.timeout_during_call = None

    def query_struct(self, method, path, params=None, headers=None, body=None, etag=""):
        self.calls.append(("struct", method, path, params))
        return self.responses.get(path), "etag-1"

    def query_operation(self, method, path, params=None, headers=None, body=None, etag=""):
        self.calls.append(("operation", method, path, params, headers))
        self.timeout_during_call = self.timeout
        if body is not None and hasattr(body, "read"):
            chunks = []
            while True:
                chunk = body.read(3)
                if not chunk:
                    break
                chunks.append(chunk)
            self.uploaded = b"".join(chunks)
        return FakeOperation({"id": "op-1", "resources": {}}), ""

    def call_api(self, method, path, params=None, headers=None, body=None, etag=""):
        self.calls.append(("call", method, path, params))
        return {}, ""

    def download_file(self, path, params, headers, downloader):
        self.calls.append(("download", path))
        self.timeout_during_call = self.timeout
        downloader({"X-Test": "1"}, io.BytesIO(b"content"))


def test_has_extension_queries_status_once():
    t = FakeTransport(extensions=["zip_archive_support", "vm_support"])
    c = BaseClient(t)
    assert c.has_extension("vm_support") is True
    assert c.has_extension("container_logs") is False
    status_calls = [call for call in t.calls if call[2] == "/1.0"]
    assert len(status_calls) == 1


def test_retrieve_service_status_returns_etag():
    t = FakeTransport(extensions=["instance_support"])
    status, etag = BaseClient(t).retrieve_service_status()
    assert status["api_extensions"] == ["instance_support"]
    assert etag == "etag-1"


def test_list_tasks_uses_recursion():
    t = FakeTransport({"/1.0/tasks": [{"id": "t1"}]})
    assert BaseClient(t).list_tasks() == [{"id": "t1"}]
    assert t.calls[-1] == ("struct", "GET", "/1.0/tasks", {"recursion": "1"})


def test_list_tasks_empty_when_none():
    assert BaseClient(FakeTransport()).list_tasks() == []


def test_get_version():
    t = FakeTransport({"/1.0/version": {"version": "1.2.3"}})
    assert BaseClient(t).get_version() == "1.2.3"


def test_operations_calls():
    ops = {"running": [{"id": "a"}]}
    t = FakeTransport({"/1.0/operations": ops, "/1.0/operations/a": {"id": "a"}})
    c = BaseClient(t)
    assert c.list_operations() == ops
    assert c.show_operation("a") == {"id": "a"}
    c.cancel_operation("a")
    assert t.calls[-1] == ("call", "DELETE", "/1.0/operations/a", None)


def test_registry_paths():
    t = FakeTransport({"/1.0/registry/applications": [{"name": "app"}]})
    c = BaseClient(t)
    assert c.list_applications_from_registry() == [{"name": "app"}]
    assert c.push_application_to_registry("x").id == "op-1"
    assert t.calls[-1][1:3] == ("POST", "/1.0/registry/applications/x/push")
    c.pull_application_from_registry("x")
    assert t.calls[-1][1:3] == ("POST", "/1.0/registry/applications/x/pull")
    c.delete_application_from_registry("x")
    assert t.calls[-1][1:3] == ("DELETE", "/1.0/registry/applications/x")


def test_upload_sends_payload_headers_and_restores_timeout(tmp_path):
    content = b"payload-data-1234"
    pkg = tmp_path / "pkg.tar.bz2"
    pkg.write_bytes(content)
    t = FakeTransport(extensions=[])
    sent = []
    BaseClient(t)._upload("POST", "/1.0/addons", None, str(pkg), {"name": "a"}, sent.append)
    headers = t.calls[-1][4]
    assert headers["X-AMS-Fingerprint"] == hashlib.sha256(content).hexdigest()
    assert json.loads(headers["X-AMS-Request"]) == {"name": "a"}
    assert headers["Content-Type"] == "application/octet-stream"
    assert t.uploaded == content
    assert sum(sent) == len(content)
    assert t.timeout_during_call == EXTENDED_TRANSPORT_TIMEOUT
    assert t.timeout == 30.0


def test_upload_without_details_sends_empty_request(tmp_path):
    pkg = tmp_path / "pkg.tar"
    pkg.write_bytes(b"abc")
    t = FakeTransport()
    BaseClient(t)._upload("PATCH", "/1.0/images/i", None, str(pkg), None, None)
    assert t.calls[-1][4]["X-AMS-Request"] == ""


def test_upload_rejects_zip_without_extension(tmp_path):
    pkg = tmp_path / "pkg.bin"
    with zipfile.ZipFile(pkg, "w") as zf:
        zf.writestr("manifest.yaml", "name: a\n")
    t = FakeTransport(extensions=[])
    with pytest.raises(NotSupportedError):
        BaseClient(t)._upload("POST", "/1.0/applications", None, str(pkg), None, None)


def test_upload_accepts_zip_with_extension(tmp_path):
    pkg = tmp_path / "pkg.zip"
    with zipfile.ZipFile(pkg, "w") as zf:
        zf.writestr("manifest.yaml", "name: a\n")
    t = FakeTransport(extensions=["zip_archive_support"])
    op = BaseClient(t)._upload("POST", "/1.0/applications", None, str(pkg), None, None)
    assert op.id == "op-1"
    assert t.uploaded == pkg.read_bytes()


def test_upload_missing_payload(tmp_path):
    t = FakeTransport(extensions=["zip_archive_support"])
    with pytest.raises(NotFoundError):
        BaseClient(t)._upload("POST", "/1.0/addons", None, str(tmp_path / "nope"), None, None)


def test_download_passes_response_and_restores_timeout():
    t = FakeTransport()
    received = {}

    def downloader(headers, body):
        received["headers"] = dict(headers)
        received["body"] = body.read()

    BaseClient(t)._download("/1.0/containers/c/logs/x", None, None, downloader)
    assert received == {"headers": {"X-Test": "1"}, "body": b"content"}
    assert t.timeout_during_call == EXTENDED_TRANSPORT_TIMEOUT
    assert t.timeout == 30.0