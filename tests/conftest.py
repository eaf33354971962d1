"""
Shared test fixtures: temporary PACKL directories, a fake HTTP session
and a fake subprocess launcher.
"""

import hashlib
import json
import threading
from pathlib import Path

import pytest
import requests

from apps.package_manager import PackageManager
from utils.audit_logger import AuditLogger


# ═══════════════════════════════════════════════════════════════════════
#  HTTP
# ═══════════════════════════════════════════════════════════════════════


class FakeResponse:
    def __init__(self, body=b"", status_code=200, headers=None, fail_after=None):
        self.body = body if isinstance(body, bytes) else body.encode("utf-8")
        self.status_code = status_code
        self.headers = headers if headers is not None else {"Content-Length": str(len(self.body))}
        self.fail_after = fail_after
        self.closed = False

    @property
    def text(self):
        return self.body.decode("utf-8")

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def iter_content(self, chunk_size=1):
        for offset in range(0, len(self.body), chunk_size):
            if self.fail_after is not None and offset >= self.fail_after:
                raise requests.ConnectionError("connection reset")
            yield self.body[offset:offset + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False


class FakeSession:
    """requests.Session stand-in serving canned responses by URL."""

    def __init__(self):
        self.routes = {}
        self.requested = []

    def add(self, url, body=b"", status_code=200, **kwargs):
        self.routes[url] = lambda: FakeResponse(body, status_code, **kwargs)

    def add_error(self, url, error):
        def _raise():
            raise error
        self.routes[url] = _raise

    def get(self, url, **kwargs):
        self.requested.append(url)
        if url not in self.routes:
            return FakeResponse(b"not found", 404)
        return self.routes[url]()


MANIFEST_BASE = "https://manifests.test/packages/"


def sha256(data):
    return hashlib.sha256(data).hexdigest()


def publish(session, name, artifact_url, artifact, package_type="executable", **fields):
    """Serve a manifest for name and its artifact bytes."""
    manifest = {
        "type": package_type,
        "version": fields.pop("version", "1.0"),
        "url": artifact_url,
        "hash": fields.pop("hash", sha256(artifact)),
    }
    manifest.update(fields)
    session.add(f"{MANIFEST_BASE}{name}.json", json.dumps(manifest))
    session.add(artifact_url, artifact)
    return manifest


# ═══════════════════════════════════════════════════════════════════════
#  Subprocess
# ═══════════════════════════════════════════════════════════════════════


class FakePopen:
    """Records launches; exit codes are taken from FakePopen.exit_codes in order."""

    launches = []
    exit_codes = []

    def __init__(self, command, cwd=None, **kwargs):
        self.command = command
        self.cwd = cwd
        self.returncode = None
        self.terminated = False
        type(self).launches.append(self)

    def wait(self, timeout=None):
        if self.returncode is None:
            self.returncode = FakePopen.exit_codes.pop(0) if FakePopen.exit_codes else 0
        return self.returncode

    def terminate(self):
        self.terminated = True

    def kill(self):
        self.terminated = True


@pytest.fixture
def fake_popen(monkeypatch):
    FakePopen.launches = []
    FakePopen.exit_codes = []
    monkeypatch.setattr("utils.process_runner.subprocess.Popen", FakePopen)
    return FakePopen


# ═══════════════════════════════════════════════════════════════════════
#  Directories and manager
# ═══════════════════════════════════════════════════════════════════════


@pytest.fixture
def packl_dirs(tmp_path: Path):
    dirs = {
        "apps": tmp_path / "packl" / "apps",
        "aliases": tmp_path / "packl" / "apps" / ".aliases",
        "downloads": tmp_path / "Downloads",
        "audit": tmp_path / "packl" / "audit",
    }
    for path in dirs.values():
        path.mkdir(parents=True, exist_ok=True)
    return dirs


@pytest.fixture
def session(monkeypatch):
    monkeypatch.setattr("config.MANIFEST_URL", MANIFEST_BASE)
    return FakeSession()


@pytest.fixture
def audit(packl_dirs):
    return AuditLogger(log_dir=packl_dirs["audit"], enabled=True)


@pytest.fixture
def manager(session, packl_dirs, audit):
    return PackageManager(
        session=session,
        apps_dir=packl_dirs["apps"],
        aliases_dir=packl_dirs["aliases"],
        downloads_dir=packl_dirs["downloads"],
        strict_update=False,
        update_path=False,
        audit_logger=audit,
    )


@pytest.fixture
def cancel_event():
    return threading.Event()


def make_installer(path: Path, signature: str = None, offset: int = 500, size: int = 2048):
    """Binary-looking file with an optional ASCII signature at a byte offset."""
    data = bytearray(b"\x00\x01\x02\xff" * (size // 4))
    if signature:
        encoded = b"\x00" + signature.encode("ascii") + b"\x00"
        data[offset - 1:offset - 1 + len(encoded)] = encoded
    path.write_bytes(bytes(data))
    return path
