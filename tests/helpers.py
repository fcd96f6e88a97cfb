"""
Test helpers — fake HTTP transport and in-memory archives.
"""

from __future__ import annotations

import hashlib
import io
import json
import tarfile
import urllib.error
import zipfile

API_BASE = "https://api.test"
DOWNLOAD_BASE = "https://dl.test/releases/download"


class FakeResponse:
    """Minimal stand-in for the object ``urlopen`` returns."""

    def __init__(self, body: bytes, status: int = 200) -> None:
        self._body = body
        self.status = status

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        return None


class FakeOpener:
    """``urlopen`` replacement serving canned responses by URL.

    Values may be bytes (200), ``(status, bytes)``, or an exception
    instance to raise.  Unknown URLs answer 404 like GitHub does.
    """

    def __init__(self, routes: dict | None = None) -> None:
        self.routes: dict = dict(routes or {})
        self.requests: list = []

    @property
    def urls(self) -> list[str]:
        return [req.full_url for req in self.requests]

    def __call__(self, request, timeout=None):
        self.requests.append(request)
        url = request.full_url
        if url not in self.routes:
            raise urllib.error.HTTPError(url, 404, "Not Found", {}, None)
        value = self.routes[url]
        if isinstance(value, BaseException):
            raise value
        if isinstance(value, tuple):
            status, body = value
            if status >= 400:
                raise urllib.error.HTTPError(url, status, "Error", {}, None)
            return FakeResponse(body, status)
        return FakeResponse(value)


def make_tar_gz(entries: dict[str, bytes], mode: int = 0o755) -> bytes:
    """Build a gzip-compressed tar in memory."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in entries.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            info.mode = mode
            tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


def make_zip(entries: dict[str, bytes]) -> bytes:
    """Build a zip archive in memory."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buf.getvalue()


def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def release_routes(
    tag: str,
    archive_name: str,
    archive: bytes,
    *,
    manifest: str | None = None,
    index: list[dict] | None = None,
    repo: str = "centy-io/centy-daemon",
) -> dict:
    """Routes for one published release: index, archive and checksums."""
    base = f"{DOWNLOAD_BASE}/{tag}"
    if manifest is None:
        manifest = f"{sha256(archive)}  {archive_name}\n"
    if index is None:
        index = [{"tag_name": tag, "prerelease": False, "draft": False}]
    return {
        f"{API_BASE}/repos/{repo}/releases": json.dumps(index).encode(),
        f"{base}/{archive_name}": archive,
        f"{base}/checksums-sha256.txt": manifest.encode(),
    }
