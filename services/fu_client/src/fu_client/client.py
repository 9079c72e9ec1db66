from __future__ import annotations

import datetime as dt
from typing import BinaryIO
from urllib.parse import urlsplit, urlunsplit

import httpx

from fu_server.durations import format_duration

from .schemas import RemoteFile


class UploadError(RuntimeError):
    pass


class Client:
    """Uploads files to a fu server."""

    def __init__(self, addr: str, token: str = "", timeout: float = 90.0,
                 transport: httpx.BaseTransport | None = None):
        parts = urlsplit(addr or "")
        if not parts.scheme or not parts.netloc:
            raise ValueError("fu: addr must be a url")
        if not parts.path.endswith("/"):
            parts = parts._replace(path=parts.path + "/")
            addr = urlunsplit(parts)
        self.addr = addr
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def url(self, file: RemoteFile) -> str:
        return f"{self.addr}{file.name}"

    def upload(self, f: BinaryIO, name: str, lifetime: dt.timedelta) -> RemoteFile:
        headers = {
            "User-Agent": "fu",
            "Authentication": f"fu token={self.token}",
        }
        files = {"file": (name or "-", f, "application/octet-stream")}
        data = {"duration": format_duration(lifetime)}
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.post(self.addr, headers=headers, files=files, data=data)
        except httpx.HTTPError as e:
            raise UploadError(f"fu: upload failed: {e}") from e
        if resp.status_code != 200:
            raise UploadError(resp.text.strip() or f"HTTP {resp.status_code}")
        return RemoteFile.model_validate(resp.json())
