from __future__ import annotations

import http.client
import logging
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class ImageUnavailableError(Exception):
    """Raised when an image resource cannot be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Image unavailable: {url} ({reason})")
        self.url = url
        self.reason = reason


def is_remote(url: str) -> bool:
    return urllib.parse.urlparse(url).scheme in {"http", "https"}


def resolve_local_path(url: str, asset_dir: Path) -> Path:
    rel = url.split("?", 1)[0].split("#", 1)[0].lstrip("/")
    return Path(asset_dir) / rel


def _fetch_remote(url: str, timeout: Optional[float]) -> bytes:
    try:
        req = urllib.request.Request(url, headers={"User-Agent": "Mozilla/5.0", "Accept": "image/*"})
        if timeout is None:
            with urllib.request.urlopen(req) as resp:
                return resp.read()
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return resp.read()
    except urllib.error.HTTPError as exc:
        raise ImageUnavailableError(url, f"HTTP {exc.code}") from exc
    except (urllib.error.URLError, OSError) as exc:
        raise ImageUnavailableError(url, str(exc)) from exc
    except (http.client.HTTPException, ValueError) as exc:
        # Truncated bodies, bad ports and other malformed responses.
        raise ImageUnavailableError(url, str(exc) or type(exc).__name__) from exc


def _fetch_local(url: str, asset_dir: Path) -> bytes:
    path = resolve_local_path(url, asset_dir)
    try:
        return path.read_bytes()
    except (OSError, ValueError) as exc:
        raise ImageUnavailableError(url, f"cannot read {path}") from exc


def fetch_image(url: str, asset_dir: Path, timeout: Optional[float] = None) -> bytes:
    """Fetch image bytes from an http(s) URL or a path under ``asset_dir``.

    No retry is attempted. ``timeout=None`` waits for as long as the
    transport does.
    """
    if not url:
        raise ImageUnavailableError(url, "empty url")
    try:
        remote = is_remote(url)
    except ValueError as exc:
        raise ImageUnavailableError(url, "malformed url") from exc
    data = _fetch_remote(url, timeout) if remote else _fetch_local(url, asset_dir)
    if not data:
        raise ImageUnavailableError(url, "empty response")
    return data
