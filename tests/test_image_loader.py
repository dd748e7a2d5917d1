import http.client
import urllib.request

import pytest

from casebook.image_loader import ImageUnavailableError, fetch_image, is_remote, resolve_local_path


class _TruncatedResponse:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def read(self):
        raise http.client.IncompleteRead(b"partial", 100)


def test_local_image_is_read(tmp_path):
    (tmp_path / "image").mkdir()
    (tmp_path / "image" / "1-01.png").write_bytes(b"\x89PNG")
    assert fetch_image("image/1-01.png", tmp_path) == b"\x89PNG"


def test_missing_local_image_raises(tmp_path):
    with pytest.raises(ImageUnavailableError) as exc:
        fetch_image("image/missing.png", tmp_path)
    assert exc.value.url == "image/missing.png"


def test_empty_file_and_empty_url_raise(tmp_path):
    (tmp_path / "empty.png").write_bytes(b"")
    with pytest.raises(ImageUnavailableError):
        fetch_image("empty.png", tmp_path)
    with pytest.raises(ImageUnavailableError):
        fetch_image("", tmp_path)


def test_truncated_remote_body_raises_unavailable(tmp_path, monkeypatch):
    monkeypatch.setattr(urllib.request, "urlopen", lambda req, **kw: _TruncatedResponse())
    with pytest.raises(ImageUnavailableError) as exc:
        fetch_image("https://example.com/a.png", tmp_path, timeout=1)
    assert exc.value.url == "https://example.com/a.png"
    assert isinstance(exc.value.__cause__, http.client.HTTPException)


def test_non_numeric_port_raises_unavailable(tmp_path):
    with pytest.raises(ImageUnavailableError):
        fetch_image("http://example.com:abc/x.png", tmp_path, timeout=1)


def test_malformed_urls_raise_unavailable(tmp_path):
    with pytest.raises(ImageUnavailableError):
        fetch_image("http://[::1/x.png", tmp_path, timeout=1)
    with pytest.raises(ImageUnavailableError):
        fetch_image("image/bad\x00name.png", tmp_path)


def test_resolve_local_path_strips_query_and_leading_slash(tmp_path):
    assert resolve_local_path("/image/a.png?v=2", tmp_path) == tmp_path / "image" / "a.png"


def test_is_remote():
    assert is_remote("https://example.com/a.png")
    assert is_remote("http://example.com/a.png")
    assert not is_remote("image/a.png")
    assert not is_remote("file:///tmp/a.png")
