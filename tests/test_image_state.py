"""
Per-card image load/error state machine and its render contract.

Run with: pytest tests/test_image_state.py -v
"""
import http.client
import urllib.request

from casebook.constants import IMAGE_ERROR_LINES
from casebook.image_loader import ImageUnavailableError, fetch_image
from casebook.image_state import ImageLoadTracker, ImageState, image_view
from casebook.ui import load_into_tracker, sync_trackers


class TestTransitions:
    def test_first_observation_is_pending(self):
        t = ImageLoadTracker()
        assert t.observe("a.png") is ImageState.PENDING
        assert "a.png" in t
        assert len(t) == 1

    def test_state_of_unseen_url_is_pending_without_recording(self):
        t = ImageLoadTracker()
        assert t.state("never.png") is ImageState.PENDING
        assert "never.png" not in t

    def test_success_signal_loads(self):
        t = ImageLoadTracker()
        t.observe("a.png")
        assert t.mark_loaded("a.png") is True
        assert t.state("a.png") is ImageState.LOADED

    def test_failure_signal_errors(self):
        t = ImageLoadTracker()
        t.observe("a.png")
        assert t.mark_errored("a.png") is True
        assert t.state("a.png") is ImageState.ERRORED

    def test_signal_before_observe_still_lands(self):
        t = ImageLoadTracker()
        t.mark_errored("b.png")
        assert t.state("b.png") is ImageState.ERRORED

    def test_terminal_states_ignore_later_signals(self):
        t = ImageLoadTracker()
        t.mark_loaded("a.png")
        t.mark_errored("b.png")

        assert t.mark_errored("a.png") is False
        assert t.mark_loaded("a.png") is False
        assert t.mark_loaded("b.png") is False
        assert t.mark_errored("b.png") is False

        assert t.state("a.png") is ImageState.LOADED
        assert t.state("b.png") is ImageState.ERRORED

    def test_observe_never_resets_terminal_state(self):
        t = ImageLoadTracker()
        t.mark_errored("a.png")
        assert t.observe("a.png") is ImageState.ERRORED

    def test_shared_url_shares_outcome(self):
        t = ImageLoadTracker()
        t.observe("same.png")
        t.observe("same.png")
        t.mark_loaded("same.png")
        assert len(t) == 1
        assert t.state("same.png") is ImageState.LOADED

    def test_signals_in_any_interleaving(self):
        t = ImageLoadTracker()
        for url in ("1.png", "2.png", "3.png"):
            t.observe(url)
        t.mark_loaded("3.png")
        t.mark_errored("1.png")
        assert t.state("2.png") is ImageState.PENDING
        t.mark_loaded("2.png")
        assert [t.state(u) for u in ("1.png", "2.png", "3.png")] == [
            ImageState.ERRORED,
            ImageState.LOADED,
            ImageState.LOADED,
        ]
        assert len(t) == 3

    def test_trackers_are_independent(self):
        a, b = ImageLoadTracker("1"), ImageLoadTracker("2")
        a.mark_errored("x.png")
        assert b.observe("x.png") is ImageState.PENDING


class TestDiscard:
    def test_signals_after_discard_are_noops(self):
        t = ImageLoadTracker("101")
        t.observe("a.png")
        t.discard()
        assert t.is_discarded
        assert t.mark_loaded("a.png") is False
        assert t.mark_errored("a.png") is False
        assert len(t) == 0

    def test_sync_trackers_discards_cards_leaving_view(self):
        store = {}
        sync_trackers(store, [1, 101])
        first = store[1]
        first.observe("best.png")

        sync_trackers(store, [101, 102])

        assert set(store) == {101, 102}
        assert first.is_discarded
        assert first.mark_loaded("best.png") is False

    def test_sync_trackers_keeps_existing_state(self):
        store = {}
        sync_trackers(store, [1])
        store[1].mark_loaded("a.png")
        sync_trackers(store, [1])
        assert store[1].state("a.png") is ImageState.LOADED


class TestImageView:
    def test_pending_shows_placeholder_and_hides_image(self):
        v = image_view(ImageState.PENDING)
        assert v.show_placeholder
        assert not v.show_image
        assert not v.show_fallback

    def test_loaded_shows_image(self):
        v = image_view(ImageState.LOADED)
        assert v.show_image
        assert not v.show_placeholder
        assert not v.show_fallback

    def test_errored_shows_two_line_fallback(self):
        v = image_view(ImageState.ERRORED)
        assert not v.show_image
        assert not v.show_placeholder
        assert v.fallback_lines == IMAGE_ERROR_LINES
        assert len(v.fallback_lines) == 2


def test_load_into_tracker_marks_loaded_on_success():
    t = ImageLoadTracker()
    data = load_into_tracker("a.png", t, lambda url: b"png-bytes")
    assert data == b"png-bytes"
    assert t.state("a.png") is ImageState.LOADED


def test_load_into_tracker_marks_errored_on_failure():
    def _fail(url):
        raise ImageUnavailableError(url, "HTTP 404")

    t = ImageLoadTracker()
    assert load_into_tracker("missing.png", t, _fail) is None
    assert t.state("missing.png") is ImageState.ERRORED


def test_second_fetch_of_shared_url_keeps_first_outcome():
    calls = []

    def _fetch(url):
        calls.append(url)
        if len(calls) > 1:
            raise ImageUnavailableError(url, "flaky")
        return b"ok"

    t = ImageLoadTracker()
    load_into_tracker("same.png", t, _fetch)
    load_into_tracker("same.png", t, _fetch)
    assert calls == ["same.png", "same.png"]
    assert t.state("same.png") is ImageState.LOADED


def test_malformed_remote_url_errors_instead_of_raising(tmp_path):
    url = "http://example.com:abc/x.png"
    t = ImageLoadTracker("101")
    assert load_into_tracker(url, t, lambda u: fetch_image(u, tmp_path, timeout=1)) is None
    assert t.state(url) is ImageState.ERRORED


def test_truncated_remote_body_errors_instead_of_raising(tmp_path, monkeypatch):
    class _Truncated:
        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def read(self):
            raise http.client.IncompleteRead(b"", 2048)

    monkeypatch.setattr(urllib.request, "urlopen", lambda req, **kw: _Truncated())
    url = "https://example.com/cut.png"
    t = ImageLoadTracker("102")
    assert load_into_tracker(url, t, lambda u: fetch_image(u, tmp_path, timeout=1)) is None
    assert t.state(url) is ImageState.ERRORED
