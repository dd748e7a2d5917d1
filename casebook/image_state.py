from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from casebook.constants import IMAGE_ERROR_LINES

logger = logging.getLogger(__name__)


class ImageState(str, Enum):
    PENDING = "pending"
    LOADED = "loaded"
    ERRORED = "errored"

    @property
    def is_terminal(self) -> bool:
        return self is not ImageState.PENDING


@dataclass(frozen=True)
class ImageView:
    """What an image slot shows for a given load state."""

    show_placeholder: bool
    show_image: bool
    fallback_lines: Tuple[str, ...] = ()

    @property
    def show_fallback(self) -> bool:
        return bool(self.fallback_lines)


def image_view(state: ImageState) -> ImageView:
    if state is ImageState.LOADED:
        return ImageView(show_placeholder=False, show_image=True)
    if state is ImageState.ERRORED:
        return ImageView(show_placeholder=False, show_image=False, fallback_lines=IMAGE_ERROR_LINES)
    # Requested but not committed: spinner only, image withheld.
    return ImageView(show_placeholder=True, show_image=False)


class ImageLoadTracker:
    """Per-card load/error bookkeeping keyed by literal image URL.

    PENDING -> LOADED | ERRORED; both are terminal for the lifetime of the
    tracker. After ``discard()`` every signal is ignored.
    """

    def __init__(self, owner: str = "") -> None:
        self.owner = owner
        self._states: Dict[str, ImageState] = {}
        self._discarded = False

    @property
    def is_discarded(self) -> bool:
        return self._discarded

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, url: object) -> bool:
        return url in self._states

    def state(self, url: str) -> ImageState:
        return self._states.get(url, ImageState.PENDING)

    def observe(self, url: str) -> ImageState:
        if self._discarded:
            return self.state(url)
        return self._states.setdefault(url, ImageState.PENDING)

    def mark_loaded(self, url: str) -> bool:
        return self._signal(url, ImageState.LOADED)

    def mark_errored(self, url: str) -> bool:
        return self._signal(url, ImageState.ERRORED)

    def discard(self) -> None:
        self._discarded = True
        self._states.clear()
        logger.debug("image tracker discarded", extra={"card": self.owner})

    def _signal(self, url: str, target: ImageState) -> bool:
        if self._discarded:
            logger.debug("late image signal ignored", extra={"card": self.owner, "url": url, "signal": target.value})
            return False
        current = self._states.get(url, ImageState.PENDING)
        if current.is_terminal:
            logger.debug(
                "duplicate image signal ignored",
                extra={"card": self.owner, "url": url, "state": current.value, "signal": target.value},
            )
            return False
        self._states[url] = target
        logger.debug("image state changed", extra={"card": self.owner, "url": url, "state": target.value})
        return True
