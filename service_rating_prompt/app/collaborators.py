"""
External collaborators consumed by the rating prompt policy.

The policy never reaches for platform globals; everything it needs to know
about time, launches, crashes and the review UI comes through these seams.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol

from pydantic import HttpUrl, TypeAdapter, ValidationError

from shared.logging import get_logger
from .store.base import Store

logger = get_logger("rating_prompt.collaborators")

APP_STORE_REVIEW_URL = "https://itunes.apple.com/app/id{app_store_id}?action=write-review"

_http_url = TypeAdapter(HttpUrl)


class Clock(Protocol):
    def now(self) -> datetime: ...


class LaunchCounter(Protocol):
    def current_launch_count(self) -> int: ...


class CrashReporter(Protocol):
    def crashed_last_launch(self) -> bool: ...


class ReviewPrompter(Protocol):
    def request_review(self, scene: Optional[Any] = None) -> None: ...


class SceneProvider(Protocol):
    def foreground_active_scene(self) -> Optional[Any]: ...


class Dispatcher(Protocol):
    def dispatch(self, callback: Callable[[], None]) -> None: ...


class UrlOpener(Protocol):
    def open(self, url: str) -> None: ...


class SystemClock:
    """Wall clock in UTC.

    Calendar-day gaps are counted in the clock's zone, so day boundaries
    fall at UTC midnight with this clock.
    """

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class LocalClock:
    """Wall clock in the host's local zone; day boundaries follow local midnight."""

    def now(self) -> datetime:
        return datetime.now().astimezone()


class StoreLaunchCounter:
    """Reads the session count maintained by the app lifecycle tracker."""

    def __init__(self, store: Store, key: str = "sessionCount"):
        self.store = store
        self.key = key

    def current_launch_count(self) -> int:
        value = self.store.get(self.key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return 0


class StaticCrashReporter:
    """Crash reporter whose answer is known at startup."""

    def __init__(self, crashed: bool = False):
        self.crashed = crashed

    def crashed_last_launch(self) -> bool:
        return self.crashed


class ImmediateDispatcher:
    """Runs callbacks inline. Suitable when there is no UI loop."""

    def dispatch(self, callback: Callable[[], None]) -> None:
        callback()


class AsyncioDispatcher:
    """Schedules callbacks on an event loop acting as the UI context.

    Dispatch is fire-and-forget: no handle is returned and the callback's
    outcome is never observed by the caller.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self.loop = loop

    def dispatch(self, callback: Callable[[], None]) -> None:
        self.loop.call_soon_threadsafe(callback)


class NullReviewPrompter:
    """Review prompter that only logs; used when no UI is attached."""

    def request_review(self, scene: Optional[Any] = None) -> None:
        logger.info("Review prompt requested without a UI", scene=scene)


def build_app_store_review_url(app_store_id: str) -> Optional[str]:
    """Build the write-review deep link, or None if it cannot be formed."""
    if not app_store_id or not (app_store_id.isascii() and app_store_id.isdigit()):
        return None

    candidate = APP_STORE_REVIEW_URL.format(app_store_id=app_store_id)
    try:
        _http_url.validate_python(candidate)
    except ValidationError:
        return None
    return candidate


def go_to_app_store_review(app_store_id: str, url_opener: UrlOpener) -> Optional[str]:
    """Open the App Store review page for this application."""
    url = build_app_store_review_url(app_store_id)
    if url is None:
        logger.debug("Skipping store review link", app_store_id=app_store_id)
        return None

    url_opener.open(url)
    return url
