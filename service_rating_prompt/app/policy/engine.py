"""
Rating prompt policy engine.
"""

from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Any, Dict, Optional

from shared.config import RatingPromptConfig, get_config
from shared.errors import RatingPromptException
from shared.logging import get_logger, set_launch_id, clear_context
from ..collaborators import (
    Clock, LaunchCounter, CrashReporter, ReviewPrompter, SceneProvider, Dispatcher,
    UrlOpener, go_to_app_store_review
)
from ..store.base import Store
from .models import (
    DecisionReason, PolicyState, Present, Stored,
    as_datetime, as_int, value_or
)


class RatingPromptPolicy:
    """Decides when to ask the user for an app store rating.

    The policy owns four persisted fields (last request date, request count,
    launch threshold and last crash date) and shares the force-show override
    flag with an external caller, clearing it after a forced prompt. None of
    the public operations raise; store failures are logged and read as
    absent values.
    """

    def __init__(
        self,
        store: Store,
        clock: Clock,
        launch_counter: LaunchCounter,
        prompter: ReviewPrompter,
        dispatcher: Dispatcher,
        crash_reporter: Optional[CrashReporter] = None,
        scene_provider: Optional[SceneProvider] = None,
        config: Optional[RatingPromptConfig] = None,
    ):
        self.store = store
        self.clock = clock
        self.launch_counter = launch_counter
        self.prompter = prompter
        self.dispatcher = dispatcher
        self.crash_reporter = crash_reporter
        self.scene_provider = scene_provider
        self.config = config or get_config()
        self.logger = get_logger("rating_prompt.policy")

        first, second, third = self.config.thresholds
        self._next_threshold: Dict[int, int] = {first: second, second: third}

    # Persisted fields

    @property
    def last_request_date(self) -> Stored[datetime]:
        return as_datetime(self._read(self.config.last_request_date_key))

    @property
    def request_count(self) -> int:
        return value_or(as_int(self._read(self.config.request_count_key)), 0)

    @property
    def threshold(self) -> int:
        return value_or(
            as_int(self._read(self.config.threshold_key)),
            self.config.first_threshold,
        )

    @property
    def last_crash_date(self) -> Stored[datetime]:
        return as_datetime(self._read(self.config.last_crash_date_key))

    @property
    def force_show_override(self) -> bool:
        try:
            return self.store.get_bool(self.config.force_show_override_key)
        except Exception as e:
            self.logger.error(
                "Error reading override flag",
                key=self.config.force_show_override_key,
                error=str(e)
            )
            return False

    def snapshot(self) -> PolicyState:
        """Current persisted state with defaults applied."""
        return PolicyState(
            last_request_date=value_or(self.last_request_date, None),
            request_count=self.request_count,
            threshold=self.threshold,
            last_crash_date=value_or(self.last_crash_date, None),
            force_show_override=self.force_show_override,
        )

    # Operations

    def on_launch(self) -> None:
        """Record the previous launch's outcome and prompt if eligible."""
        set_launch_id()
        try:
            crashed = False
            if self.crash_reporter is not None:
                try:
                    crashed = bool(self.crash_reporter.crashed_last_launch())
                except Exception as e:
                    self.logger.error("Error reading crash state", error=str(e))

            self.note_launch_outcome(self.clock.now(), crashed)
            self.present_if_needed()
        finally:
            clear_context()

    def present_if_needed(self) -> None:
        """Show the rating prompt if the policy allows it."""
        if self.should_present():
            self.record_prompt_requested(self.clock.now())
            self._write(self.config.force_show_override_key, False)

    def should_present(self) -> bool:
        """Evaluate the gates in order; escalates the threshold on success."""
        reason = self._evaluate()
        self.logger.debug("Rating prompt decision", reason=reason.value)
        return reason in (DecisionReason.FORCED, DecisionReason.ELIGIBLE)

    def record_prompt_requested(self, now: datetime) -> None:
        """Persist the request and hand the review UI off to the dispatcher."""
        self._write(self.config.last_request_date_key, now)
        request_count = self.request_count + 1
        self._write(self.config.request_count_key, request_count)

        self.logger.info(
            "Rating prompt is being requested",
            request_count=request_count
        )

        scene: Optional[Any] = None
        try:
            if self.scene_provider is not None:
                scene = self.scene_provider.foreground_active_scene()
                if scene is None:
                    self.logger.debug("No foreground-active scene, skipping review prompt")
                    return

            self.dispatcher.dispatch(partial(self.prompter.request_review, scene))
        except Exception as e:
            self.logger.error("Error dispatching review prompt", error=str(e))

    def note_launch_outcome(self, now: datetime, crashed_last_launch: bool) -> None:
        """Remember when the app last crashed."""
        if crashed_last_launch:
            self._write(self.config.last_crash_date_key, now)
            self.logger.info("Recorded crash on last launch", crash_date=now.isoformat())

    def reset(self) -> None:
        """Clear the request history.

        The threshold is zeroed rather than restored to the first threshold,
        which leaves the launch-count gate open and the escalation stuck.
        """
        self._write(self.config.last_request_date_key, None)
        self._write(self.config.request_count_key, 0)
        self._write(self.config.threshold_key, 0)
        self.logger.info("Rating prompt state reset")

    def close(self) -> None:
        """Close the store if it holds a connection."""
        close = getattr(self.store, "close", None)
        if close is None:
            return
        try:
            close()
        except Exception as e:
            self.logger.error("Error closing store", error=str(e))

    def go_to_app_store_review(self, url_opener: UrlOpener) -> Optional[str]:
        """Open the store's write-review page for the configured app."""
        try:
            return go_to_app_store_review(self.config.app_store_id, url_opener)
        except Exception as e:
            self.logger.error("Error opening store review page", error=str(e))
            return None

    # Private

    def _evaluate(self) -> DecisionReason:
        if self.force_show_override:
            return DecisionReason.FORCED

        now = self.clock.now()

        # Required: has not crashed within the cooldown window
        if self._has_crashed_recently(now):
            return DecisionReason.RECENT_CRASH

        # Required: enough days since the last request
        min_days = self.config.min_days_between_review_request
        last_request = self.last_request_date
        if isinstance(last_request, Present):
            days_since_last_request = self._days_between(last_request.value, now)
        else:
            days_since_last_request = min_days

        if days_since_last_request < min_days:
            return DecisionReason.TOO_SOON

        # Required: launch count reached the threshold
        threshold = self.threshold
        if self._current_launch_count() < threshold:
            return DecisionReason.BELOW_THRESHOLD

        # Move the threshold for the next prompt
        next_threshold = self._next_threshold.get(threshold)
        if next_threshold is not None:
            self._write(self.config.threshold_key, next_threshold)
            self.logger.info(
                "Rating prompt threshold escalated",
                threshold=threshold,
                next_threshold=next_threshold
            )

        return DecisionReason.ELIGIBLE

    def _has_crashed_recently(self, now: datetime) -> bool:
        last_crash = self.last_crash_date
        if not isinstance(last_crash, Present):
            return False

        cutoff = now - timedelta(hours=self.config.crash_cooldown_hours)
        return self._align(last_crash.value, now) >= cutoff

    def _current_launch_count(self) -> int:
        try:
            return int(self.launch_counter.current_launch_count())
        except Exception as e:
            self.logger.error("Error reading launch count", error=str(e))
            return 0

    @classmethod
    def _days_between(cls, start: datetime, end: datetime) -> int:
        """Whole calendar days from ``start`` to ``end`` in ``end``'s zone."""
        return (end.date() - cls._align(start, end).date()).days

    @staticmethod
    def _align(value: datetime, reference: datetime) -> datetime:
        """Express ``value`` in ``reference``'s zone; naive values are UTC."""
        if reference.tzinfo is None:
            if value.tzinfo is None:
                return value
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(reference.tzinfo)

    def _read(self, key: str) -> Optional[Any]:
        try:
            return self.store.get(key)
        except RatingPromptException as e:
            self.logger.error("Error reading from store", key=key, **e.to_dict())
            return None
        except Exception as e:
            self.logger.error("Error reading from store", key=key, error=str(e))
            return None

    def _write(self, key: str, value: Optional[Any]) -> bool:
        try:
            self.store.set(key, value)
            return True
        except RatingPromptException as e:
            self.logger.error("Error writing to store", key=key, **e.to_dict())
            return False
        except Exception as e:
            self.logger.error("Error writing to store", key=key, error=str(e))
            return False
