"""
Wiring for the rating prompt service.
"""

from typing import Optional

from shared.config import RatingPromptConfig, get_config
from shared.errors import ConfigurationError
from shared.logging import configure_logging, get_logger

from .collaborators import (
    Clock, LaunchCounter, CrashReporter, ReviewPrompter, SceneProvider, Dispatcher,
    LocalClock, StoreLaunchCounter, ImmediateDispatcher, NullReviewPrompter
)
from .policy.engine import RatingPromptPolicy
from .store.base import Store, InMemoryStore
from .store.redis_store import RedisStore

logger = get_logger("rating_prompt.main")


def create_store(config: RatingPromptConfig) -> Store:
    """Build the store selected by ``store_backend``."""
    backend = config.store_backend.lower()
    if backend == "memory":
        return InMemoryStore()
    if backend == "redis":
        return RedisStore(config.redis_url)
    raise ConfigurationError(
        f"Unknown store backend: {config.store_backend}",
        {"store_backend": config.store_backend}
    )


def create_policy(
    config: Optional[RatingPromptConfig] = None,
    *,
    store: Optional[Store] = None,
    clock: Optional[Clock] = None,
    launch_counter: Optional[LaunchCounter] = None,
    prompter: Optional[ReviewPrompter] = None,
    dispatcher: Optional[Dispatcher] = None,
    crash_reporter: Optional[CrashReporter] = None,
    scene_provider: Optional[SceneProvider] = None,
    setup_logging: bool = True,
) -> RatingPromptPolicy:
    """Create a policy, filling in defaults for any collaborator not given."""
    config = config or get_config()

    if setup_logging:
        configure_logging(config.service_name, config.log_level)

    if store is None:
        store = create_store(config)
    policy = RatingPromptPolicy(
        store=store,
        clock=clock or LocalClock(),
        launch_counter=launch_counter or StoreLaunchCounter(store, config.session_count_key),
        prompter=prompter or NullReviewPrompter(),
        dispatcher=dispatcher or ImmediateDispatcher(),
        crash_reporter=crash_reporter,
        scene_provider=scene_provider,
        config=config,
    )

    logger.info(
        "Rating prompt policy created",
        env=config.env,
        store_backend=type(store).__name__
    )
    return policy
