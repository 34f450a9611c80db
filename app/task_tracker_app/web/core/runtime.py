from __future__ import annotations

from functools import lru_cache
import logging

from task_tracker_app.config import AppConfig
from task_tracker_app.repository import TaskTrackerRepository

LOGGER = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _config_singleton() -> AppConfig:
    return AppConfig.from_env()


@lru_cache(maxsize=1)
def _repo_singleton() -> TaskTrackerRepository:
    return TaskTrackerRepository(_config_singleton())


def get_config() -> AppConfig:
    return _config_singleton()


def get_repo() -> TaskTrackerRepository:
    return _repo_singleton()


def repo_initialized() -> bool:
    return _repo_singleton.cache_info().currsize > 0


def _reset_repo() -> None:
    """Close the pooled repository, if one was built, and forget it."""
    if repo_initialized():
        try:
            _repo_singleton().close()
        except Exception:
            LOGGER.warning("Repository did not close cleanly.", exc_info=True)
    _repo_singleton.cache_clear()


get_config.cache_clear = _config_singleton.cache_clear  # type: ignore[attr-defined]
get_repo.cache_clear = _reset_repo  # type: ignore[attr-defined]
