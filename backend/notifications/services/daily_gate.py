"""At-most-once-per-day trigger.

Remembers the last date a keyed action ran in the Django cache. There is no
cross-process locking; two callers racing on the same key may both run.
"""
import logging
from datetime import date
from typing import Callable, Optional

from django.core.cache import cache

logger = logging.getLogger(__name__)

KEY_PREFIX = 'daily-gate:'
# Markers outlive the day they guard, then expire on their own.
TTL_SECONDS = 2 * 24 * 60 * 60


def _key(name: str) -> str:
    return f'{KEY_PREFIX}{name}'


def last_sent(name: str) -> Optional[str]:
    try:
        return cache.get(_key(name))
    except Exception as exc:
        logger.warning('Daily gate read failed for %s: %s', name, exc)
        return None


def already_ran(name: str, today: date) -> bool:
    return last_sent(name) == today.isoformat()


def mark_ran(name: str, today: date) -> None:
    try:
        cache.set(_key(name), today.isoformat(), TTL_SECONDS)
    except Exception as exc:
        logger.warning('Daily gate write failed for %s: %s', name, exc)


def run_once_per_day(name: str, action: Callable[[], object], today: date) -> bool:
    """Run *action* unless it already ran today under *name*.

    Returns True when the action ran and succeeded. Failures in the action are
    logged and swallowed; the day is only marked on success so a later call
    may retry.
    """
    if already_ran(name, today):
        return False
    try:
        action()
    except Exception:
        logger.exception('Daily action %s failed', name)
        return False
    mark_ran(name, today)
    return True
