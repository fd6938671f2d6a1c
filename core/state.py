"""
Observable state and the session preference store.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    """Handle returned by StateFlow.subscribe."""

    def __init__(self, flow: "StateFlow", callback: Callable):
        self._flow = flow
        self._callback = callback
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._flow._remove(self)


class StateFlow(Generic[T]):
    """
    Single-writer, multi-reader observable value.

    Subscribers receive the current value on subscribe and every later
    distinct value, synchronously, in the writer's thread.

    Usage:
        flow = StateFlow(0)
        sub = flow.subscribe(print)   # prints 0
        flow.set(1)                   # prints 1
        flow.set(1)                   # unchanged, nothing printed
        sub.cancel()
    """

    def __init__(self, initial: T):
        self._value = initial
        self._subscriptions: List[Subscription] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if value == self._value:
            return
        self._value = value
        self._notify(value)

    def update(self, fn: Callable[[T], T]) -> None:
        self.set(fn(self._value))

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        self._deliver(subscription, self._value)
        return subscription

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def _notify(self, value: T) -> None:
        # Copy: callbacks may cancel their own subscription
        for subscription in list(self._subscriptions):
            if subscription.active:
                self._deliver(subscription, value)

    def _deliver(self, subscription: Subscription, value: T) -> None:
        try:
            subscription._callback(value)
        except Exception as e:
            logger.error(f"State subscriber {subscription._callback!r} failed: {e}")


class UserPreference(BaseModel):
    """
    Locally held session: the access token and the profile bits the
    home screen shows.
    """
    access_token: str = Field(default="", description="Opaque bearer token")
    user_id: str = ""
    name: str = ""
    photo: str = Field(default="", description="Profile photo URL")

    @property
    def is_logged_in(self) -> bool:
        return bool(self.access_token)


class PreferenceStore:
    """
    Holds the current UserPreference, optionally persisted as JSON.

    Written by the repository on login/logout, read by view-models.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self.preference: StateFlow[UserPreference] = StateFlow(self._load())

    def _load(self) -> UserPreference:
        if not self.path or not self.path.exists():
            return UserPreference()
        try:
            return UserPreference.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return UserPreference()

    def _persist(self, preference: UserPreference) -> None:
        if not self.path:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(preference.model_dump_json(), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write session file {self.path}, keeping session in memory: {e}")

    @property
    def current(self) -> UserPreference:
        return self.preference.value

    def save(self, preference: UserPreference) -> None:
        self._persist(preference)
        self.preference.set(preference)
        logger.info(f"Session saved for user {preference.user_id or '<unknown>'}")

    def clear(self) -> None:
        if self.path and self.path.exists():
            try:
                self.path.unlink()
            except OSError as e:
                logger.warning(f"Could not remove session file {self.path}: {e}")
        self.preference.set(UserPreference())
        logger.info("Session cleared")


__all__ = [
    "StateFlow",
    "Subscription",
    "UserPreference",
    "PreferenceStore",
]
