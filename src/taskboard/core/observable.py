# src/taskboard/core/observable.py

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from .ports import Listener, Unsubscribe

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Observable(Generic[T]):
    """
    A value plus an observer list.

    subscribe() calls the listener right away with the current value and then
    after every set(). Listeners run synchronously, in subscription order.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._listeners: list[Listener[T]] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self._notify()

    def subscribe(self, listener: Listener[T]) -> Unsubscribe:
        self._listeners.append(listener)
        self._call(listener, self._value)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def _notify(self) -> None:
        # snapshot: a listener may unsubscribe while we iterate
        for listener in list(self._listeners):
            self._call(listener, self._value)

    @staticmethod
    def _call(listener: Listener[T], value: T) -> None:
        try:
            listener(value)
        except Exception:
            logger.exception("Subscriber %r failed.", listener)
