# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The stores depend on Protocols instead of concrete implementations.
This keeps the persistence backend swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

T_contra = TypeVar("T_contra", contravariant=True)

Unsubscribe = Callable[[], None]


class Listener(Protocol[T_contra]):
    def __call__(self, value: T_contra, /) -> Any: ...


class BlobStore(Protocol):
    """
    Textual key-value store (the "localStorage" of the app).

    Values are opaque strings; callers decide the encoding (JSON here).
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...
