"""Observable application state store.

Holds categories, tags, prompts and the currently viewed prompt, and notifies
subscribers synchronously on every mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace

from promptshare.models import AppState, Category, Prompt, Tag

logger = logging.getLogger(__name__)

StateListener = Callable[[AppState], None]

_STATE_FIELDS = frozenset({"categories", "tags", "prompts", "current_prompt"})


class _Subscription:
    """Registration handle; identity lets the same callable subscribe twice."""

    __slots__ = ("listener",)

    def __init__(self, listener: StateListener) -> None:
        self.listener = listener


class AppStateStore:
    """Single source of truth for the data shown by the UI.

    Setters replace whole collections and notify every subscriber in
    registration order before returning. Getters return copies, so callers
    cannot mutate the store without going through a setter.
    """

    def __init__(self, initial: AppState | None = None) -> None:
        self._state = initial or AppState()
        self._subscriptions: list[_Subscription] = []

    # ------------------------------------------------------------------
    # Getters / setters
    # ------------------------------------------------------------------

    def get_state(self) -> AppState:
        return self._state

    def get_categories(self) -> list[Category]:
        return list(self._state.categories)

    def set_categories(self, categories: Iterable[Category]) -> None:
        self._state = replace(self._state, categories=tuple(categories))
        self._notify()

    def get_tags(self) -> list[Tag]:
        return list(self._state.tags)

    def set_tags(self, tags: Iterable[Tag]) -> None:
        self._state = replace(self._state, tags=tuple(tags))
        self._notify()

    def get_prompts(self) -> list[Prompt]:
        return list(self._state.prompts)

    def set_prompts(self, prompts: Iterable[Prompt]) -> None:
        self._state = replace(self._state, prompts=tuple(prompts))
        self._notify()

    def get_current_prompt(self) -> Prompt | None:
        return self._state.current_prompt

    def set_current_prompt(self, prompt: Prompt | None) -> None:
        self._state = replace(self._state, current_prompt=prompt)
        self._notify()

    def update(self, **fields: object) -> None:
        """Patch several fields at once and notify exactly once.

        Raises:
            TypeError: If a field name is not part of the state.
        """
        unknown = set(fields) - _STATE_FIELDS
        if unknown:
            raise TypeError(f"Unknown state field(s): {', '.join(sorted(unknown))}")
        changes: dict[str, object] = {}
        for name, value in fields.items():
            if name == "current_prompt":
                changes[name] = value
            else:
                changes[name] = tuple(value)  # type: ignore[call-overload]
        self._state = replace(self._state, **changes)  # type: ignore[arg-type]
        self._notify()

    def reset(self) -> None:
        """Restore the empty state with a single notification."""
        self._state = AppState()
        self._notify()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    @property
    def listener_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener and replay the current state to it immediately.

        Returns an unsubscribe function that is safe to call more than once.
        """
        subscription = _Subscription(listener)
        self._subscriptions.append(subscription)
        self._deliver(subscription, self._state)

        def unsubscribe() -> None:
            for index, existing in enumerate(self._subscriptions):
                if existing is subscription:
                    del self._subscriptions[index]
                    return

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self._state
        # Snapshot the list so (un)subscribing inside a listener is safe
        for subscription in list(self._subscriptions):
            self._deliver(subscription, snapshot)

    @staticmethod
    def _deliver(subscription: _Subscription, snapshot: AppState) -> None:
        try:
            subscription.listener(snapshot)
        except Exception:
            logger.exception("State listener %r raised", subscription.listener)


__all__ = [
    "AppStateStore",
    "StateListener",
]
