"""Stack manager for layered modal panels.

Keeps any number of open modals in last-opened-on-top order so that exactly
one of them (the top) is interactive. Background modals stay visible but are
inert, except for their close control. Focus moves into a modal when it opens
and returns to the element that held focus before it opened when it closes.

The manager is UI-toolkit agnostic: it drives objects implementing
:class:`ModalSurface` and moves focus through a :class:`FocusHost`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from promptshare.models import MODAL_BASE_Z, MODAL_Z_STEP

logger = logging.getLogger(__name__)


class ModalState(str, Enum):
    CLOSED = "closed"
    BACKGROUND = "background"
    ACTIVE = "active"


@runtime_checkable
class ModalSurface(Protocol):
    """Presentation attributes the manager toggles on a modal."""

    hidden: bool
    inert: bool
    aria_hidden: bool
    active: bool
    z_index: int | None
    pointer_events: bool
    close_control_enabled: bool

    def focusable_widgets(self) -> Sequence[Any]:
        """Return the focusable descendants in tab order."""
        ...


@runtime_checkable
class FocusHost(Protocol):
    """Whatever owns keyboard focus (a Textual App satisfies this)."""

    @property
    def focused(self) -> Any: ...

    def set_focus(self, widget: Any) -> Any: ...


@dataclass(slots=True)
class _StackEntry:
    modal: ModalSurface
    return_focus: Any
    opener: ModalSurface | None  # active modal at open time, None for the base screen


StackListener = Callable[["ModalStackManager"], None]


def z_index_for(position: int) -> int:
    """Return the z-index for a stack position (0 is the bottom)."""
    return MODAL_BASE_Z + position * MODAL_Z_STEP


class ModalStackManager:
    """Coordinates open modals so only the topmost accepts input."""

    def __init__(self, focus_host: FocusHost | None = None) -> None:
        self._focus_host = focus_host
        self._entries: list[_StackEntry] = []
        self._listeners: list[StackListener] = []
        self.modal_open = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def stack(self) -> list[ModalSurface]:
        """Open modals, bottom first."""
        return [entry.modal for entry in self._entries]

    @property
    def depth(self) -> int:
        return len(self._entries)

    @property
    def active_modal(self) -> ModalSurface | None:
        return self._entries[-1].modal if self._entries else None

    def is_top(self, modal: ModalSurface | None) -> bool:
        return modal is not None and self.active_modal is modal

    def is_open(self, modal: ModalSurface | None) -> bool:
        return self._index_of(modal) is not None

    def state_of(self, modal: ModalSurface | None) -> ModalState:
        index = self._index_of(modal)
        if index is None:
            return ModalState.CLOSED
        if index == len(self._entries) - 1:
            return ModalState.ACTIVE
        return ModalState.BACKGROUND

    def _index_of(self, modal: ModalSurface | None) -> int | None:
        if modal is None:
            return None
        for index, entry in enumerate(self._entries):
            if entry.modal is modal:
                return index
        return None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def open(self, modal: ModalSurface | None) -> None:
        """Show ``modal`` on top of the stack and move focus into it.

        Re-opening a modal that is already on the stack moves it to the top
        and keeps the focus target recorded when it was first opened.
        """
        if modal is None:
            logger.warning("Ignoring request to open a missing modal")
            return
        existing_index = self._index_of(modal)
        if existing_index is not None:
            entry = self._entries.pop(existing_index)
        else:
            entry = _StackEntry(
                modal=modal,
                return_focus=self._current_focus(),
                opener=self.active_modal,
            )
        self._entries.append(entry)
        self.modal_open = True
        self._restack()
        self._focus_initial(modal)
        logger.debug("Opened modal %r (depth=%d)", modal, self.depth)
        self._emit()

    def close(self, modal: ModalSurface | None) -> None:
        """Hide ``modal`` wherever it sits in the stack.

        Closing the active modal promotes the next one down and restores focus
        to whatever was focused before the closed modal opened.
        """
        if modal is None:
            logger.warning("Ignoring request to close a missing modal")
            return
        index = self._index_of(modal)
        if index is None:
            logger.debug("Modal %r is not open; close ignored", modal)
            self._apply_closed(modal)
            return
        was_top = index == len(self._entries) - 1
        entry = self._entries.pop(index)
        self._reparent_children(entry)
        self._apply_closed(modal)
        self._restack()
        if not self._entries:
            self.modal_open = False
        logger.debug("Closed modal %r (depth=%d)", modal, self.depth)
        # Listeners re-enable the page before focus is handed back to it
        self._emit()
        if was_top:
            self._restore_focus(entry)

    def close_all(self) -> None:
        while self._entries:
            self.close(self._entries[-1].modal)

    def handle_escape(self) -> bool:
        """Close the active modal. Returns False when no modal is open."""
        modal = self.active_modal
        if modal is None:
            return False
        self.close(modal)
        return True

    def trap_focus(self, forward: bool = True) -> bool:
        """Move focus to the next/previous focusable inside the active modal.

        Wraps from the last element to the first (and back for Shift+Tab).
        Returns False when no modal is open so the caller can fall back to
        its normal focus traversal.
        """
        modal = self.active_modal
        if modal is None:
            return False
        focusables = list(modal.focusable_widgets())
        if not focusables:
            self._set_focus(modal)
            return True
        current = self._current_focus()
        position = next((i for i, w in enumerate(focusables) if w is current), None)
        if position is None:
            target = focusables[0] if forward else focusables[-1]
        else:
            step = 1 if forward else -1
            target = focusables[(position + step) % len(focusables)]
        self._set_focus(target)
        return True

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: StackListener) -> Callable[[], None]:
        """Call ``listener`` after every open/close. Returns a remover."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Modal stack listener %r raised", listener)

    # ------------------------------------------------------------------
    # Surface updates
    # ------------------------------------------------------------------

    def _restack(self) -> None:
        top = len(self._entries) - 1
        for position, entry in enumerate(self._entries):
            modal = entry.modal
            modal.z_index = z_index_for(position)
            modal.hidden = False
            is_active = position == top
            modal.active = is_active
            modal.inert = not is_active
            modal.aria_hidden = not is_active
            modal.pointer_events = is_active
            modal.close_control_enabled = True

    @staticmethod
    def _apply_closed(modal: ModalSurface) -> None:
        modal.active = False
        modal.inert = True
        modal.aria_hidden = True
        modal.pointer_events = False
        modal.z_index = None
        modal.hidden = True

    def _reparent_children(self, removed: _StackEntry) -> None:
        """Entries opened from ``removed`` now return to where it returned."""
        for entry in self._entries:
            if entry.opener is removed.modal:
                entry.opener = removed.opener
                entry.return_focus = removed.return_focus

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    def _current_focus(self) -> Any:
        if self._focus_host is None:
            return None
        return self._focus_host.focused

    def _set_focus(self, widget: Any) -> None:
        if self._focus_host is None:
            return
        self._focus_host.set_focus(widget)

    def _focus_initial(self, modal: ModalSurface) -> None:
        focusables = list(modal.focusable_widgets())
        self._set_focus(focusables[0] if focusables else modal)

    def _restore_focus(self, closed: _StackEntry) -> None:
        new_top = self.active_modal
        if closed.opener is new_top:
            if closed.return_focus is not None:
                self._set_focus(closed.return_focus)
            elif new_top is not None:
                self._focus_initial(new_top)
            return
        # The opener is gone; keep focus inside whatever is now interactive
        if new_top is not None:
            self._focus_initial(new_top)


__all__ = [
    "FocusHost",
    "ModalStackManager",
    "ModalState",
    "ModalSurface",
    "z_index_for",
]
