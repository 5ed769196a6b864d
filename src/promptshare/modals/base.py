"""Layered dialog panel driven by :class:`~promptshare.modal_stack.ModalStackManager`.

Panels are composed onto the main screen hidden. Opening one places it on a
screen layer derived from its stack position; background panels are dimmed
and their body disabled while the close button stays usable.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button, Label

from promptshare.models import MODAL_BASE_Z, MODAL_Z_STEP

logger = logging.getLogger(__name__)

# Screen layers reserved for panels, bottom first (see APP_CSS)
MODAL_LAYERS: tuple[str, ...] = tuple(f"modal{i}" for i in range(6))


def layer_for_z_index(z_index: int | None) -> str:
    """Map a stack z-index onto one of the screen's panel layers."""
    if z_index is None:
        return MODAL_LAYERS[0]
    position = max(0, (z_index - MODAL_BASE_Z) // MODAL_Z_STEP)
    return MODAL_LAYERS[min(position, len(MODAL_LAYERS) - 1)]


class ModalPanel(Vertical):
    """Dialog panel with a title bar, a close button, and a body."""

    can_focus = True

    PANEL_TITLE = "Dialog"

    class CloseRequested(Message):
        """The panel asked to be closed (close button)."""

        def __init__(self, panel: ModalPanel) -> None:
            super().__init__()
            self.panel = panel

    DEFAULT_CSS = """
    ModalPanel {
        display: none;
        layer: modal0;
        width: 70%;
        height: auto;
        max-height: 90%;
        background: $th-background;
        border: tall $th-accent;
        padding: 0 1;
    }

    ModalPanel.-background {
        border: tall $th-muted;
        tint: $th-background 40%;
    }

    ModalPanel .panel-titlebar {
        height: auto;
        width: 100%;
    }

    ModalPanel .panel-title {
        width: 1fr;
        text-style: bold;
        color: $th-accent-alt;
        padding: 0 1;
    }

    ModalPanel .panel-close {
        min-width: 5;
    }

    ModalPanel .panel-body {
        height: auto;
        max-height: 100%;
    }
    """

    def __init__(self, *, id: str | None = None, classes: str | None = None) -> None:
        super().__init__(id=id, classes=classes)
        self._inert = True
        self._aria_hidden = True
        self._active = False
        self._z_index: int | None = None
        self._pointer_events = False
        self._close_control_enabled = True

    def compose(self) -> ComposeResult:
        with Horizontal(classes="panel-titlebar"):
            yield Label(self.PANEL_TITLE, classes="panel-title")
            yield Button("x", classes="panel-close", variant="error")
        with Vertical(classes="panel-body"):
            yield from self.compose_body()

    def compose_body(self) -> ComposeResult:
        """Yield the panel's own widgets."""
        yield from ()

    # ------------------------------------------------------------------
    # ModalSurface attributes
    # ------------------------------------------------------------------

    @property
    def hidden(self) -> bool:
        return not self.display

    @hidden.setter
    def hidden(self, value: bool) -> None:
        self.display = not value

    @property
    def inert(self) -> bool:
        return self._inert

    @inert.setter
    def inert(self, value: bool) -> None:
        self._inert = value
        body = self._body()
        if body is not None:
            body.disabled = value

    @property
    def aria_hidden(self) -> bool:
        return self._aria_hidden

    @aria_hidden.setter
    def aria_hidden(self, value: bool) -> None:
        self._aria_hidden = value

    @property
    def active(self) -> bool:
        return self._active

    @active.setter
    def active(self, value: bool) -> None:
        self._active = value
        self.set_class(value, "-active")
        self.set_class(not value, "-background")

    @property
    def z_index(self) -> int | None:
        return self._z_index

    @z_index.setter
    def z_index(self, value: int | None) -> None:
        self._z_index = value
        self.styles.layer = layer_for_z_index(value)

    @property
    def pointer_events(self) -> bool:
        return self._pointer_events

    @pointer_events.setter
    def pointer_events(self, value: bool) -> None:
        self._pointer_events = value

    @property
    def close_control_enabled(self) -> bool:
        return self._close_control_enabled

    @close_control_enabled.setter
    def close_control_enabled(self, value: bool) -> None:
        self._close_control_enabled = value
        close = self._close_button()
        if close is not None:
            close.disabled = not value

    def focusable_widgets(self) -> Sequence[Widget]:
        """Focusable body widgets in DOM order, then the close button."""
        body = self._body()
        widgets: list[Widget] = []
        if body is not None:
            widgets = [w for w in body.query("*") if w.focusable]
        close = self._close_button()
        if close is not None and close.focusable:
            widgets.append(close)
        return widgets

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _body(self) -> Vertical | None:
        if not self.is_mounted:
            return None
        return self.query_one(".panel-body", Vertical)

    def _close_button(self) -> Button | None:
        if not self.is_mounted:
            return None
        return self.query_one(".panel-close", Button)

    def set_title(self, title: str) -> None:
        self.query_one(".panel-title", Label).update(title)

    @on(Button.Pressed, ".panel-close")
    def _on_close_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(self.CloseRequested(self))


__all__ = [
    "MODAL_LAYERS",
    "ModalPanel",
    "layer_for_z_index",
]
