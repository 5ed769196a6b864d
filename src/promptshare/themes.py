"""Color palettes and the Textual themes built from them.

Rich markup builders read the module-level ``THEME_COLORS`` dict, which
:func:`apply_theme_colors` swaps in place. CSS reads the same colors as
``$th-*`` variables registered on each Textual theme.
"""

from __future__ import annotations

import zlib

from textual.theme import Theme as TextualTheme


def _palette(
    *,
    background: str,
    panel: str,
    panel_alt: str,
    text: str,
    muted: str,
    accent: str,
    green: str,
    yellow: str,
    orange: str,
    pink: str,
    purple: str,
    highlight_focus: str,
    scrollbar_hover: str,
) -> dict[str, str]:
    """Build a full palette; selection and scrollbar colors derive from the base ones."""
    return {
        "background": background,
        "panel": panel,
        "panel_alt": panel_alt,
        "text": text,
        "muted": muted,
        "accent": accent,
        "accent_alt": yellow,
        "green": green,
        "yellow": yellow,
        "orange": orange,
        "pink": pink,
        "purple": purple,
        "highlight": panel_alt,
        "highlight_focus": highlight_focus,
        "scrollbar_background": panel_alt,
        "scrollbar": muted,
        "scrollbar_active": accent,
        "scrollbar_hover": scrollbar_hover,
    }


DEFAULT_THEME = _palette(
    background="#272822",
    panel="#1e1e1e",
    panel_alt="#3e3d32",
    text="#f8f8f2",
    muted="#75715e",
    accent="#66d9ef",
    green="#a6e22e",
    yellow="#e6db74",
    orange="#fd971f",
    pink="#f92672",
    purple="#ae81ff",
    highlight_focus="#5a5950",
    scrollbar_hover="#a8a8a2",
)

THEMES: dict[str, dict[str, str]] = {
    "monokai": DEFAULT_THEME,
    "catppuccin-mocha": _palette(
        background="#1e1e2e",
        panel="#181825",
        panel_alt="#313244",
        text="#cdd6f4",
        muted="#6c7086",
        accent="#89b4fa",
        green="#a6e3a1",
        yellow="#f9e2af",
        orange="#fab387",
        pink="#f38ba8",
        purple="#cba6f7",
        highlight_focus="#45475a",
        scrollbar_hover="#9399b2",
    ),
    "solarized-dark": _palette(
        background="#002b36",
        panel="#073642",
        panel_alt="#073642",
        text="#839496",
        muted="#586e75",
        accent="#268bd2",
        green="#859900",
        yellow="#b58900",
        orange="#cb4b16",
        pink="#d33682",
        purple="#6c71c4",
        highlight_focus="#586e75",
        scrollbar_hover="#93a1a1",
    ),
}
THEME_NAMES: list[str] = list(THEMES)

# Active palette used by Rich markup builders
THEME_COLORS = DEFAULT_THEME.copy()

# Palette keys cycled for tag chips, stable per tag name
_TAG_COLOR_KEYS = ("accent", "green", "orange", "purple", "pink", "yellow")


def _build_textual_theme(name: str, colors: dict[str, str]) -> TextualTheme:
    """Wrap a palette as a Textual theme exposing every key as ``$th-<key>``."""
    return TextualTheme(
        name=name,
        primary=colors["accent"],
        secondary=colors["accent_alt"],
        accent=colors["green"],
        foreground=colors["text"],
        background=colors["background"],
        surface=colors["panel"],
        panel=colors["panel_alt"],
        warning=colors["orange"],
        error=colors["pink"],
        success=colors["green"],
        dark=True,
        variables={f"th-{key.replace('_', '-')}": value for key, value in colors.items()},
    )


TEXTUAL_THEMES: dict[str, TextualTheme] = {
    name: _build_textual_theme(name, colors) for name, colors in THEMES.items()
}


def apply_theme_colors(name: str) -> str:
    """Swap THEME_COLORS to the named palette; unknown names fall back to monokai."""
    resolved = name if name in THEMES else "monokai"
    THEME_COLORS.clear()
    THEME_COLORS.update(THEMES[resolved])
    return resolved


def get_tag_color(tag_name: str) -> str:
    key = _TAG_COLOR_KEYS[zlib.crc32(tag_name.casefold().encode("utf-8")) % len(_TAG_COLOR_KEYS)]
    return THEME_COLORS[key]


__all__ = [
    "DEFAULT_THEME",
    "TEXTUAL_THEMES",
    "THEMES",
    "THEME_COLORS",
    "THEME_NAMES",
    "apply_theme_colors",
    "get_tag_color",
]
