"""Widget classes and markup builders for the main screen."""

from promptshare.widgets.chrome import (
    LIST_FOOTER_BINDINGS,
    MODAL_FOOTER_BINDINGS,
    ContextFooter,
    FilterBar,
    StatusBar,
)
from promptshare.widgets.details import (
    RESULT_PREVIEW_MAX_LEN,
    build_prompt_markdown,
    render_comment,
    render_prompt_details,
    render_result,
)
from promptshare.widgets.listing import (
    LOAD_MORE_OPTION_ID,
    build_prompt_options,
    render_category_label,
    render_load_more,
    render_prompt_card,
    render_tag_labels,
)

__all__ = [
    "LIST_FOOTER_BINDINGS",
    "LOAD_MORE_OPTION_ID",
    "MODAL_FOOTER_BINDINGS",
    "RESULT_PREVIEW_MAX_LEN",
    "ContextFooter",
    "FilterBar",
    "StatusBar",
    "build_prompt_markdown",
    "build_prompt_options",
    "render_category_label",
    "render_comment",
    "render_load_more",
    "render_prompt_card",
    "render_prompt_details",
    "render_result",
    "render_tag_labels",
]
