"""PromptShare - a terminal client for a shared prompt library.

Commonly used names are re-exported here so callers can write
``from promptshare import Prompt, FilterPipeline``.
"""

from promptshare.models import (
    DEFAULT_BASE_URL,
    DEFAULT_PAGE_SIZE,
    AppState,
    Category,
    Comment,
    FilterCriteria,
    Prompt,
    Result,
    Tag,
    UserConfig,
)
from promptshare.modal_stack import ModalStackManager, ModalState
from promptshare.query import (
    _HIGHLIGHT_PATTERN_CACHE,
    FilterPipeline,
    PageResult,
    PaginationState,
    filter_prompts,
    paginate,
)
from promptshare.state import AppStateStore
from promptshare.themes import DEFAULT_THEME, THEME_COLORS

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_THEME",
    "THEME_COLORS",
    "_HIGHLIGHT_PATTERN_CACHE",
    "AppState",
    "AppStateStore",
    "Category",
    "Comment",
    "FilterCriteria",
    "FilterPipeline",
    "ModalStackManager",
    "ModalState",
    "PageResult",
    "PaginationState",
    "Prompt",
    "Result",
    "Tag",
    "UserConfig",
    "__version__",
    "filter_prompts",
    "paginate",
]
