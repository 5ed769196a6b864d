"""Dialogs for the PromptShare TUI.

Import dialogs from this package: ``from promptshare.modals import PromptViewPanel``
"""

# base.py — stack-managed panel base
from promptshare.modals.base import MODAL_LAYERS, ModalPanel, layer_for_z_index

# batch_import.py — JSON/text batch import
from promptshare.modals.batch_import import BatchImportPanel, load_import_file

# common.py — screens pushed outside the panel stack
from promptshare.modals.common import ConfirmModal, HelpScreen

# editor.py, prompt_view.py, taxonomy.py — prompt workflows
from promptshare.modals.editor import PromptEditorPanel
from promptshare.modals.prompt_view import FeedbackItem, PromptViewPanel
from promptshare.modals.taxonomy import TaxonomyPanel

__all__ = [
    "MODAL_LAYERS",
    "BatchImportPanel",
    "ConfirmModal",
    "FeedbackItem",
    "HelpScreen",
    "ModalPanel",
    "PromptEditorPanel",
    "PromptViewPanel",
    "TaxonomyPanel",
    "layer_for_z_index",
    "load_import_file",
]
