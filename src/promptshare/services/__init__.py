"""Internal service layer for backend access."""

from promptshare.services.prompt_api_service import (
    ApiError,
    ImportSummary,
    add_category,
    add_comment,
    add_result,
    add_tag,
    create_prompt,
    delete_category,
    delete_comment,
    delete_prompt,
    delete_result,
    delete_tag,
    fetch_categories,
    fetch_comments,
    fetch_prompts,
    fetch_results,
    fetch_tags,
    import_prompts,
    rename_category,
    rename_tag,
    update_prompt,
)

__all__ = [
    "ApiError",
    "ImportSummary",
    "add_category",
    "add_comment",
    "add_result",
    "add_tag",
    "create_prompt",
    "delete_category",
    "delete_comment",
    "delete_prompt",
    "delete_result",
    "delete_tag",
    "fetch_categories",
    "fetch_comments",
    "fetch_prompts",
    "fetch_results",
    "fetch_tags",
    "import_prompts",
    "rename_category",
    "rename_tag",
    "update_prompt",
]
