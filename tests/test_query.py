"""Tests for filtering, pagination, label resolution and display helpers."""

from __future__ import annotations

import pytest

from promptshare.models import (
    DELETED_CATEGORY_LABEL,
    DELETED_TAG_LABEL,
    UNCATEGORIZED_LABEL,
    UNKNOWN_AUTHOR_LABEL,
    UNTITLED_LABEL,
    FilterCriteria,
)
from promptshare.query import (
    _HIGHLIGHT_PATTERN_CACHE,
    ELLIPSIS,
    NO_CONTENT_LABEL,
    FilterPipeline,
    PaginationState,
    build_empty_message,
    build_filter_summary,
    build_highlight_terms,
    display_author,
    display_title,
    filter_prompts,
    highlight_text,
    paginate,
    preview_content,
    preview_description,
    resolve_category_label,
    resolve_tag_labels,
    truncate_text,
)


@pytest.fixture
def library(make_prompt, make_category, make_tag):
    categories = [make_category("c1", "Writing"), make_category("c2", "Code")]
    tags = [make_tag("t1", "poetry"), make_tag("t2", "python"), make_tag("t3", "fun")]
    prompts = [
        make_prompt("1", "Haiku helper", "Write a haiku", category="c1", tags=("t1", "t3")),
        make_prompt("2", "Refactor bot", "Clean up this function", category="c2", tags=("t2",)),
        make_prompt("3", "Limerick", "Five lines please", category="c1", tags=("t1",)),
        make_prompt("4", "Orphan", "Dangling refs", category="gone", tags=("t9",)),
    ]
    return prompts, categories, tags


def _ids(prompts):
    return [p.id for p in prompts]


# ============================================================================
# Filtering
# ============================================================================


class TestFilterPrompts:
    def test_empty_criteria_returns_everything_in_order(self, library):
        prompts, categories, tags = library
        result = filter_prompts(prompts, categories, tags, FilterCriteria())
        assert _ids(result) == ["1", "2", "3", "4"]

    def test_blank_search_matches_everything(self, library):
        prompts, categories, tags = library
        result = filter_prompts(prompts, categories, tags, FilterCriteria(search_query="   "))
        assert len(result) == 4

    def test_search_is_case_insensitive_over_title_and_content(self, library):
        prompts, categories, tags = library
        assert _ids(filter_prompts(prompts, categories, tags, FilterCriteria("HAIKU"))) == ["1"]
        assert _ids(filter_prompts(prompts, categories, tags, FilterCriteria("five lines"))) == [
            "3"
        ]

    def test_search_matches_resolved_category_and_tag_names(self, library):
        prompts, categories, tags = library
        assert _ids(filter_prompts(prompts, categories, tags, FilterCriteria("code"))) == ["2"]
        assert _ids(filter_prompts(prompts, categories, tags, FilterCriteria("poetry"))) == [
            "1",
            "3",
        ]

    def test_search_does_not_match_placeholder_labels(self, library):
        prompts, categories, tags = library
        assert filter_prompts(prompts, categories, tags, FilterCriteria("deleted")) == []

    def test_category_filter_uses_ids(self, library):
        prompts, categories, tags = library
        result = filter_prompts(prompts, categories, tags, FilterCriteria(category_id="c1"))
        assert _ids(result) == ["1", "3"]

    def test_tag_filter_matches_by_name(self, library):
        prompts, categories, tags = library
        result = filter_prompts(prompts, categories, tags, FilterCriteria(tag_name="poetry"))
        assert _ids(result) == ["1", "3"]

    def test_tag_filter_falls_back_to_raw_id(self, library):
        prompts, categories, tags = library
        result = filter_prompts(prompts, categories, tags, FilterCriteria(tag_name="t9"))
        assert _ids(result) == ["4"]

    def test_tag_filter_id_mode_ignores_names(self, library):
        prompts, categories, tags = library
        by_name = filter_prompts(
            prompts, categories, tags, FilterCriteria(tag_name="poetry"), tag_match="id"
        )
        by_id = filter_prompts(
            prompts, categories, tags, FilterCriteria(tag_name="t1"), tag_match="id"
        )
        assert by_name == []
        assert _ids(by_id) == ["1", "3"]

    def test_filters_compose_with_and(self, library):
        prompts, categories, tags = library
        criteria = FilterCriteria(search_query="l", category_id="c1", tag_name="fun")
        assert _ids(filter_prompts(prompts, categories, tags, criteria)) == ["1"]

    def test_no_match_returns_empty_list(self, library):
        prompts, categories, tags = library
        criteria = FilterCriteria(category_id="c2", tag_name="poetry")
        assert filter_prompts(prompts, categories, tags, criteria) == []


# ============================================================================
# Pagination
# ============================================================================


class TestPaginate:
    def test_first_page(self, make_prompt):
        prompts = [make_prompt(str(i)) for i in range(25)]
        page = paginate(prompts, 0, 10)
        assert len(page.visible) == 10
        assert page.has_more is True
        assert page.total == 25

    def test_shown_count_extends_the_window(self, make_prompt):
        prompts = [make_prompt(str(i)) for i in range(25)]
        page = paginate(prompts, 20, 10)
        assert len(page.visible) == 25
        assert page.has_more is False

    def test_exact_fit_has_no_more(self, make_prompt):
        prompts = [make_prompt(str(i)) for i in range(10)]
        assert paginate(prompts, 0, 10).has_more is False

    def test_empty_list(self):
        page = paginate([], 0, 10)
        assert page.visible == []
        assert page.has_more is False


class TestPaginationState:
    def test_rejects_non_positive_page_size(self):
        with pytest.raises(ValueError, match="page_size"):
            PaginationState(0)

    def test_load_more_clamps_to_filtered_length(self):
        state = PaginationState(10)
        assert state.load_more(15) == 10
        assert state.load_more(15) == 15
        assert state.load_more(15) == 15

    def test_clamp_only_lowers(self):
        state = PaginationState(10)
        state.load_more(30)
        assert state.clamp(50) == 10
        assert state.clamp(4) == 4
        assert state.clamp(-1) == 0

    def test_reset(self):
        state = PaginationState(5)
        state.load_more(50)
        state.reset()
        assert state.shown_count == 0


class TestFilterPipeline:
    def test_compute_then_load_more(self, make_prompt):
        prompts = [make_prompt(str(i)) for i in range(7)]
        pipeline = FilterPipeline(3)

        first = pipeline.compute(prompts, [], [])
        assert len(first.visible) == 3
        assert first.has_more

        pipeline.load_more()
        second = pipeline.compute(prompts, [], [])
        assert len(second.visible) == 6

        pipeline.load_more()
        third = pipeline.compute(prompts, [], [])
        assert len(third.visible) == 7
        assert not third.has_more

    def test_criteria_change_resets_pagination(self, make_prompt):
        prompts = [make_prompt(str(i)) for i in range(7)]
        pipeline = FilterPipeline(3)
        pipeline.compute(prompts, [], [])
        pipeline.load_more()
        assert pipeline.shown_count == 3

        pipeline.set_search_query("test")

        assert pipeline.shown_count == 0
        assert pipeline.criteria.search_query == "test"

    def test_compute_clamps_cursor_when_list_shrinks(self, make_prompt):
        prompts = [make_prompt(str(i)) for i in range(45)]
        pipeline = FilterPipeline(20)
        pipeline.compute(prompts, [], [])
        pipeline.load_more()
        pipeline.compute(prompts, [], [])
        pipeline.load_more()
        assert pipeline.shown_count == 40

        page = pipeline.compute(prompts[:10], [], [])

        assert pipeline.shown_count == 10
        assert page.visible == prompts[:10]
        assert not page.has_more

        # Growing back starts from the clamped cursor, not the stale one
        page = pipeline.compute(prompts, [], [])
        assert len(page.visible) == 30
        assert page.has_more

    def test_setters_preserve_other_criteria(self):
        pipeline = FilterPipeline()
        pipeline.set_search_query("haiku")
        pipeline.set_category("c1")
        pipeline.set_tag("poetry")
        assert pipeline.criteria == FilterCriteria("haiku", "c1", "poetry")

    def test_empty_strings_clear_category_and_tag(self):
        pipeline = FilterPipeline()
        pipeline.set_category("c1")
        pipeline.set_tag("poetry")
        pipeline.set_category("")
        pipeline.set_tag("")
        assert pipeline.criteria.category_id is None
        assert pipeline.criteria.tag_name is None

    def test_clear_filters_keeps_search(self):
        pipeline = FilterPipeline()
        pipeline.set_search_query("haiku")
        pipeline.set_category("c1")
        pipeline.clear_filters()
        assert pipeline.criteria == FilterCriteria("haiku")

    def test_clear_all(self):
        pipeline = FilterPipeline()
        pipeline.set_search_query("haiku")
        pipeline.set_tag("poetry")
        pipeline.clear_all()
        assert pipeline.criteria.is_empty

    def test_tag_match_mode_is_applied(self, library):
        prompts, categories, tags = library
        pipeline = FilterPipeline(tag_match="id")
        pipeline.set_tag("poetry")
        assert pipeline.compute(prompts, categories, tags).visible == []


# ============================================================================
# Labels and display text
# ============================================================================


class TestLabels:
    def test_category_label(self, make_category):
        categories = [make_category("c1", "Writing")]
        assert resolve_category_label("c1", categories) == "Writing"
        assert resolve_category_label("c2", categories) == DELETED_CATEGORY_LABEL
        assert resolve_category_label(None, categories) == UNCATEGORIZED_LABEL

    def test_tag_labels_keep_order_and_placeholders(self, make_tag):
        tags = [make_tag("t1", "poetry"), make_tag("t2", "python")]
        assert resolve_tag_labels(["t2", "t9", "t1"], tags) == [
            "python",
            DELETED_TAG_LABEL,
            "poetry",
        ]

    @pytest.mark.parametrize("title", ["", " ", "s", "1", "AS", "x"])
    def test_placeholder_titles_render_untitled(self, title):
        assert display_title(title) == UNTITLED_LABEL

    def test_long_title_is_shortened_with_ellipsis(self):
        shortened = display_title("T" * 60)
        assert shortened.endswith(ELLIPSIS)
        assert len(shortened) == 46

    def test_preview_content(self):
        assert preview_content("   ") == NO_CONTENT_LABEL
        assert preview_content("short") == "short"
        assert preview_content("x" * 200).endswith(ELLIPSIS)

    def test_preview_description_can_be_empty(self):
        assert preview_description("") == ""

    def test_display_author_fallback(self):
        assert display_author("  ") == UNKNOWN_AUTHOR_LABEL
        assert display_author("ada") == "ada"

    def test_truncate_text(self):
        assert truncate_text("abc", 5) == "abc"
        assert truncate_text("abcdef", 3) == "abc..."


class TestHighlight:
    def test_escapes_markup_without_terms(self):
        assert highlight_text("[bold]x", [], "red") == r"\[bold]x"

    def test_wraps_matches_case_insensitively(self):
        result = highlight_text("Write a Haiku", ["haiku"], "red")
        assert result == "Write a [bold red]Haiku[/]"

    def test_single_character_terms_are_ignored(self):
        assert highlight_text("abc", ["a"], "red") == "abc"

    def test_pattern_is_cached(self):
        highlight_text("haiku", ["haiku"], "red")
        assert ("haiku",) in _HIGHLIGHT_PATTERN_CACHE


# ============================================================================
# Summary copy
# ============================================================================


class TestSummaries:
    def test_summary_without_filters(self):
        assert build_filter_summary(FilterCriteria(), []) == "Showing all prompts"

    def test_summary_with_all_filters(self, make_category):
        criteria = FilterCriteria("haiku", "c1", "poetry")
        summary = build_filter_summary(criteria, [make_category("c1", "Writing")])
        assert summary == 'Showing prompts in Category: Writing, Tag: poetry, Search: "haiku"'

    def test_empty_message_without_filters_invites_creation(self):
        message = build_empty_message(FilterCriteria(), [])
        assert message.startswith("No prompts yet.")

    def test_empty_message_lists_active_filters(self, make_category):
        criteria = FilterCriteria("haiku", "c1", "poetry")
        message = build_empty_message(criteria, [make_category("c1", "Writing")])
        assert message.startswith(
            "No prompts found for: haiku in category: Writing with tag: poetry"
        )
        assert message.endswith("Try adjusting your search or filter criteria.")

    def test_empty_message_unknown_category_shows_id(self):
        message = build_empty_message(FilterCriteria(category_id="c9"), [])
        assert "in category: c9" in message

    def test_highlight_terms(self):
        assert build_highlight_terms(FilterCriteria("  haiku ")) == ["haiku"]
        assert build_highlight_terms(FilterCriteria()) == []
