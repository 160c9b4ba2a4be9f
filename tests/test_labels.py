"""Unit tests for classifier label parsing."""
import pytest

from agri_assist.domain.labels import LABEL_SEPARATOR, UNKNOWN_CONDITION, display_name, parse_label
from agri_assist.domain.models import ParsedLabel


class TestParseLabel:
    """Test splitting labels into subject and condition."""

    def test_subject_and_condition(self):
        parsed = parse_label("Tomato___Bacterial_spot")
        assert parsed == ParsedLabel(subject="Tomato", condition="Bacterial spot")

    def test_multi_word_subject(self):
        parsed = parse_label("Bell_Pepper___Bacterial_spot")
        assert parsed.subject == "Bell Pepper"
        assert parsed.condition == "Bacterial spot"

    def test_healthy_label(self):
        parsed = parse_label("Tomato___healthy")
        assert parsed.subject == "Tomato"
        assert parsed.condition == "healthy"

    def test_extra_segments_joined_into_condition(self):
        parsed = parse_label("Corn___Cercospora_leaf_spot___Gray_leaf_spot")
        assert parsed.subject == "Corn"
        assert parsed.condition == "Cercospora leaf spot Gray leaf spot"

    @pytest.mark.parametrize("raw", [
        "Tomato___Late_blight",
        "Apple___Cedar_apple_rust",
        "Potato______Early_blight",
        "a___b___c___d",
    ])
    def test_condition_never_contains_separator(self, raw):
        assert LABEL_SEPARATOR not in parse_label(raw).condition

    def test_missing_separator_uses_unknown_condition(self):
        parsed = parse_label("  Apple_scab_leaf ")
        assert parsed.subject == "Apple scab leaf"
        assert parsed.condition == UNKNOWN_CONDITION

    def test_empty_label(self):
        parsed = parse_label("")
        assert parsed.subject == ""
        assert parsed.condition == UNKNOWN_CONDITION


class TestDisplayName:
    def test_with_condition(self):
        assert display_name(parse_label("Tomato___Early_blight")) == "Tomato – Early blight"

    def test_unknown_condition_shows_subject_only(self):
        assert display_name(parse_label("Grape_leaf")) == "Grape leaf"
