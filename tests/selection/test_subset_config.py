"""
Unit Tests for SubsetConfig and ImageMode
"""

import pytest

from quiz_toolkit.selection.config import ImageMode, SubsetConfig, parse_sub_topic_pairs


class TestSubsetConfig:
    """Tests for SubsetConfig."""

    def test_init_when_negative_random_n_then_raises(self):
        with pytest.raises(ValueError, match="random_n"):
            SubsetConfig(random_n=-1)

    def test_init_normalizes_loose_inputs(self):
        config = SubsetConfig(
            exams=["A"],
            super_topics=["S"],
            sub_topics=["S::T", ("X", "Y")],
            image_mode="without",
        )

        assert config.exams == ("A",)
        assert config.super_topics == ("S",)
        assert config.sub_topics == frozenset({("S", "T"), ("X", "Y")})
        assert config.image_mode is ImageMode.WITHOUT
        assert config.has_topic_filter

    def test_dict_round_trip(self):
        config = SubsetConfig(
            exams=("Exam 2021",),
            sub_topics={("Security", "Crypto")},
            image_mode=ImageMode.WITH,
            query="hash",
            in_answers=True,
            random_n=5,
            shuffle_questions=True,
        )

        d = config.to_dict()

        assert d["subTopics"] == ["Security::Crypto"]
        assert d["imageFilter"] == "with"
        assert SubsetConfig.from_dict(d) == config

    def test_from_dict_when_malformed_then_defaults(self):
        config = SubsetConfig.from_dict({"randomN": "many", "imageFilter": 3, "exams": None})

        assert config == SubsetConfig()

    def test_from_dict_when_not_dict_then_defaults(self):
        assert SubsetConfig.from_dict(None) == SubsetConfig()


class TestParseSubTopicPairs:
    """Tests for parse_sub_topic_pairs()."""

    def test_parse_ignores_malformed_entries(self):
        pairs = parse_sub_topic_pairs(["NoSeparator", "::Sub", "Sup::", ("a",), 5, "A::B::C"])

        assert pairs == frozenset({("A", "B::C")})
