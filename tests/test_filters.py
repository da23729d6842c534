"""Unit tests for site2epub.filters."""

import re
from unittest.mock import MagicMock

import pytest

from site2epub.filters import ContentFilter, create_fastfounder_filter
from site2epub.models import FilterRule

AUDIO_BLOCK = (
    '<p>🎧 <a href="https://t.me/c/1715387706/39033">Аудиоверсия поста</a>. '
    "Чтобы послушать аудиоверсию, нужно сначала ввести свой Telegram ID в профиль "
    "и присоединиться к группе с обзорами в Телеграме "
    "<a href='https://fastfounder.ru/howtoread/'>вот по этой инструкции</a>.</p>\n"
    "<h2>Основной контент</h2>"
)


class TestTextRules:
    def test_removes_literal_text(self) -> None:
        f = ContentFilter(logger=MagicMock())
        f.add_text_rule("удалить это", "test rule")
        assert f.filter_content("Начало удалить это конец") == "Начало конец"

    def test_removes_every_occurrence(self) -> None:
        f = ContentFilter(logger=MagicMock())
        f.add_text_rule("spam", "spam")
        assert f.filter_content("spam текст spam еще spam") == "текст еще"

    def test_literal_is_not_treated_as_regex(self) -> None:
        f = ContentFilter(logger=MagicMock())
        f.add_text_rule("a.c", "dotted")
        assert f.filter_content("abc a.c end") == "abc end"


class TestRegexRules:
    def test_removes_pattern_matches(self) -> None:
        f = ContentFilter(logger=MagicMock())
        f.add_regex_rule(r"\d+", "digits")
        assert f.filter_content("Текст 123 с цифрами 456") == "Текст с цифрами"

    def test_case_insensitive_by_default(self) -> None:
        f = ContentFilter(logger=MagicMock())
        f.add_regex_rule("test", "test")
        assert f.filter_content("Test и test и TEST") == "и и"

    def test_explicit_flags_respected(self) -> None:
        f = ContentFilter(logger=MagicMock())
        f.add_regex_rule("test", "case sensitive", flags=0)
        assert f.filter_content("Test и test") == "Test и"


class TestFilterBehaviour:
    def test_rules_applied_in_order(self) -> None:
        f = ContentFilter(logger=MagicMock())
        f.add_text_rule("remove", "remove word")
        f.add_regex_rule(r"\d+", "digits")
        assert f.filter_content("text remove 123 end") == "text end"

    def test_order_matters(self) -> None:
        first = ContentFilter(logger=MagicMock())
        first.add_text_rule("ab", "ab")
        first.add_text_rule("c", "c")
        second = ContentFilter(logger=MagicMock())
        second.add_text_rule("c", "c")
        second.add_text_rule("ab", "ab")
        # "acb" -> only the second filter exposes "ab" after removing "c"
        assert first.filter_content("x acb y") == "x ab y"
        assert second.filter_content("x acb y") == "x y"

    def test_whitespace_collapsed_after_removal(self) -> None:
        f = ContentFilter(logger=MagicMock())
        f.add_text_rule("удалить", "test")
        assert f.filter_content("начало   удалить   конец") == "начало конец"

    def test_untouched_when_nothing_matches(self) -> None:
        f = ContentFilter(logger=MagicMock())
        f.add_text_rule("missing", "nothing")
        text = "  keep   this\n\n\n\nas is  "
        assert f.filter_content(text) == text

    def test_empty_filter_returns_input(self) -> None:
        assert ContentFilter(logger=MagicMock()).filter_content(" a  b ") == " a  b "

    def test_logs_removed_chars_per_rule(self) -> None:
        logger = MagicMock()
        f = ContentFilter(logger=logger)
        f.add_text_rule("xx", "double x")
        f.filter_content("a xx b")
        logger.info.assert_called_once_with(
            "filter_rule_applied", description="double x", removed_chars=2
        )

    def test_rules_are_read_only_snapshot(self) -> None:
        rule = FilterRule(kind="text", pattern="x", description="x")
        f = ContentFilter([rule], logger=MagicMock())
        assert f.rules == (rule,)
        assert len(f) == 1

    def test_unknown_rule_kind_rejected(self) -> None:
        f = ContentFilter(logger=MagicMock())
        with pytest.raises(ValueError):
            f.add_rule(FilterRule(kind="xpath", pattern="//p", description="bad"))

    def test_default_regex_flags_are_ignorecase(self) -> None:
        f = ContentFilter(logger=MagicMock())
        f.add_regex_rule("x", "x")
        assert f.rules[0].flags == re.IGNORECASE


class TestFastFounderFilter:
    def test_has_rules(self) -> None:
        assert len(create_fastfounder_filter(logger=MagicMock())) == 2

    def test_removes_audio_block(self) -> None:
        result = create_fastfounder_filter(logger=MagicMock()).filter_content(AUDIO_BLOCK)
        assert "🎧" not in result
        assert "Аудиоверсия поста" not in result
        assert "вот по этой инструкции" not in result
        assert "Основной контент" in result

    def test_removes_plain_text_variant(self) -> None:
        result = create_fastfounder_filter(logger=MagicMock()).filter_content(
            "🎧 Послушать аудиоверсию можно по инструкции."
        )
        assert "🎧" not in result
        assert "аудиоверсию" not in result

    @pytest.mark.parametrize(
        "text",
        [
            AUDIO_BLOCK,
            "🎧 Послушать аудиоверсию можно по инструкции. Дальше текст.",
            "<p>Обычный   текст</p>\n\n\n\n<p>без рекламы</p>",
        ],
    )
    def test_filtering_is_idempotent(self, text: str) -> None:
        f = create_fastfounder_filter(logger=MagicMock())
        once = f.filter_content(text)
        assert f.filter_content(once) == once
