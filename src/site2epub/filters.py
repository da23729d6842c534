"""Rule-based scrubbing of extracted article bodies."""

import re
from typing import Iterable, Optional

from .logging import get_logger
from .models import FilterRule

_MULTI_SPACE_RE = re.compile(r"\s{2,}")
_MULTI_BREAK_RE = re.compile(r"\n\s*\n\s*\n")


class ContentFilter:
    """Ordered list of removal rules applied to article text.

    Text rules remove every occurrence of a literal substring; regex rules
    remove every match of the pattern. When anything was removed, the
    result is whitespace-normalized and trimmed; otherwise the input is
    returned untouched.
    """

    def __init__(self, rules: Optional[Iterable[FilterRule]] = None, logger=None):
        self._rules: list[FilterRule] = list(rules or [])
        self._log = logger or get_logger(__name__)

    @property
    def rules(self) -> tuple[FilterRule, ...]:
        return tuple(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def add_rule(self, rule: FilterRule) -> None:
        if rule.kind not in ("text", "regex"):
            raise ValueError(f"Unknown filter rule kind: {rule.kind}")
        self._rules.append(rule)
        self._log.debug("filter_rule_added", description=rule.description)

    def add_text_rule(self, text: str, description: str) -> None:
        self.add_rule(FilterRule(kind="text", pattern=text, description=description))

    def add_regex_rule(self, pattern: str, description: str, flags: int = re.IGNORECASE) -> None:
        self.add_rule(
            FilterRule(kind="regex", pattern=pattern, description=description, flags=flags)
        )

    def filter_content(self, content: str) -> str:
        """Apply every rule in insertion order and return the cleaned text."""
        filtered = content
        total_removed = 0

        for rule in self._rules:
            before = len(filtered)
            if rule.kind == "text":
                if rule.pattern:
                    filtered = filtered.replace(rule.pattern, "")
            else:
                filtered = re.sub(rule.pattern, "", filtered, flags=rule.flags)

            removed = before - len(filtered)
            if removed > 0:
                total_removed += removed
                self._log.info(
                    "filter_rule_applied",
                    description=rule.description,
                    removed_chars=removed,
                )

        if total_removed == 0:
            return content

        filtered = _MULTI_SPACE_RE.sub(" ", filtered)
        filtered = _MULTI_BREAK_RE.sub("\n\n", filtered)
        filtered = filtered.strip()
        self._log.debug("filter_total_removed", removed_chars=total_removed)
        return filtered


def create_fastfounder_filter(logger=None) -> ContentFilter:
    """Preset rules for fastfounder.ru articles.

    Strips the "listen to the audio version" promo block. The second rule
    catches plain-text variants the first, markup-aware one misses.
    """
    content_filter = ContentFilter(logger=logger)
    content_filter.add_regex_rule(
        r"🎧\s*<a[^>]*>Аудиоверсия поста</a>\.[^<]*<a[^>]*>вот по этой инструкции</a>\.</p>",
        "Remove audio version promo block",
    )
    content_filter.add_regex_rule(
        r"🎧[^.]*аудиоверсию[^.]*инструкции[^.]*\.",
        "Remove audio version promo variants",
    )
    return content_filter
