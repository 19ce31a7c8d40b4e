"""Expand mnemonic groups from manual headings into individual lookup keys."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .models import ExpansionRule

__all__ = ["CONDITION_CODES", "DEFAULT_RULES", "FALLBACK_RULE", "expand", "find_rule"]

CONDITION_CODES = (
    "a", "ae", "b", "be", "c", "e", "g", "ge", "l", "le",
    "na", "nae", "nb", "nbe", "nc", "ne", "ng", "nge", "nl", "nle",
    "no", "np", "ns", "nz", "o", "p", "pe", "po", "s", "z",
)

# Matches every spelling at its end and leaves it unchanged.
FALLBACK_RULE = ExpansionRule.of(r"$", "")

# First match wins, so specific headings come before the generic "cc" rule.
DEFAULT_RULES: Tuple[ExpansionRule, ...] = (
    ExpansionRule.of(r"^PREFETCH(h)$", "t0", "t1", "t2", "nta"),
    ExpansionRule.of(r"^FCMOV(cc)$", "b", "e", "be", "u", "nb", "ne", "nbe", "nu"),
    ExpansionRule.of(r"^LOOP(cc)$", "e", "ne", "z", "nz"),
    ExpansionRule.of(r"^J(cc)$", *CONDITION_CODES, "cxz", "ecxz", "rcxz"),
    ExpansionRule.of(r"cc$", *CONDITION_CODES),
    FALLBACK_RULE,
)


def find_rule(spelling: str, rules: Sequence[ExpansionRule] = DEFAULT_RULES):
    """Return the first (rule, match) pair applying to ``spelling``."""
    for rule in rules:
        match = rule.match(spelling)
        if match is not None:
            return rule, match
    match = FALLBACK_RULE.match(spelling)
    return FALLBACK_RULE, match


def expand(
    raw_group: str,
    page: int,
    rules: Sequence[ExpansionRule] = DEFAULT_RULES,
) -> List[Tuple[str, int]]:
    """Expand a "/"-delimited heading group into (mnemonic, page) pairs.

    Matching is case-sensitive against the spelling as printed in the
    manual (``Jcc``, ``SETcc``); the produced mnemonics are lower-case.
    The stem left after removing the matched suffix may be empty.
    """
    pairs: List[Tuple[str, int]] = []
    for spelling in raw_group.split("/"):
        spelling = spelling.strip()
        if not spelling:
            continue
        rule, match = find_rule(spelling, rules)
        stem = rule.stem(spelling, match)
        pairs.extend((stem + suffix, page) for suffix in rule.suffixes)
    return pairs
