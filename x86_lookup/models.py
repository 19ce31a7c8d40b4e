"""Domain models for mnemonic expansion and the page index."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Dict, Optional, Pattern, Tuple


@dataclass(frozen=True, slots=True)
class ExpansionRule:
    """Suffix expansion applied to a mnemonic spelling matching ``pattern``.

    When the pattern has a capture group, group 1 is the part replaced by
    each suffix; otherwise the whole match is.
    """

    pattern: Pattern[str]
    suffixes: Tuple[str, ...]

    @classmethod
    def of(cls, pattern: str, *suffixes: str) -> "ExpansionRule":
        return cls(re.compile(pattern), tuple(suffixes))

    def match(self, spelling: str) -> Optional[re.Match[str]]:
        return self.pattern.search(spelling)

    def stem(self, spelling: str, match: re.Match[str]) -> str:
        group = 1 if self.pattern.groups else 0
        start, end = match.span(group)
        return (spelling[:start] + spelling[end:]).lower()


@dataclass(frozen=True, slots=True)
class Page:
    number: int
    text: str


class MnemonicIndex(Mapping[str, int]):
    """Read-only mapping of lower-case mnemonic to 1-based page number."""

    __slots__ = ("_pages", "page_count")

    def __init__(self, pages: Mapping[str, int], page_count: int) -> None:
        if page_count < 0:
            raise ValueError("page_count must not be negative")
        entries: Dict[str, int] = {}
        for mnemonic, page in pages.items():
            if not mnemonic:
                raise ValueError("mnemonic must not be empty")
            if not 1 <= page <= page_count:
                raise ValueError(
                    f"page {page} for '{mnemonic}' outside 1..{page_count}"
                )
            entries[mnemonic] = page
        self._pages = entries
        self.page_count = page_count

    def __getitem__(self, mnemonic: str) -> int:
        return self._pages[mnemonic]

    def __iter__(self) -> Iterator[str]:
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __repr__(self) -> str:
        return f"MnemonicIndex({len(self._pages)} mnemonics, {self.page_count} pages)"

    def to_dict(self) -> Dict[str, int]:
        return dict(self._pages)
