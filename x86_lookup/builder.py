"""Build the mnemonic index from page-delimited SDM text."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from typing import Dict, List, Sequence, Tuple

from .expander import DEFAULT_RULES, expand
from .logging import get_logger
from .models import ExpansionRule, MnemonicIndex, Page

logger = get_logger(__name__)

# Instruction reference pages open with the running header, a blank line and
# the "MNEMONIC—Description" title. Older editions print a hyphen, which only
# counts when a capitalised description follows it.
HEADING_PATTERN = re.compile(
    r"\A\s*INSTRUCTION SET REFERENCE, [A-Za-z]-[A-Za-z][ \t]*\n"
    r"[ \t]*\n"
    r"[ \t]*(?P<group>[A-Za-z][A-Za-z0-9/]*)[ \t]*(?:—|-(?=[ \t]*[A-Z]))"
)


def iter_pages(page_texts: Iterable[str]) -> Iterator[Page]:
    for number, text in enumerate(page_texts, start=1):
        yield Page(number=number, text=text)


def heading_group(page: Page) -> str | None:
    """Return the mnemonic group named in the page heading, if any."""
    match = HEADING_PATTERN.match(page.text)
    if match is None:
        return None
    return match.group("group")


def collect_pairs(
    pages: Iterable[Page],
    rules: Sequence[ExpansionRule] = DEFAULT_RULES,
) -> Tuple[List[Tuple[str, int]], int, int]:
    """Expand every heading, returning (pairs in page order, pages, headings)."""
    pairs: List[Tuple[str, int]] = []
    page_count = 0
    headings = 0
    for page in pages:
        page_count = page.number
        group = heading_group(page)
        if group is None:
            continue
        headings += 1
        pairs.extend(expand(group, page.number, rules))
    return pairs, page_count, headings


def build_index(
    page_texts: Iterable[str],
    rules: Sequence[ExpansionRule] = DEFAULT_RULES,
) -> MnemonicIndex:
    """Build a MnemonicIndex; a mnemonic seen on several pages keeps the last."""
    pairs, page_count, headings = collect_pairs(iter_pages(page_texts), rules)

    pages: Dict[str, int] = {}
    for mnemonic, page in pairs:
        if not mnemonic:
            logger.warning("empty_mnemonic_dropped", page=page)
            continue
        pages[mnemonic] = page

    index = MnemonicIndex(pages, page_count)
    logger.info(
        "index_built",
        pages=page_count,
        headings=headings,
        mnemonics=len(index),
    )
    return index
