"""On-disk cache of built indexes, one JSON file per document identity.

The identity is derived from the document path, not its content: renaming
or moving the PDF forces a rebuild, editing it in place does not. Hashing
the path keeps startup cheap for a multi-thousand page manual; use
``x86-lookup clear-cache`` after replacing a PDF at the same path.
"""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import CacheCorrupt
from .logging import get_logger
from .models import MnemonicIndex

logger = get_logger(__name__)

CACHE_FORMAT_VERSION = 1
CACHE_SUFFIX = ".json"


def document_identity(pdf_path: Path | str) -> str:
    """SHA-1 of the absolute document path."""
    resolved = os.path.abspath(os.path.expanduser(str(pdf_path)))
    return hashlib.sha1(resolved.encode("utf-8")).hexdigest()


def encode_index(index: MnemonicIndex, source: Optional[str] = None) -> Dict[str, Any]:
    return {
        "version": CACHE_FORMAT_VERSION,
        "source": source,
        "page_count": index.page_count,
        "index": dict(sorted(index.items())),
    }


def decode_index(payload: Any) -> MnemonicIndex:
    if not isinstance(payload, dict):
        raise CacheCorrupt("cache payload is not an object")
    if payload.get("version") != CACHE_FORMAT_VERSION:
        raise CacheCorrupt(f"unsupported cache version {payload.get('version')!r}")

    page_count = payload.get("page_count")
    entries = payload.get("index")
    if (
        not isinstance(page_count, int)
        or isinstance(page_count, bool)
        or not isinstance(entries, dict)
    ):
        raise CacheCorrupt("cache payload is missing page_count or index")

    pages: Dict[str, int] = {}
    for mnemonic, page in entries.items():
        if not isinstance(page, int) or isinstance(page, bool):
            raise CacheCorrupt(f"page for '{mnemonic}' is not an integer")
        pages[mnemonic] = page
    try:
        return MnemonicIndex(pages, page_count)
    except ValueError as exc:
        raise CacheCorrupt(str(exc)) from exc


class IndexCache:
    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, identity: str) -> Path:
        return self.root / f"{identity}{CACHE_SUFFIX}"

    def save(
        self,
        identity: str,
        index: MnemonicIndex,
        source: Optional[str] = None,
    ) -> Path:
        target = self.path_for(identity)
        target.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(encode_index(index, source), ensure_ascii=False, indent=0)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{identity}.", suffix=".tmp", dir=str(target.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info("cache_saved", path=str(target), mnemonics=len(index))
        return target

    def load(self, identity: str) -> Optional[MnemonicIndex]:
        path = self.path_for(identity)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.info("cache_miss", path=str(path))
            return None
        except OSError as exc:
            logger.warning("cache_unreadable", path=str(path), error=str(exc))
            return None

        try:
            index = decode_index(json.loads(raw))
        except (ValueError, RecursionError, CacheCorrupt) as exc:
            logger.warning("cache_corrupt", path=str(path), error=str(exc))
            return None

        logger.info("cache_hit", path=str(path), mnemonics=len(index))
        return index

    def clear(self, identity: Optional[str] = None) -> int:
        """Delete one entry, or every entry when ``identity`` is None."""
        if identity is not None:
            targets = [self.path_for(identity)]
        elif self.root.is_dir():
            targets = sorted(self.root.glob(f"*{CACHE_SUFFIX}"))
        else:
            targets = []

        removed = 0
        for path in targets:
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            removed += 1
        logger.info("cache_cleared", root=str(self.root), removed=removed)
        return removed
