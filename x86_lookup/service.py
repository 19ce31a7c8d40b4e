"""Lookup session: owns the loaded index and answers mnemonic queries."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, List, Optional

from .builder import build_index
from .cache import IndexCache, document_identity
from .config import AppConfig
from .errors import ExtractionError, MnemonicNotFound
from .extractor import Extractor
from .logging import get_logger
from .models import MnemonicIndex

logger = get_logger(__name__)

STATE_UNLOADED = "unloaded"
STATE_BUILDING = "building"
STATE_LOADED = "loaded"

_build_locks: Dict[str, threading.Lock] = {}
_build_locks_guard = threading.Lock()


def _build_lock(identity: str) -> threading.Lock:
    """Process-wide lock so one document is extracted by one builder at a time."""
    with _build_locks_guard:
        lock = _build_locks.get(identity)
        if lock is None:
            lock = threading.Lock()
            _build_locks[identity] = lock
        return lock


class LookupSession:
    def __init__(self, config: AppConfig, extractor: Extractor, cache: IndexCache) -> None:
        self.config = config
        self.extractor = extractor
        self.cache = cache
        self._index: Optional[MnemonicIndex] = None
        self._state = STATE_UNLOADED
        self._lock = threading.RLock()

    @property
    def state(self) -> str:
        return self._state

    @property
    def pdf_path(self) -> Path:
        return self.config.require_pdf()

    def ensure_index(self) -> MnemonicIndex:
        with self._lock:
            if self._index is not None:
                return self._index

            pdf_path = self.config.require_pdf()
            identity = document_identity(pdf_path)
            with _build_lock(identity):
                index = self.cache.load(identity)
                if index is None:
                    index = self._build_and_cache(pdf_path, identity)
            self._index = index
            self._state = STATE_LOADED
            return index

    def reload(self) -> MnemonicIndex:
        """Rebuild from the PDF regardless of any cached entry."""
        with self._lock:
            self.reset()
            pdf_path = self.config.require_pdf()
            identity = document_identity(pdf_path)
            with _build_lock(identity):
                index = self._build_and_cache(pdf_path, identity)
            self._index = index
            self._state = STATE_LOADED
            return index

    def reset(self) -> None:
        with self._lock:
            self._index = None
            self._state = STATE_UNLOADED

    def resolve(self, mnemonic: str) -> int:
        page = self.find(mnemonic)
        if page is None:
            raise MnemonicNotFound(mnemonic)
        return page

    def find(self, mnemonic: str) -> Optional[int]:
        return self.ensure_index().get(mnemonic.strip().lower())

    def mnemonics(self, prefix: str = "") -> List[str]:
        prefix = prefix.strip().lower()
        return sorted(m for m in self.ensure_index() if m.startswith(prefix))

    def _build_and_cache(self, pdf_path: Path, identity: str) -> MnemonicIndex:
        self._state = STATE_BUILDING
        try:
            page_texts = self.extractor.extract(pdf_path)
            if not page_texts:
                raise ExtractionError(f"No page text extracted from {pdf_path}")
            index = build_index(page_texts)
            self.cache.save(identity, index, source=str(pdf_path))
        except BaseException:
            self._state = STATE_UNLOADED
            raise
        logger.info("index_ready", pdf=str(pdf_path), mnemonics=len(index))
        return index
