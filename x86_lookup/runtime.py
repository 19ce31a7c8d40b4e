"""Runtime wiring for CLI entrypoints."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .cache import IndexCache
from .config import AppConfig, load_config
from .extractor import Extractor, get_extractor
from .logging import configure_logging
from .service import LookupSession
from .viewers import ViewerDispatcher


@dataclass(slots=True)
class Runtime:
    config: AppConfig
    cache: IndexCache
    extractor: Extractor
    session: LookupSession
    dispatcher: ViewerDispatcher

    def close(self) -> None:
        self.session.reset()


def build_runtime(
    config: AppConfig | None = None,
    pdf_path: Optional[Path] = None,
) -> Runtime:
    cfg = (config or load_config()).with_pdf(pdf_path)
    configure_logging(cfg.log_level, cfg.log_json)

    cache = IndexCache(cfg.cache_dir)
    extractor = get_extractor(cfg.extractor, cfg)
    session = LookupSession(cfg, extractor, cache)
    dispatcher = ViewerDispatcher.from_names(cfg.viewers)

    return Runtime(
        config=cfg,
        cache=cache,
        extractor=extractor,
        session=session,
        dispatcher=dispatcher,
    )
