"""Page text extraction backends for the SDM PDF."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import List, Protocol

import pdfplumber

from .config import AppConfig
from .errors import ConfigError, ToolFailed, ToolMissing, ToolTimeout
from .logging import get_logger

logger = get_logger(__name__)

PAGE_DELIMITER = "\f"


class Extractor(Protocol):
    name: str

    def extract(self, pdf_path: Path) -> List[str]:
        ...


def split_pages(text: str, delimiter: str = PAGE_DELIMITER) -> List[str]:
    """Split page-delimited text into page texts, page 1 first.

    pdftotext terminates every page with the delimiter, so the empty chunk
    after the last one is not a page.
    """
    if not text:
        return []
    pages = text.split(delimiter)
    if pages and pages[-1] == "":
        pages.pop()
    return pages


class PdftotextExtractor:
    """Runs poppler's ``pdftotext`` and splits its output on form feeds."""

    name = "pdftotext"

    def __init__(self, program: str = "pdftotext", timeout: float = 120.0) -> None:
        self.program = program
        self.timeout = timeout

    def command(self, pdf_path: Path) -> List[str]:
        return [self.program, str(pdf_path), "-"]

    def extract(self, pdf_path: Path) -> List[str]:
        executable = shutil.which(self.program)
        if executable is None:
            raise ToolMissing(self.program)

        cmd = self.command(pdf_path)
        cmd[0] = executable
        logger.info("extract_start", program=self.program, pdf=str(pdf_path))
        try:
            proc = subprocess.run(cmd, capture_output=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as exc:
            raise ToolTimeout(self.program, self.timeout) from exc
        except FileNotFoundError as exc:
            raise ToolMissing(self.program) from exc
        except OSError as exc:
            raise ToolFailed(self.program, stderr=str(exc)) from exc

        stderr = proc.stderr.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            raise ToolFailed(self.program, proc.returncode, stderr)

        pages = split_pages(proc.stdout.decode("utf-8", errors="replace"))
        logger.info("extract_done", program=self.program, pages=len(pages))
        return pages


class PdfplumberExtractor:
    """In-process extraction with pdfplumber, one text block per page."""

    name = "pdfplumber"

    def extract(self, pdf_path: Path) -> List[str]:
        logger.info("extract_start", program=self.name, pdf=str(pdf_path))
        try:
            with pdfplumber.open(str(pdf_path)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise ToolFailed(self.name, stderr=str(exc)) from exc
        logger.info("extract_done", program=self.name, pages=len(pages))
        return pages


def get_extractor(name: str, config: AppConfig) -> Extractor:
    key = name.strip().lower()
    if key == PdftotextExtractor.name:
        return PdftotextExtractor(config.pdftotext_program, config.extract_timeout)
    if key == PdfplumberExtractor.name:
        return PdfplumberExtractor()
    raise ConfigError(
        f"Unknown extractor '{name}'; expected 'pdftotext' or 'pdfplumber'"
    )
