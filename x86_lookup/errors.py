"""Error taxonomy for index construction, lookup and viewer dispatch."""

from __future__ import annotations

from typing import Optional, Sequence


class X86LookupError(Exception):
    """Base class for every error raised by x86_lookup."""


class ConfigError(X86LookupError):
    """No document configured, a missing document, or a malformed setting."""


class ExtractionError(X86LookupError):
    """Text extraction from the PDF did not produce page text."""


class ToolMissing(ExtractionError):
    def __init__(self, program: str) -> None:
        super().__init__(
            f"Text extraction program '{program}' was not found; "
            "install poppler-utils or set X86_LOOKUP_PDFTOTEXT"
        )
        self.program = program


class ToolFailed(ExtractionError):
    def __init__(
        self,
        program: str,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        if returncode is None:
            message = f"{program} failed: {detail}"
        else:
            message = f"{program} exited with status {returncode}: {detail}"
        super().__init__(message)
        self.program = program
        self.returncode = returncode
        self.stderr = stderr


class ToolTimeout(ExtractionError):
    def __init__(self, program: str, timeout: float) -> None:
        super().__init__(f"{program} did not finish within {timeout:g} seconds")
        self.program = program
        self.timeout = timeout


class CacheCorrupt(X86LookupError):
    """A cache entry exists but cannot be decoded into an index."""


class MnemonicNotFound(X86LookupError, LookupError):
    def __init__(self, mnemonic: str) -> None:
        super().__init__(f"Unknown mnemonic: {mnemonic}")
        self.mnemonic = mnemonic


class ViewerUnavailable(X86LookupError):
    def __init__(self, attempted: Sequence[str]) -> None:
        names = ", ".join(attempted) if attempted else "none configured"
        super().__init__(f"No PDF viewer could be launched (tried: {names})")
        self.attempted = list(attempted)
