"""Look up x86 instruction mnemonics in the Intel SDM PDF."""

__version__ = "1.2.0"

__all__ = [
    "config",
    "errors",
    "models",
    "expander",
    "extractor",
    "builder",
    "cache",
    "service",
    "viewers",
    "runtime",
    "cli",
]
