"""PDF viewer backends and ordered dispatch."""

from __future__ import annotations

import shutil
import subprocess
import webbrowser
from pathlib import Path
from typing import Dict, Iterable, List, Protocol, Sequence

from .config import DEFAULT_VIEWERS
from .errors import ConfigError, ViewerUnavailable
from .logging import get_logger

logger = get_logger(__name__)


class Viewer(Protocol):
    name: str

    def launch(self, path: Path, page: int) -> bool:
        ...


class CommandViewer:
    """External viewer started detached with a page argument."""

    def __init__(self, name: str, program: str, args: Sequence[str]) -> None:
        self.name = name
        self.program = program
        self.args = list(args)

    def command(self, path: Path, page: int) -> List[str]:
        values = {"path": str(path), "page": str(page)}
        return [self.program] + [arg.format(**values) for arg in self.args]

    def launch(self, path: Path, page: int) -> bool:
        executable = shutil.which(self.program)
        if executable is None:
            logger.debug("viewer_missing", viewer=self.name, program=self.program)
            return False
        cmd = self.command(path, page)
        cmd[0] = executable
        try:
            subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            logger.debug("viewer_failed", viewer=self.name, error=str(exc))
            return False
        return True


class BrowserViewer:
    """Hands a ``file://...#page=N`` URL to the default web browser."""

    name = "browser"

    def url(self, path: Path, page: int) -> str:
        return f"{Path(path).resolve().as_uri()}#page={page}"

    def launch(self, path: Path, page: int) -> bool:
        try:
            return bool(webbrowser.open(self.url(path, page)))
        except webbrowser.Error as exc:
            logger.debug("viewer_failed", viewer=self.name, error=str(exc))
            return False


def builtin_viewers() -> Dict[str, Viewer]:
    return {
        "evince": CommandViewer("evince", "evince", ["-p", "{page}", "{path}"]),
        "okular": CommandViewer("okular", "okular", ["-p", "{page}", "{path}"]),
        "zathura": CommandViewer("zathura", "zathura", ["-P", "{page}", "{path}"]),
        "mupdf": CommandViewer("mupdf", "mupdf", ["{path}", "{page}"]),
        "xpdf": CommandViewer("xpdf", "xpdf", ["{path}", "{page}"]),
        "browser": BrowserViewer(),
    }


class ViewerDispatcher:
    def __init__(self, viewers: Iterable[Viewer]) -> None:
        self.viewers = list(viewers)

    @classmethod
    def from_names(cls, names: Iterable[str] = DEFAULT_VIEWERS) -> "ViewerDispatcher":
        available = builtin_viewers()
        selected: List[Viewer] = []
        for name in names:
            viewer = available.get(name.strip().lower())
            if viewer is None:
                known = ", ".join(sorted(available))
                raise ConfigError(f"Unknown viewer '{name}'; known viewers: {known}")
            selected.append(viewer)
        return cls(selected)

    def open(self, path: Path, page: int) -> str:
        """Launch the first working viewer and return its name."""
        attempted: List[str] = []
        for viewer in self.viewers:
            attempted.append(viewer.name)
            if viewer.launch(path, page):
                logger.info("viewer_launched", viewer=viewer.name, page=page)
                return viewer.name
            logger.debug("viewer_skipped", viewer=viewer.name)
        raise ViewerUnavailable(attempted)
