from pathlib import Path

import pytest

from x86_lookup import viewers as viewers_module
from x86_lookup.errors import ConfigError, ViewerUnavailable
from x86_lookup.viewers import BrowserViewer, CommandViewer, ViewerDispatcher


class StubViewer:
    def __init__(self, name, works):
        self.name = name
        self.works = works
        self.calls = []

    def launch(self, path, page):
        self.calls.append((path, page))
        return self.works


def test_dispatcher_uses_first_working_viewer():
    broken = StubViewer("evince", False)
    working = StubViewer("zathura", True)
    unused = StubViewer("browser", True)

    name = ViewerDispatcher([broken, working, unused]).open(Path("sdm.pdf"), 42)

    assert name == "zathura"
    assert broken.calls == [(Path("sdm.pdf"), 42)]
    assert unused.calls == []


def test_dispatcher_raises_when_all_fail():
    dispatcher = ViewerDispatcher([StubViewer("evince", False), StubViewer("xpdf", False)])
    with pytest.raises(ViewerUnavailable) as excinfo:
        dispatcher.open(Path("sdm.pdf"), 1)
    assert excinfo.value.attempted == ["evince", "xpdf"]


def test_from_names_rejects_unknown_viewer():
    dispatcher = ViewerDispatcher.from_names(["okular", "Browser"])
    assert [viewer.name for viewer in dispatcher.viewers] == ["okular", "browser"]
    with pytest.raises(ConfigError):
        ViewerDispatcher.from_names(["acroread"])


def test_command_viewer_formats_arguments(monkeypatch):
    spawned = []
    monkeypatch.setattr(viewers_module.shutil, "which", lambda program: f"/usr/bin/{program}")
    monkeypatch.setattr(viewers_module.subprocess, "Popen", lambda cmd, **kwargs: spawned.append(cmd))

    viewer = CommandViewer("zathura", "zathura", ["-P", "{page}", "{path}"])
    assert viewer.launch(Path("/docs/sdm.pdf"), 1234) is True
    assert spawned == [["/usr/bin/zathura", "-P", "1234", "/docs/sdm.pdf"]]


def test_command_viewer_missing_program(monkeypatch):
    monkeypatch.setattr(viewers_module.shutil, "which", lambda program: None)
    assert CommandViewer("mupdf", "mupdf", ["{path}", "{page}"]).launch(Path("sdm.pdf"), 3) is False


def test_browser_viewer_url(monkeypatch, tmp_path):
    opened = []
    monkeypatch.setattr(viewers_module.webbrowser, "open", lambda url: opened.append(url) or True)

    pdf = tmp_path / "sdm.pdf"
    assert BrowserViewer().launch(pdf, 77) is True
    assert opened == [pdf.resolve().as_uri() + "#page=77"]
