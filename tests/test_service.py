import threading
import time

import pytest

from x86_lookup.cache import document_identity
from x86_lookup.config import AppConfig
from x86_lookup.errors import ConfigError, ExtractionError, MnemonicNotFound
from x86_lookup.service import LookupSession

from conftest import FakeExtractor


def test_resolve_builds_and_caches_index(app_config, fake_extractor, index_cache):
    session = LookupSession(app_config, fake_extractor, index_cache)
    assert session.state == "unloaded"

    assert session.resolve("ADD") == 2
    assert session.resolve(" jrcxz ") == 5
    assert session.state == "loaded"
    assert fake_extractor.calls == 1
    assert index_cache.path_for(document_identity(app_config.pdf_path)).exists()

    session.resolve("nop")
    assert fake_extractor.calls == 1


def test_resolve_unknown_mnemonic_raises(app_config, fake_extractor, index_cache):
    session = LookupSession(app_config, fake_extractor, index_cache)
    with pytest.raises(MnemonicNotFound) as excinfo:
        session.resolve("zzz")
    assert excinfo.value.mnemonic == "zzz"
    assert session.find("zzz") is None


def test_new_session_uses_cache(app_config, fake_extractor, index_cache):
    LookupSession(app_config, fake_extractor, index_cache).ensure_index()
    second = LookupSession(app_config, fake_extractor, index_cache)

    assert second.resolve("xchg") == 9
    assert fake_extractor.calls == 1


def test_reset_and_reload(app_config, fake_extractor, index_cache):
    session = LookupSession(app_config, fake_extractor, index_cache)
    first = session.ensure_index()

    session.reset()
    assert session.state == "unloaded"
    assert session.ensure_index() == first
    assert fake_extractor.calls == 1

    fake_extractor.pages[1] = "INSTRUCTION SET REFERENCE, A-L\n\nSUB—Subtract\n"
    rebuilt = session.reload()
    assert fake_extractor.calls == 2
    assert "sub" in rebuilt
    assert "add" not in rebuilt
    assert session.ensure_index() is rebuilt


def test_mnemonics_prefix(app_config, fake_extractor, index_cache):
    session = LookupSession(app_config, fake_extractor, index_cache)
    assert session.mnemonics("VMOV") == ["vmovdqa32", "vmovdqa64"]
    assert "add" in session.mnemonics()


def test_missing_configuration_is_fatal(tmp_path, fake_extractor, index_cache):
    unset = LookupSession(AppConfig(pdf_path=None, cache_dir=tmp_path), fake_extractor, index_cache)
    with pytest.raises(ConfigError):
        unset.ensure_index()

    missing = AppConfig(pdf_path=tmp_path / "gone.pdf", cache_dir=tmp_path)
    with pytest.raises(ConfigError):
        LookupSession(missing, fake_extractor, index_cache).resolve("add")
    assert fake_extractor.calls == 0


def test_empty_extraction_is_an_error(app_config, fake_extractor, index_cache):
    fake_extractor.pages = []
    session = LookupSession(app_config, fake_extractor, index_cache)
    with pytest.raises(ExtractionError):
        session.ensure_index()
    assert session.state == "unloaded"
    assert index_cache.load(document_identity(app_config.pdf_path)) is None


class SlowExtractor(FakeExtractor):
    def extract(self, pdf_path):
        time.sleep(0.2)
        return super().extract(pdf_path)


def test_concurrent_sessions_build_once(app_config, sdm_pages, index_cache):
    extractor = SlowExtractor(sdm_pages)
    results = []
    errors = []

    def lookup():
        try:
            session = LookupSession(app_config, extractor, index_cache)
            results.append(session.resolve("nop"))
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=lookup) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert errors == []
    assert results == [7, 7, 7, 7]
    assert extractor.calls == 1
