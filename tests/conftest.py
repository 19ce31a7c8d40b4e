from pathlib import Path

import pytest

from x86_lookup.cache import IndexCache
from x86_lookup.config import AppConfig
from x86_lookup.extractor import split_pages

FIXTURES = Path(__file__).parent / "fixtures"


class FakeExtractor:
    name = "fake"

    def __init__(self, pages):
        self.pages = list(pages)
        self.calls = 0

    def extract(self, pdf_path):
        self.calls += 1
        return list(self.pages)


@pytest.fixture()
def sdm_pages():
    text = (FIXTURES / "sdm_excerpt.txt").read_text(encoding="utf-8")
    return split_pages(text)


@pytest.fixture()
def pdf_file(tmp_path):
    path = tmp_path / "325383-sdm-vol-2abcd.pdf"
    path.write_bytes(b"%PDF-1.7\n")
    return path


@pytest.fixture()
def app_config(tmp_path, pdf_file):
    return AppConfig(pdf_path=pdf_file, cache_dir=tmp_path / "cache")


@pytest.fixture()
def index_cache(app_config):
    return IndexCache(app_config.cache_dir)


@pytest.fixture()
def fake_extractor(sdm_pages):
    return FakeExtractor(sdm_pages)
