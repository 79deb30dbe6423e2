from pathlib import Path

import pytest

from cdocsync import config
from cdocsync.parsers import MultiLanguageParser
from cdocsync.reporting import Reporter


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    monkeypatch.delenv(config.CONFIG_ENV_VAR, raising=False)
    config.clear_config_cache()
    yield
    config.clear_config_cache()


@pytest.fixture
def reporter() -> Reporter:
    return Reporter("test", echo=False)


@pytest.fixture
def parser(reporter) -> MultiLanguageParser:
    return MultiLanguageParser(reporter=reporter)


@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_bytes(text.encode("utf-8"))
        return path
    return _write
