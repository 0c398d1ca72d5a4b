import importlib

import pytest

import config as cfg


@pytest.mark.unit
@pytest.mark.parametrize("raw,expected", [("1", True), ("true", True), ("Yes", True), ("on", True), ("0", False), ("off", False)])
def test_get_bool_parses_common_spellings(monkeypatch, raw, expected):
    monkeypatch.setenv("SONGLIB_TEST_FLAG", raw)
    assert cfg._get_bool("SONGLIB_TEST_FLAG") is expected


@pytest.mark.unit
def test_numeric_helpers_fall_back_on_garbage(monkeypatch):
    monkeypatch.setenv("SONGLIB_TEST_INT", "eight")
    monkeypatch.setenv("SONGLIB_TEST_FLOAT", "fast")
    monkeypatch.delenv("SONGLIB_TEST_MISSING", raising=False)

    assert cfg._get_int("SONGLIB_TEST_INT", 8080) == 8080
    assert cfg._get_float("SONGLIB_TEST_FLOAT", 10.0) == 10.0
    assert cfg._get_int("SONGLIB_TEST_MISSING", 5) == 5


@pytest.mark.unit
def test_csv_list_drops_blanks(monkeypatch):
    monkeypatch.setenv("SONGLIB_TEST_CSV", " http://a.test , ,http://b.test,")
    assert cfg._get_csv_list("SONGLIB_TEST_CSV", "") == ["http://a.test", "http://b.test"]


@pytest.mark.unit
def test_config_reads_environment(monkeypatch):
    monkeypatch.setenv("EXTERNAL_API_URL", "http://detail.test/")
    monkeypatch.setenv("EXTERNAL_API_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("DATABASE_URL", "postgresql://songs@db/songs")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    try:
        reloaded = importlib.reload(cfg)
        assert reloaded.Config.EXTERNAL_API_URL == "http://detail.test"
        assert reloaded.Config.EXTERNAL_API_TIMEOUT_SECONDS == 2.5
        assert reloaded.Config.PORT == 9000
        assert reloaded.Config.SQLALCHEMY_DATABASE_URI == "postgresql://songs@db/songs"
        assert reloaded.Config.LOG_LEVEL == "DEBUG"
    finally:
        monkeypatch.undo()
        importlib.reload(cfg)


@pytest.mark.unit
def test_config_defaults_to_sqlite_file(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    try:
        reloaded = importlib.reload(cfg)
        assert reloaded.Config.SQLALCHEMY_DATABASE_URI.startswith("sqlite:///")
        assert reloaded.Config.SQLALCHEMY_DATABASE_URI.endswith("songlib.db")
    finally:
        monkeypatch.undo()
        importlib.reload(cfg)
