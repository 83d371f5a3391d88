import os

from feedreader import db as dbmod


def test_env_path(tmp_db_path):
    assert dbmod.get_db_path() == tmp_db_path
    assert os.path.isdir(os.path.dirname(tmp_db_path))


def test_config_yaml_paths(tmp_path, monkeypatch):
    monkeypatch.delenv("FEEDREADER_DB_PATH", raising=False)
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        f"db_path: {tmp_path / 'prod' / 'f.db'}\ntest_db_path: {tmp_path / 'test' / 'f.db'}\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(dbmod, "_PROJECT_ROOT", str(tmp_path))
    # running under pytest selects test_db_path
    assert dbmod.get_db_path() == str(tmp_path / "test" / "f.db")
    monkeypatch.delenv("PYTEST_CURRENT_TEST", raising=False)
    monkeypatch.delenv("APP_ENV", raising=False)
    assert dbmod.get_db_path() == str(tmp_path / "prod" / "f.db")


def test_fallback_to_project_root(tmp_path, monkeypatch):
    monkeypatch.delenv("FEEDREADER_DB_PATH", raising=False)
    monkeypatch.setattr(dbmod, "_PROJECT_ROOT", str(tmp_path))
    assert dbmod.get_db_path() == str(tmp_path / "FeedReader.db")
    assert dbmod.get_db_path(file_name="Other.db") == str(tmp_path / "Other.db")


def test_malformed_yaml_ignored(tmp_path, monkeypatch):
    monkeypatch.delenv("FEEDREADER_DB_PATH", raising=False)
    (tmp_path / "config.yaml").write_text("db_path: [unclosed\n", encoding="utf-8")
    monkeypatch.setattr(dbmod, "_PROJECT_ROOT", str(tmp_path))
    assert dbmod.get_db_path() == str(tmp_path / "FeedReader.db")
