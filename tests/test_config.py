# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from sitemap_scout.config import HarvestConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("timeout: 5\nuser_agent: Bot/1.0", ".yaml", None),
        (json.dumps({"timeout": 5, "user_agent": "Bot/1.0"}), ".json", None),
        (json.dumps({"timeout": -1}), ".json", ValidationError),
        ("timeout: 5\nunknown_key: 1", ".yml", ValidationError),
        ("from_date: not-a-date", ".yaml", ValidationError),
        ("from_date: Monday", ".yaml", ValidationError),
        ("max_documents: 0", ".yaml", ValidationError),
        ("not: a: mapping", ".yaml", ValueError),
        ("- a\n- b", ".yaml", TypeError),
        ("{broken json", ".json", ValueError),
        ("timeout = 5", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, HarvestConfig)
        assert cfg.timeout == 5.0
        assert cfg.user_agent == "Bot/1.0"


def test_from_date_shapes(tmp_path):
    cfg = load_config(write_file(tmp_path, "from_date: 2024-01-01\nmax_documents: 10", ".yaml"))
    assert cfg.max_documents == 10
    assert cfg.from_date is not None
    assert HarvestConfig(from_date=1704067200).from_date == 1704067200


def test_load_config_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_config(None) == HarvestConfig()


def test_load_config_default_location(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("timeout: 7", encoding="utf-8")
    assert load_config(None).timeout == 7.0


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_config_is_frozen():
    cfg = HarvestConfig()
    with pytest.raises(ValidationError):
        cfg.timeout = 1.0
