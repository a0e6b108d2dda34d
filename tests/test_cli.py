# File: tests/test_cli.py
"""CLI tests (`sitemap_scout.cli`) using click.testing.CliRunner.
Cover the `extract` and `config` commands, `--version` and error handling.
"""
import asyncio
import json

import pytest
from click.testing import CliRunner

import sitemap_scout.cli as cli_module
from sitemap_scout.cli import cli
from sitemap_scout.errors import InvalidLowerBoundError

URLS = ["https://example.com/a", "https://example.com/b"]


@pytest.fixture(autouse=True)
def patch_extract(monkeypatch):
    """Replace extract_urls with a stub returning fixed URLs without network access."""
    calls = []

    async def fake_extract(url, from_date=None, *, config=None):
        calls.append({"url": url, "from_date": from_date, "config": config})
        if from_date == "not-a-date":
            raise InvalidLowerBoundError(from_date)
        return list(URLS)

    monkeypatch.setattr(cli_module, "extract_urls", fake_extract)
    return calls


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SitemapScout" in result.output


def test_extract_prints_one_url_per_line(patch_extract):
    result = CliRunner().invoke(cli, ["extract", "https://example.com/sitemap.xml", "--from-date", "2024-01-01"])
    assert result.exit_code == 0
    assert result.output.splitlines() == URLS
    assert patch_extract[0]["url"] == "https://example.com/sitemap.xml"
    assert patch_extract[0]["from_date"] == "2024-01-01"


def test_extract_pretty_json():
    result = CliRunner().invoke(cli, ["extract", "https://example.com/sitemap.xml", "--pretty"])
    assert result.exit_code == 0
    assert json.loads(result.output) == URLS


def test_extract_json_file(tmp_path):
    out = tmp_path / "reports" / "urls.json"
    result = CliRunner().invoke(cli, ["extract", "https://example.com/sitemap.xml", "--json", str(out)])
    assert result.exit_code == 0
    assert out.exists()
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data == {"count": 2, "urls": URLS}


def test_extract_invalid_from_date():
    result = CliRunner().invoke(cli, ["extract", "https://example.com/sitemap.xml", "--from-date", "not-a-date"])
    assert result.exit_code == 1
    assert "Invalid 'from_date'" in result.output


def test_extract_timeout(monkeypatch):
    async def slow(url, from_date=None, *, config=None):
        await asyncio.sleep(2)
        return []

    monkeypatch.setattr(cli_module, "extract_urls", slow)
    result = CliRunner().invoke(cli, ["extract", "https://example.com/sitemap.xml", "--timeout", "0.1"])
    assert result.exit_code != 0
    assert "did not finish" in result.output


def test_config_file_is_passed_through(tmp_path, patch_extract):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("timeout: 3\nuser_agent: Agent/1.0\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "extract", "https://example.com/s.xml"])
    assert result.exit_code == 0
    assert patch_extract[0]["config"].user_agent == "Agent/1.0"


def test_show_config(tmp_path):
    cfg_file = tmp_path / "config.json"
    cfg_file.write_text(json.dumps({"timeout": 2.5, "max_documents": 50}), encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["timeout"] == 2.5
    assert data["max_documents"] == 50
    assert data["from_date"] is None


def test_bad_config_file(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("timeout: -1", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Failed to load configuration" in result.output
