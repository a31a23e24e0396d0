"""Тесты для CLI (`focus_crawler/cli.py`) с использованием click.testing.CliRunner.
Проверяют команды `crawl`, `config`, `--version`, а также обработку ошибок.
"""
import json

import pytest
from click.testing import CliRunner

import focus_crawler.cli as cli_module
from focus_crawler.aggregator import CrawlResult
from focus_crawler.cli import cli
from focus_crawler.crawler.models import PageRecord


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch):
    """Патчим start_crawl: фиктивный результат без сетевых запросов."""
    seen = {}
    page = PageRecord(url="https://example.edu/", title="Home", headings=("Welcome",))

    async def fake_crawl(cfg, renderer=None, **kwargs):
        seen["config"] = cfg
        return CrawlResult({page.url: page})

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    return seen


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "FocusCrawler" in result.output


def test_crawl_prints_json_to_stdout(patch_start_crawl):
    result = CliRunner().invoke(cli, ["crawl", "https://www.example.edu/", "-k", "graduate", "--max-depth", "1"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data[0]["url"] == "https://example.edu/"
    assert data[0]["headings"] == ["Welcome"]
    cfg = patch_start_crawl["config"]
    assert cfg.base_domain == "example.edu"
    assert cfg.max_depth == 1
    assert cfg.relevance_keywords == ["graduate"]


def test_crawl_urls_only():
    result = CliRunner().invoke(cli, ["crawl", "https://example.edu/", "--urls-only"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == ["https://example.edu/"]


def test_invalid_seed_exits_non_zero(patch_start_crawl):
    result = CliRunner().invoke(cli, ["crawl", "not a url"])
    assert result.exit_code == 1
    assert "Ошибка конфигурации" in result.output
    assert "Invalid URL" in result.output
    assert "config" not in patch_start_crawl


def test_missing_seed_exits_non_zero():
    result = CliRunner().invoke(cli, ["crawl"])
    assert result.exit_code == 1
    assert "SEED" in result.output


def test_seed_from_config_file(tmp_path, patch_start_crawl):
    cfg_file = tmp_path / "crawl.yaml"
    cfg_file.write_text("seed_url: https://example.edu/\nconcurrency: 2\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "crawl", "-n", "3"])
    assert result.exit_code == 0, result.output
    assert patch_start_crawl["config"].concurrency == 3


def test_crawl_json_file(tmp_path):
    out = tmp_path / "out.json"
    result = CliRunner().invoke(cli, ["crawl", "https://example.edu/", "--json", str(out)])
    assert result.exit_code == 0
    assert result.stdout == ""
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data[0]["url"] == "https://example.edu/"


def test_crawl_json_file_respects_pretty(tmp_path):
    compact, pretty = tmp_path / "compact.json", tmp_path / "pretty.json"
    CliRunner().invoke(cli, ["crawl", "https://example.edu/", "--json", str(compact)])
    CliRunner().invoke(cli, ["crawl", "https://example.edu/", "--json", str(pretty), "--pretty"])
    assert "\n" not in compact.read_text(encoding="utf-8")
    assert '\n  {\n    "url"' in pretty.read_text(encoding="utf-8")


def test_cli_module_is_importable_by_name():
    import importlib

    module = importlib.import_module("focus_crawler.cli")
    assert module is cli_module
    assert hasattr(cli_module, "start_crawl")


def test_crawl_save_uses_domain_file_name(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["crawl", "https://www.example.edu/", "--save"])
    assert result.exit_code == 0
    assert (tmp_path / "scraped_example_edu.json").exists()


def test_crawl_html_file(tmp_path):
    out = tmp_path / "report.html"
    result = CliRunner().invoke(cli, ["crawl", "https://example.edu/", "--html", str(out)])
    assert result.exit_code == 0
    assert "Welcome" in out.read_text(encoding="utf-8")


def test_crawl_failure_exits_non_zero(monkeypatch):
    async def broken(cfg, renderer=None, **kwargs):
        raise RuntimeError("event loop exploded")

    monkeypatch.setattr(cli_module, "start_crawl", broken)
    result = CliRunner().invoke(cli, ["crawl", "https://example.edu/"])
    assert result.exit_code == 1
    assert "event loop exploded" in result.output


def test_empty_result_is_not_an_error(monkeypatch):
    async def empty(cfg, renderer=None, **kwargs):
        return CrawlResult({})

    monkeypatch.setattr(cli_module, "start_crawl", empty)
    result = CliRunner().invoke(cli, ["crawl", "https://example.edu/"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == []
    assert "No data was scraped." in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "crawl.json"
    cfg_file.write_text(json.dumps({"seed_url": "https://example.edu", "max_depth": 1}), encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["seed_url"] == "https://example.edu/"
    assert data["base_domain"] == "example.edu"
    assert data["max_depth"] == 1


def test_bad_config_file(tmp_path):
    cfg_file = tmp_path / "crawl.yaml"
    cfg_file.write_text("seed_url: https://example.edu/\nmax_depth: -3\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "max_depth" in result.output
