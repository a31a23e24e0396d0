# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from focus_crawler.config import (
    DEFAULT_EXCLUDED_EXTENSIONS,
    DEFAULT_EXCLUDED_HOST_PATTERNS,
    CrawlerConfig,
    load_config,
)

EXAMPLE = Path(__file__).resolve().parent.parent / "configs" / "example.yaml"


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("seed_url: https://example.edu/", ".yaml", None),
        (json.dumps({"seed_url": "https://example.edu/"}), ".json", None),
        ("{}", ".yaml", ValidationError),
        ("seed_url: [unclosed", ".yaml", ValueError),
        ("- just\n- a list", ".yaml", TypeError),
        ("[1, 2]", ".json", TypeError),
        ("{not json", ".json", ValueError),
        ("seed_url = 1", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlerConfig)
        assert cfg.seed_url == "https://example.edu/"


def test_defaults_are_explicit():
    cfg = CrawlerConfig(seed_url="https://www.Example.edu")
    assert cfg.seed_url == "https://www.example.edu/"
    assert cfg.base_domain == "example.edu"
    assert cfg.max_depth == 2
    assert cfg.concurrency == 4
    assert cfg.fetch_timeout_ms == 60000
    assert cfg.relevance_keywords == []
    assert cfg.relevance_mode == "substring"
    assert cfg.excluded_extensions == DEFAULT_EXCLUDED_EXTENSIONS
    assert cfg.excluded_host_patterns == DEFAULT_EXCLUDED_HOST_PATTERNS
    assert cfg.crawl_timeout is None
    assert cfg.max_pages is None


def test_invalid_seed_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        CrawlerConfig(seed_url="not a url")
    assert "Invalid URL" in str(exc_info.value)


@pytest.mark.parametrize(
    "field,value",
    [("max_depth", -1), ("concurrency", 0), ("fetch_timeout_ms", 0), ("relevance_mode", "fuzzy"), ("unknown", 1)],
)
def test_schema_violations(field, value):
    with pytest.raises(ValidationError):
        CrawlerConfig(seed_url="https://example.edu/", **{field: value})


def test_normalization():
    cfg = CrawlerConfig(
        seed_url="https://example.edu/",
        base_domain=".Example.EDU.",
        excluded_extensions=["PDF", ".Jpg", "pdf"],
        relevance_keywords=[" graduate ", ""],
    )
    assert cfg.base_domain == "example.edu"
    assert cfg.excluded_extensions == [".pdf", ".jpg"]
    assert cfg.relevance_keywords == ["graduate"]


@pytest.mark.parametrize(
    "domain",
    ["https://cam.ac.uk/", "cam.ac.uk:443", "cam.ac.uk/study", "cam ac.uk", "user@cam.ac.uk", " . "],
)
def test_base_domain_must_be_bare_host(domain):
    with pytest.raises(ValidationError):
        CrawlerConfig(seed_url="https://www.cam.ac.uk/", base_domain=domain)


def test_ipv6_seed_gets_base_domain():
    cfg = CrawlerConfig(seed_url="http://[::1]:8080/")
    assert cfg.base_domain == "::1"


def test_overrides_win_and_none_is_ignored(tmp_path):
    cfg_path = write_file(tmp_path, "seed_url: https://example.edu/\nmax_depth: 5\nconcurrency: 2", ".yaml")
    cfg = load_config(cfg_path, max_depth=1, concurrency=None)
    assert cfg.max_depth == 1
    assert cfg.concurrency == 2


def test_load_config_without_file_uses_overrides():
    cfg = load_config(None, seed_url="https://example.edu/")
    assert cfg.base_domain == "example.edu"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_config_is_frozen():
    cfg = CrawlerConfig(seed_url="https://example.edu/")
    with pytest.raises(ValidationError):
        cfg.max_depth = 3  # type: ignore[misc]


def test_example_config_loads():
    cfg = load_config(EXAMPLE)
    assert cfg.base_domain == "cam.ac.uk"
    assert "postgraduate" in cfg.relevance_keywords
