import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from crawlscope.config import CrawlConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("base_url: http://example.com\nscope_pattern: example.com", ".yaml", None),
        (json.dumps({"base_url": "http://example.com", "scope_pattern": "example.com"}), ".json", None),
        ("{}", ".json", ValidationError),
        ("base_url: http://example.com", ".yaml", ValidationError),
        ("not: a: mapping", ".yaml", ValueError),
        ("- just\n- a list", ".yaml", TypeError),
        ("{broken json", ".json", ValueError),
        ("base_url = 'x'", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlConfig)
        assert cfg.base_url == "http://example.com"
        assert cfg.scope_pattern == "example.com"


def test_defaults():
    cfg = CrawlConfig(base_url="HTTP://Example.com/Blog", scope_pattern="example.com/blog")
    assert cfg.base_url == "HTTP://Example.com/Blog"
    assert cfg.pattern_mode == "regex"
    assert cfg.literal is False
    assert cfg.order == "depth"
    assert cfg.concurrency == 4
    assert cfg.max_depth is None
    assert cfg.max_pages is None
    assert cfg.excluded_extensions == [".py", ".zip", ".xls", ".pdf"]
    assert cfg.visited_log is None


def test_overrides_replace_file_values(tmp_path):
    cfg_path = write_file(tmp_path, "base_url: http://example.com\nscope_pattern: example.com", ".yaml")
    cfg = load_config(cfg_path, scope_pattern="example.com/docs", max_pages=None)
    assert cfg.scope_pattern == "example.com/docs"
    assert cfg.max_pages is None


def test_load_config_default_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        load_config(None)


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_url": "not a url", "scope_pattern": "x"},
        {"base_url": "ftp://example.com", "scope_pattern": "x"},
        {"base_url": "http://example.com", "scope_pattern": "blog("},
        {"base_url": "http://example.com", "scope_pattern": ""},
        {"base_url": "http://example.com", "scope_pattern": "x", "concurrency": 0},
        {"base_url": "http://example.com", "scope_pattern": "x", "order": "random"},
        {"base_url": "http://example.com", "scope_pattern": "x", "unknown": 1},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        CrawlConfig(**kwargs)


def test_literal_mode_accepts_regex_metacharacters():
    cfg = CrawlConfig(base_url="http://example.com", scope_pattern="blog(", pattern_mode="literal")
    assert cfg.literal


def test_extensions_are_normalized():
    cfg = CrawlConfig(base_url="http://example.com", scope_pattern="x", excluded_extensions=["PDF", ".Zip"])
    assert cfg.excluded_extensions == [".pdf", ".zip"]


def test_config_is_frozen():
    cfg = CrawlConfig(base_url="http://example.com", scope_pattern="x")
    with pytest.raises(ValidationError):
        cfg.scope_pattern = "y"
