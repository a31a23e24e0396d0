# === FILE: focus_crawler/config.py ===
"""
Модуль для загрузки и валидации конфигурации обходчика FocusCrawler.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import ipaddress
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from focus_crawler.crawler.urls import canonicalize

DEFAULT_EXCLUDED_EXTENSIONS: List[str] = [
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    ".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp",
    ".zip", ".rar", ".gz", ".tar", ".7z",
    ".mp3", ".mp4",
]
DEFAULT_EXCLUDED_HOST_PATTERNS: List[str] = [
    "twitter.com",
    "facebook.com",
    "linkedin.com",
    "instagram.com",
]


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_url: str = Field(..., description="Стартовый URL (глубина 0).")
    base_domain: str = Field(..., min_length=1, description="Домен, за пределы которого обход не выходит.")
    max_depth: int = Field(2, ge=0, description="Максимальная глубина обхода (включительно).")
    excluded_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_EXTENSIONS),
        description="Расширения файлов, которые не обходятся.",
    )
    excluded_host_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_HOST_PATTERNS),
        description="Шаблоны хостов, которые не обходятся (подстрока или glob).",
    )
    relevance_keywords: List[str] = Field(
        default_factory=list, description="Ключевые слова релевантности; пустой список отключает фильтр."
    )
    relevance_mode: Literal["substring", "token"] = Field(
        "substring", description="Режим сравнения ключевых слов."
    )
    concurrency: int = Field(4, ge=1, le=64, description="Число параллельных воркеров.")
    fetch_timeout_ms: int = Field(60000, gt=0, description="Таймаут загрузки одной страницы (мс).")
    crawl_timeout: Optional[float] = Field(None, gt=0, description="Таймаут всего обхода (секунд).")
    max_pages: Optional[int] = Field(None, ge=1, description="Жесткий лимит по числу страниц.")
    user_agent: str = Field("FocusCrawler/1.0", min_length=1, description="Заголовок User-Agent.")
    retry_times: int = Field(2, ge=0, description="Число повторных попыток при 429/5xx.")

    @model_validator(mode="before")
    @classmethod
    def _default_base_domain(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("base_domain") and isinstance(data.get("seed_url"), str):
            host = (urlsplit(data["seed_url"].strip()).hostname or "").lower()
            if host:
                data = {**data, "base_domain": host.removeprefix("www.")}
        return data

    @field_validator("seed_url")
    @classmethod
    def _canonical_seed(cls, v: str) -> str:
        # InvalidURLError is a ValueError, so pydantic reports it as a validation error
        return canonicalize(v)

    @field_validator("base_domain")
    @classmethod
    def _normalize_domain(cls, v: str) -> str:
        domain = v.strip().lower().strip(".")
        if not domain:
            raise ValueError("base_domain не может быть пустым")
        if any(ch.isspace() or ch in "/@" for ch in domain):
            raise ValueError(f"base_domain должен быть именем хоста без схемы и пути: {v!r}")
        if ":" in domain:
            try:
                ipaddress.IPv6Address(domain)
            except ValueError:
                raise ValueError(f"base_domain не должен содержать порт: {v!r}") from None
        return domain

    @field_validator("excluded_extensions")
    @classmethod
    def _normalize_extensions(cls, v: List[str]) -> List[str]:
        out = []
        for ext in v:
            ext = ext.strip().lower()
            if ext and not ext.startswith("."):
                ext = "." + ext
            if ext and ext not in out:
                out.append(ext)
        return out

    @field_validator("relevance_keywords")
    @classmethod
    def _strip_keywords(cls, v: List[str]) -> List[str]:
        return [k.strip() for k in v if k.strip()]


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Читает YAML или JSON файл конфига в словарь."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlerConfig:
    """
    Читает YAML или JSON (если путь задан), накладывает overrides и
    возвращает проверенный объект CrawlerConfig.

    Значения overrides, равные None, игнорируются.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    data: Dict[str, Any] = read_config_file(path) if path is not None else {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlerConfig(**data)


__all__ = [
    "CrawlerConfig",
    "DEFAULT_EXCLUDED_EXTENSIONS",
    "DEFAULT_EXCLUDED_HOST_PATTERNS",
    "load_config",
    "read_config_file",
]
