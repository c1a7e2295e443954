"""
Модуль для загрузки и валидации конфигурации краулера CrawlScope.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from crawlscope.crawler.link_filter import DEFAULT_EXCLUDED_EXTENSIONS, InvalidScopePattern, LinkFilter

_HTTP_URL: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


class CrawlConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: str = Field(..., description="Стартовый URL обхода.")
    scope_pattern: str = Field(..., min_length=1, description="Фрагмент, который должен содержать URL ссылки.")
    pattern_mode: Literal["regex", "literal"] = Field(
        "regex", description="regex: фрагмент как регулярное выражение; literal: как обычный текст."
    )
    order: Literal["depth", "breadth"] = Field("depth", description="Порядок обхода.")
    concurrency: int = Field(4, ge=1, description="Число параллельных воркеров.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на одну загрузку (секунд).")
    retry_times: int = Field(2, ge=0, description="Число повторных попыток при 5xx/429.")
    user_agent: str = Field("CrawlScopeBot/1.0", min_length=1, description="Заголовок User-Agent.")
    max_depth: Optional[int] = Field(None, ge=0, description="Максимальная глубина обхода (None: без ограничения).")
    max_pages: Optional[int] = Field(None, ge=1, description="Лимит по числу URL (None: без ограничения).")
    excluded_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_EXTENSIONS),
        description="Расширения файлов, которые не обходятся.",
    )
    visited_log: Optional[Path] = Field(None, description="Файл для отладочного списка посещённых URL.")

    @field_validator("base_url", mode="before")
    def _check_base_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            # only validates; the seed is kept as written and lowercased at run time
            try:
                _HTTP_URL.validate_python(v)
            except ValidationError as exc:
                raise ValueError(f"base_url is not a valid http(s) URL: {v!r}") from exc
        return v

    @field_validator("excluded_extensions")
    def _normalize_extensions(cls, v: List[str]) -> List[str]:
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]

    @model_validator(mode="after")
    def _check_scope_pattern(self) -> CrawlConfig:
        try:
            LinkFilter(self.scope_pattern, literal=self.literal)
        except InvalidScopePattern as exc:
            raise ValueError(str(exc)) from exc
        return self

    @property
    def literal(self) -> bool:
        return self.pattern_mode == "literal"


DEFAULT_CONFIG = Path("configs/default.yaml")


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


def load_config(path: Union[str, Path, None], **overrides: Any) -> CrawlConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlConfig.
    Непустые значения из ``overrides`` заменяют значения из файла.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not DEFAULT_CONFIG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(DEFAULT_CONFIG))
        path_obj = DEFAULT_CONFIG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlConfig(**data)


__all__ = ["DEFAULT_CONFIG", "CrawlConfig", "ValidationError", "load_config"]
