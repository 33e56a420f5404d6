# === FILE: site_survey/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера SiteSurvey.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from site_survey.crawler.uri import DEFAULT_BLACKLIST


class CrawlConfig(BaseModel):
    """Конфигурация одного обхода сайта."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_redirects: int = Field(
        5, ge=1, description="Сколько запросов делать по цепочке редиректов (первый запрос тоже считается)."
    )
    blacklist: Tuple[str, ...] = Field(
        DEFAULT_BLACKLIST, description="Расширения файлов, по ссылкам на которые не переходим."
    )
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("SiteSurveyBot/1.0", min_length=1, description="Заголовок User-Agent.")
    concurrency: int = Field(1, ge=1, description="Число одновременных загрузок.")

    @field_validator("blacklist", mode="before")
    def _normalize_blacklist(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.split()
        if isinstance(v, (list, tuple)):
            items = tuple(str(ext).strip().lower() for ext in v)
            bad = [ext for ext in items if not ext.startswith(".")]
            if bad:
                raise ValueError(f"Расширение должно начинаться с точки: {bad[0]!r}")
            return items
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


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


def load_config(path: Union[str, Path, None] = None) -> CrawlConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlConfig.
    Без пути берёт configs/default.yaml, а если его нет — значения по умолчанию.
    Явно указанный, но отсутствующий файл — FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlConfig()
        path_obj = _DEFAULT_CFG
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

    try:
        return CrawlConfig(**data)
    except ValidationError:
        raise
