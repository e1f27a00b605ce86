# === FILE: site_mapper/config.py ===
"""
Модуль для загрузки и валидации настроек генератора карты сайта SiteMapper.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from site_mapper import __version__

#: Допустимые значения <changefreq> по протоколу sitemaps.org.
CHANGE_FREQUENCIES: frozenset[str] = frozenset(
    ("always", "hourly", "daily", "weekly", "monthly", "yearly", "never")
)


class SitemapOptions(BaseModel):
    """Настройки одного запуска обхода и генерации карты сайта."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    ignore_query: bool = Field(True, description="Отбрасывать query-строку при нормализации URL.")
    ignore_fragment: bool = Field(True, description="Отбрасывать фрагмент (#...) при нормализации URL.")
    change_freq: str = Field("", description="Значение <changefreq>; пустая строка — элемент не выводится.")
    last_mod: Optional[datetime] = Field(None, description="Общий <lastmod>; по умолчанию — время записи.")
    verbose: bool = Field(False, description="Подробные диагностические логи обхода.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field(
        f"SiteMapper/{__version__}", min_length=1, description="Заголовок User-Agent."
    )

    @field_validator("change_freq", mode="before")
    def _check_change_freq(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, str):
            v = v.strip().lower()
            if v and v not in CHANGE_FREQUENCIES:
                allowed = ", ".join(sorted(CHANGE_FREQUENCIES))
                raise ValueError(f"changefreq должен быть одним из: {allowed}")
        return v


_DEFAULT_CFG = Path("configs/sitemap.yaml")


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


def load_config(path: Union[str, Path, None]) -> SitemapOptions:
    """
    Читает YAML или JSON и возвращает проверенный объект SitemapOptions.
    Без пути используется configs/sitemap.yaml, а если его нет — значения по умолчанию.
    При отсутствии явно указанного файла бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return SitemapOptions()
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

    return SitemapOptions(**data)


def override(options: SitemapOptions, **changes: Any) -> SitemapOptions:
    """Возвращает копию options с заменёнными полями; значения None пропускаются."""
    updates = {k: v for k, v in changes.items() if v is not None}
    if not updates:
        return options
    return SitemapOptions(**{**options.model_dump(), **updates})


__all__ = [
    "CHANGE_FREQUENCIES",
    "SitemapOptions",
    "load_config",
    "override",
]
