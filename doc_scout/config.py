# === FILE: doc_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера DocScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import urlparse

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
    model_validator,
)

DEFAULT_PAGE_TYPES: Tuple[str, ...] = ("UserGuidePage", "DevGuidePage", "InstanceTypePage")

# Порядок важен: первое совпавшее правило определяет тип страницы.
DEFAULT_PAGE_TYPE_RULES: Dict[str, str] = {
    r"instance-types?": "InstanceTypePage",
    r"/(developerguide|devguide)/": "DevGuidePage",
    r"/userguide/": "UserGuidePage",
}


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода документации."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    root_url: HttpUrl = Field(..., description="Корень сайта, к которому приводятся относительные ссылки.")
    entry_url: Optional[HttpUrl] = Field(None, description="Стартовый URL (по умолчанию root_url).")
    allowed_domain: Optional[str] = Field(None, description="Домен, за пределы которого обход не выходит.")

    output_dir: Path = Field(Path("data"), description="Каталог для результатов.")
    output_filename: str = Field("crawl.json", min_length=1, description="Имя файла с записями.")

    max_depth: int = Field(5, ge=0, description="Максимальная глубина обхода ссылок.")
    max_concurrent_crawls: int = Field(10, ge=1, description="Размер пакета дочерних ссылок на уровне.")
    max_concurrent_fetches: Optional[int] = Field(
        None, ge=1, description="Глобальный лимит одновременных загрузок (None: без лимита)."
    )

    allowed_page_types: Tuple[str, ...] = Field(DEFAULT_PAGE_TYPES, description="Типы страниц для извлечения.")
    page_type_rules: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PAGE_TYPE_RULES),
        description="Регулярное выражение URL -> тип страницы.",
    )

    crawl_timeout: float = Field(600.0, gt=0, description="Таймаут всего обхода (секунд).")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("DocScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    retry_times: int = Field(2, ge=0, description="Число повторных попыток при 5xx/429.")
    retry_backoff: float = Field(0.5, ge=0, description="Базовая пауза экспоненциального backoff.")

    save_every: int = Field(10, ge=1, description="Сбрасывать буфер каждые N страниц.")
    wrap_width: int = Field(80, ge=1, description="Ширина строки при переносе полей.")

    content_selector: Optional[str] = Field(
        "div.awsdocs-container", description="CSS-селектор контейнера с текстом (None: весь body)."
    )
    code_selector: str = Field("code, pre", min_length=1, description="CSS-селектор блоков кода.")
    html_parser: str = Field("lxml", min_length=1, description="Парсер BeautifulSoup.")

    @field_validator("root_url", "entry_url", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @field_validator("allowed_domain", mode="before")
    def _lower_domain(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().strip(".").lower() or None
        return v

    @field_validator("allowed_page_types", mode="before")
    def _coerce_page_types(cls, v: Any) -> Any:
        if isinstance(v, str):
            return (v,)
        return v

    @model_validator(mode="after")
    def _check_page_types(self) -> CrawlerConfig:
        if not self.allowed_page_types:
            raise ValueError("allowed_page_types не может быть пустым")
        return self

    @property
    def site_root(self) -> str:
        """Корень сайта без завершающего слеша, к нему приклеиваются относительные ссылки."""
        return str(self.root_url).rstrip("/")

    @property
    def start_url(self) -> str:
        return str(self.entry_url).rstrip("/") if self.entry_url else self.site_root

    @property
    def domain(self) -> str:
        return self.allowed_domain or (urlparse(self.site_root).hostname or "")

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.output_filename


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


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
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
        return CrawlerConfig(**data)
    except ValidationError:
        raise


__all__ = ["CrawlerConfig", "load_config", "DEFAULT_PAGE_TYPES", "DEFAULT_PAGE_TYPE_RULES"]
