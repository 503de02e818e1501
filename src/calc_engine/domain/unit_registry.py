"""
Unit Registry — реестр категорий конверсии

Реестр строится из декларативных таблиц единиц (JSON, контракт unit_table).
Таблицы валидируются JSON Schema контрактом ДО построения моделей:
- jsonschema.ValidationError — структура таблицы нарушена
- pydantic.ValidationError — нарушены инварианты категории
  (дубликаты id, базовая единица, популярные пары, неизвестный custom-transform)
- InvalidInput — дубликат id категории в реестре

Формат единицы в таблице:
    {"id": "km", "label": "Kilometer", "symbol": "km", "factor": 1000}
    {"id": "C", "label": "Celsius", "transform": {"kind": "affine", "scale": 1, "offset": 273.15}}
"""

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from src.calc_engine.contracts import validate_unit_table
from src.calc_engine.domain.units import ConversionCategory, convert
from src.calc_engine.errors import CategoryNotFound, InvalidInput

# Версия формата таблиц
UNIT_TABLE_SCHEMA_VERSION = "1"

# Таблицы, поставляемые с пакетом
DEFAULT_UNIT_TABLES_PATH = Path(__file__).parent.parent / "data" / "unit_tables.json"


def _unit_from_table(entry: Mapping[str, Any]) -> dict[str, Any]:
    """Раскрытие сокращения factor → affine transform."""
    unit = {k: v for k, v in entry.items() if k != "factor"}
    if "factor" in entry:
        unit["transform"] = {"kind": "affine", "scale": entry["factor"], "offset": 0.0}
    return unit


def _category_from_table(entry: Mapping[str, Any]) -> ConversionCategory:
    data = dict(entry)
    data["units"] = [_unit_from_table(u) for u in entry["units"]]
    data["popular_pairs"] = [tuple(pair) for pair in entry.get("popular_pairs", [])]
    return ConversionCategory.model_validate(data)


class UnitRegistry:
    """
    Реестр категорий по id.

    Не хранит изменяемого состояния после построения: безопасен для
    одновременного использования из нескольких потоков.
    """

    def __init__(self, categories: Iterable[ConversionCategory]):
        self._categories: dict[str, ConversionCategory] = {}
        for category in categories:
            if category.id in self._categories:
                raise InvalidInput(f"Duplicate category id: {category.id!r}")
            self._categories[category.id] = category

    # -------------------------------------------------------------------------
    # Построение
    # -------------------------------------------------------------------------

    @classmethod
    def from_tables(cls, tables: Sequence[Mapping[str, Any]]) -> "UnitRegistry":
        """
        Построение из списка табличных категорий.

        Raises:
            jsonschema.ValidationError: Если таблицы не соответствуют контракту
            pydantic.ValidationError: Если нарушены инварианты категории
            InvalidInput: Если id категорий повторяются
        """
        document = {
            "schema_version": UNIT_TABLE_SCHEMA_VERSION,
            "categories": [dict(t) for t in tables],
        }
        return cls.from_document(document)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "UnitRegistry":
        """Построение из полного документа {"schema_version", "categories"}."""
        validate_unit_table(document)
        return cls(_category_from_table(entry) for entry in document["categories"])

    @classmethod
    def from_json_file(cls, path: Path | str) -> "UnitRegistry":
        """Загрузка документа таблиц из JSON файла."""
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
        return cls.from_document(document)

    # -------------------------------------------------------------------------
    # Доступ
    # -------------------------------------------------------------------------

    @property
    def category_ids(self) -> list[str]:
        return list(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._categories

    def __iter__(self):
        return iter(self._categories.values())

    def get_category(self, category_id: str) -> ConversionCategory:
        """
        Категория по id.

        Raises:
            CategoryNotFound: Если категории нет в реестре
        """
        try:
            return self._categories[category_id]
        except KeyError:
            raise CategoryNotFound(f"Category {category_id!r} not found")

    def categories_in_group(self, group: str) -> list[ConversionCategory]:
        return [c for c in self._categories.values() if c.group == group]

    def convert(self, value: float, category_id: str, from_id: str, to_id: str) -> float:
        """
        Конверсия внутри категории category_id.

        Raises:
            CategoryNotFound: Если категории нет в реестре
            UnitNotFound: Если from_id или to_id отсутствуют в категории
            InvalidInput: Если value NaN/Inf
        """
        return convert(value, self.get_category(category_id), from_id, to_id)


def load_default_registry() -> UnitRegistry:
    """Реестр из таблиц, поставляемых с пакетом (data/unit_tables.json)."""
    return UnitRegistry.from_json_file(DEFAULT_UNIT_TABLES_PATH)
