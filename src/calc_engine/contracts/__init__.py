"""
Contract Validation Module

Модуль для валидации JSON контрактов вычислительного ядра
(декларативные таблицы единиц).
"""

from .validators import (
    ContractValidator,
    SchemaLoader,
    UnitTableValidator,
    validate_unit_table,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "UnitTableValidator",
    # Functions
    "validate_unit_table",
]
