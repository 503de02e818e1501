"""
Domain models and value objects.

Contains unit conversion entities (Unit, ConversionCategory, UnitRegistry)
and the Matrix and Fraction value objects.
"""

from src.calc_engine.domain.fraction import Fraction
from src.calc_engine.domain.matrix import Matrix
from src.calc_engine.domain.unit_registry import (
    DEFAULT_UNIT_TABLES_PATH,
    UnitRegistry,
    load_default_registry,
)
from src.calc_engine.domain.units import (
    CUSTOM_TRANSFORMS,
    ROUNDTRIP_REL_TOL,
    AffineTransform,
    ConversionCategory,
    CustomTransform,
    ReciprocalTransform,
    Unit,
    convert,
    get_unit,
)

__all__ = [
    # Units module
    "ROUNDTRIP_REL_TOL",
    "CUSTOM_TRANSFORMS",
    "AffineTransform",
    "ReciprocalTransform",
    "CustomTransform",
    "Unit",
    "ConversionCategory",
    "get_unit",
    "convert",
    # Registry
    "UnitRegistry",
    "DEFAULT_UNIT_TABLES_PATH",
    "load_default_registry",
    # Value objects
    "Matrix",
    "Fraction",
]
