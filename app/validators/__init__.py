"""
app/validators package marker.
"""

from app.validators.cell_types import (
    TYPE_PARSERS,
    TYPE_PREDICATES,
    clean_numeric,
    is_date,
    is_decimal,
    is_whole_number,
    parse_date,
    parse_decimal,
    parse_whole_number,
    serial_to_date,
)
from app.validators.mapping_validator import MappingErrorDetail, MappingValidator, SchemaMappingError

__all__ = [
    "TYPE_PARSERS",
    "TYPE_PREDICATES",
    "MappingErrorDetail",
    "MappingValidator",
    "SchemaMappingError",
    "clean_numeric",
    "is_date",
    "is_decimal",
    "is_whole_number",
    "parse_date",
    "parse_decimal",
    "parse_whole_number",
    "serial_to_date",
]
