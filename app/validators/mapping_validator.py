"""
app/validators/mapping_validator.py

Validation for column-index to sales-role mappings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Sequence

from app.domain.sales_columns import SalesColumn


@dataclass(frozen=True)
class MappingErrorDetail:
    """
    Structured mapping error detail.
    """

    code: str
    message: str
    sales_column: str | None = None
    column_index: int | None = None
    context: dict[str, Any] | None = None


class SchemaMappingError(ValueError):
    """
    Raised when a column mapping cannot be resolved safely.
    """

    def __init__(self, *, message: str, errors: Sequence[MappingErrorDetail]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {
                    "code": error.code,
                    "message": error.message,
                    "sales_column": error.sales_column,
                    "column_index": error.column_index,
                    "context": error.context,
                }
                for error in self.errors
            ],
        }


class MappingValidator:
    """
    Validates that a mapping assigns each role at most once to a real column.
    """

    def validate(
        self,
        *,
        mapping: Mapping[int, SalesColumn],
        column_count: int | None = None,
        pre_errors: Sequence[MappingErrorDetail] | None = None,
    ) -> None:
        """
        Validate mapping and raise structured errors if invalid.
        """

        errors: list[MappingErrorDetail] = list(pre_errors or [])
        seen: dict[SalesColumn, int] = {}

        for column_index, sales_column in sorted(mapping.items(), key=lambda item: item[0]):
            if not isinstance(sales_column, SalesColumn):
                errors.append(
                    MappingErrorDetail(
                        code="unknown_sales_column",
                        message="Mapping contains a value that is not a sales column.",
                        column_index=column_index,
                        context={"value": repr(sales_column)},
                    )
                )
                continue
            if column_index < 0:
                errors.append(
                    MappingErrorDetail(
                        code="negative_column_index",
                        message="Column indices must be zero or positive.",
                        sales_column=sales_column.display_name,
                        column_index=column_index,
                    )
                )
            elif column_count is not None and column_index >= column_count:
                errors.append(
                    MappingErrorDetail(
                        code="column_index_out_of_range",
                        message="Mapped column index is beyond the sampled columns.",
                        sales_column=sales_column.display_name,
                        column_index=column_index,
                        context={"column_count": column_count},
                    )
                )
            if sales_column in seen:
                errors.append(
                    MappingErrorDetail(
                        code="duplicate_sales_column",
                        message="Sales column is mapped to more than one source column.",
                        sales_column=sales_column.display_name,
                        column_index=column_index,
                        context={"first_index": seen[sales_column]},
                    )
                )
            else:
                seen[sales_column] = column_index

        if errors:
            codes = ", ".join(sorted({error.code for error in errors}))
            raise SchemaMappingError(
                message=f"Column mapping validation failed: {codes}.",
                errors=errors,
            )
