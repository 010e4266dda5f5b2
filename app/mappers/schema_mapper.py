"""
app/mappers/schema_mapper.py

Column guessing engine for header-optional sales files.

Resolution order, each step only touching columns and roles still free:
manual overrides, header names, typed sample matching (date, whole number,
decimal), then text fallback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from app.domain.sales_columns import TYPED_GUESS_ORDER, SalesColumn, SemanticType
from app.validators.cell_types import TYPE_PREDICATES, is_blank
from app.validators.mapping_validator import MappingErrorDetail, MappingValidator

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_LIMIT = 10

STRATEGY_OVERRIDE = "override"
STRATEGY_HEADER = "header"
STRATEGY_TYPED = "typed"
STRATEGY_TEXT = "text"

RawRow = Sequence[str | None]


@dataclass(frozen=True)
class ColumnMapping:
    """
    Resolved column index to sales column assignments for one file.
    """

    assignments: dict[int, SalesColumn] = field(default_factory=dict)
    match_strategies: dict[int, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.assignments)

    def items(self) -> list[tuple[int, SalesColumn]]:
        return sorted(self.assignments.items(), key=lambda item: item[0])

    def index_of(self, sales_column: SalesColumn) -> int | None:
        for index, assigned in self.assignments.items():
            if assigned is sales_column:
                return index
        return None

    def describe(self) -> dict[str, str]:
        """Readable form used in logs and API responses."""

        return {
            str(index): f"{sales_column.display_name} ({self.match_strategies.get(index, '?')})"
            for index, sales_column in self.items()
        }


class SchemaMapper:
    """
    Guesses which sales column each raw column holds from a small sample.
    """

    def __init__(
        self,
        *,
        sample_limit: int = DEFAULT_SAMPLE_LIMIT,
        validator: MappingValidator | None = None,
    ) -> None:
        self._sample_limit = max(1, sample_limit)
        self._validator = validator or MappingValidator()

    def guess_columns(
        self,
        sample_rows: Sequence[RawRow],
        header: RawRow | None = None,
        *,
        manual_overrides: Mapping[int, SalesColumn | str] | None = None,
    ) -> ColumnMapping:
        """
        Resolve a column mapping from sampled data rows and an optional header.

        Raises ``SchemaMappingError`` when manual overrides are invalid.
        """

        sample = [row for row in sample_rows[: self._sample_limit] if row is not None]
        column_count = max((len(row) for row in sample), default=0)
        if header:
            column_count = max(column_count, len(header))

        assignments: dict[int, SalesColumn] = {}
        strategies: dict[int, str] = {}
        used_columns: set[int] = set()

        def assign(index: int, sales_column: SalesColumn, strategy: str) -> None:
            assignments[index] = sales_column
            strategies[index] = strategy
            used_columns.add(index)

        for index, sales_column in self._resolve_overrides(manual_overrides).items():
            assign(index, sales_column, STRATEGY_OVERRIDE)

        if header:
            for index, cell in enumerate(header):
                if index in used_columns or is_blank(cell):
                    continue
                sales_column = SalesColumn.from_display_name(str(cell))
                if sales_column is None or sales_column in assignments.values():
                    continue
                assign(index, sales_column, STRATEGY_HEADER)

        for semantic_type in TYPED_GUESS_ORDER:
            predicate = TYPE_PREDICATES[semantic_type]
            for sales_column in SalesColumn.of_type(semantic_type):
                if sales_column in assignments.values():
                    continue
                for index in range(column_count):
                    if index in used_columns:
                        continue
                    if self._column_satisfies(sample, index, predicate):
                        assign(index, sales_column, STRATEGY_TYPED)
                        break

        free_columns = (index for index in range(column_count) if index not in used_columns)
        for sales_column in SalesColumn.of_type(SemanticType.TEXT):
            if sales_column in assignments.values():
                continue
            index = next(free_columns, None)
            if index is None:
                break
            assign(index, sales_column, STRATEGY_TEXT)

        mapping = ColumnMapping(assignments=assignments, match_strategies=strategies)
        logger.debug(
            "Guessed %d of %d columns from %d sample rows",
            len(mapping),
            column_count,
            len(sample),
        )
        return mapping

    def _resolve_overrides(
        self,
        manual_overrides: Mapping[int, SalesColumn | str] | None,
    ) -> dict[int, SalesColumn]:
        if not manual_overrides:
            return {}

        resolved: dict[int, SalesColumn] = {}
        errors: list[MappingErrorDetail] = []
        for raw_index, raw_column in manual_overrides.items():
            try:
                index = int(raw_index)
            except (TypeError, ValueError):
                errors.append(
                    MappingErrorDetail(
                        code="invalid_override_index",
                        message="Manual override index must be an integer.",
                        context={"index": repr(raw_index)},
                    )
                )
                continue

            sales_column = raw_column
            if not isinstance(raw_column, SalesColumn):
                sales_column = SalesColumn.from_display_name(str(raw_column))
            if sales_column is None:
                errors.append(
                    MappingErrorDetail(
                        code="invalid_override_column",
                        message="Manual override names an unknown sales column.",
                        column_index=index,
                        context={"value": str(raw_column)},
                    )
                )
                continue
            resolved[index] = sales_column

        self._validator.validate(mapping=resolved, pre_errors=errors)
        return resolved

    @staticmethod
    def _column_satisfies(sample: Sequence[RawRow], index: int, predicate) -> bool:
        for row in sample:
            if index >= len(row):
                continue
            cell = row[index]
            if is_blank(cell):
                continue
            if not predicate(str(cell).strip()):
                return False
        return True
