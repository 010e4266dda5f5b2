"""
app/domain/sales_columns.py

Semantic column roles recognised in uploaded sales files.
"""

from __future__ import annotations

from enum import Enum


class SemanticType(str, Enum):
    """
    Target value type a column role is parsed into.
    """

    TEXT = "text"
    WHOLE_NUMBER = "whole_number"
    DECIMAL = "decimal"
    DATE = "date"


class SalesColumn(Enum):
    """
    Fixed enumeration of sales column roles.

    Member order is significant: the schema guesser walks roles in this
    order, so it doubles as the tie-break order for data-driven matching.
    Each member carries its canonical display name (used for header
    matching), its semantic type, and the ``SalesRecord`` attribute it fills.
    """

    SEGMENT = ("Segment", SemanticType.TEXT, "segment")
    COUNTRY = ("Country", SemanticType.TEXT, "country")
    PRODUCT = ("Product", SemanticType.TEXT, "product")
    DISCOUNT_BAND = ("Discount Band", SemanticType.TEXT, "discount_band")
    UNITS_SOLD = ("Units Sold", SemanticType.DECIMAL, "units_sold")
    MANUFACTURING_PRICE = ("Manufacturing Price", SemanticType.DECIMAL, "manufacturing_price")
    SALE_PRICE = ("Sale Price", SemanticType.DECIMAL, "sale_price")
    GROSS_SALES = ("Gross Sales", SemanticType.DECIMAL, "gross_sales")
    DISCOUNTS = ("Discounts", SemanticType.DECIMAL, "discounts")
    SALES = ("Sales", SemanticType.DECIMAL, "sales")
    COGS = ("COGS", SemanticType.DECIMAL, "cogs")
    PROFIT = ("Profit", SemanticType.DECIMAL, "profit")
    DATE = ("Date", SemanticType.DATE, "date")
    MONTH_NUMBER = ("Month Number", SemanticType.WHOLE_NUMBER, "month_number")
    MONTH_NAME = ("Month Name", SemanticType.TEXT, "month_name")
    YEAR = ("Year", SemanticType.WHOLE_NUMBER, "year")

    def __init__(self, display_name: str, semantic_type: SemanticType, field_name: str) -> None:
        self.display_name = display_name
        self.semantic_type = semantic_type
        self.field_name = field_name

    @classmethod
    def from_display_name(cls, name: str | None) -> SalesColumn | None:
        """
        Case-insensitive lookup by display name; ``None`` when nothing matches.
        """

        if name is None:
            return None
        needle = name.strip().lower()
        if not needle:
            return None
        for column in cls:
            if column.display_name.lower() == needle:
                return column
        return None

    @classmethod
    def of_type(cls, semantic_type: SemanticType) -> tuple[SalesColumn, ...]:
        return tuple(column for column in cls if column.semantic_type is semantic_type)


# Types the guesser matches from data, in priority order. Text is the fallback.
TYPED_GUESS_ORDER: tuple[SemanticType, ...] = (
    SemanticType.DATE,
    SemanticType.WHOLE_NUMBER,
    SemanticType.DECIMAL,
)
