"""
Expense Models

These models define what lives inside a sheet file and what the
configuration offers as expense categories.

DESIGN DECISION: ExpenseRecord validates its own amount, and validates
its category whenever the caller passes the configured categories in the
validation context. Records read back from disk are accepted as written,
so renaming a category in the config never makes old sheets unreadable.
"""

from datetime import date
from typing import Any, Iterable, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from budget_tracker.errors import InvalidDataError
from budget_tracker.models.period import Period


class ExpenseCategory(BaseModel):
    """A named classification for expenses, sourced from configuration."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Category name shown in menus and summaries"
    )
    description: Optional[str] = Field(
        default=None,
        description="Optional longer explanation"
    )


class ExpenseRecord(BaseModel):
    """A single logged expense."""
    model_config = ConfigDict(str_strip_whitespace=True)

    category: str = Field(
        ...,
        min_length=1,
        description="Name of a configured category"
    )
    amount: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount spent"
    )
    logged_on: date = Field(
        default_factory=date.today,
        description="Day the expense was logged"
    )

    @field_validator("category")
    @classmethod
    def match_configured_category(cls, v: str, info: ValidationInfo) -> str:
        """Normalise the category to its configured spelling when categories are known."""
        categories = (info.context or {}).get("categories")
        if categories is None:
            return v

        for category in categories:
            if category.name.lower() == v.lower():
                return category.name

        known = ", ".join(category.name for category in categories)
        raise ValueError(f"Unknown category '{v}'. Known categories: {known}")

    @classmethod
    def create(
        cls,
        category: str,
        amount: float,
        logged_on: Optional[date] = None,
        categories: Optional[Iterable[ExpenseCategory]] = None,
    ) -> "ExpenseRecord":
        """
        Build a validated record.

        Raises:
            InvalidDataError: amount is not positive or category is unknown
        """
        data: dict[str, Any] = {"category": category, "amount": amount}
        if logged_on is not None:
            data["logged_on"] = logged_on

        context = {"categories": list(categories)} if categories is not None else None
        try:
            return cls.model_validate(data, context=context)
        except ValidationError as exc:
            raise InvalidDataError(_first_error(exc)) from exc


class CategoryStats(BaseModel):
    """Aggregated spending for one category."""

    category: str
    total: float = 0.0
    count: int = 0


class ExpenseSheet(BaseModel):
    """
    A named collection of expenses bound to a period.

    Identity is the name; each sheet is persisted as its own file.
    """

    name: str = Field(
        ...,
        min_length=1,
        description="Sheet name, also used as the file stem"
    )
    period: Period
    expenses: list[ExpenseRecord] = Field(default_factory=list)

    @classmethod
    def empty(cls, name: str, period: Period) -> "ExpenseSheet":
        return cls(name=name, period=period, expenses=[])

    def total(self) -> float:
        return sum(expense.amount for expense in self.expenses)

    def summary(self) -> list[CategoryStats]:
        """Per-category totals, largest first."""
        stats: dict[str, CategoryStats] = {}
        for expense in self.expenses:
            entry = stats.setdefault(expense.category, CategoryStats(category=expense.category))
            entry.total += expense.amount
            entry.count += 1

        return sorted(stats.values(), key=lambda s: s.total, reverse=True)


def _first_error(exc: ValidationError) -> str:
    """Human-readable message for the first validation failure."""
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", str(exc))
    return f"{location}: {message}" if location else message
