"""
Command Handlers

Each handler receives the console context and the tokens that followed
its command words. Handlers raise TrackerError subclasses on failure;
the interaction loop reports them and keeps running.
"""

import math
from datetime import date
from typing import Optional, Protocol, Sequence

from budget_tracker.errors import ActiveSheetNotSelectedError, DuplicateError, InvalidDataError
from budget_tracker.manager import TrackerManager
from budget_tracker.models.expense import ExpenseSheet
from budget_tracker.models.period import Period
from budget_tracker.services.storage import SHEET_SUFFIX


class LineInput(Protocol):
    """Source of finished input lines. Raises EOFError when input ends."""

    def read_line(self, prompt: str) -> str:
        ...


class ConsoleContext:
    """Everything a handler may touch."""

    def __init__(
        self,
        manager: TrackerManager,
        line_input: LineInput,
        currency: str = "PLN",
    ):
        self.manager = manager
        self.line_input = line_input
        self.currency = currency

    def ask(self, prompt: str) -> str:
        return self.line_input.read_line(prompt).strip()


# =============================================================================
# PROMPTS
# =============================================================================

def create_sheet_with_prompt(ctx: ConsoleContext, name: str, period: Period) -> bool:
    """
    Create a sheet, asking before overwriting an existing one.

    Only DuplicateError triggers the question; any other failure
    propagates. Returns False if the user declined to overwrite.
    """
    try:
        ctx.manager.new_sheet(name, period, overwrite=False)
    except DuplicateError:
        while True:
            answer = ctx.ask(
                f"!> Sheet '{name}{SHEET_SUFFIX}' already exists. Overwrite? [Y/N] "
            ).lower()
            if answer == "y":
                ctx.manager.new_sheet(name, period, overwrite=True)
                print(f"> Sheet '{name}{SHEET_SUFFIX}' overwritten.")
                return True
            if answer == "n":
                print("> Sheet left unchanged.")
                return False
            print(f"!> Unsupported input: '{answer}'")

    print(f"> Sheet '{name}{SHEET_SUFFIX}' created successfully.")
    return True


def _prompt_index(ctx: ConsoleContext, prompt: str, low: int, high: int) -> int:
    """Ask until the user enters an integer in [low, high]."""
    while True:
        raw = ctx.ask(prompt)
        try:
            value = int(raw)
        except ValueError:
            value = None
        if value is not None and low <= value <= high:
            return value
        print(f"!> Invalid input. Enter a number between {low} and {high}.")


def _parse_amount(raw: str) -> float:
    try:
        amount = float(raw.replace(",", "."))
    except ValueError as exc:
        raise InvalidDataError(f"'{raw}' is not a valid amount") from exc
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidDataError("The amount must be greater than 0")
    return amount


def _prompt_amount(ctx: ConsoleContext) -> float:
    while True:
        raw = ctx.ask("!> Enter amount: ")
        try:
            return _parse_amount(raw)
        except InvalidDataError:
            print("!> Invalid input. The value must be a number greater than 0.")


def _require_active_sheet(ctx: ConsoleContext) -> ExpenseSheet:
    sheet = ctx.manager.get_active_sheet()
    if sheet is None:
        raise ActiveSheetNotSelectedError()
    return sheet


def _print_sheet_list(names: Sequence[str], active: Optional[ExpenseSheet]) -> None:
    for idx, name in enumerate(names):
        if active is not None and active.name == name:
            print(f">  {idx}. {name:<20} (ACTIVE)")
        else:
            print(f">  {idx}. {name}")


# =============================================================================
# ADD
# =============================================================================

def add_expense_handler(ctx: ConsoleContext, tail: Sequence[str]) -> None:
    """add expense [category amount]"""
    _require_active_sheet(ctx)
    categories = ctx.manager.get_categories()

    if len(tail) == 1:
        raise InvalidDataError("Usage: add expense [<category> <amount>]")

    if tail:
        category = " ".join(tail[:-1])
        amount = _parse_amount(tail[-1])
        if category.isdigit() and 1 <= int(category) <= len(categories):
            category = categories[int(category) - 1].name
    else:
        if not categories:
            raise InvalidDataError("No expense categories are configured")
        print("!> Select a category:")
        for idx, item in enumerate(categories, start=1):
            print(f"> {idx}: {item.name}")
        choice = _prompt_index(ctx, "> ", 1, len(categories))
        category = categories[choice - 1].name
        amount = _prompt_amount(ctx)

    record = ctx.manager.add_expense_to_active_sheet(category, amount)
    print(f"!> Expense added: {record.category} {record.amount:.2f} {ctx.currency}")


def add_sheet_handler(ctx: ConsoleContext, tail: Sequence[str]) -> None:
    """add sheet [name]"""
    today = date.today()
    period = Period.current_month(today)
    name = " ".join(tail) if tail else f"{today.month:02d}-{today.year}"

    create_sheet_with_prompt(ctx, name, period)


# =============================================================================
# SHOW
# =============================================================================

def show_categories_handler(ctx: ConsoleContext, tail: Sequence[str]) -> None:
    print("? CATEGORIES:")
    for category in ctx.manager.get_categories():
        print(f">  {category.name}")
        if category.description:
            print(f"   {category.description}")


def show_expenses_handler(ctx: ConsoleContext, tail: Sequence[str]) -> None:
    sheet = _require_active_sheet(ctx)
    grand_total = sheet.total()

    print(f"\n{'EXPENSES SUMMARY FOR':<22} {sheet.name}")
    print(f"{'PERIOD':<22} {sheet.period}")
    print("-" * 60 + "\n")

    print(f"{'Category':<20} {'Total':>12} {'Count':>8}  {'Part Of Total':>12}")
    print("-" * 60)

    for stats in sheet.summary():
        share = (stats.total / grand_total) * 100.0 if grand_total else 0.0
        print(
            f"{stats.category:<20} {stats.total:>9.2f} {ctx.currency} "
            f"{stats.count:>8}  {share:>10.1f}%"
        )

    print("-" * 60)
    print(f"{'TOTAL':<20} {grand_total:>9.2f} {ctx.currency}")


def show_sheets_handler(ctx: ConsoleContext, tail: Sequence[str]) -> None:
    print("? SHEETS:")
    _print_sheet_list(ctx.manager.list_sheets(), ctx.manager.get_active_sheet())


# =============================================================================
# SELECT
# =============================================================================

def select_handler(ctx: ConsoleContext, tail: Sequence[str]) -> None:
    """select <name>"""
    if not tail:
        raise InvalidDataError("Sheet name must be provided: select <name>")

    name = " ".join(tail)
    ctx.manager.set_active_sheet(name)
    print(f"> Sheet '{name}' is now active.")


# =============================================================================
# DELETE
# =============================================================================

def delete_sheet_handler(ctx: ConsoleContext, tail: Sequence[str]) -> None:
    """delete sheet [name]"""
    if tail:
        name = " ".join(tail)
    else:
        names = ctx.manager.list_sheets()
        if not names:
            print("> There are no sheets to delete.")
            return
        print("?> Select a sheet to be deleted:")
        _print_sheet_list(names, ctx.manager.get_active_sheet())
        name = names[_prompt_index(ctx, "> ", 0, len(names) - 1)]

    ctx.manager.delete_sheet(name)
    print(f"!> Sheet '{name}' has been removed.")


def delete_expense_handler(ctx: ConsoleContext, tail: Sequence[str]) -> None:
    """delete expense [index]"""
    sheet = _require_active_sheet(ctx)
    if not sheet.expenses:
        print("> The active sheet has no expenses.")
        return

    if tail:
        try:
            index = int(tail[0])
        except ValueError as exc:
            raise InvalidDataError(f"'{tail[0]}' is not a valid expense index") from exc
    else:
        print("?> Select an expense to be deleted:")
        for idx, expense in enumerate(sheet.expenses):
            print(
                f"> {idx}. {expense.category:<20} {expense.amount:<8.2f} "
                f"{expense.logged_on.isoformat()}"
            )
        index = _prompt_index(ctx, "> ", 0, len(sheet.expenses) - 1)

    removed = ctx.manager.remove_expense_from_active_sheet(index)
    print(f"!> Expense removed: {removed.category} {removed.amount:.2f} {ctx.currency}")
