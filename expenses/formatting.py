"""Display helpers used by the Streamlit page."""
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional, Union

from expenses.domain import ALL, Category, CategoryFilter, MonthOverMonth, PaymentMethod

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "KZT": "₸",
}

CATEGORY_DISPLAY_NAMES = {
    Category.HOUSING: "Housing",
    Category.FOOD: "Food & Dining",
    Category.TRANSPORTATION: "Transport",
    Category.HEALTH: "Health",
    Category.ENTERTAINMENT: "Entertainment",
    Category.UTILITIES: "Utilities",
    Category.OTHER: "Other",
}

PAYMENT_METHOD_LABELS = {
    PaymentMethod.CARD: "Card",
    PaymentMethod.CASH: "Cash",
    PaymentMethod.BANK_TRANSFER: "Bank transfer",
}

NO_COMPARISON = "No spending last month to compare."
EMPTY_SELECTION = "No expenses found for this selection."


def format_currency(value: Union[Decimal, int, float], currency: str = "USD") -> str:
    amount = Decimal(str(value))
    with localcontext() as ctx:
        # room for every integer digit plus cents
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        body = f"{abs(amount):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(currency)
    body = f"{symbol}{body}" if symbol else f"{body} {currency}"
    return f"-{body}" if amount < 0 else body


def format_month_label(month: Optional[str]) -> str:
    if not month:
        return "No data"
    return datetime.strptime(month, "%Y-%m").strftime("%B %Y")


def format_row_date(date: str) -> str:
    d = datetime.strptime(date, "%Y-%m-%d")
    return f"{d.strftime('%b')} {d.day}"


def category_label(category: CategoryFilter) -> str:
    if category == ALL:
        return "All categories"
    return CATEGORY_DISPLAY_NAMES[Category(category)]


def format_change(mom: Optional[MonthOverMonth]) -> str:
    if mom is None or mom.percent is None:
        return NO_COMPARISON
    sign = "+" if mom.delta >= 0 else "-"
    return f"{sign}{abs(mom.percent):.1f}% vs last month"


def budget_status(utilization: int) -> str:
    if utilization >= 100:
        return "Budget reached"
    return f"{utilization}% used"


def progress_fraction(utilization: int) -> float:
    return min(utilization, 100) / 100
