from decimal import Decimal
from pathlib import Path

import pytest

from expenses.aggregation import (
    DAYS_PER_MONTH,
    average_per_day,
    category_breakdown,
    default_selection,
    filter_by_month_and_category,
    highest_expense,
    list_months,
    month_over_month_change,
    monthly_total,
    most_active_category,
    payment_method_split,
    previous_month_key,
    sum_amounts,
    utilization_percent,
)
from expenses.domain import ALL, Budget, Category, PaymentMethod, Selection, Transaction
from expenses.transforms import load_seed

SEED = Path(__file__).resolve().parent.parent / "data" / "seed.json"


def make_tx(id, category, amount, date, method=PaymentMethod.CARD, description="x"):
    return Transaction(id, description, category, Decimal(str(amount)), date, method)


def make_budgets(**limits):
    return tuple(Budget(c, Decimal(str(limits.get(c.name.lower(), 100)))) for c in Category)


def sample():
    transactions, budgets = load_seed(SEED)
    return transactions, budgets


def test_list_months_descending_and_distinct():
    trans = (
        make_tx(1, Category.FOOD, 10, "2023-12-30"),
        make_tx(2, Category.FOOD, 10, "2024-02-01"),
        make_tx(3, Category.FOOD, 10, "2024-01-15"),
        make_tx(4, Category.FOOD, 10, "2024-02-20"),
    )
    assert list_months(trans) == ("2024-02", "2024-01", "2023-12")


def test_list_months_empty():
    assert list_months(()) == ()


def test_filter_preserves_source_order():
    trans = (
        make_tx(3, Category.FOOD, 10, "2024-02-09"),
        make_tx(1, Category.HOUSING, 10, "2024-02-01"),
        make_tx(2, Category.FOOD, 10, "2024-02-03"),
    )
    result = filter_by_month_and_category(trans, "2024-02", ALL)
    assert [t.id for t in result] == [3, 1, 2]


def test_filter_no_match_is_empty():
    trans = (make_tx(1, Category.FOOD, 10, "2024-02-09"),)
    assert filter_by_month_and_category(trans, "2024-03", ALL) == ()
    assert filter_by_month_and_category(trans, "2024-02", Category.HEALTH) == ()


def test_filter_accepts_plain_category_string():
    trans = (
        make_tx(1, Category.FOOD, 10, "2024-02-09"),
        make_tx(2, Category.HEALTH, 10, "2024-02-09"),
    )
    result = filter_by_month_and_category(trans, "2024-02", "Food")
    assert [t.id for t in result] == [1]


def test_sum_amounts_empty_is_zero():
    assert sum_amounts(()) == Decimal(0)


def test_sum_amounts_is_exact():
    trans = (
        make_tx(1, Category.FOOD, "0.1", "2024-01-01"),
        make_tx(2, Category.FOOD, "0.2", "2024-01-01"),
    )
    assert sum_amounts(trans) == Decimal("0.3")


def test_monthly_totals_partition_full_sum():
    trans, _ = sample()
    assert sum(monthly_total(trans, m) for m in list_months(trans)) == sum_amounts(trans)


def test_categories_partition_all_filter():
    trans, _ = sample()
    for month in list_months(trans):
        everything = filter_by_month_and_category(trans, month, ALL)
        parts = [filter_by_month_and_category(trans, month, c) for c in Category]
        ids = [t.id for part in parts for t in part]
        assert len(ids) == len(set(ids))
        assert set(ids) == {t.id for t in everything}


@pytest.mark.parametrize("month, expected", [
    ("2024-01", "2023-12"),
    ("2024-03", "2024-02"),
    ("2024-12", "2024-11"),
    ("2000-10", "2000-09"),
])
def test_previous_month_key(month, expected):
    assert previous_month_key(month) == expected


def test_previous_month_key_rejects_bad_month():
    with pytest.raises(ValueError):
        previous_month_key("2024-13")


def test_month_over_month_without_previous_spend():
    trans = (make_tx(1, Category.FOOD, 50, "2024-02-01"),)
    mom = month_over_month_change(trans, "2024-02")
    assert mom.current == 50
    assert mom.previous == 0
    assert mom.delta == 50
    assert mom.percent is None


def test_month_over_month_percent():
    trans = (
        make_tx(1, Category.FOOD, 100, "2024-01-15"),
        make_tx(2, Category.FOOD, 150, "2024-02-15"),
    )
    mom = month_over_month_change(trans, "2024-02")
    assert mom.delta == 50
    assert mom.percent == Decimal("50.0")


def test_month_over_month_decrease_across_year():
    trans = (
        make_tx(1, Category.FOOD, 200, "2023-12-15"),
        make_tx(2, Category.FOOD, 50, "2024-01-15"),
    )
    mom = month_over_month_change(trans, "2024-01")
    assert mom.delta == -150
    assert mom.percent == Decimal("-75")


def test_category_breakdown_covers_every_budget_in_order():
    trans = (make_tx(1, Category.FOOD, 40, "2024-02-01"),)
    budgets = make_budgets(food=400)
    rows = category_breakdown(trans, budgets, "2024-02")

    assert [r.category for r in rows] == [b.category for b in budgets]
    food = next(r for r in rows if r.category == Category.FOOD)
    assert food.actual == 40
    assert food.utilization == 10
    other = next(r for r in rows if r.category == Category.OTHER)
    assert other.actual == 0
    assert other.utilization == 0


def test_category_breakdown_ignores_other_months():
    trans = (
        make_tx(1, Category.FOOD, 40, "2024-02-01"),
        make_tx(2, Category.FOOD, 999, "2024-01-01"),
    )
    rows = category_breakdown(trans, make_budgets(food=400), "2024-02")
    assert rows[1].actual == 40


def test_utilization_rounds_half_up_and_caps():
    assert utilization_percent(Decimal("1"), Decimal("200")) == 1  # 0.5 -> 1
    assert utilization_percent(Decimal("185.32"), Decimal("400")) == 46
    assert utilization_percent(Decimal("5000"), Decimal("100")) == 999


def test_utilization_caps_beyond_decimal_precision():
    assert utilization_percent(Decimal("1e30"), Decimal("100")) == 999
    assert utilization_percent(Decimal("50"), Decimal("1e-30")) == 999
    assert utilization_percent(Decimal("998.4"), Decimal("100")) == 998
    assert utilization_percent(Decimal("998.5"), Decimal("100")) == 999


def test_category_breakdown_with_extreme_values():
    huge = (make_tx(1, Category.FOOD, "1e30", "2024-02-01"),)
    rows = category_breakdown(huge, make_budgets(food=100), "2024-02")
    assert rows[1].utilization == 999

    tiny_budgets = tuple(Budget(c, Decimal("1e-30")) for c in Category)
    rows = category_breakdown((make_tx(1, Category.FOOD, 50, "2024-02-01"),), tiny_budgets, "2024-02")
    assert rows[1].utilization == 999
    assert rows[0].utilization == 0


def test_payment_method_split_empty_is_zero_filled():
    split = payment_method_split(())
    assert set(split) == set(PaymentMethod)
    assert all(v == 0 for v in split.values())


def test_payment_method_split_sums_per_method():
    trans = (
        make_tx(1, Category.FOOD, 10, "2024-02-01", PaymentMethod.CASH),
        make_tx(2, Category.FOOD, 5, "2024-02-01", PaymentMethod.CASH),
        make_tx(3, Category.FOOD, 7, "2024-02-01", PaymentMethod.CARD),
    )
    split = payment_method_split(trans)
    assert split[PaymentMethod.CASH] == 15
    assert split[PaymentMethod.CARD] == 7
    assert split[PaymentMethod.BANK_TRANSFER] == 0


def test_average_per_day_uses_fixed_divisor():
    trans = (make_tx(1, Category.FOOD, 300, "2024-02-01"),)
    assert DAYS_PER_MONTH == 30
    assert average_per_day(trans, "2024-02") == 10


def test_highest_expense_and_most_active():
    trans = (
        make_tx(1, Category.FOOD, 10, "2024-02-01", description="Coffee"),
        make_tx(2, Category.HOUSING, 900, "2024-02-01", description="Rent"),
        make_tx(3, Category.FOOD, 20, "2024-02-01", description="Lunch"),
    )
    assert highest_expense(trans).description == "Rent"
    assert most_active_category(trans) == Category.FOOD


def test_most_active_tie_goes_to_enum_order():
    trans = (
        make_tx(1, Category.HEALTH, 10, "2024-02-01"),
        make_tx(2, Category.FOOD, 10, "2024-02-01"),
    )
    assert most_active_category(trans) == Category.FOOD


def test_insights_on_empty_input():
    assert highest_expense(()) is None
    assert most_active_category(()) is None


def test_default_selection():
    trans, _ = sample()
    assert default_selection(trans) == Selection("2024-02", ALL)
    assert default_selection(()) == Selection(None, ALL)


def test_selection_replace_is_immutable():
    sel = Selection("2024-02")
    food = sel.with_category(Category.FOOD)
    assert sel.category == ALL
    assert food.category == Category.FOOD
    assert food.with_month("2024-01").month == "2024-01"


def test_end_to_end_sample_month():
    trans, budgets = sample()
    assert monthly_total(trans, "2024-02") == Decimal("1659.74")

    food = filter_by_month_and_category(trans, "2024-02", Category.FOOD)
    assert [t.description for t in food] == ["Groceries", "Coffee beans"]
    assert sum_amounts(food) == Decimal("207.82")

    rows = category_breakdown(trans, budgets, "2024-02")
    housing = rows[0]
    assert housing.category == Category.HOUSING
    assert housing.utilization == 100

    mom = month_over_month_change(trans, "2024-02")
    assert mom.previous == Decimal("356.19")
    assert mom.delta == Decimal("1303.55")
