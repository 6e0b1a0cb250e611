import logging
from typing import Any, Callable, Dict, Sequence, Tuple

from expenses import aggregation as agg
from expenses.domain import Budget, Selection, Transaction

logger = logging.getLogger(__name__)

Calculator = Callable[[Selection, Tuple[Transaction, ...], Tuple[Budget, ...], Dict[str, Any]], Dict[str, Any]]


class DashboardService:
    """Facade that derives every dashboard figure for a selection using injected calculators.

    calculators: sequence of functions taking (selection, transactions, budgets, acc) -> dict (partial results).
    ``acc`` holds the merged output of the calculators that ran before, so later
    steps can reuse earlier ones (e.g. the filtered list).
    """

    def __init__(self, calculators: Sequence[Calculator]):
        self.calculators = calculators

    def summary(self, selection: Selection, transactions: Tuple[Transaction, ...], budgets: Tuple[Budget, ...]) -> Dict[str, Any]:
        """Run calculators in order and return the aggregated report with intermediate steps."""
        report = {
            "selection": selection,
            "steps": [],
            "result": {}
        }

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(selection, transactions, budgets, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            if isinstance(out, dict):
                acc.update(out)

        report["result"] = acc
        logger.debug("Summary for %s/%s: %d steps", selection.month, selection.category, len(report["steps"]))
        return report


def calc_filtered(selection, transactions, budgets, acc):
    if selection.month is None:
        filtered = ()
    else:
        filtered = agg.filter_by_month_and_category(transactions, selection.month, selection.category)
    return {"filtered": filtered, "filtered_total": agg.sum_amounts(filtered)}


def calc_monthly_total(selection, transactions, budgets, acc):
    if selection.month is None:
        return {"monthly_total": agg.sum_amounts(()), "average_per_day": agg.sum_amounts(())}
    return {
        "monthly_total": agg.monthly_total(transactions, selection.month),
        "average_per_day": agg.average_per_day(transactions, selection.month),
    }


def calc_month_over_month(selection, transactions, budgets, acc):
    if selection.month is None:
        return {"month_over_month": None}
    return {"month_over_month": agg.month_over_month_change(transactions, selection.month)}


def calc_category_breakdown(selection, transactions, budgets, acc):
    if selection.month is None:
        return {"category_breakdown": ()}
    return {"category_breakdown": agg.category_breakdown(transactions, budgets, selection.month)}


def calc_payment_split(selection, transactions, budgets, acc):
    return {"payment_split": agg.payment_method_split(acc.get("filtered", ()))}


def calc_insights(selection, transactions, budgets, acc):
    in_month = () if selection.month is None else agg.filter_by_month_and_category(transactions, selection.month)
    return {
        "highest_expense": agg.highest_expense(in_month),
        "most_active_category": agg.most_active_category(in_month),
    }


def default_calculators() -> Tuple[Calculator, ...]:
    return (
        calc_filtered,
        calc_monthly_total,
        calc_month_over_month,
        calc_category_breakdown,
        calc_payment_split,
        calc_insights,
    )
