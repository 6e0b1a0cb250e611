import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, Tuple, Union

from expenses.domain import Budget, Transaction
from expenses.errors import DataValidationError
from expenses.functional import check_budget_coverage, validate_budget, validate_transaction

logger = logging.getLogger(__name__)


def parse_transactions(records: Any) -> Tuple[Tuple[Transaction, ...], list]:
    if not isinstance(records, list):
        return (), [{"error": "invalid_seed", "message": "'transactions' must be a list"}]

    transactions = []
    errors = []
    seen_ids = set()
    for raw in records:
        result = validate_transaction(raw)
        if result.is_left():
            errors.append(result.get_error())
            continue
        t = result.get_or_else(None)
        if t.id in seen_ids:
            errors.append({
                "error": "duplicate_id",
                "message": f"Transaction id {t.id} is used more than once",
                "id": t.id,
            })
            continue
        seen_ids.add(t.id)
        transactions.append(t)
    return tuple(transactions), errors


def parse_budgets(table: Any) -> Tuple[Tuple[Budget, ...], list]:
    if not isinstance(table, Mapping):
        return (), [{"error": "invalid_seed", "message": "'budgets' must be an object of category -> limit"}]

    budgets = []
    errors = []
    for category_name, limit in table.items():
        result = validate_budget(category_name, limit)
        if result.is_left():
            errors.append(result.get_error())
        else:
            budgets.append(result.get_or_else(None))

    if not errors:
        coverage = check_budget_coverage(budgets)
        if coverage.is_left():
            errors.append(coverage.get_error())
    return tuple(budgets), errors


def parse_seed(data: Any) -> Tuple[Tuple[Transaction, ...], Tuple[Budget, ...]]:
    """Validate a decoded seed document; raise DataValidationError on any bad record."""
    if not isinstance(data, Mapping):
        raise DataValidationError([{"error": "invalid_seed", "message": "Seed must be a JSON object"}])

    transactions, tx_errors = parse_transactions(data.get("transactions"))
    budgets, budget_errors = parse_budgets(data.get("budgets"))

    errors = tx_errors + budget_errors
    if errors:
        for err in errors:
            logger.error("Seed validation failed [%s]: %s", err["error"], err["message"])
        raise DataValidationError(errors)

    logger.info("Loaded %d transactions and %d budgets", len(transactions), len(budgets))
    return transactions, budgets


def load_seed(path: Union[str, Path]) -> Tuple[Tuple[Transaction, ...], Tuple[Budget, ...]]:
    logger.info("Loading seed data from %s", path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise DataValidationError(
                [{"error": "invalid_seed", "message": f"{path} is not valid JSON: {e}"}]
            ) from e

    return parse_seed(data)
