from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Generic, Iterable, Mapping, TypeVar

from expenses.domain import Budget, Category, PaymentMethod, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Generic[E, T], Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Generic[E, T], Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


PAYMENT_METHOD_ALIASES = {
    "BankTransfer": PaymentMethod.BANK_TRANSFER,
}


def parse_decimal(value: Any) -> Either[str, Decimal]:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        return Left(f"{value!r} is not a number")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return Left(f"{value!r} is not a number")
    if not amount.is_finite():
        return Left(f"{value!r} is not a finite number")
    return Right(amount)


def parse_category(value: Any) -> Either[str, Category]:
    try:
        return Right(Category(value))
    except ValueError:
        return Left(f"Unknown category {value!r}")


def parse_payment_method(value: Any) -> Either[str, PaymentMethod]:
    if isinstance(value, str) and value in PAYMENT_METHOD_ALIASES:
        return Right(PAYMENT_METHOD_ALIASES[value])
    try:
        return Right(PaymentMethod(value))
    except ValueError:
        return Left(f"Unknown payment method {value!r}")


def is_iso_date(value: Any) -> bool:
    if not isinstance(value, str) or len(value) != 10:
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def validate_transaction(raw: Mapping[str, Any]) -> Either[dict, Transaction]:
    """Turn one raw seed record into a Transaction, or an error dict."""
    if not isinstance(raw, Mapping):
        return Left({
            "error": "invalid_record",
            "message": f"Transaction record must be an object, got {type(raw).__name__}",
        })

    tx_id = raw.get("id")
    if isinstance(tx_id, bool) or not isinstance(tx_id, int):
        return Left({
            "error": "invalid_id",
            "message": f"Transaction id must be an integer, got {tx_id!r}",
            "id": tx_id,
        })

    description = raw.get("description")
    if not isinstance(description, str):
        return Left({
            "error": "invalid_record",
            "message": f"Transaction {tx_id} has no description",
            "id": tx_id,
        })

    category = parse_category(raw.get("category"))
    if category.is_left():
        return Left({
            "error": "unknown_category",
            "message": f"Transaction {tx_id}: {category.get_error()}",
            "id": tx_id,
            "category": raw.get("category"),
        })

    method_value = raw.get("paymentMethod", raw.get("payment_method"))
    method = parse_payment_method(method_value)
    if method.is_left():
        return Left({
            "error": "unknown_payment_method",
            "message": f"Transaction {tx_id}: {method.get_error()}",
            "id": tx_id,
            "payment_method": method_value,
        })

    amount = parse_decimal(raw.get("amount"))
    if amount.is_left():
        return Left({
            "error": "invalid_amount",
            "message": f"Transaction {tx_id}: amount {amount.get_error()}",
            "id": tx_id,
            "amount": raw.get("amount"),
        })
    if amount.get_or_else(Decimal(0)) < 0:
        return Left({
            "error": "negative_amount",
            "message": f"Transaction {tx_id} cannot have negative amount",
            "id": tx_id,
            "amount": raw.get("amount"),
        })

    date = raw.get("date")
    if not is_iso_date(date):
        return Left({
            "error": "invalid_date",
            "message": f"Transaction {tx_id}: date {date!r} is not YYYY-MM-DD",
            "id": tx_id,
            "date": date,
        })

    note = raw.get("note")
    if note is None:
        note = ""
    elif not isinstance(note, str):
        return Left({
            "error": "invalid_record",
            "message": f"Transaction {tx_id}: note must be text",
            "id": tx_id,
        })

    return Right(Transaction(
        id=tx_id,
        description=description,
        category=category.get_or_else(None),
        amount=amount.get_or_else(None),
        date=date,
        payment_method=method.get_or_else(None),
        note=note,
    ))


def validate_budget(category_name: Any, limit: Any) -> Either[dict, Budget]:
    category = parse_category(category_name)
    if category.is_left():
        return Left({
            "error": "unknown_category",
            "message": f"Budget table: {category.get_error()}",
            "category": category_name,
        })

    amount = parse_decimal(limit)
    if amount.is_left() or amount.get_or_else(Decimal(0)) <= 0:
        return Left({
            "error": "invalid_budget",
            "message": f"Budget for {category_name} must be a positive number, got {limit!r}",
            "category": category_name,
            "limit": limit,
        })

    return Right(Budget(category=category.get_or_else(None), limit=amount.get_or_else(None)))


def check_budget_coverage(budgets: Iterable[Budget]) -> Either[dict, tuple[Budget, ...]]:
    """Budget table must name every category exactly once."""
    table = tuple(budgets)
    seen: list[Category] = []
    for b in table:
        if b.category in seen:
            return Left({
                "error": "duplicate_budget",
                "message": f"Budget for {b.category.value} is defined more than once",
                "category": b.category.value,
            })
        seen.append(b.category)

    missing = [c.value for c in Category if c not in seen]
    if missing:
        return Left({
            "error": "missing_budget",
            "message": f"No budget defined for: {', '.join(missing)}",
            "missing": missing,
        })

    return Right(table)


def pipe(x, *funcs):
    """Pipe a value through a series of functions.

    pipe(x, f, g, h) == h(g(f(x)))
    """
    res = x
    for f in funcs:
        res = f(res)
    return res
