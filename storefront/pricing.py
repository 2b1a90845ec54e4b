from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

TAX_RATE = Decimal("0.05")
CENTS = Decimal("0.01")
# Largest value a Numeric(10, 2) column holds
MAX_PRICE = Decimal("99999999.99")


@dataclass(frozen=True)
class CartTotals:
    subtotal: str
    tax: str
    final_total: str


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their printed value rather than binary noise
    return Decimal(str(value))


def parse_price(raw: str) -> Decimal:
    """Read a price typed into the admin form. Raises ValueError if it is not a number."""
    try:
        price = Decimal(raw.strip())
    except (InvalidOperation, AttributeError):
        raise ValueError(f"invalid price: {raw!r}")
    if not price.is_finite() or abs(price) > MAX_PRICE:
        raise ValueError(f"invalid price: {raw!r}")
    try:
        price = price.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"invalid price: {raw!r}")
    return price


def money(value) -> str:
    return format(to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP), "f")


def line_total(price, quantity: int) -> Decimal:
    return to_decimal(price) * quantity


def subtotal(lines: Iterable) -> Decimal:
    return sum((line_total(line.price, line.quantity) for line in lines), Decimal("0"))


def cart_totals(lines: Iterable) -> CartTotals:
    amount = subtotal(lines)
    return CartTotals(
        subtotal=money(amount),
        tax=money(amount * TAX_RATE),
        final_total=money(amount * (1 + TAX_RATE)),
    )
