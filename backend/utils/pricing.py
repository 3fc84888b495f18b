"""
Price arithmetic for the storefront.

All amounts are handled as ``Decimal`` and quantized to cents so that cart and
order totals do not drift the way repeated float additions do.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple, Union

Number = Union[int, float, str, Decimal]

CENT = Decimal("0.01")

TAX_RATE = Decimal("0.18")  # 18% GST
SHIPPING_FEE = Decimal("199")
FREE_SHIPPING_THRESHOLD = Decimal("5000")


def to_money(value: Number) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        # str() keeps floats like 0.1 from expanding into binary noise
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_discount_price(base_price: Number, discount_percent: Number) -> Decimal:
    """base_price * (1 - discount_percent / 100); non-positive discounts leave the price unchanged."""
    base = to_money(base_price)
    percent = Decimal(str(discount_percent or 0))
    if percent <= 0:
        return base
    return to_money(base - base * percent / Decimal(100))


def line_total(price: Number, quantity: int) -> Decimal:
    return to_money(to_money(price) * quantity)


def cart_total(lines: Iterable) -> Decimal:
    """Full re-summation of price * quantity over cart lines."""
    total = Decimal("0.00")
    for line in lines:
        total += line_total(line.price, line.quantity)
    return to_money(total)


def order_totals(subtotal: Number) -> Tuple[Decimal, Decimal, Decimal]:
    """Return (tax, shipping_cost, total) for a cart subtotal.

    Shipping is charged only when the subtotal is strictly below the
    free-shipping threshold.
    """
    subtotal = to_money(subtotal)
    tax = to_money(subtotal * TAX_RATE)
    shipping = SHIPPING_FEE if subtotal < FREE_SHIPPING_THRESHOLD else Decimal("0")
    shipping = to_money(shipping)
    return tax, shipping, to_money(subtotal + tax + shipping)
