"""Display formatting for money amounts and totals.

Formatting works on copies; the figures used for computation are never
rounded.
"""

from decimal import Decimal, ROUND_HALF_UP

from bizdocs.domain.entities import DiscountType, PricingDocument

CENTS = Decimal("0.01")

CURRENCIES = {
    "SAR": {"symbol": "SAR ", "name": "Saudi Riyals"},
    "USD": {"symbol": "$", "name": "US Dollars"},
}
DEFAULT_CURRENCY = "SAR"


def format_amount(amount: Decimal) -> str:
    """Format with two decimals and thousands separators, e.g. "1,234.50"."""
    return f"{amount.quantize(CENTS, rounding=ROUND_HALF_UP):,.2f}"


def format_money(amount: Decimal, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount with its currency symbol as prefix, e.g. "$1,234.50"."""
    info = CURRENCIES.get(currency, {"symbol": f"{currency} "})
    sign = "-" if amount < 0 else ""
    return f"{sign}{info['symbol']}{format_amount(abs(amount))}"


def currency_name(currency: str) -> str:
    """Return the long currency name used in terms text."""
    return CURRENCIES.get(currency, {}).get("name", currency)


def _percent(value: Decimal) -> str:
    # normalize() can yield exponent form (1E+1); "f" prints it as 10
    return format(value.normalize(), "f")


def totals_summary(document: PricingDocument) -> list[tuple[str, str]]:
    """Labelled display lines for a document's totals.

    The discount line is left out when there is no discount amount.
    """
    totals = document.totals
    currency = document.currency
    lines = [("Subtotal", format_money(totals.subtotal, currency))]

    if totals.discount_amount != 0:
        label = "Discount"
        if document.discount.type == DiscountType.PERCENTAGE:
            label = f"Discount ({_percent(document.discount.value)}%)"
        lines.append((label, format_money(-totals.discount_amount, currency)))

    lines.append((f"VAT ({_percent(document.tax_rate)}%)", format_money(totals.tax_amount, currency)))
    lines.append(("Total", format_money(totals.grand_total, currency)))
    return lines
