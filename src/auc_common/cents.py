"""Integer arithmetic utilities for cents-based auction prices.

All prices and bid amounts use int (cents). No float, no Decimal:
price comparisons (bid > current_price) must be exact.
"""

# 100,000,000.00 — keeps every amount comfortably inside BIGINT and JSON-safe ints
MAX_AMOUNT_CENTS = 10_000_000_000


def validate_amount(amount: int) -> None:
    """Validate that an amount is in the range [1, MAX_AMOUNT_CENTS] cents."""
    if not (1 <= amount <= MAX_AMOUNT_CENTS):
        raise ValueError(
            f"Amount must be between 1 and {MAX_AMOUNT_CENTS} cents, got {amount}"
        )


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 15000 -> '$150.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"
