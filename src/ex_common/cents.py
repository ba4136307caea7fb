"""Integer arithmetic utilities for cents-based order totals.

All prices and totals are int minor units. No float, no Decimal.
"""


def validate_non_negative(name: str, cents: int) -> None:
    """Raise ValueError unless *cents* is a non-negative int."""
    if isinstance(cents, bool) or not isinstance(cents, int):
        raise ValueError(f"{name} must be an integer number of cents, got {cents!r}")
    if cents < 0:
        raise ValueError(f"{name} must be >= 0, got {cents}")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"
