# Type alias for money values: integer minor units (cents)
Cents = int


def cents_or_zero(value: int | None) -> Cents:
    """
    Resolve an optional amount to cents; missing amounts count as zero.

    Examples:
        >>> cents_or_zero(None)
        0
        >>> cents_or_zero(1500)
        1500
    """
    return int(value) if value is not None else 0


def payment_rate(paid_cents: Cents, invoiced_cents: Cents) -> float:
    """
    Share of the invoiced amount that has been paid.

    Returns exactly 0.0 when nothing was invoiced.

    Examples:
        >>> payment_rate(900, 1500)
        0.6
        >>> payment_rate(100, 0)
        0.0
    """
    if invoiced_cents > 0:
        return paid_cents / invoiced_cents
    return 0.0
