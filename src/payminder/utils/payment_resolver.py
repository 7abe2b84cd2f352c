"""Utility for resolving payment references to IDs."""

from payminder.domain.ledger import PaymentLedger

MIN_PREFIX = 4


def resolve_payment(ledger: PaymentLedger, reference: str) -> str:
    """Resolve a payment ID, unique ID prefix or exact title to a payment ID.

    Args:
        ledger: PaymentLedger instance
        reference: Full ID, ID prefix (at least 4 characters) or title

    Returns:
        Payment ID

    Raises:
        ValueError: If nothing matches or the reference is ambiguous
    """
    reference = reference.strip()
    if not reference:
        raise ValueError("Payment reference is empty")

    # Exact ID (covers short seeded IDs such as "1")
    if ledger.get_payment(reference) is not None:
        return reference

    payments = ledger.list_payments()

    if len(reference) >= MIN_PREFIX:
        matches = [p for p in payments if p.id.startswith(reference)]
        if len(matches) == 1:
            return matches[0].id
        if len(matches) > 1:
            raise ValueError(f"Payment ID prefix '{reference}' is ambiguous ({len(matches)} matches)")

    # Try to find by title
    matches = [p for p in payments if p.title.lower() == reference.lower()]
    if len(matches) == 1:
        return matches[0].id
    if len(matches) > 1:
        raise ValueError(f"Several payments are titled '{reference}'; use the payment ID")

    raise ValueError(f"Payment '{reference}' not found")
