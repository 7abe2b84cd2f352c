"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested payment or record does not exist."""


def payment_not_found(payment_id: str) -> str:
    """Return message for missing payment."""
    return f"Payment {payment_id} not found"


def required_field(field_name: str) -> str:
    """Return message for a missing required field."""
    return f"{field_name} is required"


def negative_amount(amount) -> str:
    """Return message for an amount below zero."""
    return f"Amount must not be negative (got {amount})"


def unknown_payment_fields(fields: list[str]) -> str:
    """Return message when an update names fields a payment does not have."""
    names = ", ".join(sorted(fields))
    return f"Cannot update field{'s' if len(fields) != 1 else ''}: {names}"


def delete_requires_archive(payment_title: str) -> str:
    """Return message when deleting a payment that is not archived."""
    return (
        f"Cannot delete '{payment_title}': only archived payments can be deleted. "
        "Archive it first."
    )
