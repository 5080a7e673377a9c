"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class TaxonomyError(ValidationError):
    """Account code falls outside the sections of a statement."""


class OverrideConfigurationError(DomainError):
    """Stored override rules could not be read."""


def entity_not_found(entity_id: int) -> str:
    """Return message for missing entity."""
    return f"Entity {entity_id} not found"


def ledger_account_not_found(account_id: int) -> str:
    """Return message for missing ledger account."""
    return f"Ledger account {account_id} not found"


def template_not_found(template_id: int) -> str:
    """Return message for missing report template."""
    return f"Report template {template_id} not found"


def duplicate_entity_name(name: str) -> str:
    """Return message for an entity name that is already taken."""
    return f"Entity with name '{name}' already exists"


def undefined_section_digit(code: str) -> str:
    """Return message for a code outside the balance sheet digits."""
    return f"Account code '{code}' does not belong to a balance sheet section"


def duplicate_override_rule(grouping_key: str, section: str) -> str:
    """Return message when two override rules target the same row."""
    return f"Override rule for '{grouping_key}' in section '{section}' is defined more than once"


def invalid_property_index(index: int) -> str:
    """Return message for a property filter outside the five property slots."""
    return f"Property index {index} is out of range (expected 1-5)"
