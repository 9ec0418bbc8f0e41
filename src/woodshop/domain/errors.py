"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only catch ValueError.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


def client_not_found(client_id: str) -> str:
    """Return message for missing client."""
    return f"Client {client_id} not found"


def material_not_found(material_id: str) -> str:
    """Return message for missing material."""
    return f"Material {material_id} not found"


def product_not_found(product_id: str) -> str:
    """Return message for missing product."""
    return f"Product {product_id} not found"


def project_not_found(project_id: str) -> str:
    """Return message for missing project."""
    return f"Project {project_id} not found"


def project_number_not_found(number: int) -> str:
    """Return message for missing project by number."""
    return f"Project #{number} not found"


def negative_value(field_name: str, value) -> str:
    """Return message for a numeric field that must not be negative."""
    return f"{field_name} must not be negative (got {value})"


def non_positive_quantity(field_name: str, value) -> str:
    """Return message for a quantity that must be greater than zero."""
    return f"{field_name} must be greater than zero (got {value})"


def blank_name(entity: str) -> str:
    """Return message for an entity submitted without a name."""
    return f"{entity} name must not be empty"
