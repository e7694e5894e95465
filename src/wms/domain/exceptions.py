"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the calling layer (CLI, HTTP adapter) can catch them uniformly and map
them to user-facing responses.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Caller input violated a business rule or invariant."""


class EntityNotFoundError(DomainException):
    """A requested order or draft does not exist."""


class InventoryReservationError(DomainException):
    """Base class for reservation failures raised by the allocator."""


class InsufficientStockError(InventoryReservationError):
    """Requested quantity exceeds what is available. Nothing was mutated."""

    def __init__(self, sku: str, requested: int, available: int) -> None:
        super().__init__(
            f"SKU {sku} has only {available} available units "
            f"(requested {requested})"
        )
        self.sku = sku
        self.requested = requested
        self.available = available


class AllocationError(InventoryReservationError):
    """The ledger could not satisfy a reservation it reported as available.

    Signals an inconsistency between per-record and aggregate quantities.
    """


class DuplicateOrderNumberError(DomainException):
    """An explicitly supplied order number is already in use for the tenant."""

    def __init__(self, tenant_id: str, order_number: str) -> None:
        super().__init__(
            f"Order number {order_number} is already in use for tenant {tenant_id}"
        )
        self.tenant_id = tenant_id
        self.order_number = order_number
