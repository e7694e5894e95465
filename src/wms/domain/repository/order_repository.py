"""Abstract repository for the SalesOrder aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from wms.domain.model.order import SalesOrder


class SalesOrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> SalesOrder | None:
        """Return a copy of the order, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[SalesOrder]:
        """Return copies of every order, in insertion order."""

    @abstractmethod
    def save(self, order: SalesOrder) -> None:
        """Persist a new or updated order."""

    @abstractmethod
    def delete(self, order_id: str) -> SalesOrder | None:
        """Remove an order and return it, or None if it did not exist."""
