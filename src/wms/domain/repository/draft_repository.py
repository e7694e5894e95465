"""Abstract repository for SalesOrderDraft."""

from __future__ import annotations

from abc import ABC, abstractmethod

from wms.domain.model.draft import SalesOrderDraft


class SalesOrderDraftRepository(ABC):

    @abstractmethod
    def get_by_id(self, draft_id: str) -> SalesOrderDraft | None:
        """Return a copy of the draft, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[SalesOrderDraft]:
        """Return copies of every draft."""

    @abstractmethod
    def save(self, draft: SalesOrderDraft) -> None:
        """Persist a new or updated draft."""

    @abstractmethod
    def delete(self, draft_id: str) -> SalesOrderDraft | None:
        """Remove a draft and return it, or None if it did not exist."""
