"""
Audit log repository port (interface).

This defines the contract for ledger persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from audit.domain.audit_entry import AuditLogEntry
from core.domain.value_objects import PageRequest


@dataclass(frozen=True)
class AuditLogFilter:
    """Optional filters for ledger queries; None means unfiltered."""

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    module: Optional[str] = None
    action: Optional[str] = None
    operator_id: Optional[int] = None
    product_id: Optional[int] = None
    # Restricts results to these products when not None
    product_scope: Optional[Iterable[int]] = None


class AuditLogRepository(ABC):
    """
    Abstract repository for AuditLogEntry entities.

    There is no update or delete: the ledger is append-only.
    """

    @abstractmethod
    def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        """
        Insert a new entry.

        Args:
            entry: Unsaved entry

        Returns:
            The stored entry with its id
        """
        pass

    @abstractmethod
    def query(
        self, filters: AuditLogFilter, page_request: PageRequest
    ) -> Tuple[int, List[AuditLogEntry]]:
        """
        Filtered entries, newest first.

        Args:
            filters: Query filters
            page_request: Page to return

        Returns:
            Total matching count and the entries of the page
        """
        pass
