"""
ListAuditLogsQuery.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import Actor


@dataclass
class ListAuditLogsQuery:
    """Filtered, paginated ledger listing, newest first."""

    actor: Actor
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    module: Optional[str] = None
    action: Optional[str] = None
    operator_id: Optional[int] = None
    product_id: Optional[int] = None
    page: int = 1
    page_size: int = 10
