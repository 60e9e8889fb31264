"""
User directory port.

Accounts, passwords and tokens are managed elsewhere; products only need
to resolve a user id from an email address.
"""
from abc import ABC, abstractmethod
from typing import Optional


class UserDirectory(ABC):
    """Read-only lookup of user accounts."""

    @abstractmethod
    def find_id_by_email(self, email: str) -> Optional[int]:
        """
        Resolve a user id.

        Args:
            email: Account email, matched case-insensitively

        Returns:
            User id or None when no account has this email
        """
        pass
