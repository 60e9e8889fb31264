"""
UserDirectory backed by Django's configured user model.
"""
from typing import Optional

from django.contrib.auth import get_user_model

from products.ports.user_directory import UserDirectory


class DjangoUserDirectory(UserDirectory):
    """Looks accounts up in ``settings.AUTH_USER_MODEL``."""

    def find_id_by_email(self, email: str) -> Optional[int]:
        user_model = get_user_model()
        return (
            user_model.objects.filter(email__iexact=email.strip())
            .order_by("pk")
            .values_list("pk", flat=True)
            .first()
        )
