"""
Actor resolution middleware.

Resolves which user a request acts for. Token issuance happens upstream:
either Django's session authentication has populated ``request.user`` or
the API gateway forwards the authenticated user id in ``ACTOR_HEADER``.
"""
import logging
from typing import Callable

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import validate_ipv46_address
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


def get_client_ip(request: HttpRequest) -> str:
    """
    First X-Forwarded-For hop, falling back to REMOTE_ADDR.

    A hop that is not an IPv4 or IPv6 address is ignored.
    """
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        hop = forwarded.split(",")[0].strip()
        try:
            validate_ipv46_address(hop)
        except ValidationError:
            logger.warning("Ignoring malformed X-Forwarded-For", extra={"path": request.path})
        else:
            return hop
    return request.META.get("REMOTE_ADDR", "") or ""


class ActorMiddleware:
    """
    Middleware that sets ``request.actor_id`` and ``request.client_ip``.

    ``actor_id`` is 0 for unauthenticated requests; views reject those.
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response
        self.header_key = "HTTP_" + settings.ACTOR_HEADER.upper().replace("-", "_")

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request.actor_id = self._resolve_actor_id(request)  # type: ignore
        request.client_ip = get_client_ip(request)  # type: ignore
        return self.get_response(request)

    def _resolve_actor_id(self, request: HttpRequest) -> int:
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            return user.pk

        raw = request.META.get(self.header_key, "").strip()
        if not raw:
            return 0
        try:
            actor_id = int(raw)
        except ValueError:
            logger.warning("Ignoring malformed actor header", extra={"path": request.path})
            return 0
        return actor_id if actor_id > 0 else 0
