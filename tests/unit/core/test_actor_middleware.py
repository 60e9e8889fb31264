"""
Unit tests for actor and client address resolution.
"""

import pytest
from django.http import HttpResponse

from core.middleware.actor import ActorMiddleware, get_client_ip


class TestGetClientIp:
    """Tests for get_client_ip."""

    def test_first_forwarded_hop(self, rf):
        request = rf.get("/", HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1", REMOTE_ADDR="10.0.0.9")
        assert get_client_ip(request) == "203.0.113.7"

    def test_ipv6_hop(self, rf):
        request = rf.get("/", HTTP_X_FORWARDED_FOR="2001:db8::1", REMOTE_ADDR="10.0.0.9")
        assert get_client_ip(request) == "2001:db8::1"

    @pytest.mark.parametrize("forwarded", ["not-an-ip", "1" * 200, "999.1.1.1", " , 10.0.0.1"])
    def test_malformed_hop_falls_back_to_remote_addr(self, rf, forwarded):
        request = rf.get("/", HTTP_X_FORWARDED_FOR=forwarded, REMOTE_ADDR="10.0.0.9")
        assert get_client_ip(request) == "10.0.0.9"

    def test_no_forwarded_header(self, rf):
        assert get_client_ip(rf.get("/", REMOTE_ADDR="10.0.0.9")) == "10.0.0.9"


class TestActorMiddleware:
    """Tests for ActorMiddleware."""

    def test_sets_actor_and_client_ip(self, rf):
        request = rf.get(
            "/", HTTP_X_ACTOR_ID="2001", HTTP_X_FORWARDED_FOR="x" * 100, REMOTE_ADDR="10.0.0.9"
        )

        ActorMiddleware(lambda req: HttpResponse())(request)

        assert (request.actor_id, request.client_ip) == (2001, "10.0.0.9")

    @pytest.mark.parametrize("raw", ["abc", "-3", "0", ""])
    def test_unusable_actor_header(self, rf, raw):
        request = rf.get("/", HTTP_X_ACTOR_ID=raw)

        ActorMiddleware(lambda req: HttpResponse())(request)

        assert request.actor_id == 0
