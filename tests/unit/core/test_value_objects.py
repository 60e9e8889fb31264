"""
Unit tests for value objects.
"""

import pytest

from core.domain.value_objects import Actor, PageRequest, SerialNumber


class TestActor:
    """Tests for Actor value object."""

    @pytest.mark.parametrize("user_id", [0, -5, None])
    def test_rejects_missing_identity(self, user_id):
        with pytest.raises(ValueError):
            Actor(user_id=user_id)

    def test_super_admin_follows_settings(self, settings):
        settings.SUPER_ADMIN_ID = 99
        assert Actor(99).is_super_admin
        assert not Actor(1).is_super_admin

    def test_anonymous_actor(self, settings):
        settings.ANONYMOUS_ACTOR_ID = 100000000
        actor = Actor.anonymous("192.0.2.1")
        assert actor.user_id == 100000000
        assert actor.ip_address == "192.0.2.1"


class TestSerialNumber:
    """Tests for SerialNumber value object."""

    def test_valid(self):
        assert str(SerialNumber("SN-001")) == "SN-001"

    @pytest.mark.parametrize("value", ["", "   ", " SN", "x" * 129])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            SerialNumber(value)

    def test_equality_by_value(self):
        assert SerialNumber("A") == SerialNumber("A")
        assert SerialNumber("A") != SerialNumber("B")


class TestPageRequest:
    """Tests for PageRequest value object."""

    def test_offset(self):
        assert PageRequest(3, 20).offset == 40

    @pytest.mark.parametrize("page, page_size", [(0, 10), (1, 0)])
    def test_bounds(self, page, page_size):
        with pytest.raises(ValueError):
            PageRequest(page, page_size)
