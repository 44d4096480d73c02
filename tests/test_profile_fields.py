import pytest

from models import Role
from services.profile_fields import build_profile_changes, touches_role


def test_only_present_fields_are_returned():
    assert build_profile_changes(user_name="Bob") == [("username", "Bob")]
    assert build_profile_changes(role=2, avatar_url=None) == [("role", 2)]
    assert build_profile_changes() == []


def test_all_fields_in_fixed_order():
    changes = build_profile_changes(avatar_url="b.png", user_name="Bob", role=Role.ESTIMATOR)
    assert changes == [("role", 1), ("username", "Bob"), ("avatar_url", "b.png")]
    assert touches_role(changes)
    assert not touches_role(changes[1:])


def test_unknown_field_is_rejected():
    with pytest.raises(TypeError):
        build_profile_changes(email="bob@example.com")


def test_invalid_role_is_rejected():
    with pytest.raises(ValueError):
        build_profile_changes(role=9)
