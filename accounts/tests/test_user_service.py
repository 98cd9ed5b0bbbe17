from __future__ import annotations

import pytest

from accounts.models import Role, is_lecturer


@pytest.mark.django_db
def test_add_user_creates_profile_with_role(user_service):
    lecturer = user_service.add_user("lena", "pw-lena-123", lecturer=True)
    participant = user_service.add_user("paula", "pw-paula-123")
    assert lecturer.profile.role == Role.LECTURER
    assert participant.profile.role == Role.PARTICIPANT
    assert is_lecturer(lecturer) and not is_lecturer(participant)


@pytest.mark.django_db
def test_password_check(user_service, participant):
    assert user_service.is_password_valid("paula", "pw-paula-123")
    assert user_service.is_password_valid(participant, "pw-paula-123")
    assert not user_service.is_password_valid("paula", "wrong")
    assert not user_service.is_password_valid("nobody", "pw-paula-123")


@pytest.mark.django_db
def test_lookups(user_service, participant, lecturer):
    assert user_service.get_user("paula") == participant
    assert user_service.get_user("nobody") is None
    assert user_service.get_user_by_id(str(lecturer.pk)) == lecturer
    assert user_service.get_user_by_id("not-a-number") is None
    assert [u.username for u in user_service.get_all_users()] == ["lena", "paula"]


def test_anonymous_user_is_no_lecturer():
    from django.contrib.auth.models import AnonymousUser

    assert is_lecturer(AnonymousUser()) is False
    assert is_lecturer(None) is False
