from __future__ import annotations

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from accounts.models import is_lecturer
from accounts.services import UserService


@pytest.mark.django_db
def test_adduser_creates_lecturer():
    out = StringIO()
    call_command("adduser", "lena", "--password", "pw-lena-123", "--lecturer", stdout=out)
    user = UserService().get_user("lena")
    assert is_lecturer(user)
    assert user.check_password("pw-lena-123")
    assert "Created lecturer lena" in out.getvalue()


@pytest.mark.django_db
def test_adduser_refuses_duplicates(participant):
    with pytest.raises(CommandError):
        call_command("adduser", "paula", "--password", "x")
