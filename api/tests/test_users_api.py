from __future__ import annotations

import pytest
from django.core.cache import cache

from accounts.tokens import AuthService
from api.throttling import LoginRateThrottle
from bookings.models import CourseDateBooking

LOGIN = "/api/v1/users/login"


@pytest.mark.django_db
def test_login_sets_session_cookie(anon_client, participant):
    r = anon_client.post(LOGIN, {"username": "paula", "password": "pw-paula-123"}, format="json")
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == participant.pk
    assert body["name"] == "paula"
    assert body["isLecturer"] is False
    assert AuthService().verify_token(body["token"]).id == str(participant.pk)

    cookie = r.cookies["jsession"]
    assert cookie.value == body["token"]
    assert cookie["httponly"] is True
    assert cookie["samesite"] == "Strict"
    assert cookie["path"] == "/"

    # the cookie alone authenticates follow-up requests
    assert anon_client.get("/api/v1/users/me").json()["name"] == "paula"


@pytest.mark.django_db
def test_login_with_wrong_password(anon_client, participant):
    r = anon_client.post(LOGIN, {"username": "paula", "password": "nope"}, format="json")
    assert r.status_code == 401
    assert "jsession" not in r.cookies


@pytest.mark.django_db
def test_login_body_is_validated(anon_client):
    assert anon_client.post(LOGIN, {"username": "paula"}, format="json").status_code == 400


@pytest.mark.django_db
def test_login_while_logged_in(client_for, anon_client, participant):
    body = {"username": "paula", "password": "pw-paula-123"}
    assert client_for(participant).post(LOGIN, body, format="json").status_code == 204

    anon_client.credentials(HTTP_AUTHORIZATION="Bearer forged")
    assert anon_client.post(LOGIN, body, format="json").status_code == 400


@pytest.mark.django_db
@pytest.mark.security
def test_login_is_throttled(anon_client, participant, monkeypatch):
    cache.clear()
    monkeypatch.setattr(LoginRateThrottle, "rate", "2/min", raising=False)
    body = {"username": "paula", "password": "nope"}
    codes = [anon_client.post(LOGIN, body, format="json").status_code for _ in range(3)]
    assert codes == [401, 401, 429]
    cache.clear()


def test_logout_clears_cookie(anon_client):
    r = anon_client.post("/api/v1/users/logout")
    assert r.status_code == 204
    assert r.cookies["jsession"].value == ""
    assert r.cookies["jsession"]["max-age"] == 0


@pytest.mark.django_db
def test_me(client_for, anon_client, lecturer):
    r = client_for(lecturer).get("/api/v1/users/me")
    assert r.status_code == 200
    assert r.json() == {"id": lecturer.pk, "name": "lena", "isLecturer": True}
    assert anon_client.get("/api/v1/users/me").status_code == 403


@pytest.mark.django_db
@pytest.mark.security
def test_me_with_token_of_deleted_user(client_for, participant):
    client = client_for(participant)
    participant.delete()
    assert client.get("/api/v1/users/me").status_code == 400


@pytest.mark.django_db
def test_user_bookings(client_for, course, course_date, participant, other_participant):
    own = CourseDateBooking.objects.create(course=course, date=course_date, user=participant, spots=1)
    CourseDateBooking.objects.create(course=course, date=course_date, user=other_participant, spots=1)
    r = client_for(participant).get("/api/v1/users/bookings")
    assert r.status_code == 200
    assert [b["id"] for b in r.json()] == [own.pk]


@pytest.mark.django_db
@pytest.mark.security
def test_bearer_header_without_token_is_400(anon_client):
    anon_client.credentials(HTTP_AUTHORIZATION="Bearer")
    assert anon_client.get("/api/v1/users/me").status_code == 400
