from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone

from bookings.models import CourseDateBooking
from courses.models import CourseDate


def bookings_url(course, course_date, booking_id=None):
    base = f"/api/v1/courses/{course.pk}/dates/{course_date.pk}/bookings"
    return f"{base}/{booking_id}" if booking_id else base


@pytest.fixture
def booking(course, course_date, participant):
    return CourseDateBooking.objects.create(course=course, date=course_date, user=participant, spots=2)


@pytest.mark.django_db
def test_participant_books_spots(client_for, course, course_date, participant):
    r = client_for(participant).post(bookings_url(course, course_date), {"spots": 3}, format="json")
    assert r.status_code == 201
    body = r.json()
    assert body["user"] == participant.pk
    assert body["course"] == course.pk
    assert body["date"] == str(course_date.pk)
    assert body["spots"] == 3


@pytest.mark.django_db
def test_overbooking_is_400(client_for, course, course_date, participant, booking):
    r = client_for(participant).post(bookings_url(course, course_date), {"spots": 4}, format="json")
    assert r.status_code == 400
    assert r.json()["detail"] == "No open spots left. Tried to book 4 from available 3"
    assert CourseDateBooking.objects.count() == 1


@pytest.mark.django_db
def test_availability_reflects_bookings(anon_client, course, course_date, booking):
    r = anon_client.get(f"/api/v1/courses/{course.pk}/dates/{course_date.pk}")
    assert r.json()["availableSpots"] == 3


@pytest.mark.django_db
@pytest.mark.parametrize("spots", [0, -1, "2", 1.5])
def test_spots_must_be_positive_integer(client_for, course, course_date, participant, spots):
    r = client_for(participant).post(bookings_url(course, course_date), {"spots": spots}, format="json")
    assert r.status_code == 400
    assert not CourseDateBooking.objects.exists()


@pytest.mark.django_db
@pytest.mark.security
def test_booking_requires_login(anon_client, course, course_date):
    assert anon_client.post(bookings_url(course, course_date), {"spots": 1}, format="json").status_code == 403
    assert anon_client.get(bookings_url(course, course_date)).status_code == 403


@pytest.mark.django_db
def test_list_bookings_per_viewer(client_for, course, course_date, booking, other_participant, lecturer, other_lecturer):
    CourseDateBooking.objects.create(course=course, date=course_date, user=other_participant, spots=1)
    url = bookings_url(course, course_date)
    assert [b["id"] for b in client_for(booking.user).get(url).json()] == [booking.pk]
    assert len(client_for(lecturer).get(url).json()) == 2
    assert client_for(other_lecturer).get(url).json() == []


@pytest.mark.django_db
def test_list_bookings_filters_by_date(client_for, course, course_date, booking):
    start = timezone.now() + timedelta(days=30)
    second = CourseDate.objects.create(course=course, start_date=start, end_date=start, total_spots=3)
    r = client_for(booking.user).get(bookings_url(course, second))
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.django_db
def test_booking_detail_access(client_for, course, course_date, booking, other_participant, lecturer, other_lecturer):
    url = bookings_url(course, course_date, booking.pk)
    assert client_for(booking.user).get(url).json()["spots"] == 2
    assert client_for(lecturer).get(url).status_code == 200
    assert client_for(other_participant).get(url).status_code == 403
    assert client_for(other_lecturer).get(url).status_code == 403


@pytest.mark.django_db
def test_booking_must_belong_to_addressed_date(client_for, course, booking):
    start = timezone.now() + timedelta(days=30)
    second = CourseDate.objects.create(course=course, start_date=start, end_date=start, total_spots=3)
    client = client_for(booking.user)
    assert client.get(bookings_url(course, second, booking.pk)).status_code == 404
    assert client.get(bookings_url(course, booking.date, booking.pk + 1)).status_code == 404


@pytest.mark.django_db
def test_update_booking(client_for, course, course_date, booking, other_participant):
    CourseDateBooking.objects.create(course=course, date=course_date, user=other_participant, spots=1)
    client = client_for(booking.user)
    url = bookings_url(course, course_date, booking.pk)

    r = client.put(url, {"spots": 4}, format="json")
    assert r.status_code == 200
    assert r.json()["spots"] == 4

    r = client.put(url, {"spots": 5}, format="json")
    assert r.status_code == 400
    assert r.json()["detail"] == "No open spots left. Tried to book additional 1 from available 0"

    assert client_for(other_participant).put(url, {"spots": 1}, format="json").status_code == 403
    assert CourseDateBooking.objects.get(pk=booking.pk).spots == 4


@pytest.mark.django_db
def test_lecturer_cancels_booking(client_for, course, course_date, booking, lecturer):
    r = client_for(lecturer).delete(bookings_url(course, course_date, booking.pk))
    assert r.status_code == 200
    assert r.json()["id"] == booking.pk
    assert not CourseDateBooking.objects.exists()
