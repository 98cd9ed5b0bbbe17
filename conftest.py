from __future__ import annotations

from datetime import timedelta
import logging

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.services import UserService
from accounts.tokens import AuthService
from courses.models import Course, CourseDate


@pytest.fixture(autouse=True)
def silence_django_request_logger():
    """Reduce noise from expected 4xx in passing tests.

    Many tests intentionally exercise 400/403 paths. Django logs these at
    WARNING via 'django.request'. Lower that logger to ERROR during tests.
    """
    logger = logging.getLogger("django.request")
    old = logger.level
    logger.setLevel(logging.ERROR)
    try:
        yield
    finally:
        logger.setLevel(old)


@pytest.fixture
def user_service():
    return UserService()


@pytest.fixture
def participant(db, user_service):
    return user_service.add_user("paula", "pw-paula-123")


@pytest.fixture
def other_participant(db, user_service):
    return user_service.add_user("otto", "pw-otto-123")


@pytest.fixture
def lecturer(db, user_service):
    return user_service.add_user("lena", "pw-lena-123", lecturer=True)


@pytest.fixture
def other_lecturer(db, user_service):
    return user_service.add_user("lars", "pw-lars-123", lecturer=True)


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def client_for():
    """Build an API client sending a bearer token for ``user``."""

    def _make(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {AuthService().generate_token(user)}")
        return client

    return _make


@pytest.fixture
def course(lecturer):
    course = Course.objects.create(
        lecturer=lecturer,
        title="Python basics",
        description="Three evenings",
        price="120.00",
        organiser="VHS",
        category="Weiterbildung",
    )
    start = timezone.now() + timedelta(days=7)
    CourseDate.objects.create(
        course=course,
        start_date=start,
        end_date=start + timedelta(hours=3),
        total_spots=5,
        location="Room 1",
    )
    return course


@pytest.fixture
def course_date(course):
    return course.dates.get()
