"""Course and course date operations.

Views call into `CourseService`; lookups return ``None`` for missing
records and rule violations raise `CourseError`.
"""
from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import logging
from typing import Any, Mapping, Optional
import uuid

from django.db import transaction
from django.db.models import Prefetch, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from accounts.models import is_lecturer
from accounts.services import UserService
from config.exceptions import CourseError

from .models import MAX_PRICE, Course, CourseCategory, CourseDate

logger = logging.getLogger(__name__)

# request field -> model field
COURSE_FIELDS = {"title": "title", "description": "description", "price": "price", "organiser": "organiser"}
DATE_FIELDS = {"startDate": "start_date", "endDate": "end_date", "totalSpots": "total_spots", "location": "location"}


def _parse_moment(value: Any, field: str) -> datetime:
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = parse_datetime(str(value)) if value is not None else None
        except ValueError:
            moment = None
        if moment is None:
            raise CourseError(f"{field} is not a valid date-time: {value!r}")
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def _date_values(data: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, field in DATE_FIELDS.items():
        if key not in data:
            continue
        value = data[key]
        if field in ("start_date", "end_date"):
            value = _parse_moment(value, key)
        values[field] = value
    return values


def _parse_price(value: Any) -> Decimal:
    try:
        price = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as exc:
        raise CourseError(f"price is not a valid amount: {value!r}") from exc
    if not Decimal(0) <= price <= MAX_PRICE:
        raise CourseError(f"price must be between 0 and {MAX_PRICE}")
    return price


def _course_values(data: Mapping[str, Any]) -> dict[str, Any]:
    values = {field: data[key] for key, field in COURSE_FIELDS.items() if key in data}
    if "price" in values:
        values["price"] = _parse_price(values["price"])
    return values


def _check_date_order(start: datetime, end: datetime) -> None:
    if end < start:
        raise CourseError("A course date cannot end before it starts")


class CourseService:
    def __init__(self, user_service: Optional[UserService] = None):
        self.user_service = user_service or UserService()

    def _queryset(self):
        dates = CourseDate.objects.annotate(booked_spots=Coalesce(Sum("bookings__spots"), 0))
        return Course.objects.select_related("lecturer", "lecturer__profile").prefetch_related(
            Prefetch("dates", queryset=dates)
        )

    def get_all_courses(self):
        return self._queryset().all()

    def get_course(self, course_id) -> Optional[Course]:
        try:
            return self._queryset().filter(pk=int(course_id)).first()
        except (TypeError, ValueError):
            return None

    def get_course_date(self, course: Course, date_id) -> Optional[CourseDate]:
        try:
            date_uuid = uuid.UUID(str(date_id))
        except ValueError:
            return None
        return next((d for d in course.dates.all() if d.id == date_uuid), None)

    def get_course_categories(self) -> list[str]:
        return list(CourseCategory.values)

    def _resolve_lecturer(self, username: str):
        lecturer = self.user_service.get_user(username)
        if lecturer is None:
            raise CourseError(f"Unknown lecturer {username}")
        if not is_lecturer(lecturer):
            raise CourseError(f"{username} is not a lecturer")
        return lecturer

    def _resolve_category(self, name: Optional[str]) -> str:
        if not name:
            return ""
        if name not in CourseCategory.values:
            raise CourseError(f"Unknown category {name}!")
        return name

    def _create_dates(self, course: Course, dates) -> list[CourseDate]:
        created = []
        for data in dates:
            values = _date_values(data)
            _check_date_order(values["start_date"], values["end_date"])
            created.append(CourseDate.objects.create(course=course, **values))
        return created

    def add_course(self, data: Mapping[str, Any], lecturer=None) -> Course:
        """Create a course; ``data["lecturer"]`` names the owner by username.

        Without a lecturer name the requesting ``lecturer`` owns the course.
        """
        if data.get("lecturer"):
            lecturer = self._resolve_lecturer(data["lecturer"])
        if lecturer is None:
            raise CourseError("A course needs a lecturer")

        values = _course_values(data)
        with transaction.atomic():
            course = Course.objects.create(
                lecturer=lecturer,
                category=self._resolve_category(data.get("category")),
                **values,
            )
            self._create_dates(course, data.get("dates") or [])
        logger.info("Course %s created by lecturer %s", course.pk, lecturer.username)
        return self.get_course(course.pk)

    def update_course(self, course_id, data: Mapping[str, Any]) -> Optional[Course]:
        """Apply a partial change; a ``dates`` list replaces all dates."""
        course = self.get_course(course_id)
        if course is None:
            return None

        if data.get("lecturer"):
            course.lecturer = self._resolve_lecturer(data["lecturer"])
        if "category" in data:
            course.category = self._resolve_category(data["category"])
        for field, value in _course_values(data).items():
            setattr(course, field, value)

        with transaction.atomic():
            course.save()
            if "dates" in data:
                CourseDate.objects.filter(course=course).delete()
                self._create_dates(course, data["dates"] or [])
        return self.get_course(course.pk)

    def delete_course(self, course_id) -> Optional[Course]:
        course = self.get_course(course_id)
        if course is None:
            return None
        # dates stay in the prefetch cache for the response body
        pk = course.pk
        course.delete()
        course.pk = pk
        logger.info("Course %s deleted", pk)
        return course

    def add_course_date(self, course_id, data: Mapping[str, Any]) -> Optional[CourseDate]:
        course = self.get_course(course_id)
        if course is None:
            return None
        return self._create_dates(course, [data])[0]

    def update_course_date(self, course_id, date_id, data: Mapping[str, Any]) -> Optional[CourseDate]:
        course = self.get_course(course_id)
        if course is None:
            return None
        course_date = self.get_course_date(course, date_id)
        if course_date is None:
            return None

        for field, value in _date_values(data).items():
            setattr(course_date, field, value)
        _check_date_order(course_date.start_date, course_date.end_date)

        if "totalSpots" in data:
            booked = course_date.bookings.aggregate(total=Sum("spots"))["total"] or 0
            if course_date.total_spots < booked:
                raise CourseError(
                    f"Cannot reduce spots to {course_date.total_spots}, {booked} are already booked"
                )
        course_date.save()
        return course_date

    def delete_course_date(self, course_id, date_id) -> Optional[CourseDate]:
        course = self.get_course(course_id)
        if course is None:
            return None
        course_date = self.get_course_date(course, date_id)
        if course_date is None:
            return None
        pk = course_date.pk
        course_date.delete()
        course_date.pk = pk
        return course_date
