"""Courses and their dates.

A `Course` is owned by a lecturer and carries a list of `CourseDate`
records (the sessions a course is held at). Dates belong to exactly one
course and are deleted with it. Date ids are random UUIDs so they can be
handed out before a client knows anything else about the course.
"""
from __future__ import annotations

from decimal import Decimal
import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

# largest value a DecimalField(max_digits=10, decimal_places=2) holds
MAX_PRICE = Decimal("99999999.99")


class CourseCategory(models.TextChoices):
    KONFERENZ = "Konferenz", "Konferenz"
    SPRACHKURS = "Sprachkurs", "Sprachkurs"
    MEETING = "Meeting", "Meeting"
    WEITERBILDUNG = "Weiterbildung", "Weiterbildung"


class Course(models.Model):
    """A bookable course held by a lecturer."""

    lecturer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="courses")
    title = models.CharField(max_length=200, db_index=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0), MaxValueValidator(MAX_PRICE)])
    organiser = models.CharField(max_length=200, blank=True)
    category = models.CharField(max_length=32, choices=CourseCategory.choices, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["title", "id"]
        constraints = [
            models.CheckConstraint(condition=Q(price__gte=0), name="course_price_non_negative"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.title}"

    def is_owner(self, user) -> bool:
        return bool(user and user.is_authenticated and self.lecturer_id == user.id)


class CourseDate(models.Model):
    """One session of a course with a fixed number of spots."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="dates")
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    total_spots = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    location = models.CharField(max_length=200, blank=True)

    class Meta:
        ordering = ["start_date"]
        constraints = [
            models.CheckConstraint(condition=Q(total_spots__gte=1), name="coursedate_total_spots_positive"),
            models.CheckConstraint(condition=Q(end_date__gte=models.F("start_date")), name="coursedate_ends_after_start"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.course_id}@{self.start_date:%Y-%m-%d %H:%M}"
