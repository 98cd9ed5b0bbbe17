"""Bookings of spots on a course date.

A booking names the course, the date and the user it was made for. The
sum of ``spots`` over a date's bookings is kept at or below the date's
``total_spots`` by `BookingService`; the database does not enforce it.
"""
from __future__ import annotations

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from courses.models import Course, CourseDate


class CourseDateBooking(models.Model):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="bookings")
    date = models.ForeignKey(CourseDate, on_delete=models.CASCADE, related_name="bookings")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookings")
    spots = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(condition=Q(spots__gte=1), name="booking_spots_positive"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.user_id}->{self.date_id} x{self.spots}"
