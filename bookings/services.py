"""Spot bookings and capacity accounting.

Capacity is checked by reading the spots already booked on a date and
comparing before writing. There is no lock or transaction around the
read and the write, so two concurrent requests for the last spots of a
date can both pass the check.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from django.db.models import Sum

from accounts.models import is_lecturer
from config.exceptions import InsufficientSpots
from courses.models import Course, CourseDate

from .models import CourseDateBooking

logger = logging.getLogger(__name__)


class BookingService:
    def _queryset(self):
        return CourseDateBooking.objects.select_related("course", "date", "user")

    def get_booked_spots(self, course: Course, date_id) -> int:
        qs = CourseDateBooking.objects.filter(course=course, date_id=date_id)
        return qs.aggregate(total=Sum("spots"))["total"] or 0

    def get_open_spots(self, course: Course, date_id) -> int:
        course_date = CourseDate.objects.filter(course=course, pk=date_id).only("total_spots").first()
        if course_date is None:
            return 0
        return max(course_date.total_spots - self.get_booked_spots(course, date_id), 0)

    def book_spots(self, course: Course, user, spots: int, date_id) -> CourseDateBooking:
        """Book ``spots`` on a date of ``course`` for ``user``.

        Raises:
            InsufficientSpots: when fewer than ``spots`` are still open.
        """
        open_spots = self.get_open_spots(course, date_id)
        if open_spots < spots:
            raise InsufficientSpots(
                f"No open spots left. Tried to book {spots} from available {open_spots}",
                {"requested": spots, "available": open_spots},
            )
        booking = CourseDateBooking.objects.create(course=course, date_id=date_id, user=user, spots=spots)
        logger.info("User %s booked %d spots on %s/%s", user.pk, spots, course.pk, date_id)
        return booking

    def get_booking(self, booking_id) -> Optional[CourseDateBooking]:
        try:
            return self._queryset().filter(pk=int(booking_id)).first()
        except (TypeError, ValueError):
            return None

    def get_bookings(self, course: Course, date_id, user) -> list[CourseDateBooking]:
        """All bookings on the date for its lecturer, otherwise the user's own."""
        qs = self._queryset().filter(course=course, date_id=date_id)
        if not (is_lecturer(user) and course.is_owner(user)):
            qs = qs.filter(user=user)
        return list(qs)

    def get_all_user_bookings(self, user) -> list[CourseDateBooking]:
        return list(self._queryset().filter(user=user))

    def update_booking(self, booking_id, data: Mapping[str, Any]) -> Optional[CourseDateBooking]:
        """Change the number of spots of a booking.

        Only an increase is checked against the open spots of the date;
        the booking's current spots already count as taken.
        """
        booking = self.get_booking(booking_id)
        if booking is None:
            return None

        spots = data.get("spots")
        if spots is None:
            return booking
        if spots > booking.spots:
            additional = spots - booking.spots
            open_spots = self.get_open_spots(booking.course, booking.date_id)
            if open_spots < additional:
                raise InsufficientSpots(
                    f"No open spots left. Tried to book additional {additional} from available {open_spots}",
                    {"requested": additional, "available": open_spots},
                )
        booking.spots = spots
        booking.save(update_fields=["spots"])
        return booking

    def delete_booking(self, booking_id) -> Optional[CourseDateBooking]:
        booking = self.get_booking(booking_id)
        if booking is None:
            return None
        pk = booking.pk
        booking.delete()
        booking.pk = pk
        logger.info("Booking %s deleted", pk)
        return booking
