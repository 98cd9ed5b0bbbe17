"""Serializers for REST API v1.

Responses use the camelCase field names the booking frontend expects.
Request bodies are validated against the JSON schemas (see
`api.validation`); the request serializers below only describe those
bodies in the OpenAPI document.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models import Sum
from rest_framework import serializers

from accounts.models import is_lecturer
from bookings.models import CourseDateBooking
from courses.models import MAX_PRICE, Course, CourseCategory, CourseDate

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="username", read_only=True)
    isLecturer = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ("id", "name", "isLecturer")

    def get_isLecturer(self, obj) -> bool:
        return is_lecturer(obj)


class LoginResultSerializer(UserSerializer):
    token = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ("token",)

    def get_token(self, obj) -> str:
        return self.context["token"]


class CourseDateSerializer(serializers.ModelSerializer):
    startDate = serializers.DateTimeField(source="start_date")
    endDate = serializers.DateTimeField(source="end_date")
    totalSpots = serializers.IntegerField(source="total_spots", min_value=1)
    availableSpots = serializers.SerializerMethodField()

    class Meta:
        model = CourseDate
        fields = ("id", "startDate", "endDate", "totalSpots", "availableSpots", "location")

    def get_availableSpots(self, obj) -> int:
        booked = getattr(obj, "booked_spots", None)
        if booked is None:
            booked = obj.bookings.aggregate(total=Sum("spots"))["total"] or 0
        return max(obj.total_spots - booked, 0)


class CourseSerializer(serializers.ModelSerializer):
    lecturer = UserSerializer(read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False)
    dates = CourseDateSerializer(many=True, read_only=True)

    class Meta:
        model = Course
        fields = ("id", "title", "description", "price", "organiser", "lecturer", "category", "dates")


class CourseDateBookingSerializer(serializers.ModelSerializer):
    user = serializers.IntegerField(source="user_id", read_only=True)
    course = serializers.IntegerField(source="course_id", read_only=True)
    date = serializers.UUIDField(source="date_id", read_only=True)

    class Meta:
        model = CourseDateBooking
        fields = ("id", "user", "spots", "course", "date")


# Request bodies (documentation only)


class CourseDateRequestSerializer(serializers.Serializer):
    startDate = serializers.DateTimeField()
    endDate = serializers.DateTimeField()
    totalSpots = serializers.IntegerField(min_value=1)
    location = serializers.CharField(required=False)


class CourseRequestSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, max_value=MAX_PRICE)
    organiser = serializers.CharField(required=False)
    lecturer = serializers.CharField(required=False, help_text="Username of the lecturer; defaults to the caller.")
    category = serializers.ChoiceField(choices=CourseCategory.choices, required=False)
    dates = CourseDateRequestSerializer(many=True, required=False)


class BookingRequestSerializer(serializers.Serializer):
    spots = serializers.IntegerField(min_value=1)


class LoginRequestSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()
