"""REST API v1 endpoints.

Views stay thin: they look records up through the service classes, apply
permission checks and serialize results. Request bodies are validated
against the JSON schemas before a handler runs.
"""
from __future__ import annotations

from django.conf import settings
from django.http import Http404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import generics, serializers, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.tokens import AuthService
from bookings.services import BookingService
from courses.services import CourseService
from .permissions import (
    IsAuthenticatedUser,
    IsBookingOwnerOrCourseLecturer,
    IsCourseOwnerOrReadOnly,
    IsLecturerOrReadOnly,
)
from .serializers import (
    BookingRequestSerializer,
    CourseDateBookingSerializer,
    CourseDateRequestSerializer,
    CourseDateSerializer,
    CourseRequestSerializer,
    CourseSerializer,
    LoginRequestSerializer,
    LoginResultSerializer,
    UserSerializer,
)
from .throttling import LoginRateThrottle
from .validation import validate_request

SCHEMA_DIR_REFS = ["./"]


class BaseAPIView(APIView):
    """APIView with lazy authentication.

    The token is only verified once a permission check or handler reads
    ``request.user``.
    """

    course_service_class = CourseService
    booking_service_class = BookingService

    def perform_authentication(self, request):
        pass

    @property
    def courses(self) -> CourseService:
        return self.course_service_class()

    @property
    def bookings(self) -> BookingService:
        return self.booking_service_class()

    def get_course_or_404(self, course_id):
        course = self.courses.get_course(course_id)
        if course is None:
            raise Http404("Course not found.")
        return course

    def get_course_date_or_404(self, course, date_id):
        course_date = self.courses.get_course_date(course, date_id)
        if course_date is None:
            raise Http404("Course date not found.")
        return course_date


@extend_schema(tags=["Courses"])
class CourseListView(BaseAPIView, generics.GenericAPIView):
    permission_classes = [IsLecturerOrReadOnly]
    serializer_class = CourseSerializer
    filterset_fields = ["category"]
    search_fields = ["title", "description", "organiser", "lecturer__username"]
    ordering_fields = ["title", "price", "id"]

    def get_queryset(self):
        return self.courses.get_all_courses()

    @extend_schema(operation_id="getCourses", summary="List all courses")
    def get(self, request):
        courses = self.filter_queryset(self.get_queryset())
        return Response(CourseSerializer(courses, many=True).data)

    @extend_schema(
        operation_id="addCourse",
        summary="Create a course (lecturers only)",
        request=CourseRequestSerializer,
        responses={201: CourseSerializer, 400: OpenApiResponse(description="Unknown lecturer or invalid body")},
    )
    @validate_request("course.requestbody.schema.json", SCHEMA_DIR_REFS)
    def post(self, request):
        course = self.courses.add_course(request.data, lecturer=request.user)
        return Response(CourseSerializer(course).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Courses"])
class CourseCategoryListView(BaseAPIView):
    @extend_schema(operation_id="getCourseCategories", responses={200: serializers.ListField(child=serializers.CharField())})
    def get(self, request):
        return Response(self.courses.get_course_categories())


@extend_schema(tags=["Courses"])
class CourseDetailView(BaseAPIView):
    permission_classes = [IsLecturerOrReadOnly, IsCourseOwnerOrReadOnly]

    def get_object(self, course_id):
        course = self.get_course_or_404(course_id)
        self.check_object_permissions(self.request, course)
        return course

    @extend_schema(operation_id="getCourse", responses={200: CourseSerializer})
    def get(self, request, course_id):
        return Response(CourseSerializer(self.get_object(course_id)).data)

    @extend_schema(
        operation_id="updateCourse",
        request=CourseRequestSerializer(partial=True),
        responses={200: CourseSerializer},
    )
    @validate_request("coursechange.requestbody.schema.json", SCHEMA_DIR_REFS)
    def put(self, request, course_id):
        self.get_object(course_id)
        course = self.courses.update_course(course_id, request.data)
        return Response(CourseSerializer(course).data)

    @extend_schema(operation_id="deleteCourse", responses={200: CourseSerializer})
    def delete(self, request, course_id):
        self.get_object(course_id)
        course = self.courses.delete_course(course_id)
        return Response(CourseSerializer(course).data)


@extend_schema(tags=["Dates"])
class CourseDateListView(BaseAPIView):
    permission_classes = [IsLecturerOrReadOnly, IsCourseOwnerOrReadOnly]

    @extend_schema(operation_id="getCourseDates", responses={200: CourseDateSerializer(many=True)})
    def get(self, request, course_id):
        course = self.get_course_or_404(course_id)
        return Response(CourseDateSerializer(course.dates.all(), many=True).data)

    @extend_schema(
        operation_id="addCourseDate",
        request=CourseDateRequestSerializer,
        responses={201: CourseDateSerializer},
    )
    @validate_request("coursedate.requestbody.schema.json", SCHEMA_DIR_REFS)
    def post(self, request, course_id):
        course = self.get_course_or_404(course_id)
        self.check_object_permissions(request, course)
        course_date = self.courses.add_course_date(course_id, request.data)
        return Response(CourseDateSerializer(course_date).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Dates"])
class CourseDateDetailView(BaseAPIView):
    permission_classes = [IsLecturerOrReadOnly, IsCourseOwnerOrReadOnly]

    def get_object(self, course_id, date_id):
        course = self.get_course_or_404(course_id)
        self.check_object_permissions(self.request, course)
        return self.get_course_date_or_404(course, date_id)

    @extend_schema(operation_id="getCourseDate", responses={200: CourseDateSerializer})
    def get(self, request, course_id, date_id):
        return Response(CourseDateSerializer(self.get_object(course_id, date_id)).data)

    @extend_schema(
        operation_id="updateCourseDate",
        request=CourseDateRequestSerializer(partial=True),
        responses={200: CourseDateSerializer},
    )
    @validate_request("coursedatechange.requestbody.schema.json", SCHEMA_DIR_REFS)
    def put(self, request, course_id, date_id):
        self.get_object(course_id, date_id)
        course_date = self.courses.update_course_date(course_id, date_id, request.data)
        return Response(CourseDateSerializer(course_date).data)

    @extend_schema(operation_id="deleteCourseDate", responses={200: CourseDateSerializer})
    def delete(self, request, course_id, date_id):
        self.get_object(course_id, date_id)
        course_date = self.courses.delete_course_date(course_id, date_id)
        return Response(CourseDateSerializer(course_date).data)


@extend_schema(tags=["Bookings"])
class CourseDateBookingListView(BaseAPIView):
    permission_classes = [IsAuthenticatedUser]

    @extend_schema(
        operation_id="getCourseDateBookings",
        summary="Own bookings on a date, or all of them for the course's lecturer",
        responses={200: CourseDateBookingSerializer(many=True)},
    )
    def get(self, request, course_id, date_id):
        course = self.get_course_or_404(course_id)
        course_date = self.get_course_date_or_404(course, date_id)
        bookings = self.bookings.get_bookings(course, course_date.pk, request.user)
        return Response(CourseDateBookingSerializer(bookings, many=True).data)

    @extend_schema(
        operation_id="bookCourseDate",
        request=BookingRequestSerializer,
        responses={
            201: CourseDateBookingSerializer,
            400: OpenApiResponse(description="Not enough open spots"),
        },
    )
    @validate_request("coursedatebooking.requestbody.schema.json", SCHEMA_DIR_REFS)
    def post(self, request, course_id, date_id):
        course = self.get_course_or_404(course_id)
        course_date = self.get_course_date_or_404(course, date_id)
        booking = self.bookings.book_spots(course, request.user, request.data["spots"], course_date.pk)
        return Response(CourseDateBookingSerializer(booking).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Bookings"])
class CourseDateBookingDetailView(BaseAPIView):
    permission_classes = [IsAuthenticatedUser, IsBookingOwnerOrCourseLecturer]

    def get_object(self, course_id, date_id, booking_id):
        course = self.get_course_or_404(course_id)
        course_date = self.get_course_date_or_404(course, date_id)
        booking = self.bookings.get_booking(booking_id)
        if booking is None or booking.course_id != course.pk or booking.date_id != course_date.pk:
            raise Http404("Booking not found.")
        self.check_object_permissions(self.request, booking)
        return booking

    @extend_schema(operation_id="getCourseDateBooking", responses={200: CourseDateBookingSerializer})
    def get(self, request, course_id, date_id, booking_id):
        return Response(CourseDateBookingSerializer(self.get_object(course_id, date_id, booking_id)).data)

    @extend_schema(
        operation_id="updateCourseDateBooking",
        request=BookingRequestSerializer,
        responses={200: CourseDateBookingSerializer},
    )
    @validate_request("coursedatebooking.requestbody.schema.json", SCHEMA_DIR_REFS)
    def put(self, request, course_id, date_id, booking_id):
        self.get_object(course_id, date_id, booking_id)
        booking = self.bookings.update_booking(booking_id, request.data)
        return Response(CourseDateBookingSerializer(booking).data)

    @extend_schema(operation_id="deleteCourseDateBooking", responses={200: CourseDateBookingSerializer})
    def delete(self, request, course_id, date_id, booking_id):
        self.get_object(course_id, date_id, booking_id)
        booking = self.bookings.delete_booking(booking_id)
        return Response(CourseDateBookingSerializer(booking).data)


@extend_schema(tags=["Users"])
class LoginView(BaseAPIView):
    permission_classes = [AllowAny]
    throttle_classes = [LoginRateThrottle]

    @extend_schema(
        operation_id="login",
        request=LoginRequestSerializer,
        responses={
            200: LoginResultSerializer,
            204: OpenApiResponse(description="Already logged in"),
            401: OpenApiResponse(description="Wrong username or password"),
        },
        auth=[],
    )
    @validate_request("login.requestbody.schema.json")
    def post(self, request):
        # A valid token means the client is logged in already; a bad one is a 400
        if request.user.is_authenticated:
            return Response(status=status.HTTP_204_NO_CONTENT)

        result = AuthService().log_in(request.data["username"], request.data["password"])
        if result is None:
            return Response(status=status.HTTP_401_UNAUTHORIZED)

        user, token = result
        response = Response(LoginResultSerializer(user, context={"token": token}).data)
        response.set_cookie(
            settings.TOKEN_COOKIE_NAME,
            token,
            max_age=int(settings.TOKEN_LIFETIME.total_seconds()),
            path="/",
            secure=settings.TOKEN_COOKIE_SECURE,
            httponly=True,
            samesite="Strict",
        )
        return response


@extend_schema(tags=["Users"])
class LogoutView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(operation_id="logout", request=None, responses={204: None}, auth=[])
    def post(self, request):
        response = Response(status=status.HTTP_204_NO_CONTENT)
        response.delete_cookie(settings.TOKEN_COOKIE_NAME, path="/", samesite="Strict")
        return response


@extend_schema(tags=["Users"])
class MeView(BaseAPIView):
    permission_classes = [IsAuthenticatedUser]

    @extend_schema(operation_id="getCurrentUser", responses={200: UserSerializer})
    def get(self, request):
        return Response(UserSerializer(request.user).data)


@extend_schema(tags=["Users", "Bookings"])
class UserBookingsView(BaseAPIView):
    permission_classes = [IsAuthenticatedUser]

    @extend_schema(operation_id="getUserBookings", responses={200: CourseDateBookingSerializer(many=True)})
    def get(self, request):
        return Response(CourseDateBookingSerializer(self.bookings.get_all_user_bookings(request.user), many=True).data)
