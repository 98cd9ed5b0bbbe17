"""API routes (v1) plus the OpenAPI document and its Swagger UI."""
from django.urls import path
from drf_spectacular.views import SpectacularJSONAPIView, SpectacularSwaggerView

from . import views

COURSE = "api/v1/courses/<int:course_id>"
DATE = COURSE + "/dates/<uuid:date_id>"

urlpatterns = [
    path("api/v1/openapi.json", SpectacularJSONAPIView.as_view(), name="schema"),
    path("api-docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # Courses
    path("api/v1/courses", views.CourseListView.as_view(), name="course-list"),
    path("api/v1/courses/categories", views.CourseCategoryListView.as_view(), name="course-categories"),
    path(COURSE, views.CourseDetailView.as_view(), name="course-detail"),
    # Dates
    path(COURSE + "/dates", views.CourseDateListView.as_view(), name="coursedate-list"),
    path(DATE, views.CourseDateDetailView.as_view(), name="coursedate-detail"),
    # Bookings
    path(DATE + "/bookings", views.CourseDateBookingListView.as_view(), name="booking-list"),
    path(DATE + "/bookings/<int:booking_id>", views.CourseDateBookingDetailView.as_view(), name="booking-detail"),
    # Users
    path("api/v1/users/login", views.LoginView.as_view(), name="login"),
    path("api/v1/users/logout", views.LogoutView.as_view(), name="logout"),
    path("api/v1/users/me", views.MeView.as_view(), name="me"),
    path("api/v1/users/bookings", views.UserBookingsView.as_view(), name="user-bookings"),
]
