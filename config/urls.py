"""URL routing for the course booking service.

Admin plus the versioned REST API and its documentation.
"""
from django.contrib import admin
from django.urls import include, path


urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("api.urls")),
]
