from django.contrib import admin

from .models import CourseDateBooking


@admin.register(CourseDateBooking)
class CourseDateBookingAdmin(admin.ModelAdmin):
    list_display = ("course", "date", "user", "spots", "created_at")
    search_fields = ("course__title", "user__username")
    list_select_related = ("course", "date", "user")
