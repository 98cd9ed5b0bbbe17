from django.contrib import admin

from .models import Course, CourseDate


class CourseDateInline(admin.TabularInline):
    model = CourseDate
    extra = 0
    fields = ("start_date", "end_date", "total_spots", "location")


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("title", "lecturer", "category", "price", "created_at")
    list_filter = ("category",)
    search_fields = ("title", "description", "organiser", "lecturer__username")
    inlines = [CourseDateInline]
