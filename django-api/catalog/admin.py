from django.contrib import admin

from catalog.models import Course, DigitalProduct


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ["title", "price", "is_published"]
    list_filter = ["is_published"]
    search_fields = ["title", "slug"]


@admin.register(DigitalProduct)
class DigitalProductAdmin(admin.ModelAdmin):
    list_display = ["title", "product_type", "price", "download_limit", "is_published"]
    list_filter = ["product_type", "is_published"]
    search_fields = ["title", "slug"]
