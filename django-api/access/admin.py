from django.contrib import admin

from access.models import CourseEnrollment, DownloadEntitlement


class ReadOnlyGrantAdmin(admin.ModelAdmin):
    """Grants are owned by orders; the admin only displays them."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(CourseEnrollment)
class CourseEnrollmentAdmin(ReadOnlyGrantAdmin):
    list_display = ["course", "user_id", "status", "granted_at", "revoked_at"]
    list_filter = ["status"]


@admin.register(DownloadEntitlement)
class DownloadEntitlementAdmin(ReadOnlyGrantAdmin):
    list_display = ["product", "user_id", "downloads_used", "download_limit", "status"]
    list_filter = ["status"]
