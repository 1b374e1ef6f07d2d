from django.contrib import admin

from bookings.models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "user_id", "seats", "total_price", "status", "created_at"]
    list_filter = ["status", "event"]
    search_fields = ["id", "user_id"]
    # Status and seats move only through BookingService so capacity stays in sync.
    readonly_fields = [f.name for f in Booking._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
