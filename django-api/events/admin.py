from django.contrib import admin

from events.models import Event


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "starts_at", "total_capacity", "remaining_capacity", "is_published"]
    list_filter = ["is_published"]
    search_fields = ["title", "slug", "venue_name"]
    prepopulated_fields = {"slug": ["title"]}
    readonly_fields = ["remaining_capacity"]

    def get_readonly_fields(self, request, obj=None):
        # Capacity is fixed once an event exists.
        if obj is not None:
            return [*self.readonly_fields, "total_capacity"]
        return self.readonly_fields
