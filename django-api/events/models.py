"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models
from django.db.models import F, Q


class Event(models.Model):
    """Persistence model for bookable events.

    ``remaining_capacity`` is only written by the inventory ledger.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    starts_at = models.DateTimeField()
    venue_name = models.CharField(max_length=255, blank=True)
    total_capacity = models.PositiveIntegerField()
    remaining_capacity = models.PositiveIntegerField()
    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["starts_at"]),
            models.Index(fields=["is_published"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(remaining_capacity__gte=0)
                & Q(remaining_capacity__lte=F("total_capacity")),
                name="event_remaining_within_capacity",
            ),
        ]

    def save(self, *args, **kwargs):
        if self._state.adding and self.remaining_capacity is None:
            self.remaining_capacity = self.total_capacity
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.title
