"""Django ORM models (persistence layer) for access grants.

Rows are created by order fulfillment and revoked by refunds; nothing else
writes them.
"""

import uuid

from django.db import models
from django.db.models import Q


class GrantStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    REVOKED = "revoked", "Revoked"


class CourseEnrollment(models.Model):
    """A user's right to take a purchased course."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(db_index=True)
    course = models.ForeignKey(
        "catalog.Course", on_delete=models.PROTECT, related_name="enrollments"
    )
    order_line = models.OneToOneField(
        "orders.OrderLine", on_delete=models.PROTECT, related_name="enrollment"
    )
    status = models.CharField(
        max_length=20, choices=GrantStatus.choices, default=GrantStatus.ACTIVE
    )
    granted_at = models.DateTimeField(auto_now_add=True)
    revoked_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "course"],
                condition=Q(status="active"),
                name="enrollment_one_active_per_user_course",
            ),
        ]


class DownloadEntitlement(models.Model):
    """A user's right to download a purchased digital product."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(db_index=True)
    product = models.ForeignKey(
        "catalog.DigitalProduct", on_delete=models.PROTECT, related_name="entitlements"
    )
    order_line = models.OneToOneField(
        "orders.OrderLine", on_delete=models.PROTECT, related_name="entitlement"
    )
    download_limit = models.PositiveIntegerField()
    downloads_used = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20, choices=GrantStatus.choices, default=GrantStatus.ACTIVE
    )
    granted_at = models.DateTimeField(auto_now_add=True)
    revoked_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "product"],
                condition=Q(status="active"),
                name="entitlement_one_active_per_user_product",
            ),
        ]
