"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import F, Q


class Content(models.Model):
    """Persistence model for purchasable performances."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    image_url = models.URLField(max_length=500, blank=True, default="")
    vr_url = models.URLField(max_length=500, blank=True, default="")
    duration_minutes = models.PositiveIntegerField(default=0)
    tags = models.JSONField(default=list, blank=True)
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="contents",
        null=True,
        blank=True,
    )
    ticket_price_standard = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    ticket_price_vip = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    ticket_price_premium = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total_tickets = models.PositiveIntegerField(default=0)
    unlimited_tickets = models.BooleanField(default=False)
    available_tickets = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="checkout_co_created_6d2a8e_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(unlimited_tickets=True)
                | Q(available_tickets__lte=F("total_tickets")),
                name="content_available_within_total",
            ),
        ]

    def __str__(self) -> str:
        return self.title


class OrderGroup(models.Model):
    """Persistence model for a cart checkout and its fee breakdown."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="order_groups",
        null=True,
        blank=True,
    )
    buyer_email = models.EmailField()
    subtotal_amount = models.PositiveIntegerField()
    service_fee_amount = models.PositiveIntegerField(default=0)
    payment_fee_amount = models.PositiveIntegerField(default=0)
    tax_amount = models.PositiveIntegerField(default=0)
    total_amount = models.PositiveIntegerField()
    currency = models.CharField(max_length=3)
    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.PENDING
    )
    payment_session_id = models.CharField(
        max_length=255, unique=True, null=True, blank=True
    )
    checkout_attempts = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.id} ({self.status})"


class Order(models.Model):
    """Persistence model for one cart line's purchase."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"

    class Tier(models.TextChoices):
        STANDARD = "standard", "Standard"
        VIP = "vip", "VIP"
        PREMIUM = "premium", "Premium"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    content = models.ForeignKey(
        Content, on_delete=models.PROTECT, related_name="orders"
    )
    group = models.ForeignKey(
        OrderGroup,
        on_delete=models.CASCADE,
        related_name="orders",
        null=True,
        blank=True,
    )
    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="orders",
        null=True,
        blank=True,
    )
    buyer_email = models.EmailField()
    ticket_type = models.CharField(max_length=16, choices=Tier.choices)
    quantity = models.PositiveSmallIntegerField()
    total_amount = models.PositiveIntegerField()
    currency = models.CharField(max_length=3)
    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.PENDING
    )
    payment_session_id = models.CharField(
        max_length=255, unique=True, null=True, blank=True
    )
    checkout_attempts = models.PositiveSmallIntegerField(default=0)
    # Tickets issued after payment beyond the content's remaining capacity.
    oversold_quantity = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["group"], name="checkout_or_group_i_4b1f0c_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=1) & Q(quantity__lte=10),
                name="order_quantity_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.ticket_type} x{self.quantity} ({self.status})"


class Ticket(models.Model):
    """Persistence model for issued admission codes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="tickets")
    content = models.ForeignKey(
        Content, on_delete=models.PROTECT, related_name="tickets"
    )
    ticket_type = models.CharField(max_length=16, choices=Order.Tier.choices)
    code = models.CharField(max_length=32, unique=True)
    issued_to = models.EmailField()
    used_at = models.DateTimeField(null=True, blank=True)
    used_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="redeemed_tickets",
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["order"], name="checkout_ti_order_i_9c3e71_idx"),
        ]

    def __str__(self) -> str:
        return self.code


class PlatformSettings(models.Model):
    """Single-row platform configuration edited through the admin."""

    SINGLETON_ID = 1

    id = models.PositiveSmallIntegerField(
        primary_key=True, default=SINGLETON_ID, editable=False
    )
    fee_fixed_cents = models.PositiveIntegerField(default=0)
    fee_percent = models.DecimalField(max_digits=6, decimal_places=3, default=0)
    payment_fee_fixed_cents = models.PositiveIntegerField(default=0)
    payment_fee_percent = models.DecimalField(max_digits=6, decimal_places=3, default=0)
    tax_percent = models.DecimalField(max_digits=6, decimal_places=3, default=0)
    app_url = models.URLField(max_length=500, blank=True, default="")
    company_name = models.CharField(max_length=255, blank=True, default="")
    company_email = models.EmailField(blank=True, default="")
    company_address = models.CharField(max_length=500, blank=True, default="")
    support_email = models.EmailField(blank=True, default="")
    smtp_host = models.CharField(max_length=255, blank=True, default="")
    smtp_port = models.PositiveIntegerField(null=True, blank=True)
    smtp_user = models.CharField(max_length=255, blank=True, default="")
    smtp_password = models.CharField(max_length=255, blank=True, default="")
    smtp_from = models.CharField(max_length=255, blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "platform settings"
        verbose_name_plural = "platform settings"

    def __str__(self) -> str:
        return "Platform settings"

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_ID
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "PlatformSettings":
        obj, _ = cls.objects.get_or_create(pk=cls.SINGLETON_ID)
        return obj
