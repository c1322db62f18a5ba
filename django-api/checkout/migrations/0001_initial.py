import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Content",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("image_url", models.URLField(blank=True, default="", max_length=500)),
                ("vr_url", models.URLField(blank=True, default="", max_length=500)),
                ("duration_minutes", models.PositiveIntegerField(default=0)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("ticket_price_standard", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("ticket_price_vip", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("ticket_price_premium", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("total_tickets", models.PositiveIntegerField(default=0)),
                ("unlimited_tickets", models.BooleanField(default=False)),
                ("available_tickets", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "seller",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="contents",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["-created_at"], name="checkout_co_created_6d2a8e_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("unlimited_tickets", True), ("available_tickets__lte", models.F("total_tickets")), _connector="OR"),
                        name="content_available_within_total",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderGroup",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("buyer_email", models.EmailField(max_length=254)),
                ("subtotal_amount", models.PositiveIntegerField()),
                ("service_fee_amount", models.PositiveIntegerField(default=0)),
                ("payment_fee_amount", models.PositiveIntegerField(default=0)),
                ("tax_amount", models.PositiveIntegerField(default=0)),
                ("total_amount", models.PositiveIntegerField()),
                ("currency", models.CharField(max_length=3)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("paid", "Paid")], default="pending", max_length=16)),
                ("payment_session_id", models.CharField(blank=True, max_length=255, null=True, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "buyer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="order_groups",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("buyer_email", models.EmailField(max_length=254)),
                ("ticket_type", models.CharField(choices=[("standard", "Standard"), ("vip", "VIP"), ("premium", "Premium")], max_length=16)),
                ("quantity", models.PositiveSmallIntegerField()),
                ("total_amount", models.PositiveIntegerField()),
                ("currency", models.CharField(max_length=3)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("paid", "Paid")], default="pending", max_length=16)),
                ("payment_session_id", models.CharField(blank=True, max_length=255, null=True, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "buyer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "content",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="checkout.content",
                    ),
                ),
                (
                    "group",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="orders",
                        to="checkout.ordergroup",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [models.Index(fields=["group"], name="checkout_or_group_i_4b1f0c_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gte", 1), ("quantity__lte", 10)),
                        name="order_quantity_range",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Ticket",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("ticket_type", models.CharField(choices=[("standard", "Standard"), ("vip", "VIP"), ("premium", "Premium")], max_length=16)),
                ("code", models.CharField(max_length=32, unique=True)),
                ("issued_to", models.EmailField(max_length=254)),
                ("used_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "content",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tickets",
                        to="checkout.content",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tickets",
                        to="checkout.order",
                    ),
                ),
                (
                    "used_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="redeemed_tickets",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [models.Index(fields=["order"], name="checkout_ti_order_i_9c3e71_idx")],
            },
        ),
        migrations.CreateModel(
            name="PlatformSettings",
            fields=[
                ("id", models.PositiveSmallIntegerField(default=1, editable=False, primary_key=True, serialize=False)),
                ("fee_fixed_cents", models.PositiveIntegerField(default=0)),
                ("fee_percent", models.DecimalField(decimal_places=3, default=0, max_digits=6)),
                ("payment_fee_fixed_cents", models.PositiveIntegerField(default=0)),
                ("payment_fee_percent", models.DecimalField(decimal_places=3, default=0, max_digits=6)),
                ("tax_percent", models.DecimalField(decimal_places=3, default=0, max_digits=6)),
                ("app_url", models.URLField(blank=True, default="", max_length=500)),
                ("company_name", models.CharField(blank=True, default="", max_length=255)),
                ("company_email", models.EmailField(blank=True, default="", max_length=254)),
                ("company_address", models.CharField(blank=True, default="", max_length=500)),
                ("support_email", models.EmailField(blank=True, default="", max_length=254)),
                ("smtp_host", models.CharField(blank=True, default="", max_length=255)),
                ("smtp_port", models.PositiveIntegerField(blank=True, null=True)),
                ("smtp_user", models.CharField(blank=True, default="", max_length=255)),
                ("smtp_password", models.CharField(blank=True, default="", max_length=255)),
                ("smtp_from", models.CharField(blank=True, default="", max_length=255)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "platform settings",
                "verbose_name_plural": "platform settings",
            },
        ),
    ]
