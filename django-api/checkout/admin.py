from django.contrib import admin

from checkout.models import Content, Order, OrderGroup, PlatformSettings, Ticket

# Payment state, amounts and redemption only change through checkout code paths.
GROUP_READONLY_FIELDS = [
    "buyer",
    "buyer_email",
    "subtotal_amount",
    "service_fee_amount",
    "payment_fee_amount",
    "tax_amount",
    "total_amount",
    "currency",
    "status",
    "payment_session_id",
    "checkout_attempts",
    "created_at",
    "updated_at",
]
ORDER_READONLY_FIELDS = [
    "content",
    "group",
    "buyer",
    "buyer_email",
    "ticket_type",
    "quantity",
    "total_amount",
    "currency",
    "status",
    "payment_session_id",
    "checkout_attempts",
    "oversold_quantity",
    "created_at",
    "updated_at",
]
TICKET_READONLY_FIELDS = [
    "order",
    "content",
    "ticket_type",
    "code",
    "issued_to",
    "used_at",
    "used_by",
    "created_at",
]


class CheckoutRecordAdmin(admin.ModelAdmin):
    """Inspection-only admin for records written by checkout and fulfillment."""

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class OrderInline(admin.TabularInline):
    model = Order
    extra = 0
    fields = ["content", "ticket_type", "quantity", "total_amount", "status", "oversold_quantity"]
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 0
    fields = ["code", "ticket_type", "issued_to", "used_at"]
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class OversoldFilter(admin.SimpleListFilter):
    title = "oversold"
    parameter_name = "oversold"

    def lookups(self, request, model_admin):
        return [("yes", "Yes"), ("no", "No")]

    def queryset(self, request, queryset):
        if self.value() == "yes":
            return queryset.filter(oversold_quantity__gt=0)
        if self.value() == "no":
            return queryset.filter(oversold_quantity=0)
        return queryset


@admin.register(Content)
class ContentAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "ticket_price_standard",
        "available_tickets",
        "unlimited_tickets",
        "created_at",
    ]
    list_filter = ["unlimited_tickets"]
    search_fields = ["title", "description"]


@admin.register(OrderGroup)
class OrderGroupAdmin(CheckoutRecordAdmin):
    list_display = ["id", "buyer_email", "total_amount", "currency", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["buyer_email", "payment_session_id"]
    readonly_fields = GROUP_READONLY_FIELDS
    inlines = [OrderInline]


@admin.register(Order)
class OrderAdmin(CheckoutRecordAdmin):
    list_display = [
        "id",
        "content",
        "ticket_type",
        "quantity",
        "total_amount",
        "status",
        "oversold_quantity",
    ]
    list_filter = ["status", "ticket_type", OversoldFilter]
    search_fields = ["buyer_email", "payment_session_id"]
    readonly_fields = ORDER_READONLY_FIELDS
    inlines = [TicketInline]


@admin.register(Ticket)
class TicketAdmin(CheckoutRecordAdmin):
    list_display = ["code", "content", "ticket_type", "issued_to", "used_at"]
    list_filter = ["ticket_type", "content"]
    search_fields = ["code", "issued_to"]
    readonly_fields = TICKET_READONLY_FIELDS


@admin.register(PlatformSettings)
class PlatformSettingsAdmin(admin.ModelAdmin):
    fieldsets = [
        (
            "Fees",
            {
                "fields": [
                    "fee_fixed_cents",
                    "fee_percent",
                    "payment_fee_fixed_cents",
                    "payment_fee_percent",
                    "tax_percent",
                ]
            },
        ),
        (
            "Branding",
            {"fields": ["app_url", "company_name", "company_email", "company_address", "support_email"]},
        ),
        ("SMTP", {"fields": ["smtp_host", "smtp_port", "smtp_user", "smtp_password", "smtp_from"]}),
    ]

    def has_add_permission(self, request):
        return not PlatformSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
