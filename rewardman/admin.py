"""Rewardman admin.

Ledger entries are read-only everywhere: points are changed through
services.ledger (e.g. manual adjustments), never by editing rows.
"""

from django.contrib import admin
from django.utils.html import format_html

from rewardman.models import (
    Account,
    LedgerEntry,
    MenuItem,
    Order,
    OrderItem,
    RedeemableItem,
    Redemption,
    Reservation,
)


def _points(delta):
    if delta > 0:
        return format_html('<span style="color:green">+{}</span>', delta)
    return format_html('<span style="color:red">{}</span>', delta)


# ===========================================
# Accounts & ledger
# ===========================================


class LedgerEntryInline(admin.TabularInline):
    model = LedgerEntry
    extra = 0
    fields = ["sequence", "delta", "reason", "running_balance", "order", "description", "created_at"]
    readonly_fields = fields
    ordering = ["-sequence"]

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = [
        "code",
        "display_name",
        "points_balance",
        "referral_code",
        "referred_by",
        "first_order_completed",
        "is_active",
    ]
    list_filter = ["is_active", "first_order_completed"]
    search_fields = ["code", "display_name", "email", "referral_code"]
    # Referrals are set once at signup by services.accounts
    readonly_fields = [
        "uuid",
        "referral_code",
        "referred_by",
        "first_order_completed",
        "created_at",
        "updated_at",
    ]
    inlines = [LedgerEntryInline]

    def points_balance(self, obj):
        return obj.points_balance

    points_balance.short_description = "Points"


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = [
        "created_at",
        "account",
        "sequence",
        "delta_display",
        "running_balance",
        "reason",
        "description",
    ]
    list_filter = ["reason"]
    search_fields = ["account__code", "description"]
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def delta_display(self, obj):
        return _points(obj.delta)

    delta_display.short_description = "Points"


# ===========================================
# Menu & orders
# ===========================================


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "category", "price", "is_available"]
    list_filter = ["category", "is_available"]
    search_fields = ["code", "name"]


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ["position", "menu_item_code", "name", "unit_price", "quantity"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        "ref_short",
        "account",
        "status",
        "total",
        "points_earned",
        "geofence_badge",
        "placed_at",
    ]
    list_filter = ["status", "geofence_check_passed"]
    search_fields = ["ref", "account__code"]
    # Status moves go through services.orders so points stay consistent
    readonly_fields = [
        "ref",
        "account",
        "status",
        "total",
        "geofence_check_passed",
        "points_earned",
        "placed_at",
        "completed_at",
        "cancelled_at",
        "cancel_reason",
    ]
    inlines = [OrderItemInline]

    def ref_short(self, obj):
        return str(obj.ref)[:8]

    ref_short.short_description = "Ref"

    def geofence_badge(self, obj):
        if obj.geofence_check_passed is None:
            return "-"
        color = "#28a745" if obj.geofence_check_passed else "#dc3545"
        label = "in zone" if obj.geofence_check_passed else "outside"
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            color,
            label,
        )

    geofence_badge.short_description = "Geofence"


# ===========================================
# Reservations
# ===========================================


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ["name", "date", "time", "party_size", "status", "account"]
    list_filter = ["status", "date"]
    search_fields = ["name", "email", "account__code"]
    readonly_fields = ["status", "confirmed_at", "cancelled_at", "created_at"]


# ===========================================
# Redemptions
# ===========================================


@admin.register(RedeemableItem)
class RedeemableItemAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "category", "points_cost", "in_stock", "is_active"]
    list_filter = ["category", "in_stock", "is_active"]
    search_fields = ["code", "name"]


@admin.register(Redemption)
class RedemptionAdmin(admin.ModelAdmin):
    list_display = ["created_at", "account", "item_name", "points_spent", "status"]
    list_filter = ["status"]
    search_fields = ["account__code", "item_name", "voucher_code"]
    readonly_fields = [
        "account",
        "item",
        "item_name",
        "points_spent",
        "ledger_entry",
        "voucher_code",
        "status",
        "created_at",
    ]

    # Each redemption is backed by a ledger debit; status moves through
    # services.redemptions.update_status
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
