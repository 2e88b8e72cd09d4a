# Initial migration for accounts, ledger, menu, orders, reservations and redemptions

import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "code",
                    models.CharField(
                        help_text="Unique account code (e.g. ACC-001)",
                        max_length=50,
                        unique=True,
                        verbose_name="code",
                    ),
                ),
                ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("display_name", models.CharField(blank=True, max_length=200, verbose_name="name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email")),
                (
                    "referral_code",
                    models.CharField(
                        editable=False,
                        max_length=20,
                        unique=True,
                        verbose_name="referral code",
                    ),
                ),
                (
                    "first_order_completed",
                    models.BooleanField(
                        default=False,
                        help_text="Set on the first completed order; guards the referral bonus",
                        verbose_name="first order completed",
                    ),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "referred_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="referrals",
                        to="rewardman.account",
                        verbose_name="referred by",
                    ),
                ),
            ],
            options={
                "verbose_name": "account",
                "verbose_name_plural": "accounts",
                "db_table": "rewardman_account",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.SlugField(unique=True, verbose_name="code")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("category", models.CharField(blank=True, max_length=50, verbose_name="category")),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="price",
                    ),
                ),
                ("is_available", models.BooleanField(default=True, verbose_name="available")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "menu item",
                "verbose_name_plural": "menu items",
                "db_table": "rewardman_menu_item",
                "ordering": ["category", "name"],
            },
        ),
        migrations.CreateModel(
            name="RedeemableItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.SlugField(unique=True, verbose_name="code")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("points_cost", models.PositiveIntegerField(verbose_name="points cost")),
                (
                    "category",
                    models.CharField(
                        choices=[("merchandise", "Merchandise"), ("gift_card", "Gift card")],
                        default="merchandise",
                        max_length=20,
                        verbose_name="category",
                    ),
                ),
                (
                    "in_stock",
                    models.BooleanField(
                        default=True,
                        help_text="Ignored for gift cards",
                        verbose_name="in stock",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "redeemable item",
                "verbose_name_plural": "redeemable items",
                "db_table": "rewardman_redeemable_item",
                "ordering": ["points_cost", "name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(points_cost__gt=0),
                        name="rewardman_item_cost_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ref", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("preparing", "Preparing"),
                            ("ready", "Ready"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("total", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="total")),
                ("pickup_notes", models.TextField(blank=True, verbose_name="pickup notes")),
                (
                    "geofence_check_passed",
                    models.BooleanField(
                        blank=True,
                        help_text="Empty when no location was supplied at placement",
                        null=True,
                        verbose_name="geofence check passed",
                    ),
                ),
                ("points_earned", models.PositiveIntegerField(default=0, verbose_name="points earned")),
                ("cancel_reason", models.CharField(blank=True, max_length=200, verbose_name="cancel reason")),
                ("placed_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="placed at")),
                ("completed_at", models.DateTimeField(blank=True, null=True, verbose_name="completed at")),
                ("cancelled_at", models.DateTimeField(blank=True, null=True, verbose_name="cancelled at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "account",
                    models.ForeignKey(
                        blank=True,
                        help_text="Empty for guest orders",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="rewardman.account",
                        verbose_name="account",
                    ),
                ),
            ],
            options={
                "verbose_name": "order",
                "verbose_name_plural": "orders",
                "db_table": "rewardman_order",
                "ordering": ["-placed_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(total__gte=0),
                        name="rewardman_order_total_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveIntegerField(verbose_name="position")),
                ("menu_item_code", models.CharField(max_length=50, verbose_name="menu item")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="unit price")),
                ("quantity", models.PositiveIntegerField(verbose_name="quantity")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="rewardman.order",
                        verbose_name="order",
                    ),
                ),
            ],
            options={
                "verbose_name": "order item",
                "verbose_name_plural": "order items",
                "db_table": "rewardman_order_item",
                "ordering": ["order", "position"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gte=1),
                        name="rewardman_order_item_quantity_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(unit_price__gte=0),
                        name="rewardman_order_item_price_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("email", models.EmailField(max_length=254, verbose_name="email")),
                ("phone", models.CharField(blank=True, max_length=30, verbose_name="phone")),
                ("date", models.DateField(verbose_name="date")),
                ("time", models.TimeField(verbose_name="time")),
                ("party_size", models.PositiveIntegerField(verbose_name="party size")),
                ("special_requests", models.TextField(blank=True, verbose_name="special requests")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("confirmed_at", models.DateTimeField(blank=True, null=True, verbose_name="confirmed at")),
                ("cancelled_at", models.DateTimeField(blank=True, null=True, verbose_name="cancelled at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "account",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reservations",
                        to="rewardman.account",
                        verbose_name="account",
                    ),
                ),
            ],
            options={
                "verbose_name": "reservation",
                "verbose_name_plural": "reservations",
                "db_table": "rewardman_reservation",
                "ordering": ["date", "time"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(party_size__gte=1),
                        name="rewardman_reservation_party_size_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sequence", models.PositiveIntegerField(verbose_name="sequence")),
                (
                    "delta",
                    models.IntegerField(
                        help_text="Positive for credits, negative for debits",
                        verbose_name="delta",
                    ),
                ),
                (
                    "reason",
                    models.CharField(
                        choices=[
                            ("order_purchase", "Order purchase"),
                            ("referral_signup", "Referral signup"),
                            ("referral_first_order", "Referral first order"),
                            ("redemption", "Redemption"),
                            ("manual_adjustment", "Manual adjustment"),
                        ],
                        max_length=30,
                        verbose_name="reason",
                    ),
                ),
                ("running_balance", models.IntegerField(verbose_name="running balance")),
                ("description", models.CharField(blank=True, max_length=200, verbose_name="description")),
                ("created_by", models.CharField(blank=True, max_length=100, verbose_name="created by")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to="rewardman.account",
                        verbose_name="account",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to="rewardman.order",
                        verbose_name="order",
                    ),
                ),
            ],
            options={
                "verbose_name": "ledger entry",
                "verbose_name_plural": "ledger entries",
                "db_table": "rewardman_ledger_entry",
                "ordering": ["account", "sequence"],
                "indexes": [
                    models.Index(fields=["order", "reason"], name="rewardman_ledger_order_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("account", "sequence"),
                        name="rewardman_unique_ledger_sequence",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(running_balance__gte=0),
                        name="rewardman_ledger_balance_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("delta", 0), _negated=True),
                        name="rewardman_ledger_delta_non_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Redemption",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("item_name", models.CharField(max_length=200, verbose_name="item name")),
                ("points_spent", models.PositiveIntegerField(verbose_name="points spent")),
                (
                    "voucher_code",
                    models.CharField(
                        blank=True,
                        help_text="Gift card code, empty for merchandise",
                        max_length=32,
                        verbose_name="voucher code",
                    ),
                ),
                ("delivery_address", models.TextField(blank=True, verbose_name="delivery address")),
                ("pickup_notes", models.TextField(blank=True, verbose_name="pickup notes")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("processing", "Processing"),
                            ("shipped", "Shipped"),
                            ("delivered", "Delivered"),
                        ],
                        default="pending",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemptions",
                        to="rewardman.account",
                        verbose_name="account",
                    ),
                ),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemptions",
                        to="rewardman.redeemableitem",
                        verbose_name="item",
                    ),
                ),
                (
                    "ledger_entry",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemption",
                        to="rewardman.ledgerentry",
                        verbose_name="ledger entry",
                    ),
                ),
            ],
            options={
                "verbose_name": "redemption",
                "verbose_name_plural": "redemptions",
                "db_table": "rewardman_redemption",
                "ordering": ["-created_at"],
            },
        ),
    ]
