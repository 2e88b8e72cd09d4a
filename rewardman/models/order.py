"""Order models."""

import uuid
from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class OrderStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    PREPARING = "preparing", _("Preparing")
    READY = "ready", _("Ready")
    COMPLETED = "completed", _("Completed")
    CANCELLED = "cancelled", _("Cancelled")


class Order(models.Model):
    """
    Customer order.

    Lifecycle:
        pending -> preparing -> ready -> completed
        pending -> cancelled
        preparing -> cancelled

    ``total`` is always recomputed from menu prices at placement.
    ``points_earned`` is set once at completion and never changes after.
    """

    TRANSITIONS = {
        "pending": {"preparing", "cancelled"},
        "preparing": {"ready", "cancelled"},
        "ready": {"completed"},
        "completed": set(),
        "cancelled": set(),
    }

    ref = models.UUIDField(default=uuid.uuid4, editable=False, unique=True)
    account = models.ForeignKey(
        "rewardman.Account",
        on_delete=models.PROTECT,
        related_name="orders",
        null=True,
        blank=True,
        verbose_name=_("account"),
        help_text=_("Empty for guest orders"),
    )

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
    )
    total = models.DecimalField(_("total"), max_digits=10, decimal_places=2)
    pickup_notes = models.TextField(_("pickup notes"), blank=True)

    geofence_check_passed = models.BooleanField(
        _("geofence check passed"),
        null=True,
        blank=True,
        help_text=_("Empty when no location was supplied at placement"),
    )
    points_earned = models.PositiveIntegerField(_("points earned"), default=0)
    cancel_reason = models.CharField(_("cancel reason"), max_length=200, blank=True)

    placed_at = models.DateTimeField(_("placed at"), auto_now_add=True, db_index=True)
    completed_at = models.DateTimeField(_("completed at"), null=True, blank=True)
    cancelled_at = models.DateTimeField(_("cancelled at"), null=True, blank=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "rewardman_order"
        verbose_name = _("order")
        verbose_name_plural = _("orders")
        ordering = ["-placed_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total__gte=0),
                name="rewardman_order_total_non_negative",
            ),
        ]

    def __str__(self):
        return f"{str(self.ref)[:8]} {self.status} {self.total}"

    @property
    def geofence_warning(self) -> bool:
        """A location was checked at placement and was outside the zone."""
        return self.geofence_check_passed is False

    @property
    def is_terminal(self) -> bool:
        return self.status in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)

    def can_transition_to(self, status: str) -> bool:
        return str(status) in self.TRANSITIONS.get(str(self.status), set())


class OrderItem(models.Model):
    """Order line with the menu price frozen at placement."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("order"),
    )
    position = models.PositiveIntegerField(_("position"))
    menu_item_code = models.CharField(_("menu item"), max_length=50)
    name = models.CharField(_("name"), max_length=200)
    unit_price = models.DecimalField(_("unit price"), max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(_("quantity"))

    class Meta:
        db_table = "rewardman_order_item"
        verbose_name = _("order item")
        verbose_name_plural = _("order items")
        ordering = ["order", "position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="rewardman_order_item_quantity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name="rewardman_order_item_price_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.quantity}x {self.name}"

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity
