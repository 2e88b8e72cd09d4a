"""Redemption catalog and redemption records."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ItemCategory(models.TextChoices):
    MERCHANDISE = "merchandise", _("Merchandise")
    GIFT_CARD = "gift_card", _("Gift card")


class RedemptionStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    PROCESSING = "processing", _("Processing")
    SHIPPED = "shipped", _("Shipped")
    DELIVERED = "delivered", _("Delivered")


class RedeemableItem(models.Model):
    """Catalog item that can be bought with points."""

    code = models.SlugField(_("code"), max_length=50, unique=True)
    name = models.CharField(_("name"), max_length=200)
    description = models.TextField(_("description"), blank=True)
    points_cost = models.PositiveIntegerField(_("points cost"))
    category = models.CharField(
        _("category"),
        max_length=20,
        choices=ItemCategory.choices,
        default=ItemCategory.MERCHANDISE,
    )
    in_stock = models.BooleanField(
        _("in stock"),
        default=True,
        help_text=_("Ignored for gift cards"),
    )
    is_active = models.BooleanField(_("active"), default=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "rewardman_redeemable_item"
        verbose_name = _("redeemable item")
        verbose_name_plural = _("redeemable items")
        ordering = ["points_cost", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points_cost__gt=0),
                name="rewardman_item_cost_positive",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.points_cost}pts)"

    @property
    def is_available(self) -> bool:
        if not self.is_active:
            return False
        return self.category == ItemCategory.GIFT_CARD or self.in_stock


class Redemption(models.Model):
    """
    Points spent on a catalog item.

    ``points_spent`` and ``item_name`` are frozen at redemption time; later
    catalog edits never change past redemptions.
    """

    STATUS_FLOW = ["pending", "processing", "shipped", "delivered"]

    account = models.ForeignKey(
        "rewardman.Account",
        on_delete=models.PROTECT,
        related_name="redemptions",
        verbose_name=_("account"),
    )
    item = models.ForeignKey(
        RedeemableItem,
        on_delete=models.PROTECT,
        related_name="redemptions",
        verbose_name=_("item"),
    )
    item_name = models.CharField(_("item name"), max_length=200)
    points_spent = models.PositiveIntegerField(_("points spent"))
    ledger_entry = models.OneToOneField(
        "rewardman.LedgerEntry",
        on_delete=models.PROTECT,
        related_name="redemption",
        verbose_name=_("ledger entry"),
    )

    voucher_code = models.CharField(
        _("voucher code"),
        max_length=32,
        blank=True,
        help_text=_("Gift card code, empty for merchandise"),
    )
    delivery_address = models.TextField(_("delivery address"), blank=True)
    pickup_notes = models.TextField(_("pickup notes"), blank=True)
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=RedemptionStatus.choices,
        default=RedemptionStatus.PENDING,
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "rewardman_redemption"
        verbose_name = _("redemption")
        verbose_name_plural = _("redemptions")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.account_id}: {self.item_name} (-{self.points_spent}pts)"

    def can_transition_to(self, status: str) -> bool:
        """Forward-only fulfilment: one step at a time."""
        flow = self.STATUS_FLOW
        current = flow.index(str(self.status))
        return str(status) in flow and flow.index(str(status)) == current + 1
