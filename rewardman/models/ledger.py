"""Points ledger models."""

from django.db import models
from django.utils.translation import gettext_lazy as _

from rewardman.exceptions import RewardmanError


class LedgerReason(models.TextChoices):
    ORDER_PURCHASE = "order_purchase", _("Order purchase")
    REFERRAL_SIGNUP = "referral_signup", _("Referral signup")
    REFERRAL_FIRST_ORDER = "referral_first_order", _("Referral first order")
    REDEMPTION = "redemption", _("Redemption")
    MANUAL_ADJUSTMENT = "manual_adjustment", _("Manual adjustment")


class LedgerEntry(models.Model):
    """
    Immutable point credit or debit.

    Entries of one account are totally ordered by ``sequence`` (1, 2, 3...).
    ``running_balance`` is the balance after applying this entry, so the
    latest entry carries the account balance. Append-only: entries are
    never updated or deleted.
    """

    account = models.ForeignKey(
        "rewardman.Account",
        on_delete=models.PROTECT,
        related_name="ledger_entries",
        verbose_name=_("account"),
    )
    sequence = models.PositiveIntegerField(_("sequence"))
    delta = models.IntegerField(
        _("delta"),
        help_text=_("Positive for credits, negative for debits"),
    )
    reason = models.CharField(
        _("reason"),
        max_length=30,
        choices=LedgerReason.choices,
    )
    running_balance = models.IntegerField(_("running balance"))

    order = models.ForeignKey(
        "rewardman.Order",
        on_delete=models.PROTECT,
        related_name="ledger_entries",
        null=True,
        blank=True,
        verbose_name=_("order"),
    )
    description = models.CharField(_("description"), max_length=200, blank=True)
    created_by = models.CharField(_("created by"), max_length=100, blank=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        db_table = "rewardman_ledger_entry"
        verbose_name = _("ledger entry")
        verbose_name_plural = _("ledger entries")
        ordering = ["account", "sequence"]
        constraints = [
            models.UniqueConstraint(
                fields=["account", "sequence"],
                name="rewardman_unique_ledger_sequence",
            ),
            models.CheckConstraint(
                condition=models.Q(running_balance__gte=0),
                name="rewardman_ledger_balance_non_negative",
            ),
            models.CheckConstraint(
                condition=~models.Q(delta=0),
                name="rewardman_ledger_delta_non_zero",
            ),
        ]
        indexes = [
            models.Index(fields=["order", "reason"], name="rewardman_ledger_order_idx"),
        ]

    def __str__(self):
        sign = "+" if self.delta > 0 else ""
        return f"{self.account_id}#{self.sequence}: {sign}{self.delta}pts ({self.reason})"

    @property
    def is_credit(self) -> bool:
        return self.delta > 0

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise RewardmanError("LEDGER_IMMUTABLE", entry_id=self.pk)
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RewardmanError("LEDGER_IMMUTABLE", entry_id=self.pk)
