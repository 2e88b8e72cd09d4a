"""Account model.

Data architecture:
    Account.points_balance
        Read-only projection: the running balance of the account's latest
        LedgerEntry. There is no stored balance column; the ledger is the
        single source of truth.

    Account.referred_by
        Set once at creation when the customer signs up with a referral
        code. Drives the signup bonus (at creation) and the first-order
        bonus (on the first completed order, guarded by
        first_order_completed).
"""

import secrets
import uuid as uuid_lib

from django.db import models
from django.utils.translation import gettext_lazy as _

# No 0/O or 1/I to keep codes readable when shared by text
REFERRAL_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
REFERRAL_CODE_LENGTH = 8


def generate_referral_code() -> str:
    return "".join(
        secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(REFERRAL_CODE_LENGTH)
    )


class Account(models.Model):
    """Loyalty account of a registered customer."""

    code = models.CharField(
        _("code"),
        max_length=50,
        unique=True,
        help_text=_("Unique account code (e.g. ACC-001)"),
    )
    uuid = models.UUIDField(default=uuid_lib.uuid4, editable=False, unique=True)

    display_name = models.CharField(_("name"), max_length=200, blank=True)
    email = models.EmailField(_("email"), blank=True)

    # Referrals
    referral_code = models.CharField(
        _("referral code"),
        max_length=20,
        unique=True,
        editable=False,
    )
    referred_by = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        related_name="referrals",
        null=True,
        blank=True,
        verbose_name=_("referred by"),
    )
    first_order_completed = models.BooleanField(
        _("first order completed"),
        default=False,
        help_text=_("Set on the first completed order; guards the referral bonus"),
    )

    is_active = models.BooleanField(_("active"), default=True, db_index=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "rewardman_account"
        verbose_name = _("account")
        verbose_name_plural = _("accounts")
        ordering = ["code"]

    def __str__(self):
        return self.code

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.lower().strip()
        if not self.referral_code:
            self.referral_code = generate_referral_code()
        super().save(*args, **kwargs)

    @property
    def points_balance(self) -> int:
        """Current balance, projected from the latest ledger entry."""
        latest = self.ledger_entries.order_by("-sequence").first()
        return latest.running_balance if latest else 0
