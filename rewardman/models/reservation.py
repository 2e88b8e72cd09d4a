"""Reservation model."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ReservationStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    CONFIRMED = "confirmed", _("Confirmed")
    CANCELLED = "cancelled", _("Cancelled")


class Reservation(models.Model):
    """
    Table reservation.

    Lifecycle:
        pending -> confirmed
        pending -> cancelled
        confirmed -> cancelled
    """

    TRANSITIONS = {
        "pending": {"confirmed", "cancelled"},
        "confirmed": {"cancelled"},
        "cancelled": set(),
    }

    account = models.ForeignKey(
        "rewardman.Account",
        on_delete=models.PROTECT,
        related_name="reservations",
        null=True,
        blank=True,
        verbose_name=_("account"),
    )

    # Contact
    name = models.CharField(_("name"), max_length=200)
    email = models.EmailField(_("email"))
    phone = models.CharField(_("phone"), max_length=30, blank=True)

    date = models.DateField(_("date"))
    time = models.TimeField(_("time"))
    party_size = models.PositiveIntegerField(_("party size"))
    special_requests = models.TextField(_("special requests"), blank=True)

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=ReservationStatus.choices,
        default=ReservationStatus.PENDING,
        db_index=True,
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    confirmed_at = models.DateTimeField(_("confirmed at"), null=True, blank=True)
    cancelled_at = models.DateTimeField(_("cancelled at"), null=True, blank=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "rewardman_reservation"
        verbose_name = _("reservation")
        verbose_name_plural = _("reservations")
        ordering = ["date", "time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(party_size__gte=1),
                name="rewardman_reservation_party_size_positive",
            ),
        ]

    def __str__(self):
        return f"{self.name} - {self.date} {self.time} ({self.party_size})"

    def can_transition_to(self, status: str) -> bool:
        return str(status) in self.TRANSITIONS.get(str(self.status), set())
