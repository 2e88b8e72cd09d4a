"""Reservation service.

Transitions:
    pending -> confirmed
    pending -> cancelled
    confirmed -> cancelled

Cancelling an already cancelled reservation succeeds without changes.
"""

import logging
from datetime import date as date_cls
from datetime import datetime
from datetime import time as time_cls

from django.db import transaction
from django.utils import timezone

from rewardman.exceptions import InvalidReservationWindow, InvalidTransition, NotFound
from rewardman.models import Reservation, ReservationStatus
from rewardman.services import accounts
from rewardman.signals import (
    reservation_created,
    reservation_status_changed,
    send_on_commit,
)

logger = logging.getLogger(__name__)


def get(reservation_id: int) -> Reservation:
    """Get reservation or raise NotFound."""
    try:
        return Reservation.objects.select_related("account").get(pk=reservation_id)
    except (ValueError, TypeError, Reservation.DoesNotExist):
        raise NotFound("RESERVATION_NOT_FOUND", reservation_id=reservation_id)


def for_account(account_code: str) -> list[Reservation]:
    """Reservations of an account, soonest first."""
    return list(
        Reservation.objects.filter(account__code=account_code).order_by("date", "time")
    )


def create_reservation(
    name: str,
    email: str,
    date,
    time,
    party_size: int,
    phone: str = "",
    account_code: str | None = None,
    special_requests: str = "",
) -> Reservation:
    """
    Create a pending reservation.

    Args:
        name: Contact name
        email: Contact email
        date: date or ISO string (YYYY-MM-DD)
        time: time or ISO string (HH:MM[:SS])
        party_size: Number of guests (>= 1)
        phone: Contact phone (optional)
        account_code: Account code, or None for a guest reservation
        special_requests: Free-text requests

    Raises:
        InvalidReservationWindow: Malformed or past date/time, party size < 1
        NotFound: Unknown account
    """
    if isinstance(party_size, bool) or not isinstance(party_size, int) or party_size < 1:
        raise InvalidReservationWindow(party_size=party_size, reason="party size must be >= 1")

    slot_date = _parse_date(date)
    slot_time = _parse_time(time)
    slot = datetime.combine(slot_date, slot_time)
    if timezone.is_naive(slot):
        slot = timezone.make_aware(slot)
    # Times given with an offset are stored in the current time zone
    slot = timezone.localtime(slot)
    now = timezone.now()
    if slot <= now:
        raise InvalidReservationWindow(
            date=slot_date.isoformat(),
            time=slot_time.isoformat(),
            reason="reservation must be in the future",
        )

    account = accounts.require(account_code) if account_code is not None else None

    reservation = Reservation.objects.create(
        account=account,
        name=name.strip(),
        email=email.strip().lower(),
        phone=phone.strip(),
        date=slot.date(),
        time=slot.time(),
        party_size=party_size,
        special_requests=special_requests,
    )

    logger.info(
        "Reservation %s created for %s on %s (%d guests)",
        reservation.pk,
        account_code or "guest",
        slot.isoformat(),
        party_size,
    )
    send_on_commit(reservation_created, sender=Reservation, reservation=reservation)
    return reservation


def transition(reservation_id: int, target_status: str) -> Reservation:
    """
    Move a reservation to ``target_status``.

    Raises:
        InvalidTransition: If the move is not allowed from the current status
    """
    target = str(target_status)

    with transaction.atomic():
        reservation = _get_for_update(reservation_id)

        if target == ReservationStatus.CANCELLED and reservation.status == ReservationStatus.CANCELLED:
            return reservation

        if not reservation.can_transition_to(target):
            raise InvalidTransition(
                reservation_id=reservation.pk,
                current=reservation.status,
                target=target,
            )

        previous = reservation.status
        reservation.status = target
        update_fields = ["status", "updated_at"]
        if target == ReservationStatus.CONFIRMED:
            reservation.confirmed_at = timezone.now()
            update_fields.append("confirmed_at")
        elif target == ReservationStatus.CANCELLED:
            reservation.cancelled_at = timezone.now()
            update_fields.append("cancelled_at")
        reservation.save(update_fields=update_fields)

    logger.info("Reservation %s: %s -> %s", reservation.pk, previous, target)
    send_on_commit(
        reservation_status_changed,
        sender=Reservation,
        reservation=reservation,
        previous_status=previous,
    )
    return reservation


def confirm(reservation_id: int) -> Reservation:
    return transition(reservation_id, ReservationStatus.CONFIRMED)


def cancel(reservation_id: int) -> Reservation:
    """Cancel; a no-op when already cancelled."""
    return transition(reservation_id, ReservationStatus.CANCELLED)


def _get_for_update(reservation_id: int) -> Reservation:
    """MUST be called inside transaction.atomic()."""
    try:
        return Reservation.objects.select_for_update().get(pk=reservation_id)
    except (ValueError, TypeError, Reservation.DoesNotExist):
        raise NotFound("RESERVATION_NOT_FOUND", reservation_id=reservation_id)


def _parse_date(value) -> date_cls:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date_cls):
        return value
    try:
        return date_cls.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidReservationWindow(date=str(value), reason="malformed date")


def _parse_time(value) -> time_cls:
    if isinstance(value, time_cls):
        return value
    try:
        return time_cls.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidReservationWindow(time=str(value), reason="malformed time")
