"""
Rewardman configuration.

Values come from environment variables (``REWARDMAN_<NAME>``) and may be
overridden in settings.py:
    REWARDMAN = {
        "ZONE_LATITUDE": 34.0522,
        "ZONE_LONGITUDE": -118.2437,
        "GEOFENCE_RADIUS_METERS": 500,
        "REFERRAL_SIGNUP_BONUS_POINTS": 500,
        "REFERRAL_FIRST_ORDER_BONUS_POINTS": 500,
    }
"""

import math
import os
from dataclasses import dataclass, fields
from typing import Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

ENV_PREFIX = "REWARDMAN_"

POINTS_ROUNDING_CHOICES = ("floor", "round")


@dataclass
class RewardmanSettings:
    """Rewardman configuration settings."""

    # Restaurant geofence
    ZONE_LATITUDE: float = 34.0522
    ZONE_LONGITUDE: float = -118.2437
    GEOFENCE_RADIUS_METERS: int = 500

    # Referral bonuses
    REFERRAL_SIGNUP_BONUS_POINTS: int = 500
    REFERRAL_FIRST_ORDER_BONUS_POINTS: int = 500

    # Points earned per whole currency unit of an order total
    POINTS_PER_CURRENCY_UNIT: int = 1
    POINTS_ROUNDING: str = "floor"

    # Ledger write retries on concurrent conflicts
    LEDGER_MAX_RETRIES: int = 3

    # Authoritative menu prices
    MENU_CATALOG_BACKEND: str = "rewardman.adapters.menu.ModelMenuCatalog"

    def __post_init__(self):
        if not _is_number(self.ZONE_LATITUDE) or abs(self.ZONE_LATITUDE) > 90:
            raise ImproperlyConfigured(
                f"REWARDMAN ZONE_LATITUDE must be within [-90, 90], got {self.ZONE_LATITUDE!r}"
            )
        if not _is_number(self.ZONE_LONGITUDE) or abs(self.ZONE_LONGITUDE) > 180:
            raise ImproperlyConfigured(
                f"REWARDMAN ZONE_LONGITUDE must be within [-180, 180], got {self.ZONE_LONGITUDE!r}"
            )
        if not _is_int(self.GEOFENCE_RADIUS_METERS) or self.GEOFENCE_RADIUS_METERS <= 0:
            raise ImproperlyConfigured(
                "REWARDMAN GEOFENCE_RADIUS_METERS must be a positive integer, "
                f"got {self.GEOFENCE_RADIUS_METERS!r}"
            )
        for name in (
            "REFERRAL_SIGNUP_BONUS_POINTS",
            "REFERRAL_FIRST_ORDER_BONUS_POINTS",
            "POINTS_PER_CURRENCY_UNIT",
        ):
            value = getattr(self, name)
            if not _is_int(value) or value < 0:
                raise ImproperlyConfigured(
                    f"REWARDMAN {name} must be a non-negative integer, got {value!r}"
                )
        if self.POINTS_ROUNDING not in POINTS_ROUNDING_CHOICES:
            raise ImproperlyConfigured(
                f"REWARDMAN POINTS_ROUNDING must be one of {POINTS_ROUNDING_CHOICES}, "
                f"got {self.POINTS_ROUNDING!r}"
            )
        if not _is_int(self.LEDGER_MAX_RETRIES) or self.LEDGER_MAX_RETRIES < 1:
            raise ImproperlyConfigured(
                f"REWARDMAN LEDGER_MAX_RETRIES must be >= 1, got {self.LEDGER_MAX_RETRIES!r}"
            )


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _from_environ() -> dict[str, Any]:
    """Read ``REWARDMAN_<NAME>`` variables, cast to each field's type."""
    values: dict[str, Any] = {}
    for field in fields(RewardmanSettings):
        raw = os.environ.get(ENV_PREFIX + field.name)
        if raw is None or raw.strip() == "":
            continue
        cast = field.type
        try:
            values[field.name] = cast(raw.strip())
        except ValueError:
            raise ImproperlyConfigured(
                f"Environment variable {ENV_PREFIX}{field.name} is not a valid {cast.__name__}: {raw!r}"
            )
    return values


def get_rewardman_settings() -> RewardmanSettings:
    """Load settings: Django ``REWARDMAN`` dict over environment over defaults."""
    user_settings: dict[str, Any] = getattr(settings, "REWARDMAN", {})
    unknown = set(user_settings) - {f.name for f in fields(RewardmanSettings)}
    if unknown:
        raise ImproperlyConfigured(f"Unknown REWARDMAN settings: {sorted(unknown)}")
    values = _from_environ()
    values.update(user_settings)
    return RewardmanSettings(**values)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_rewardman_settings(), name)


rewardman_settings = _LazySettings()
