from django.apps import AppConfig


class RewardmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "rewardman"
    verbose_name = "Rewardman - Ordering & Loyalty"

    def ready(self):
        from rewardman.conf import get_rewardman_settings

        # Fail at startup on bad REWARDMAN / environment configuration
        get_rewardman_settings()
