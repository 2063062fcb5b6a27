from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from core.models import MemberStatusTier, RewardsPointSettings, RewardsPointSlot, SystemSetting

SYSTEM_SETTINGS = (
    ("platform_name", "Keyhost Homes", "string", "Name shown across the site", True),
    ("admin_commission_rate", "10", "number", "Platform commission in percent of each booking", False),
    ("payment_time_limit_minutes", "15", "number", "Minutes a guest has to pay after the owner accepts", True),
    ("default_currency", "BDT", "string", "Currency used for prices", True),
    ("support_email", "support@keyhosthomes.com", "string", "Support contact address", True),
    ("support_phone", "", "string", "Support contact number", True),
    ("sms_enabled", "false", "boolean", "Send booking SMS notifications", False),
    ("sms_api_key", "", "string", "SMS gateway API key", False),
    ("sms_secret_key", "", "string", "SMS gateway secret key", False),
    ("sms_sender_id", "", "string", "SMS gateway caller ID", False),
    ("sms_api_url", "", "string", "SMS gateway URL override", False),
)

EARNING_SLOTS = (
    (Decimal("0"), Decimal("4999.99"), Decimal("5")),
    (Decimal("5000"), Decimal("19999.99"), Decimal("10")),
    (Decimal("20000"), Decimal("9999999"), Decimal("15")),
)

MEMBER_TIERS = (
    ("Bronze", 0, "#CD7F32", "Welcome tier"),
    ("Silver", 1000, "#C0C0C0", "Priority support"),
    ("Gold", 5000, "#FFD700", "Priority support and early access to featured stays"),
    ("Platinum", 15000, "#E5E4E2", "Dedicated support and exclusive offers"),
)


class Command(BaseCommand):
    help = "Insert or refresh default system settings, rewards settings, earning slots and member tiers."

    @transaction.atomic
    def handle(self, *args, **options):
        for key, value, setting_type, description, is_public in SYSTEM_SETTINGS:
            setting, _ = SystemSetting.objects.get_or_create(
                setting_key=key,
                defaults={"setting_value": value},
            )
            # Values already edited by an admin are kept; only the metadata is refreshed.
            setting.setting_type = setting_type
            setting.description = description
            setting.is_public = is_public
            setting.save()

        if not RewardsPointSettings.objects.exists():
            RewardsPointSettings.objects.create()

        for min_amount, max_amount, points in EARNING_SLOTS:
            RewardsPointSlot.objects.update_or_create(
                min_amount=min_amount,
                max_amount=max_amount,
                defaults={"points_per_thousand": points, "is_active": True},
            )

        for order, (name, min_points, color, benefits) in enumerate(MEMBER_TIERS):
            MemberStatusTier.objects.update_or_create(
                name=name,
                defaults={"min_points": min_points, "color": color, "benefits": benefits, "sort_order": order},
            )

        self.stdout.write(self.style.SUCCESS("Default settings seeded."))
