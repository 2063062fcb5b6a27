from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from .models import AdminEarning, MemberStatusTier, Payment, RewardsPointSettings, RewardsPointSlot, SystemSetting
from .testutils import make_booking, make_property, make_user, set_setting


class CancelExpiredBookingsTest(TestCase):
    def setUp(self):
        self.listing = make_property(make_user("property_owner"))
        self.guest = make_user()
        self.weeks_ahead = 0
        set_setting("sms_enabled", "false", "boolean")

    def accepted(self, deadline_offset):
        now = timezone.now()
        self.weeks_ahead += 2
        booking = make_booking(
            self.guest,
            self.listing,
            check_in=timezone.localdate() + timedelta(weeks=self.weeks_ahead),
            confirmed_at=now - timedelta(minutes=30),
            payment_deadline=now + deadline_offset,
        )
        Payment.objects.create(
            booking=booking,
            payment_reference=f"DR-1-{booking.pk}",
            transaction_type="owner_accepted",
            dr_amount=booking.total_amount,
            amount=booking.total_amount,
        )
        return booking

    def run_command(self):
        out = StringIO()
        call_command("cancel_expired_bookings", stdout=out)
        return out.getvalue()

    def test_nothing_to_do(self):
        self.assertIn("No expired booking requests.", self.run_command())

    def test_expired_request_is_cancelled(self):
        expired = self.accepted(-timedelta(minutes=5))
        still_open = self.accepted(timedelta(minutes=5))
        unaccepted = make_booking(self.guest, self.listing, check_in=timezone.localdate() + timedelta(days=200))

        output = self.run_command()
        self.assertIn(f"Cancelled {expired.booking_reference}", output)

        expired.refresh_from_db()
        self.assertEqual(expired.status, "cancelled")
        self.assertEqual(expired.cancellation_reason, "Payment not completed within the deadline")
        self.assertEqual(expired.payments.get().status, "cancelled")
        self.assertEqual(AdminEarning.objects.get(booking=expired).status, "cancelled")

        still_open.refresh_from_db()
        unaccepted.refresh_from_db()
        self.assertEqual(still_open.status, "pending")
        self.assertEqual(unaccepted.status, "pending")

    def test_second_run_is_a_no_op(self):
        self.accepted(-timedelta(minutes=5))
        self.run_command()
        self.assertIn("No expired booking requests.", self.run_command())


class SeedDefaultsTest(TestCase):
    def test_seeds_defaults(self):
        call_command("seed_defaults", stdout=StringIO())
        self.assertEqual(SystemSetting.get_int("payment_time_limit_minutes", 0), 15)
        self.assertEqual(RewardsPointSlot.objects.count(), 3)
        self.assertEqual(
            list(MemberStatusTier.objects.values_list("name", flat=True)), ["Bronze", "Silver", "Gold", "Platinum"]
        )
        self.assertEqual(RewardsPointSettings.objects.count(), 1)

    def test_keeps_edited_values(self):
        set_setting("admin_commission_rate", "12", "number")
        call_command("seed_defaults", stdout=StringIO())
        call_command("seed_defaults", stdout=StringIO())
        self.assertEqual(SystemSetting.objects.get(setting_key="admin_commission_rate").setting_value, "12")
        self.assertEqual(RewardsPointSlot.objects.count(), 3)
