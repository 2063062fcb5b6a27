from decimal import Decimal

from django.test import TestCase

from .exceptions import ServiceError
from .models import MemberStatusTier, Payment, RewardsPointSettings, RewardsPointSlot, RewardsPointTransaction, UserRewardsPoints
from .services.booking import GuestBookingService
from .services.owner import OwnerBookingService
from .services.rewards import RewardsPointsService
from .testutils import api_client, make_booking, make_property, make_user


def seed_rewards():
    RewardsPointSlot.objects.create(min_amount=Decimal("0"), max_amount=Decimal("4999.99"), points_per_thousand=5)
    RewardsPointSlot.objects.create(min_amount=Decimal("5000"), max_amount=Decimal("19999.99"), points_per_thousand=10)
    MemberStatusTier.objects.create(name="Bronze", min_points=0)
    MemberStatusTier.objects.create(name="Silver", min_points=40)
    RewardsPointSettings.objects.create(points_per_taka=2, min_points_to_redeem=100, max_points_per_booking=500)


class RewardsPointsServiceTest(TestCase):
    def setUp(self):
        seed_rewards()
        self.guest = make_user()
        self.service = RewardsPointsService(self.guest)

    def test_award_uses_matching_slot_and_upgrades_tier(self):
        award = self.service.award_for_booking(Decimal("5000"))
        self.assertEqual(award.points_awarded, 50)
        account = UserRewardsPoints.objects.get(user=self.guest)
        self.assertEqual(account.current_balance, 50)
        self.assertEqual(account.tier.name, "Silver")

    def test_small_amount_uses_lower_slot(self):
        self.assertEqual(self.service.award_for_booking(Decimal("1999")).points_awarded, 9)
        self.assertEqual(self.service.account().tier.name, "Bronze")

    def test_no_slot_awards_nothing(self):
        self.assertEqual(self.service.award_for_booking(Decimal("25000")).points_awarded, 0)
        self.assertFalse(RewardsPointTransaction.objects.exists())

    def test_redeem_converts_points_to_taka(self):
        UserRewardsPoints.objects.create(user=self.guest, current_balance=1000, total_points_earned=1000)
        redemption = self.service.redeem_for_booking(300)
        self.assertEqual(redemption.discount_amount, Decimal("150.00"))
        self.assertEqual(redemption.new_balance, 700)
        self.assertEqual(RewardsPointTransaction.objects.get().points, -300)

    def test_redeem_limits(self):
        UserRewardsPoints.objects.create(user=self.guest, current_balance=1000)
        with self.assertRaisesMessage(ServiceError, "Minimum 100 points required to redeem"):
            self.service.redeem_for_booking(50)
        with self.assertRaisesMessage(ServiceError, "Maximum 500 points can be used per booking"):
            self.service.redeem_for_booking(600)

    def test_redeem_needs_balance(self):
        with self.assertRaisesMessage(ServiceError, "Insufficient points balance"):
            self.service.redeem_for_booking(200)

    def test_max_redeemable(self):
        UserRewardsPoints.objects.create(user=self.guest, current_balance=1000)
        self.assertEqual(self.service.max_redeemable(Decimal("100")), 200)
        self.assertEqual(self.service.max_redeemable(Decimal("10000")), 500)
        self.assertEqual(self.service.max_redeemable(Decimal("20")), 0)


class PointsAcrossBookingTest(TestCase):
    def setUp(self):
        seed_rewards()
        self.owner = make_user("property_owner")
        self.guest = make_user()
        self.booking = make_booking(self.guest, make_property(self.owner))
        UserRewardsPoints.objects.create(user=self.guest, current_balance=400, total_points_earned=400)
        OwnerBookingService(self.owner).confirm(self.booking.pk)

    def test_pay_with_points_then_cancel_refunds_them(self):
        response = api_client(self.guest).patch(
            f"/api/guest/bookings/{self.booking.pk}/payment",
            {"payment_status": "paid", "points_to_redeem": 200},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["pointsRedeemed"], 200)
        self.assertEqual(data["pointsAwarded"], 50)
        received = Payment.objects.get(transaction_type="guest_payment")
        self.assertEqual(received.cr_amount, Decimal("4900.00"))
        self.assertEqual(RewardsPointsService(self.guest).balance(), 250)

        GuestBookingService(self.guest).cancel(self.booking.pk)
        self.assertEqual(RewardsPointsService(self.guest).balance(), 450)

    def test_failed_redemption_still_takes_payment(self):
        GuestBookingService(self.guest).pay(self.booking.pk, "paid", points_to_redeem=50)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, "confirmed")
        self.assertEqual(self.booking.points_redeemed, 0)


class RewardsApiTest(TestCase):
    def setUp(self):
        seed_rewards()
        self.admin = make_user("admin")
        self.guest = make_user()

    def test_my_points_opens_an_account(self):
        response = api_client(self.guest).get("/api/rewards-points/my-points")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["points"]["current_balance"], 0)
        self.assertEqual(data["points"]["tier"]["name"], "Bronze")
        self.assertEqual(data["settings"]["min_points_to_redeem"], 100)

    def test_overlapping_slot_is_rejected(self):
        payload = {"min_amount": "1000", "max_amount": "3000", "points_per_thousand": "7"}
        response = api_client(self.admin).post("/api/rewards-points/admin/slots", payload, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Slot overlaps with existing active slot")

    def test_inactive_slot_may_overlap(self):
        payload = {"min_amount": "1000", "max_amount": "3000", "points_per_thousand": "7", "is_active": False}
        response = api_client(self.admin).post("/api/rewards-points/admin/slots", payload, format="json")
        self.assertEqual(response.status_code, 201)

    def test_slot_bounds_must_be_ordered(self):
        payload = {"min_amount": "30000", "max_amount": "20000", "points_per_thousand": "7"}
        response = api_client(self.admin).post("/api/rewards-points/admin/slots", payload, format="json")
        self.assertEqual(response.json()["message"], "Min amount must be less than max amount")

    def test_duplicate_tier_name(self):
        response = api_client(self.admin).post(
            "/api/rewards-points/admin/member-tiers", {"name": "silver", "min_points": 100}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Tier name already exists")

    def test_adjust_points(self):
        UserRewardsPoints.objects.create(user=self.guest, current_balance=100)
        client = api_client(self.admin)
        payload = {"user_id": self.guest.pk, "points": 25, "description": "Goodwill"}
        response = client.post("/api/rewards-points/admin/adjust-points", payload, format="json")
        self.assertEqual(response.json()["data"], {"newBalance": 125})

        payload["points"] = -500
        response = client.post("/api/rewards-points/admin/adjust-points", payload, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Insufficient points balance")

    def test_adjust_points_without_account(self):
        payload = {"user_id": self.guest.pk, "points": 25, "description": "Goodwill"}
        response = api_client(self.admin).post("/api/rewards-points/admin/adjust-points", payload, format="json")
        self.assertEqual(response.status_code, 404)

    def test_guests_cannot_manage_slots(self):
        self.assertEqual(api_client(self.guest).get("/api/rewards-points/admin/slots").status_code, 403)
