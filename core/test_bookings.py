from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from .models import AdminEarning, Booking, Coupon, Payment
from .testutils import api_client, make_booking, make_property, make_user


class GuestBookingTest(TestCase):
    def setUp(self):
        self.owner = make_user("property_owner")
        self.guest = make_user()
        self.listing = make_property(self.owner)
        self.client = api_client(self.guest)
        self.today = timezone.localdate()

    def request_booking(self, **extra):
        payload = {
            "property_id": self.listing.pk,
            "check_in_date": str(self.today + timedelta(days=5)),
            "check_out_date": str(self.today + timedelta(days=8)),
            "number_of_guests": 2,
        }
        payload.update(extra)
        return self.client.post("/api/guest/bookings", payload, format="json")

    def test_create_prices_the_stay_and_records_commission(self):
        response = self.request_booking()
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Booking request sent to the property owner")

        booking = Booking.objects.get()
        self.assertEqual(booking.status, "pending")
        self.assertIsNone(booking.confirmed_at)
        self.assertEqual(booking.number_of_nights, 3)
        self.assertEqual(booking.total_amount, Decimal("7500.00"))
        self.assertEqual(booking.admin_commission, Decimal("750.00"))
        self.assertRegex(booking.booking_reference, r"^KH\d{6}[A-Z0-9]{3}$")
        earning = AdminEarning.objects.get(booking=booking)
        self.assertEqual(earning.owner_earnings, Decimal("6750.00"))

    def test_coupon_discount_is_applied(self):
        Coupon.objects.create(code="FLAT500", discount_type="fixed", discount_value=Decimal("500"))
        self.assertEqual(self.request_booking(coupon_code="FLAT500").status_code, 201)
        booking = Booking.objects.get()
        self.assertEqual(booking.discount_amount, Decimal("500.00"))
        self.assertEqual(booking.total_amount, Decimal("7000.00"))
        self.assertEqual(Coupon.objects.get().used_count, 1)

    def test_rejects_past_check_in(self):
        response = self.request_booking(check_in_date=str(self.today - timedelta(days=1)))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Check-in date cannot be in the past")

    def test_rejects_too_many_guests(self):
        response = self.request_booking(number_of_guests=9)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Maximum 4 guests allowed")

    def test_unknown_property(self):
        response = self.request_booking(property_id=9999)
        self.assertEqual(response.status_code, 404)

    def test_confirmed_stay_blocks_overlapping_dates(self):
        make_booking(self.guest, self.listing, check_in=self.today + timedelta(days=7), status="confirmed")
        response = self.request_booking()
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["message"], "Property is not available for the selected dates")

    def test_unaccepted_request_does_not_block(self):
        make_booking(self.guest, self.listing, check_in=self.today + timedelta(days=5))
        self.assertEqual(self.request_booking().status_code, 201)

    def test_owners_cannot_use_guest_endpoints(self):
        response = api_client(self.owner).post("/api/guest/bookings", {}, format="json")
        self.assertEqual(response.status_code, 403)

    def test_anonymous_is_rejected(self):
        self.assertEqual(api_client().get("/api/guest/bookings").status_code, 401)

    def test_list_is_paginated(self):
        for days in (20, 30, 40):
            make_booking(self.guest, self.listing, check_in=self.today + timedelta(days=days))
        make_booking(make_user(), self.listing, check_in=self.today + timedelta(days=50))
        response = self.client.get("/api/guest/bookings", {"limit": 2})
        data = response.json()["data"]
        self.assertEqual(len(data["bookings"]), 2)
        self.assertEqual(data["pagination"]["totalItems"], 3)
        self.assertEqual(data["pagination"]["totalPages"], 2)
        self.assertTrue(data["pagination"]["hasNextPage"])


class AcceptAndPayTest(TestCase):
    def setUp(self):
        self.owner = make_user("property_owner")
        self.guest = make_user()
        self.listing = make_property(self.owner)
        self.booking = make_booking(self.guest, self.listing)

    def pay(self, **extra):
        payload = {"payment_status": "paid", "payment_method": "bkash"}
        payload.update(extra)
        return api_client(self.guest).patch(f"/api/guest/bookings/{self.booking.pk}/payment", payload, format="json")

    def test_accept_then_pay_confirms_the_stay(self):
        response = api_client(self.owner).patch(f"/api/property-owner/bookings/{self.booking.pk}/confirm")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Booking request accepted. Waiting for guest payment.")

        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, "pending")
        self.assertIsNotNone(self.booking.confirmed_at)
        self.assertAlmostEqual(
            (self.booking.payment_deadline - self.booking.confirmed_at).total_seconds(), 15 * 60, delta=1
        )
        receivable = Payment.objects.get(booking=self.booking)
        self.assertEqual(receivable.transaction_type, "owner_accepted")
        self.assertEqual(receivable.dr_amount, self.booking.total_amount)
        self.assertRegex(receivable.payment_reference, rf"^DR-\d+-{self.booking.pk}$")

        response = self.pay()
        self.assertEqual(response.status_code, 200)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, "confirmed")
        self.assertEqual(self.booking.payment_status, "paid")
        rows = {row.transaction_type: row for row in self.booking.payments.all()}
        self.assertEqual(rows["owner_accepted"].status, "completed")
        self.assertEqual(rows["guest_payment"].cr_amount, self.booking.total_amount)
        self.assertEqual(AdminEarning.objects.get(booking=self.booking).payment_status, "paid")

    def test_accepting_twice_is_rejected(self):
        client = api_client(self.owner)
        client.patch(f"/api/property-owner/bookings/{self.booking.pk}/confirm")
        response = client.patch(f"/api/property-owner/bookings/{self.booking.pk}/confirm")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Payment.objects.filter(booking=self.booking).count(), 1)

    def test_other_owner_cannot_accept(self):
        response = api_client(make_user("property_owner")).patch(f"/api/property-owner/bookings/{self.booking.pk}/confirm")
        self.assertEqual(response.status_code, 404)

    def test_pay_before_acceptance(self):
        response = self.pay()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Property owner has not accepted this booking request yet")

    def test_pay_after_deadline(self):
        now = timezone.now()
        Booking.objects.filter(pk=self.booking.pk).update(
            confirmed_at=now - timedelta(hours=1), payment_deadline=now - timedelta(minutes=30)
        )
        response = self.pay()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Payment deadline has passed for this booking")

    def test_accepted_request_holds_the_dates(self):
        api_client(self.owner).patch(f"/api/property-owner/bookings/{self.booking.pk}/confirm")
        payload = {
            "property_id": self.listing.pk,
            "check_in_date": str(self.booking.check_in_date),
            "check_out_date": str(self.booking.check_out_date),
        }
        response = api_client(make_user()).post("/api/guest/bookings", payload, format="json")
        self.assertEqual(response.status_code, 409)

    def test_cannot_accept_two_overlapping_requests(self):
        rival = make_booking(make_user(), self.listing, check_in=self.booking.check_in_date + timedelta(days=1))
        client = api_client(self.owner)
        self.assertEqual(client.patch(f"/api/property-owner/bookings/{self.booking.pk}/confirm").status_code, 200)

        response = client.patch(f"/api/property-owner/bookings/{rival.pk}/confirm")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["message"], "Property is not available for the selected dates")
        rival.refresh_from_db()
        self.assertIsNone(rival.confirmed_at)
        self.assertFalse(Payment.objects.filter(booking=rival).exists())


class GuestCancelTest(TestCase):
    def setUp(self):
        self.owner = make_user("property_owner")
        self.guest = make_user()
        self.listing = make_property(self.owner)

    def cancel(self, booking):
        return api_client(self.guest).patch(
            f"/api/guest/bookings/{booking.pk}/cancel", {"reason": "Change of plans"}, format="json"
        )

    def test_cancel_future_booking(self):
        booking = make_booking(self.guest, self.listing, status="confirmed")
        response = self.cancel(booking)
        self.assertEqual(response.status_code, 200)
        booking.refresh_from_db()
        self.assertEqual(booking.status, "cancelled")
        self.assertEqual(booking.cancellation_reason, "Change of plans")
        self.assertEqual(AdminEarning.objects.get(booking=booking).status, "cancelled")

    def test_cannot_cancel_on_check_in_day(self):
        booking = make_booking(self.guest, self.listing, check_in=timezone.localdate(), status="confirmed")
        response = self.cancel(booking)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Cannot cancel booking after check-in date")

    def test_cannot_cancel_twice(self):
        booking = make_booking(self.guest, self.listing, status="cancelled")
        self.assertEqual(self.cancel(booking).json()["message"], "Booking is already cancelled")

    def test_cannot_cancel_someone_elses_booking(self):
        booking = make_booking(make_user(), self.listing)
        self.assertEqual(self.cancel(booking).status_code, 404)
