from decimal import Decimal

from django.test import TestCase

from .models import OwnerPayout, Payment
from .services.accounting import AdminLedgerService, OwnerBalanceService, summarize, with_running_balance
from .testutils import api_client, make_booking, make_property, make_user


class LedgerMathTest(TestCase):
    def setUp(self):
        self.booking = make_booking(make_user(), make_property(make_user("property_owner")))

    def entry(self, dr="0", cr="0"):
        return Payment.objects.create(
            booking=self.booking,
            payment_reference="TEST",
            transaction_type="owner_accepted" if Decimal(dr) else "guest_payment",
            dr_amount=Decimal(dr),
            cr_amount=Decimal(cr),
        )

    def test_running_balance_is_cumulative(self):
        entries = [self.entry(dr="5000"), self.entry(cr="3000"), self.entry(cr="2000")]
        balances = [line.running_balance for line in with_running_balance(entries)]
        self.assertEqual(balances, [Decimal("5000.00"), Decimal("2000.00"), Decimal("0.00")])

    def test_summary(self):
        summary = summarize([self.entry(dr="5000"), self.entry(cr="1500")])
        self.assertEqual(summary.total_dr, Decimal("5000.00"))
        self.assertEqual(summary.total_cr, Decimal("1500.00"))
        self.assertEqual(summary.outstanding, Decimal("3500.00"))
        self.assertEqual(summary.total_bookings, 1)


class OwnerBalanceTest(TestCase):
    def setUp(self):
        self.owner = make_user("property_owner")
        listing = make_property(self.owner)
        guest = make_user()
        make_booking(guest, listing, status="checked_out", payment_status="paid")
        make_booking(guest, listing, status="confirmed", payment_status="pending")
        make_booking(guest, listing, status="cancelled", payment_status="paid")

    def test_only_paid_stays_count_towards_the_balance(self):
        self.assertEqual(OwnerBalanceService(self.owner).available_balance(), Decimal("4500.00"))

    def test_payout_over_balance_is_rejected(self):
        response = api_client(self.owner).post("/api/property-owner/payouts", {"amount": "5000.00"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Insufficient balance. Available: 4500.00")

    def test_pending_payout_is_committed(self):
        response = api_client(self.owner).post("/api/property-owner/payouts", {"amount": "1000.00"}, format="json")
        self.assertEqual(response.status_code, 201)
        payout = OwnerPayout.objects.get()
        self.assertRegex(payout.payout_reference, rf"^OWNER-PAYOUT-REQ-\d+-{self.owner.pk}$")
        self.assertEqual(payout.payment_method, "bank_transfer")
        self.assertEqual(OwnerBalanceService(self.owner).available_balance(), Decimal("3500.00"))

    def test_failed_payout_releases_the_amount(self):
        payout = OwnerBalanceService(self.owner).request_payout(Decimal("1000"))
        admin = make_user("admin")
        response = api_client(admin).patch(
            f"/api/admin/payouts/{payout.pk}/status", {"payment_status": "failed"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(OwnerBalanceService(self.owner).available_balance(), Decimal("4500.00"))

    def test_completed_payout_is_dated(self):
        payout = OwnerBalanceService(self.owner).request_payout(Decimal("1000"))
        response = api_client(make_user("admin")).patch(
            f"/api/admin/payouts/{payout.pk}/status",
            {"payment_status": "completed", "payment_reference": "TRX-991"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        payout.refresh_from_db()
        self.assertIsNotNone(payout.payment_date)
        self.assertEqual(payout.payment_reference, "TRX-991")

    def test_earnings_summary(self):
        earnings = OwnerBalanceService(self.owner).summary()
        self.assertEqual(earnings["total_earnings"], Decimal("9000.00"))
        self.assertEqual(earnings["total_bookings"], 2)


class AdminLedgerTest(TestCase):
    def setUp(self):
        self.owner = make_user("property_owner")
        self.guest = make_user()
        self.booking = make_booking(self.guest, make_property(self.owner), status="confirmed")
        Payment.objects.create(
            booking=self.booking, payment_reference="DR-1", transaction_type="owner_accepted", dr_amount=Decimal("5000")
        )
        Payment.objects.create(
            booking=self.booking, payment_reference="CR-1", transaction_type="guest_payment", cr_amount=Decimal("2000")
        )
        self.admin = make_user("admin")

    def test_ledger_filtered_by_guest(self):
        service = AdminLedgerService()
        entries, summary = service.ledger(service.build_filters({"view": "guest", "entity_id": str(self.guest.pk)}))
        self.assertEqual(len(entries), 2)
        self.assertEqual(summary["outstanding"], Decimal("3000.00"))
        self.assertEqual(summary["total_commission_earned"], Decimal("500.00"))

        other = service.build_filters({"view": "guest", "entity_id": str(self.guest.pk + 100)})
        self.assertEqual(service.ledger(other)[0], [])

    def test_guest_accounts_endpoint(self):
        response = api_client(self.admin).get("/api/admin/accounting/guests")
        self.assertEqual(response.status_code, 200)
        row = response.json()["data"]["guests"][0]
        self.assertEqual(row["id"], self.guest.pk)
        self.assertEqual(Decimal(str(row["outstanding"])), Decimal("3000.00"))

    def test_ledger_rejects_impossible_dates(self):
        response = api_client(self.admin).get("/api/admin/accounting/ledger", {"start_date": "2030-02-30"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid start date. Use a real date in YYYY-MM-DD format")

    def test_ledger_endpoint_requires_admin(self):
        self.assertEqual(api_client(self.guest).get("/api/admin/accounting/ledger").status_code, 403)
