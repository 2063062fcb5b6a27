import io
import shutil
import tempfile
from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from PIL import Image

from .models import AdminEarning, Amenity, Payment, Property, PropertyImage
from .services.owner import OwnerBookingService
from .testutils import api_client, make_booking, make_property, make_user


def png_upload(name="front.png"):
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(20, 120, 200)).save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")


class OwnerPropertyTest(TestCase):
    def setUp(self):
        self.owner = make_user("property_owner")
        self.client = api_client(self.owner)

    def test_new_listing_waits_for_approval(self):
        wifi = Amenity.objects.create(name="WiFi")
        payload = {
            "title": "Hillside Bungalow",
            "address": "Road 4, Sreemangal",
            "city": "Moulvibazar",
            "base_price": "3500.00",
            "max_guests": 6,
            "amenities": [wifi.pk],
        }
        response = self.client.post("/api/property-owner/properties", payload, format="json")
        self.assertEqual(response.status_code, 201)
        data = response.json()["data"]["property"]
        self.assertEqual(data["status"], "pending")
        self.assertEqual([item["name"] for item in data["amenities"]], ["WiFi"])
        self.assertEqual(Property.objects.get().owner, self.owner)

    def test_price_must_be_positive(self):
        payload = {"title": "Free", "address": "Nowhere", "city": "Dhaka", "base_price": "0"}
        response = self.client.post("/api/property-owner/properties", payload, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Base price must be greater than zero.")

    def test_cannot_touch_another_owners_listing(self):
        listing = make_property(make_user("property_owner"))
        response = self.client.patch(f"/api/property-owner/properties/{listing.pk}", {"title": "Mine"}, format="json")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Property not found or access denied")

    def test_partial_update(self):
        listing = make_property(self.owner)
        response = self.client.patch(
            f"/api/property-owner/properties/{listing.pk}", {"base_price": "2500.00"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        listing.refresh_from_db()
        self.assertEqual(listing.base_price, Decimal("2500.00"))

    def test_delete_is_blocked_by_active_bookings(self):
        listing = make_property(self.owner)
        make_booking(make_user(), listing, status="confirmed")
        response = self.client.delete(f"/api/property-owner/properties/{listing.pk}")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Cannot delete property with active bookings")

    def test_delete_deactivates(self):
        listing = make_property(self.owner)
        self.assertEqual(self.client.delete(f"/api/property-owner/properties/{listing.pk}").status_code, 200)
        listing.refresh_from_db()
        self.assertEqual(listing.status, "inactive")

    def test_guests_cannot_manage_listings(self):
        self.assertEqual(api_client(make_user()).get("/api/property-owner/properties").status_code, 403)


class OwnerPropertyImageTest(TestCase):
    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)
        override = override_settings(MEDIA_ROOT=self.media_root)
        override.enable()
        self.addCleanup(override.disable)
        self.owner = make_user("property_owner")
        self.listing = make_property(self.owner)
        self.url = f"/api/property-owner/properties/{self.listing.pk}/images"

    def test_first_upload_becomes_main_image(self):
        response = api_client(self.owner).post(
            self.url, {"images": [png_upload(), png_upload("back.png")]}, format="multipart"
        )
        self.assertEqual(response.status_code, 201)
        types = list(PropertyImage.objects.order_by("sort_order").values_list("image_type", flat=True))
        self.assertEqual(types, ["main", "gallery"])

    def test_rejects_files_that_are_not_images(self):
        upload = SimpleUploadedFile("notes.png", b"not an image", content_type="image/png")
        response = api_client(self.owner).post(self.url, {"images": [upload]}, format="multipart")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid image file: notes.png")
        self.assertFalse(PropertyImage.objects.exists())

    def test_removing_main_image_promotes_the_next(self):
        api_client(self.owner).post(self.url, {"images": [png_upload(), png_upload("back.png")]}, format="multipart")
        main = PropertyImage.objects.get(image_type="main")
        response = api_client(self.owner).delete(f"{self.url}/{main.pk}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(PropertyImage.objects.get().image_type, "main")


class OwnerBookingTest(TestCase):
    def setUp(self):
        self.owner = make_user("property_owner")
        self.listing = make_property(self.owner)
        self.booking = make_booking(make_user(), self.listing)
        self.client = api_client(self.owner)

    def url(self, action=""):
        return f"/api/property-owner/bookings/{self.booking.pk}{action}"

    def test_check_in_requires_payment(self):
        self.booking.status = "confirmed"
        self.booking.save()
        response = self.client.patch(self.url("/check-in"))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Payment must be completed before check-in")

    def test_check_in_then_out(self):
        self.booking.status = "confirmed"
        self.booking.payment_status = "paid"
        self.booking.save()
        self.assertEqual(self.client.patch(self.url("/check-in")).status_code, 200)
        self.assertEqual(self.client.patch(self.url("/check-out")).status_code, 200)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, "checked_out")
        self.assertIsNotNone(self.booking.checked_out_at)

    def test_check_out_requires_check_in(self):
        self.booking.status = "confirmed"
        self.booking.save()
        self.assertEqual(self.client.patch(self.url("/check-out")).status_code, 400)

    def test_cash_payment_settles_the_receivable(self):
        OwnerBookingService(self.owner).confirm(self.booking.pk)
        response = self.client.patch(
            self.url("/payment"),
            {"payment_status": "processing", "partial_amount": str(self.booking.total_amount)},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.payment_status, "paid")
        self.assertEqual(set(Payment.objects.values_list("status", flat=True)), {"completed"})

    def test_discount_reduces_what_is_owed(self):
        OwnerBookingService(self.owner).confirm(self.booking.pk)
        response = self.client.patch(
            self.url("/payment"),
            {"payment_status": "pending", "discount_amount": "1000.00", "discount_reason": "Repeat guest"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.discount_amount, Decimal("1000.00"))
        self.assertEqual(self.booking.total_amount, Decimal("4000.00"))
        receivable = Payment.objects.get(transaction_type="owner_accepted")
        self.assertEqual(receivable.dr_amount, Decimal("4000.00"))
        self.assertEqual(self.booking.admin_commission, Decimal("400.00"))
        self.assertEqual(self.booking.owner_earnings, Decimal("3600.00"))
        self.assertEqual(self.booking.owner_earnings + self.booking.admin_commission, self.booking.total_amount)
        earning = AdminEarning.objects.get(booking=self.booking)
        self.assertEqual(
            (earning.booking_amount, earning.commission_amount, earning.owner_earnings),
            (Decimal("4000.00"), Decimal("400.00"), Decimal("3600.00")),
        )

        history = self.client.get(self.url("/payment-history")).json()["data"]
        self.assertEqual(history["summary"]["outstanding"], "4000.00")
        self.assertEqual(history["payments"][0]["running_balance"], "4000.00")

    def test_invalid_payment_status(self):
        response = self.client.patch(self.url("/payment"), {"payment_status": "paid"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid payment status")

    def test_owner_cancel(self):
        response = self.client.patch(self.url("/cancel"), {}, format="json")
        self.assertEqual(response.status_code, 200)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, "cancelled")
        self.assertEqual(self.booking.cancellation_reason, "Cancelled by property owner")

    def test_dashboard_counts_pending_requests(self):
        response = self.client.get("/api/property-owner/dashboard")
        data = response.json()["data"]
        self.assertEqual(data["statistics"]["total_properties"], 1)
        self.assertEqual(data["statistics"]["pending_requests"], 1)
        self.assertEqual(data["bookingsByStatus"], {"pending": 1})
