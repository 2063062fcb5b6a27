from django.test import TestCase
from rest_framework.authtoken.models import Token

from .models import Amenity, DisplayCategory, PropertyReport, SystemSetting
from .testutils import api_client, make_booking, make_property, make_user


class AdminAccessTest(TestCase):
    def test_staff_flag_grants_access(self):
        staff = make_user("guest", is_staff=True)
        self.assertEqual(api_client(staff).get("/api/admin/dashboard").status_code, 200)

    def test_owner_is_forbidden(self):
        response = api_client(make_user("property_owner")).get("/api/admin/dashboard")
        self.assertEqual(response.status_code, 403)
        self.assertFalse(response.json()["success"])


class AdminUserTest(TestCase):
    def setUp(self):
        self.admin = api_client(make_user("admin"))
        self.guest = make_user(first_name="Nadia")

    def test_dashboard_counts(self):
        owner = make_user("property_owner")
        make_booking(self.guest, make_property(owner))
        stats = self.admin.get("/api/admin/dashboard").json()["data"]["statistics"]
        self.assertEqual(stats["users"]["guest"], 1)
        self.assertEqual(stats["users"]["property_owner"], 1)
        self.assertEqual(stats["bookings"]["pending"], 1)

    def test_list_filters_by_type_and_search(self):
        make_user("property_owner")
        data = self.admin.get("/api/admin/users", {"user_type": "guest", "search": "nadia"}).json()["data"]
        self.assertEqual([user["id"] for user in data["users"]], [self.guest.pk])

    def test_blocking_revokes_tokens(self):
        Token.objects.create(user=self.guest)
        response = self.admin.patch(f"/api/admin/users/{self.guest.pk}/status", {"is_active": False}, format="json")
        self.assertEqual(response.json()["message"], "User blocked successfully")
        self.guest.refresh_from_db()
        self.assertFalse(self.guest.is_active)
        self.assertFalse(Token.objects.filter(user=self.guest).exists())

    def test_email_must_stay_unique(self):
        other = make_user()
        response = self.admin.put(f"/api/admin/users/{self.guest.pk}", {"email": other.email}, format="json")
        self.assertEqual(response.status_code, 409)

    def test_update_user(self):
        response = self.admin.put(f"/api/admin/users/{self.guest.pk}", {"last_name": "Rahman"}, format="json")
        self.assertEqual(response.json()["data"]["user"]["last_name"], "Rahman")

    def test_unknown_user(self):
        self.assertEqual(self.admin.get("/api/admin/users/9999").status_code, 404)


class AdminPropertyTest(TestCase):
    def setUp(self):
        self.admin = api_client(make_user("admin"))
        self.listing = make_property(make_user("property_owner"), status="pending")

    def test_approve_listing(self):
        response = self.admin.patch(f"/api/admin/properties/{self.listing.pk}/status", {"status": "active"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.listing.refresh_from_db()
        self.assertEqual(self.listing.status, "active")

    def test_invalid_status(self):
        response = self.admin.patch(f"/api/admin/properties/{self.listing.pk}/status", {"status": "archived"}, format="json")
        self.assertEqual(response.json()["message"], "Invalid status")

    def test_featured_flag_must_be_boolean(self):
        url = f"/api/admin/properties/{self.listing.pk}/featured"
        self.assertEqual(self.admin.patch(url, {"is_featured": "yes"}, format="json").status_code, 400)
        response = self.admin.patch(url, {"is_featured": True}, format="json")
        self.assertEqual(response.json()["message"], "Property marked as featured")

    def test_admin_edit(self):
        response = self.admin.put(f"/api/admin/properties/{self.listing.pk}", {"title": "Renamed"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["property"]["title"], "Renamed")

    def test_assign_categories(self):
        category = DisplayCategory.objects.create(name="Family Stays", slug="family-stays")
        url = f"/api/admin/properties/{self.listing.pk}/display-categories"
        response = self.admin.put(url, {"category_ids": [category.pk]}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(list(self.listing.display_categories.all()), [category])
        bad = self.admin.put(url, {"category_ids": [category.pk, 9999]}, format="json")
        self.assertEqual(bad.json()["message"], "One or more category IDs are invalid")
        junk = self.admin.put(url, {"category_ids": ["abc"]}, format="json")
        self.assertEqual(junk.status_code, 400)
        self.assertEqual(junk.json()["message"], "Invalid category ID")
        self.assertEqual(list(self.listing.display_categories.all()), [category])


class ReferenceDataAdminTest(TestCase):
    def setUp(self):
        self.admin = api_client(make_user("admin"))

    def test_amenity_crud(self):
        response = self.admin.post("/api/admin/amenities", {"name": "Pool", "category": "Outdoor"}, format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["message"], "Amenity created successfully")
        amenity_id = response.json()["data"]["item"]["id"]

        duplicate = self.admin.post("/api/admin/amenities", {"name": "pool"}, format="json")
        self.assertEqual(duplicate.status_code, 409)
        self.assertEqual(duplicate.json()["message"], "Amenity with this name already exists")

        toggled = self.admin.patch(f"/api/admin/amenities/{amenity_id}/toggle", {"is_active": False}, format="json")
        self.assertFalse(toggled.json()["data"]["item"]["is_active"])

        self.assertEqual(self.admin.delete(f"/api/admin/amenities/{amenity_id}").status_code, 200)
        self.assertFalse(Amenity.objects.exists())

    def test_amenity_in_use_cannot_be_deleted(self):
        amenity = Amenity.objects.create(name="WiFi")
        make_property(make_user("property_owner")).amenities.add(amenity)
        response = self.admin.delete(f"/api/admin/amenities/{amenity.pk}")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["message"], "Cannot delete amenity. It is being used by properties.")

    def test_property_types_listed(self):
        self.admin.post("/api/admin/property-types", {"name": "Villa"}, format="json")
        data = self.admin.get("/api/admin/property-types").json()["data"]
        self.assertEqual([item["name"] for item in data["propertyTypes"]], ["Villa"])

    def test_display_category_slug_is_unique(self):
        first = self.admin.post("/api/admin/display-categories", {"name": "Beach Houses"}, format="json")
        self.assertEqual(first.json()["data"]["category"]["slug"], "beach-houses")
        DisplayCategory.objects.filter(pk=first.json()["data"]["category"]["id"]).update(name="Old Beach")
        second = self.admin.post("/api/admin/display-categories", {"name": "Beach Houses"}, format="json")
        self.assertEqual(second.json()["data"]["category"]["slug"], "beach-houses-2")

    def test_assign_category_properties(self):
        category = DisplayCategory.objects.create(name="Weekend", slug="weekend")
        listing = make_property(make_user("property_owner"))
        url = f"/api/admin/display-categories/{category.pk}/properties"
        self.assertEqual(self.admin.put(url, {"property_ids": "1"}, format="json").status_code, 400)
        response = self.admin.put(url, {"property_ids": [listing.pk]}, format="json")
        self.assertEqual([item["id"] for item in response.json()["data"]["properties"]], [listing.pk])


class AdminSettingsTest(TestCase):
    def setUp(self):
        self.admin = api_client(make_user("admin"))

    def test_update_settings(self):
        payload = {
            "settings": {
                "admin_commission_rate": {"value": 12, "type": "number"},
                "sms_enabled": {"value": False, "type": "boolean"},
            }
        }
        response = self.admin.put("/api/admin/settings", payload, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(SystemSetting.objects.get(setting_key="admin_commission_rate").setting_value, "12")
        self.assertEqual(SystemSetting.objects.get(setting_key="sms_enabled").setting_value, "false")
        self.assertFalse(response.json()["data"]["settings"]["sms_enabled"]["value"])

    def test_settings_object_required(self):
        response = self.admin.put("/api/admin/settings", {}, format="json")
        self.assertEqual(response.json()["message"], "Settings object is required")


class AdminModerationTest(TestCase):
    def setUp(self):
        self.admin = api_client(make_user("admin"))

    def test_report_status(self):
        report = PropertyReport.objects.create(property=make_property(make_user("property_owner")), reason="Spam")
        response = self.admin.patch(f"/api/admin/reports/{report.pk}/status", {"status": "resolved"}, format="json")
        self.assertEqual(response.status_code, 200)
        report.refresh_from_db()
        self.assertEqual(report.status, "resolved")

    def test_booking_payments_for_unknown_booking(self):
        response = self.admin.get("/api/admin/bookings/9999/payments")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Booking not found")

    def test_booking_list_filters_status(self):
        owner = make_user("property_owner")
        listing = make_property(owner)
        kept = make_booking(make_user(), listing, status="confirmed")
        make_booking(make_user(), listing)
        data = self.admin.get("/api/admin/bookings", {"status": "confirmed"}).json()["data"]
        self.assertEqual([item["id"] for item in data["bookings"]], [kept.pk])
