from datetime import date, datetime

from django.test import SimpleTestCase

from .flights import (
    build_manifest,
    calculate_exact_age,
    classify_passenger,
    fallback_code,
    passenger_type_code,
    validate_passenger_age,
)


class ExactAgeTest(SimpleTestCase):
    def test_age_breakdown(self):
        age = calculate_exact_age(date(2015, 1, 1), date(2022, 7, 1))
        self.assertEqual((age.years, age.months, age.days), (7, 5, 29))
        self.assertEqual(str(age), "7y 5m 29d")

    def test_accepts_datetimes(self):
        age = calculate_exact_age(datetime(2020, 1, 1, 6, 0), datetime(2020, 1, 2, 18, 0))
        self.assertEqual(age.days, 1)
        self.assertEqual(age.hours, 12)


class PassengerTypeCodeTest(SimpleTestCase):
    def test_adult(self):
        self.assertEqual(passenger_type_code(date(1990, 3, 3), date(2026, 1, 1)), "ADT")

    def test_child_uses_completed_years(self):
        self.assertEqual(passenger_type_code(date(2015, 1, 1), date(2022, 7, 1)), "C07")

    def test_infant_uses_completed_months(self):
        self.assertEqual(passenger_type_code(date(2022, 1, 1), date(2022, 9, 15)), "I08")

    def test_fallback_codes(self):
        self.assertEqual(fallback_code("Adult"), "ADT")
        self.assertEqual(fallback_code("Children"), "C07")
        self.assertEqual(fallback_code("Infant"), "INF")
        self.assertEqual(fallback_code(None), "INF")


class ClassifyPassengerTest(SimpleTestCase):
    def test_labels(self):
        self.assertEqual(classify_passenger("Adult"), "adult")
        self.assertEqual(classify_passenger("Kid (2-5)"), "kid")
        self.assertEqual(classify_passenger("Children"), "child")
        self.assertEqual(classify_passenger("INFANT"), "infant")
        self.assertIsNone(classify_passenger("Senior"))
        self.assertIsNone(classify_passenger(None))


class ValidatePassengerAgeTest(SimpleTestCase):
    def test_valid_adult(self):
        check = validate_passenger_age("Adult", date(1990, 1, 1), date(2026, 5, 1), date(2026, 1, 1))
        self.assertTrue(check.is_valid)

    def test_infant_too_old_at_departure(self):
        check = validate_passenger_age("Infant", date(2024, 3, 1), date(2026, 6, 1), date(2026, 1, 1))
        self.assertEqual(check.current_error, "")
        self.assertEqual(check.departure_error, "Infant must be below 24 months at departure")
        self.assertFalse(check.is_valid)

    def test_child_rule_reports_both_moments(self):
        check = validate_passenger_age("Child", date(2024, 1, 1), date(2026, 6, 1), date(2026, 1, 1))
        self.assertEqual(check.current_error, "Child must be 5 to below 12 years (current age)")
        self.assertEqual(check.departure_error, "Child must be 5 to below 12 years at departure")

    def test_unknown_label_is_not_checked(self):
        check = validate_passenger_age("Senior", date(2024, 1, 1), date(2026, 6, 1), date(2026, 1, 1))
        self.assertTrue(check.is_valid)


class BuildManifestTest(SimpleTestCase):
    def test_one_entry_per_seat(self):
        fares = {
            "adult": {"passengerType": "Adult", "code": "ADT", "passengerNumberByType": 2},
            "infant": {"passengerType": "Infant", "passengerNumberByType": 1},
            "totalPassenger": 3,
        }
        manifest = build_manifest(fares)
        self.assertEqual([p["code"] for p in manifest], ["ADT", "ADT", "INF"])
        self.assertEqual(manifest[0]["first_name"], "")

    def test_empty_summary_defaults_to_one_adult(self):
        self.assertEqual(build_manifest(None), [{"type": "Adult", "code": "ADT", "title": "Mr"}])
