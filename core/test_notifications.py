import httpx
from django.test import TestCase

from .services.notifications import SmsNotifier, mask_phone
from .testutils import set_setting


class SmsNotifierTest(TestCase):
    def configure(self):
        set_setting("sms_api_key", "key-1")
        set_setting("sms_secret_key", "secret-1")
        set_setting("sms_sender_id", "KEYHOST")
        set_setting("sms_api_url", "https://sms.test/sendtext")

    def notifier(self, handler):
        return SmsNotifier(transport=httpx.MockTransport(handler), timeout=2)

    def unreachable(self, request):
        raise AssertionError("gateway should not be called")

    def test_missing_recipient(self):
        result = self.notifier(self.unreachable).send("", "Hello")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Missing phone number or message content")

    def test_disabled_is_skipped(self):
        self.configure()
        set_setting("sms_enabled", "false", "boolean")
        result = self.notifier(self.unreachable).send("01712345678", "Hello")
        self.assertFalse(result.success)
        self.assertTrue(result.skipped)
        self.assertEqual(result.reason, "disabled")

    def test_missing_credentials(self):
        set_setting("sms_api_key", "key-1")
        result = self.notifier(self.unreachable).send("01712345678", "Hello")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "SMS credentials not configured. Missing: sms_secret_key, sms_sender_id")

    def test_sends_with_gateway_parameters(self):
        self.configure()
        seen = {}

        def handler(request):
            seen["url"] = f"{request.url.scheme}://{request.url.host}{request.url.path}"
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, text="1701|sent")

        result = self.notifier(handler).send("017 1234 5678", "Your booking is confirmed")
        self.assertTrue(result.success)
        self.assertEqual(result.response, "1701|sent")
        self.assertEqual(seen["url"], "https://sms.test/sendtext")
        self.assertEqual(
            seen["params"],
            {
                "apikey": "key-1",
                "secretkey": "secret-1",
                "callerID": "KEYHOST",
                "toUser": "01712345678",
                "messageContent": "Your booking is confirmed",
            },
        )

    def test_gateway_error_is_reported_not_raised(self):
        self.configure()
        with self.assertLogs("core.services.notifications", level="WARNING") as logs:
            result = self.notifier(lambda request: httpx.Response(500)).send("01712345678", "Hello")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "SMS API error: HTTP 500")
        output = "\n".join(logs.output)
        self.assertIn("017***5678", output)
        for secret in ("key-1", "secret-1", "01712345678", "sms.test"):
            self.assertNotIn(secret, output)
            self.assertNotIn(secret, result.error)

    def test_unreachable_gateway_hides_the_request_url(self):
        self.configure()

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with self.assertLogs("core.services.notifications", level="WARNING") as logs:
            result = self.notifier(handler).send("01712345678", "Hello")
        self.assertEqual(result.error, "SMS API error: ConnectError")
        self.assertNotIn("secret-1", "\n".join(logs.output))

    def test_empty_gateway_body(self):
        self.configure()
        result = self.notifier(lambda request: httpx.Response(200, text="")).send("01712345678", "Hello")
        self.assertEqual(result.error, "SMS API error: empty response")

    def test_mask_phone(self):
        self.assertEqual(mask_phone("01712345678"), "017***5678")
        self.assertEqual(mask_phone(None), "MISSING")
