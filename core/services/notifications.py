"""Outbound SMS through the HTTP gateway configured in system settings."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

import httpx
from django.conf import settings

from ..models import SystemSetting

logger = logging.getLogger(__name__)

SMS_SETTING_KEYS = ("sms_api_key", "sms_secret_key", "sms_sender_id", "sms_enabled", "sms_api_url")


@dataclass(frozen=True)
class SmsResult:
    success: bool
    skipped: bool = False
    reason: str | None = None
    error: str | None = None
    response: Any = None


def mask_phone(phone: str | None) -> str:
    if not phone:
        return "MISSING"
    return f"{phone[:3]}***{phone[-4:]}"


class SmsNotifier:
    """Send text messages; failures are reported in the result, never raised."""

    def __init__(self, transport: httpx.BaseTransport | None = None, timeout: float | None = None):
        self.transport = transport
        self.timeout = timeout if timeout is not None else settings.SMS_TIMEOUT

    def load_settings(self) -> dict[str, str]:
        rows = SystemSetting.objects.filter(setting_key__in=SMS_SETTING_KEYS)
        return {row.setting_key: row.setting_value for row in rows}

    def send(self, to: str | None, message: str | None) -> SmsResult:
        if not to or not message:
            logger.error("SMS not sent: missing phone number or message content")
            return SmsResult(False, error="Missing phone number or message content")

        config = self.load_settings()
        if str(config.get("sms_enabled") or "true").lower() == "false":
            logger.info("SMS sending disabled via settings")
            return SmsResult(False, skipped=True, reason="disabled")

        missing = [key for key in ("sms_api_key", "sms_secret_key", "sms_sender_id") if not config.get(key)]
        if missing:
            error = f"SMS credentials not configured. Missing: {', '.join(missing)}"
            logger.error(error)
            return SmsResult(False, error=error)

        recipient = re.sub(r"\s+", "", str(to))
        params = {
            "apikey": config["sms_api_key"],
            "secretkey": config["sms_secret_key"],
            "callerID": config["sms_sender_id"],
            "toUser": recipient,
            "messageContent": message,
        }
        url = config.get("sms_api_url") or settings.SMS_API_URL
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(url, params=params)
                response.raise_for_status()
        except (httpx.HTTPError, httpx.TimeoutException) as exc:
            if isinstance(exc, httpx.HTTPStatusError):
                error = f"SMS API error: HTTP {exc.response.status_code}"
            else:
                error = f"SMS API error: {exc.__class__.__name__}"
            logger.warning("SMS to %s failed: %s", mask_phone(recipient), error)
            return SmsResult(False, error=error)

        body = response.text
        if not body:
            logger.warning("SMS gateway returned an empty body for %s", mask_phone(recipient))
            return SmsResult(False, error="SMS API error: empty response")
        logger.info("SMS sent to %s", mask_phone(recipient))
        return SmsResult(True, response=body)


def send_sms(to: str | None, message: str | None) -> SmsResult:
    return SmsNotifier().send(to, message)
