import json
from decimal import Decimal, InvalidOperation

from django.db import models


class SystemSetting(models.Model):
    """Key/value platform configuration editable from the admin back office."""

    SETTING_TYPE_CHOICES = (
        ("string", "String"),
        ("number", "Number"),
        ("boolean", "Boolean"),
        ("json", "JSON"),
    )

    setting_key = models.CharField(max_length=100, unique=True)
    setting_value = models.TextField(blank=True)
    setting_type = models.CharField(max_length=20, choices=SETTING_TYPE_CHOICES, default="string")
    description = models.TextField(blank=True)
    is_public = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("setting_key",)

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.setting_key

    @property
    def typed_value(self):
        raw = self.setting_value
        if self.setting_type == "boolean":
            return str(raw).strip().lower() in {"1", "true", "yes", "on"}
        if self.setting_type == "number":
            try:
                return Decimal(raw)
            except (InvalidOperation, TypeError):
                return None
        if self.setting_type == "json":
            try:
                return json.loads(raw)
            except (TypeError, ValueError):
                return None
        return raw

    @classmethod
    def get_value(cls, key: str, default=None):
        setting = cls.objects.filter(setting_key=key).first()
        if setting is None or setting.setting_value in (None, ""):
            return default
        return setting.setting_value

    @classmethod
    def get_decimal(cls, key: str, default) -> Decimal:
        raw = cls.get_value(key)
        try:
            return Decimal(str(raw)) if raw is not None else Decimal(str(default))
        except InvalidOperation:
            return Decimal(str(default))

    @classmethod
    def get_int(cls, key: str, default: int) -> int:
        raw = cls.get_value(key)
        try:
            return int(raw) if raw is not None else default
        except (TypeError, ValueError):
            return default

    @classmethod
    def get_bool(cls, key: str, default: bool = False) -> bool:
        raw = cls.get_value(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}
