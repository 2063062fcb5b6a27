from rest_framework import serializers

from ...models import User
from .auth import clean_phone


class AdminUserUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("first_name", "last_name", "email", "user_type", "phone")

    def validate_phone(self, value):
        return clean_phone(value)


class StatusSerializer(serializers.Serializer):
    status = serializers.CharField()


class ActiveFlagSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()
