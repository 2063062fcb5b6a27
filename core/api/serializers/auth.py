from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from ...models import PropertyOwnerProfile, User


def _absolute_url(serializer, file_field):
    if not file_field:
        return None
    request = serializer.context.get("request")
    url = file_field.url
    if request is None:
        return url
    return request.build_absolute_uri(url)


class UserSerializer(serializers.ModelSerializer):
    """Serializer exposing the current user's public profile information."""

    profile_image = serializers.SerializerMethodField()
    full_name = serializers.CharField(source="display_name", read_only=True)

    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "full_name",
            "user_type",
            "phone",
            "date_of_birth",
            "profile_image",
            "is_active",
            "date_joined",
        )
        read_only_fields = fields

    def get_profile_image(self, obj):
        return _absolute_url(self, obj.profile_image)


def clean_phone(value: str) -> str:
    phone = (value or "").strip()
    if phone:
        digits_only = "".join(ch for ch in phone if ch.isdigit())
        if not 10 <= len(digits_only) <= 15:
            raise serializers.ValidationError("Phone number must contain 10 to 15 digits.")
        phone = digits_only
    return phone


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)
    user_type = serializers.ChoiceField(choices=("guest", "property_owner"), default="guest")
    business_name = serializers.CharField(required=False, allow_blank=True, write_only=True)

    class Meta:
        model = User
        fields = (
            "username",
            "email",
            "first_name",
            "last_name",
            "phone",
            "date_of_birth",
            "user_type",
            "password",
            "confirm_password",
            "business_name",
        )
        extra_kwargs = {"email": {"required": True}, "first_name": {"required": True}, "last_name": {"required": True}}

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("An account with this email already exists.")
        return value

    def validate_phone(self, value):
        return clean_phone(value)

    def validate(self, attrs):
        if attrs["password"] != attrs.pop("confirm_password"):
            raise serializers.ValidationError({"confirm_password": "Passwords do not match."})
        validate_password(attrs["password"])
        return attrs


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        attrs["identifier"] = attrs.get("username") or attrs.get("email") or ""
        if not attrs["identifier"]:
            raise serializers.ValidationError("Username or email is required.")
        return attrs


class ProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("first_name", "last_name", "phone", "date_of_birth", "profile_image")

    def validate_phone(self, value):
        return clean_phone(value)


class OwnerProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertyOwnerProfile
        fields = (
            "business_name",
            "business_address",
            "bank_name",
            "bank_account_number",
            "mobile_banking_number",
        )
