from decimal import Decimal

from rest_framework import serializers

from ...models import MemberStatusTier, RewardsPointSettings, RewardsPointSlot, RewardsPointTransaction, UserRewardsPoints


class RewardsPointSlotSerializer(serializers.ModelSerializer):
    min_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
    max_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
    points_per_thousand = serializers.DecimalField(max_digits=8, decimal_places=2, min_value=Decimal("0"))

    class Meta:
        model = RewardsPointSlot
        fields = ("id", "min_amount", "max_amount", "points_per_thousand", "is_active", "created_at", "updated_at")
        read_only_fields = ("id", "created_at", "updated_at")


class RewardsPointSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = RewardsPointSettings
        fields = ("id", "points_per_taka", "min_points_to_redeem", "max_points_per_booking", "is_active", "updated_at")
        read_only_fields = ("id", "is_active", "updated_at")

    def validate_points_per_taka(self, value):
        if value <= 0:
            raise serializers.ValidationError("Points per taka must be greater than zero.")
        return value


class MemberStatusTierSerializer(serializers.ModelSerializer):
    class Meta:
        model = MemberStatusTier
        fields = ("id", "name", "min_points", "color", "icon", "benefits", "sort_order", "is_active")
        extra_kwargs = {"name": {"validators": []}}


class UserRewardsPointsSerializer(serializers.ModelSerializer):
    tier = MemberStatusTierSerializer(read_only=True)

    class Meta:
        model = UserRewardsPoints
        fields = ("total_points_earned", "current_balance", "lifetime_points_spent", "tier", "updated_at")
        read_only_fields = fields


class MemberPointsSerializer(UserRewardsPointsSerializer):
    user_id = serializers.IntegerField(source="user.id", read_only=True)
    name = serializers.CharField(source="user.display_name", read_only=True)
    email = serializers.CharField(source="user.email", read_only=True)
    phone = serializers.CharField(source="user.phone", read_only=True)

    class Meta(UserRewardsPointsSerializer.Meta):
        fields = ("user_id", "name", "email", "phone") + UserRewardsPointsSerializer.Meta.fields
        read_only_fields = fields


class RewardsPointTransactionSerializer(serializers.ModelSerializer):
    booking_reference = serializers.CharField(source="booking.booking_reference", default=None, read_only=True)

    class Meta:
        model = RewardsPointTransaction
        fields = (
            "id",
            "transaction_type",
            "points",
            "balance_after",
            "amount",
            "description",
            "booking_reference",
            "created_at",
        )
        read_only_fields = fields


class AdjustPointsSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(min_value=1)
    points = serializers.IntegerField()
    description = serializers.CharField(max_length=255)

    def validate_points(self, value):
        if value == 0:
            raise serializers.ValidationError("Points adjustment cannot be zero.")
        return value
