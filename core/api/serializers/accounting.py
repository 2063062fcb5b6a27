from decimal import Decimal

from rest_framework import serializers

from ...models import OwnerPayout


class OwnerPayoutSerializer(serializers.ModelSerializer):
    owner_name = serializers.CharField(source="owner.display_name", read_only=True)

    class Meta:
        model = OwnerPayout
        fields = (
            "id",
            "payout_reference",
            "owner",
            "owner_name",
            "amount",
            "payment_method",
            "payment_status",
            "payment_reference",
            "payment_date",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class PayoutRequestSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    payment_method = serializers.CharField(required=False, allow_blank=True, default="bank_transfer")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class PayoutStatusSerializer(serializers.Serializer):
    payment_status = serializers.CharField()
    payment_reference = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
