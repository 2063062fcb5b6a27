from decimal import Decimal

from rest_framework import serializers

from ...models import Booking, Payment


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = (
            "id",
            "payment_reference",
            "payment_type",
            "payment_method",
            "transaction_type",
            "amount",
            "dr_amount",
            "cr_amount",
            "status",
            "notes",
            "processed_at",
            "created_at",
        )
        read_only_fields = fields


class LedgerEntrySerializer(serializers.Serializer):
    """A payment row paired with the running ``dr - cr`` balance."""

    def to_representation(self, instance):
        data = PaymentSerializer(instance.payment, context=self.context).data
        data["running_balance"] = serializers.DecimalField(max_digits=14, decimal_places=2).to_representation(
            instance.running_balance
        )
        return data


class LedgerSummarySerializer(serializers.Serializer):
    total_dr = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_cr = serializers.DecimalField(max_digits=14, decimal_places=2)
    outstanding = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_bookings = serializers.IntegerField()


class BookingSerializer(serializers.ModelSerializer):
    property_id = serializers.IntegerField(source="property.id", read_only=True)
    property_title = serializers.CharField(source="property.title", read_only=True)
    property_city = serializers.CharField(source="property.city", read_only=True)
    guest_id = serializers.IntegerField(source="guest.id", read_only=True)
    owner_accepted = serializers.BooleanField(source="is_owner_accepted", read_only=True)

    class Meta:
        model = Booking
        fields = (
            "id",
            "booking_reference",
            "property_id",
            "property_title",
            "property_city",
            "guest_id",
            "guest_name",
            "guest_email",
            "guest_phone",
            "check_in_date",
            "check_out_date",
            "check_in_time",
            "check_out_time",
            "number_of_guests",
            "number_of_nights",
            "base_price",
            "cleaning_fee",
            "security_deposit",
            "extra_guest_fee",
            "service_fee",
            "tax_amount",
            "discount_amount",
            "subtotal",
            "total_amount",
            "currency",
            "admin_commission_rate",
            "admin_commission",
            "owner_earnings",
            "special_requests",
            "status",
            "payment_status",
            "owner_accepted",
            "confirmed_at",
            "payment_deadline",
            "checked_in_at",
            "checked_out_at",
            "cancelled_at",
            "cancellation_reason",
            "points_redeemed",
            "points_discount",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    property_id = serializers.IntegerField(min_value=1)
    check_in_date = serializers.DateField()
    check_out_date = serializers.DateField()
    number_of_guests = serializers.IntegerField(min_value=1, default=1)
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")
    coupon_code = serializers.CharField(required=False, allow_blank=True, default="")


class GuestPaymentSerializer(serializers.Serializer):
    payment_status = serializers.CharField()
    payment_method = serializers.CharField(required=False, allow_blank=True, default="")
    points_to_redeem = serializers.IntegerField(required=False, min_value=0, default=0)


class OwnerPaymentSerializer(serializers.Serializer):
    payment_status = serializers.CharField()
    partial_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True, min_value=Decimal("0"))
    discount_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True, min_value=Decimal("0"))
    discount_reason = serializers.CharField(required=False, allow_blank=True, default="")


class CancelBookingSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")
