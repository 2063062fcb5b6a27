from rest_framework import serializers

from ...models import Review


class ReviewSerializer(serializers.ModelSerializer):
    guest_name = serializers.CharField(source="guest.display_name", read_only=True)
    property_title = serializers.CharField(source="property.title", read_only=True)
    booking_reference = serializers.CharField(source="booking.booking_reference", read_only=True)

    class Meta:
        model = Review
        fields = (
            "id",
            "booking",
            "booking_reference",
            "property",
            "property_title",
            "guest",
            "guest_name",
            "rating",
            "title",
            "comment",
            "cleanliness_rating",
            "communication_rating",
            "check_in_rating",
            "accuracy_rating",
            "location_rating",
            "value_rating",
            "status",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class ReviewWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Review
        fields = (
            "rating",
            "title",
            "comment",
            "cleanliness_rating",
            "communication_rating",
            "check_in_rating",
            "accuracy_rating",
            "location_rating",
            "value_rating",
        )


class ReviewCreateSerializer(ReviewWriteSerializer):
    booking_id = serializers.IntegerField(min_value=1)

    class Meta(ReviewWriteSerializer.Meta):
        fields = ("booking_id",) + ReviewWriteSerializer.Meta.fields
