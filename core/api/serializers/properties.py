from rest_framework import serializers

from ...models import Amenity, DisplayCategory, Favorite, Property, PropertyImage, PropertyReport, PropertyType, Review


class PropertyTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertyType
        fields = ("id", "name", "description", "icon", "sort_order", "is_active")
        extra_kwargs = {"name": {"validators": []}}


class AmenitySerializer(serializers.ModelSerializer):
    class Meta:
        model = Amenity
        fields = ("id", "name", "icon", "category", "is_active")
        extra_kwargs = {"name": {"validators": []}}


class PropertyImageSerializer(serializers.ModelSerializer):
    image_url = serializers.SerializerMethodField()

    class Meta:
        model = PropertyImage
        fields = ("id", "image_url", "image_type", "caption", "sort_order")

    def get_image_url(self, obj):
        request = self.context.get("request")
        url = obj.image.url
        return request.build_absolute_uri(url) if request is not None else url


class PropertyListSerializer(serializers.ModelSerializer):
    property_type = serializers.CharField(source="property_type.name", default=None, read_only=True)
    main_image = serializers.SerializerMethodField()
    average_rating = serializers.SerializerMethodField()
    review_count = serializers.IntegerField(read_only=True, default=0)
    owner_name = serializers.CharField(source="owner.display_name", read_only=True)

    class Meta:
        model = Property
        fields = (
            "id",
            "title",
            "city",
            "state",
            "country",
            "property_type",
            "bedrooms",
            "bathrooms",
            "max_guests",
            "base_price",
            "currency",
            "status",
            "is_featured",
            "main_image",
            "average_rating",
            "review_count",
            "owner_name",
            "created_at",
        )

    def get_main_image(self, obj):
        image = obj.main_image
        if image is None:
            return None
        return PropertyImageSerializer(image, context=self.context).data["image_url"]

    def get_average_rating(self, obj):
        rating = getattr(obj, "average_rating", None)
        return round(float(rating), 1) if rating is not None else None


class ReviewSummarySerializer(serializers.ModelSerializer):
    guest_name = serializers.CharField(source="guest.display_name", read_only=True)

    class Meta:
        model = Review
        fields = (
            "id",
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
            "created_at",
        )


class PropertyDetailSerializer(PropertyListSerializer):
    images = PropertyImageSerializer(many=True, read_only=True)
    amenities = AmenitySerializer(many=True, read_only=True)
    reviews = serializers.SerializerMethodField()
    booking_count = serializers.IntegerField(read_only=True, default=None)

    class Meta(PropertyListSerializer.Meta):
        fields = PropertyListSerializer.Meta.fields + (
            "description",
            "address",
            "postal_code",
            "minimum_stay",
            "cleaning_fee",
            "security_deposit",
            "extra_guest_fee",
            "check_in_time",
            "check_out_time",
            "house_rules",
            "cancellation_policy",
            "free_cancellation_hours",
            "cancellation_fee_percentage",
            "images",
            "amenities",
            "reviews",
            "booking_count",
            "updated_at",
        )

    def get_reviews(self, obj):
        reviews = getattr(obj, "approved_reviews", None)
        if reviews is None:
            return []
        return ReviewSummarySerializer(reviews, many=True, context=self.context).data


class PropertyWriteSerializer(serializers.ModelSerializer):
    """Owner-editable listing fields; status is managed by admins."""

    amenities = serializers.PrimaryKeyRelatedField(
        queryset=Amenity.objects.filter(is_active=True), many=True, required=False
    )
    property_type = serializers.PrimaryKeyRelatedField(
        queryset=PropertyType.objects.filter(is_active=True), required=False, allow_null=True
    )

    class Meta:
        model = Property
        fields = (
            "title",
            "description",
            "property_type",
            "address",
            "city",
            "state",
            "country",
            "postal_code",
            "bedrooms",
            "bathrooms",
            "max_guests",
            "minimum_stay",
            "base_price",
            "cleaning_fee",
            "security_deposit",
            "extra_guest_fee",
            "check_in_time",
            "check_out_time",
            "house_rules",
            "cancellation_policy",
            "free_cancellation_hours",
            "cancellation_fee_percentage",
            "amenities",
        )

    def validate_base_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Base price must be greater than zero.")
        return value

    def validate_max_guests(self, value):
        if value < 1:
            raise serializers.ValidationError("At least one guest must be allowed.")
        return value


class AdminPropertyUpdateSerializer(PropertyWriteSerializer):
    class Meta(PropertyWriteSerializer.Meta):
        fields = PropertyWriteSerializer.Meta.fields + ("status", "is_featured")


class DisplayCategorySerializer(serializers.ModelSerializer):
    property_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = DisplayCategory
        fields = ("id", "name", "slug", "description", "sort_order", "is_active", "property_count")
        read_only_fields = ("slug",)
        extra_kwargs = {"name": {"validators": []}}


class FavoriteSerializer(serializers.ModelSerializer):
    property = PropertyListSerializer(read_only=True)

    class Meta:
        model = Favorite
        fields = ("id", "property", "created_at")


class PropertyReportSerializer(serializers.ModelSerializer):
    property_title = serializers.CharField(source="property.title", read_only=True)
    reporter = serializers.CharField(source="user.display_name", default=None, read_only=True)

    class Meta:
        model = PropertyReport
        fields = ("id", "property", "property_title", "reporter", "reason", "detail", "status", "created_at")
        read_only_fields = fields
