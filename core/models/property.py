from datetime import time

from django.db import models

from .user import User


class PropertyType(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    icon = models.CharField(max_length=50, blank=True)
    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ("sort_order", "name")

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.name


class Amenity(models.Model):
    name = models.CharField(max_length=100, unique=True)
    icon = models.CharField(max_length=50, blank=True)
    category = models.CharField(max_length=50, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ("name",)
        verbose_name_plural = "amenities"

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.name


class Property(models.Model):
    STATUS_CHOICES = (
        ("pending", "Pending Approval"),
        ("active", "Active"),
        ("inactive", "Inactive"),
        ("rejected", "Rejected"),
    )

    owner = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        limit_choices_to={"user_type": "property_owner"},
        related_name="properties",
    )
    property_type = models.ForeignKey(
        PropertyType,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="properties",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    address = models.TextField()
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, default="Bangladesh")
    postal_code = models.CharField(max_length=20, blank=True)
    bedrooms = models.PositiveIntegerField(default=1)
    bathrooms = models.PositiveIntegerField(default=1)
    max_guests = models.PositiveIntegerField(default=1)
    minimum_stay = models.PositiveIntegerField(default=1, help_text="Minimum number of nights")
    base_price = models.DecimalField(max_digits=10, decimal_places=2, help_text="Price per night")
    cleaning_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    security_deposit = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    extra_guest_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        help_text="Charged for every guest after the first",
    )
    currency = models.CharField(max_length=3, default="BDT")
    check_in_time = models.TimeField(default=time(15, 0))
    check_out_time = models.TimeField(default=time(11, 0))
    house_rules = models.TextField(blank=True)
    cancellation_policy = models.TextField(blank=True)
    free_cancellation_hours = models.PositiveIntegerField(default=24)
    cancellation_fee_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    is_featured = models.BooleanField(default=False)
    amenities = models.ManyToManyField(Amenity, blank=True, related_name="properties")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)
        verbose_name_plural = "properties"

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.title

    @property
    def main_image(self):
        images = list(self.images.all())
        for image in images:
            if image.image_type == "main":
                return image
        return images[0] if images else None


class PropertyImage(models.Model):
    IMAGE_TYPE_CHOICES = (("main", "Main"), ("gallery", "Gallery"))

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="images")
    image = models.ImageField(upload_to="property_images/")
    image_type = models.CharField(max_length=10, choices=IMAGE_TYPE_CHOICES, default="gallery")
    caption = models.CharField(max_length=255, blank=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("sort_order", "id")

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Image for {self.property.title}"


class DisplayCategory(models.Model):
    """Admin-curated home page rail grouping a hand-picked set of listings."""

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True)
    description = models.TextField(blank=True)
    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    properties = models.ManyToManyField(Property, blank=True, related_name="display_categories")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("sort_order", "name")
        verbose_name_plural = "display categories"

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.name


class Favorite(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="favorites")
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="favorited_by")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "property"], name="unique_favorite_per_user"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.user.username} likes {self.property.title}"


class PropertyReport(models.Model):
    STATUS_CHOICES = (
        ("pending", "Pending"),
        ("investigating", "Investigating"),
        ("resolved", "Resolved"),
        ("dismissed", "Dismissed"),
    )

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="reports")
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="property_reports",
    )
    reason = models.CharField(max_length=255)
    detail = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Report on {self.property.title}: {self.reason}"
