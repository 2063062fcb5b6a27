from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    USER_TYPE_CHOICES = (
        ("guest", "Guest"),
        ("property_owner", "Property Owner"),
        ("admin", "Admin"),
    )

    user_type = models.CharField(max_length=20, choices=USER_TYPE_CHOICES, default="guest")
    phone = models.CharField(max_length=20, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    profile_image = models.ImageField(upload_to="profile_images/", null=True, blank=True)

    @property
    def is_guest(self) -> bool:
        return self.user_type == "guest"

    @property
    def is_property_owner(self) -> bool:
        return self.user_type == "property_owner"

    @property
    def is_admin_user(self) -> bool:
        return self.user_type == "admin" or self.is_staff

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username
