from rest_framework.permissions import BasePermission


class _UserTypePermission(BasePermission):
    user_type = ""
    message = "You do not have permission to access this resource."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "user_type", None) == self.user_type


class IsGuest(_UserTypePermission):
    user_type = "guest"
    message = "Only guest accounts can access this resource."


class IsPropertyOwner(_UserTypePermission):
    user_type = "property_owner"
    message = "Only property owners can access this resource."


class IsAdmin(BasePermission):
    message = "Admin access required."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "user_type", None) == "admin" or user.is_staff
