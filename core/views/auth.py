from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated

from ..api.responses import success_response
from ..api.serializers import (
    LoginSerializer,
    OwnerProfileSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)
from ..services.auth import AccountService
from .base import ServiceAPIView


class AuthView(ServiceAPIView):
    service_class = AccountService

    def get_service(self) -> AccountService:
        return self.service_class()

    def session_payload(self, result):
        return {"user": self.serialize(UserSerializer, result.user), "token": result.token}


class RegisterView(AuthView):
    permission_classes = [AllowAny]

    def post(self, request):
        data = dict(self.validated(RegisterSerializer))
        result = self.get_service().register(data)
        return success_response("User registered successfully", self.session_payload(result), status.HTTP_201_CREATED)


class LoginView(AuthView):
    permission_classes = [AllowAny]

    def post(self, request):
        data = self.validated(LoginSerializer)
        result = self.get_service().login(data["identifier"], data["password"], request=request)
        return success_response("Login successful", self.session_payload(result))


class LogoutView(AuthView):
    def post(self, request):
        self.get_service().logout(request.user)
        return success_response("Logged out successfully")


class CurrentUserView(ServiceAPIView):
    """Return or update the authenticated user's profile information."""

    permission_classes = [IsAuthenticated]

    def profile_payload(self, user):
        data = {"user": self.serialize(UserSerializer, user)}
        owner_profile = getattr(user, "owner_profile", None) if user.is_property_owner else None
        if owner_profile is not None:
            data["owner_profile"] = self.serialize(OwnerProfileSerializer, owner_profile)
        return data

    def get(self, request):
        return success_response("Profile retrieved successfully", self.profile_payload(request.user))

    def patch(self, request):
        serializer = ProfileUpdateSerializer(
            request.user, data=request.data, partial=True, context=self.get_serializer_context()
        )
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return success_response("Profile updated successfully", self.profile_payload(user))
