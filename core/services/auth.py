from __future__ import annotations

import logging
from dataclasses import dataclass

from django.contrib.auth import authenticate, get_user_model
from django.db import transaction
from rest_framework.authtoken.models import Token

from ..exceptions import ServiceError
from ..models import PropertyOwnerProfile

logger = logging.getLogger(__name__)

User = get_user_model()


@dataclass(frozen=True)
class LoginResult:
    user: object
    token: str


class AccountService:
    """Registration and token sessions for API clients."""

    @transaction.atomic
    def register(self, data: dict) -> LoginResult:
        password = data.pop("password")
        business_name = data.pop("business_name", "")
        user = User(**data)
        user.set_password(password)
        user.save()
        if user.user_type == "property_owner":
            PropertyOwnerProfile.objects.create(user=user, business_name=business_name or user.display_name)
        token = Token.objects.create(user=user)
        logger.info("Registered %s account %s", user.user_type, user.pk)
        return LoginResult(user, token.key)

    def login(self, identifier: str, password: str, request=None) -> LoginResult:
        identifier = (identifier or "").strip()
        if not identifier or not password:
            raise ServiceError("Username or email and password are required")
        username = identifier
        if "@" in identifier:
            match = User.objects.filter(email__iexact=identifier).first()
            if match is not None:
                username = match.get_username()
        user = authenticate(request, username=username, password=password)
        if user is None:
            raise ServiceError("Invalid credentials", status_code=401)
        token, _ = Token.objects.get_or_create(user=user)
        logger.info("User %s logged in", user.pk)
        return LoginResult(user, token.key)

    def logout(self, user) -> None:
        Token.objects.filter(user=user).delete()
