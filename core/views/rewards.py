from rest_framework import status

from ..api.permissions import IsAdmin, IsGuest
from ..api.responses import success_response
from ..api.serializers import (
    AdjustPointsSerializer,
    MemberPointsSerializer,
    MemberStatusTierSerializer,
    RewardsPointSettingsSerializer,
    RewardsPointSlotSerializer,
    RewardsPointTransactionSerializer,
    UserRewardsPointsSerializer,
)
from ..exceptions import NotFoundError
from ..models import MemberStatusTier, RewardsPointSettings, RewardsPointSlot, RewardsPointTransaction, User
from ..services.rewards import RewardsAdminService, RewardsPointsService
from .base import ServiceAPIView


class MyPointsView(ServiceAPIView):
    permission_classes = [IsGuest]
    service_class = RewardsPointsService

    def get(self, request):
        account = self.get_service().account()
        transactions = RewardsPointTransaction.objects.filter(user=request.user).select_related("booking")[:10]
        settings = RewardsPointSettings.active()
        return success_response(
            "Rewards points retrieved successfully",
            {
                "points": self.serialize(UserRewardsPointsSerializer, account),
                "transactions": self.serialize(RewardsPointTransactionSerializer, transactions, many=True),
                "settings": self.serialize(RewardsPointSettingsSerializer, settings) if settings else None,
            },
        )


class MyTransactionsView(ServiceAPIView):
    permission_classes = [IsGuest]

    def get(self, request):
        transactions = RewardsPointTransaction.objects.filter(user=request.user).select_related("booking")
        return self.paginated_response(
            "Transactions retrieved successfully", transactions, RewardsPointTransactionSerializer, "transactions"
        )


class MemberTiersView(ServiceAPIView):
    permission_classes = [IsGuest]

    def get(self, request):
        tiers = MemberStatusTier.objects.filter(is_active=True).order_by("sort_order", "min_points")
        return success_response(
            "Member tiers retrieved successfully",
            {"tiers": self.serialize(MemberStatusTierSerializer, tiers, many=True)},
        )


class RewardsAdminView(ServiceAPIView):
    permission_classes = [IsAdmin]
    service_class = RewardsAdminService

    def get_service(self) -> RewardsAdminService:
        return self.service_class()


class SlotListView(RewardsAdminView):
    def get(self, request):
        slots = RewardsPointSlot.objects.all()
        return success_response("Slots retrieved successfully", {"slots": self.serialize(RewardsPointSlotSerializer, slots, many=True)})

    def post(self, request):
        slot = self.get_service().create_slot(dict(self.validated(RewardsPointSlotSerializer)))
        return success_response(
            "Slot created successfully",
            {"slot": self.serialize(RewardsPointSlotSerializer, slot)},
            status.HTTP_201_CREATED,
        )


class SlotDetailView(RewardsAdminView):
    def put(self, request, slot_id):
        data = self.validated(RewardsPointSlotSerializer, partial=True)
        slot = self.get_service().update_slot(slot_id, dict(data))
        return success_response("Slot updated successfully", {"slot": self.serialize(RewardsPointSlotSerializer, slot)})

    def delete(self, request, slot_id):
        self.get_service().delete_slot(slot_id)
        return success_response("Slot deleted successfully")


class RewardsSettingsView(RewardsAdminView):
    def get(self, request):
        settings = self.get_service().settings()
        return success_response(
            "Settings retrieved successfully", {"settings": self.serialize(RewardsPointSettingsSerializer, settings)}
        )

    def put(self, request):
        data = self.validated(RewardsPointSettingsSerializer, partial=True)
        settings = self.get_service().update_settings(dict(data))
        return success_response(
            "Settings updated successfully", {"settings": self.serialize(RewardsPointSettingsSerializer, settings)}
        )


class TierListView(RewardsAdminView):
    def get(self, request):
        tiers = MemberStatusTier.objects.order_by("sort_order", "min_points")
        return success_response(
            "Member tiers retrieved successfully", {"tiers": self.serialize(MemberStatusTierSerializer, tiers, many=True)}
        )

    def post(self, request):
        tier = self.get_service().create_tier(dict(self.validated(MemberStatusTierSerializer)))
        return success_response(
            "Member tier created successfully",
            {"tier": self.serialize(MemberStatusTierSerializer, tier)},
            status.HTTP_201_CREATED,
        )


class TierDetailView(RewardsAdminView):
    def put(self, request, tier_id):
        data = self.validated(MemberStatusTierSerializer, partial=True)
        tier = self.get_service().update_tier(tier_id, dict(data))
        return success_response("Tier updated successfully", {"tier": self.serialize(MemberStatusTierSerializer, tier)})

    def delete(self, request, tier_id):
        self.get_service().delete_tier(tier_id)
        return success_response("Tier deleted successfully")


class MemberPointsListView(RewardsAdminView):
    def get(self, request):
        members = self.get_service().members(request.query_params.get("search", ""))
        return self.paginated_response("Users points retrieved successfully", members, MemberPointsSerializer, "usersPoints")


class AdjustPointsView(RewardsAdminView):
    def post(self, request):
        data = self.validated(AdjustPointsSerializer)
        user = User.objects.filter(pk=data["user_id"]).first()
        if user is None:
            raise NotFoundError("User not found")
        new_balance = self.get_service().adjust_points(user, data["points"], data["description"])
        return success_response("Points adjusted successfully", {"newBalance": new_balance})
