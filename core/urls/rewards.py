"""Loyalty points endpoints for guests and admins."""

from django.urls import path

from ..views import rewards

urlpatterns = [
    path("api/rewards-points/my-points", rewards.MyPointsView.as_view(), name="rewards_my_points"),
    path("api/rewards-points/my-transactions", rewards.MyTransactionsView.as_view(), name="rewards_my_transactions"),
    path("api/rewards-points/member-tiers", rewards.MemberTiersView.as_view(), name="rewards_member_tiers"),
    path("api/rewards-points/admin/slots", rewards.SlotListView.as_view(), name="rewards_slot_list"),
    path("api/rewards-points/admin/slots/<int:slot_id>", rewards.SlotDetailView.as_view(), name="rewards_slot_detail"),
    path("api/rewards-points/admin/settings", rewards.RewardsSettingsView.as_view(), name="rewards_settings"),
    path("api/rewards-points/admin/member-tiers", rewards.TierListView.as_view(), name="rewards_tier_list"),
    path(
        "api/rewards-points/admin/member-tiers/<int:tier_id>",
        rewards.TierDetailView.as_view(),
        name="rewards_tier_detail",
    ),
    path("api/rewards-points/admin/users-points", rewards.MemberPointsListView.as_view(), name="rewards_users_points"),
    path("api/rewards-points/admin/adjust-points", rewards.AdjustPointsView.as_view(), name="rewards_adjust_points"),
]
