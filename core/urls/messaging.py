"""Guest/host messaging endpoints."""

from django.urls import path

from ..views import messaging

urlpatterns = [
    path("api/messages", messaging.ConversationListView.as_view(), name="conversation_list"),
    path("api/messages/start", messaging.StartConversationView.as_view(), name="conversation_start"),
    path("api/messages/<int:conversation_id>", messaging.ConversationDetailView.as_view(), name="conversation_detail"),
    path("api/messages/<int:conversation_id>/reply", messaging.ReplyView.as_view(), name="conversation_reply"),
]
