from rest_framework import status
from rest_framework.permissions import IsAuthenticated

from ..api.responses import success_response
from ..api.serializers import ConversationSerializer, MessageSerializer, ReplySerializer, StartConversationSerializer
from ..services.messaging import MessagingService
from .base import ServiceAPIView


class MessagingView(ServiceAPIView):
    permission_classes = [IsAuthenticated]
    service_class = MessagingService


class ConversationListView(MessagingView):
    def get(self, request):
        conversations = self.get_service().conversations()
        return success_response(
            "Conversations retrieved successfully",
            {"conversations": self.serialize(ConversationSerializer, conversations, many=True)},
        )


class ConversationDetailView(MessagingView):
    def get(self, request, conversation_id):
        thread = self.get_service().thread(conversation_id)
        return success_response(
            "Messages retrieved successfully",
            {
                "conversation": self.serialize(ConversationSerializer, thread.conversation),
                "messages": self.serialize(MessageSerializer, thread.messages, many=True),
            },
        )


class StartConversationView(MessagingView):
    def post(self, request):
        data = self.validated(StartConversationSerializer)
        conversation = self.get_service().start(data.get("property_id"), data["message"])
        return success_response(
            "Message sent successfully",
            {"conversationId": conversation.pk},
            status.HTTP_201_CREATED,
        )


class ReplyView(MessagingView):
    def post(self, request, conversation_id):
        data = self.validated(ReplySerializer)
        message = self.get_service().reply(conversation_id, data["content"])
        return success_response(
            "Reply sent successfully",
            {"message": self.serialize(MessageSerializer, message)},
            status.HTTP_201_CREATED,
        )
