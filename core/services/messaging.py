from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.db.models import Count, OuterRef, Q, Subquery
from django.utils import timezone

from ..exceptions import NotFoundError, ServiceError
from ..models import Conversation, Message, Property
from .params import record_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversationThread:
    conversation: Conversation
    messages: list[Message]


class MessagingService:
    """Guest/host conversations scoped to a listing."""

    def __init__(self, user):
        self.user = user

    def conversations(self) -> list[Conversation]:
        latest = Message.objects.filter(conversation=OuterRef("pk")).order_by("-created_at", "-id")
        queryset = (
            Conversation.objects.filter(Q(guest=self.user) | Q(host=self.user))
            .select_related("guest", "host", "property")
            .prefetch_related("property__images")
            .annotate(
                unread_count=Count(
                    "messages",
                    filter=Q(messages__is_read=False) & ~Q(messages__sender=self.user),
                ),
                latest_message_id=Subquery(latest.values("id")[:1]),
            )
            .order_by("-last_message_at", "-id")
        )
        conversations = list(queryset)
        last_messages = Message.objects.in_bulk(
            [conversation.latest_message_id for conversation in conversations if conversation.latest_message_id]
        )
        for conversation in conversations:
            conversation.other_user = conversation.other_participant(self.user)
            conversation.last_message = last_messages.get(conversation.latest_message_id)
        return conversations

    def _get_for_participant(self, conversation_id: int) -> Conversation | None:
        return (
            Conversation.objects.filter(pk=conversation_id)
            .filter(Q(guest=self.user) | Q(host=self.user))
            .select_related("guest", "host", "property")
            .first()
        )

    def thread(self, conversation_id: int) -> ConversationThread:
        conversation = self._get_for_participant(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found or access denied")
        messages = list(conversation.messages.select_related("sender").order_by("created_at", "id"))
        conversation.messages.filter(is_read=False).exclude(sender=self.user).update(is_read=True)
        conversation.other_user = conversation.other_participant(self.user)
        return ConversationThread(conversation, messages)

    @transaction.atomic
    def start(self, property_id, content: str) -> Conversation:
        property_id = record_id(property_id, "property ID")
        if not property_id or not (content or "").strip():
            raise ServiceError("Property ID and message are required")
        listing = Property.objects.filter(pk=property_id).select_related("owner").first()
        if listing is None:
            raise NotFoundError("Property not found")
        if listing.owner_id == self.user.pk:
            raise ServiceError("You cannot start a conversation about your own property")
        now = timezone.now()
        conversation, created = Conversation.objects.get_or_create(
            guest=self.user,
            host=listing.owner,
            property=listing,
            defaults={"last_message_at": now},
        )
        if not created:
            conversation.last_message_at = now
            conversation.save(update_fields=["last_message_at"])
        Message.objects.create(conversation=conversation, sender=self.user, content=content.strip())
        logger.info("User %s messaged host %s about property %s", self.user.pk, listing.owner_id, listing.pk)
        return conversation

    @transaction.atomic
    def reply(self, conversation_id: int, content: str) -> Message:
        if not (content or "").strip():
            raise ServiceError("Message content is required")
        conversation = self._get_for_participant(conversation_id)
        if conversation is None:
            raise PermissionError("Access denied or conversation not found")
        message = Message.objects.create(conversation=conversation, sender=self.user, content=content.strip())
        conversation.last_message_at = message.created_at
        conversation.save(update_fields=["last_message_at"])
        return message
