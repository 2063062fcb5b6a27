from django.db import models

from .property import Property
from .user import User


class Conversation(models.Model):
    guest = models.ForeignKey(User, on_delete=models.CASCADE, related_name="guest_conversations")
    host = models.ForeignKey(User, on_delete=models.CASCADE, related_name="host_conversations")
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="conversations")
    last_message_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["guest", "host", "property"], name="unique_conversation_per_listing"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.guest.username} / {self.host.username} about {self.property.title}"

    def has_participant(self, user) -> bool:
        return user.pk in {self.guest_id, self.host_id}

    def other_participant(self, user):
        return self.host if user.pk == self.guest_id else self.guest


class Message(models.Model):
    conversation = models.ForeignKey(Conversation, on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(User, on_delete=models.CASCADE, related_name="sent_messages")
    content = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("created_at", "id")

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Message from {self.sender.username}"
