from rest_framework import serializers

from ...models import Conversation, Message


class MessageSerializer(serializers.ModelSerializer):
    sender_name = serializers.CharField(source="sender.display_name", read_only=True)

    class Meta:
        model = Message
        fields = ("id", "conversation", "sender", "sender_name", "content", "is_read", "created_at")
        read_only_fields = fields


class ConversationSerializer(serializers.ModelSerializer):
    property_title = serializers.CharField(source="property.title", read_only=True)
    other_user = serializers.SerializerMethodField()
    last_message = serializers.SerializerMethodField()
    unread_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Conversation
        fields = (
            "id",
            "property",
            "property_title",
            "guest",
            "host",
            "other_user",
            "last_message",
            "unread_count",
            "last_message_at",
            "created_at",
        )
        read_only_fields = fields

    def get_other_user(self, obj):
        other = getattr(obj, "other_user", None)
        if other is None:
            return None
        return {"id": other.pk, "name": other.display_name, "user_type": other.user_type}

    def get_last_message(self, obj):
        message = getattr(obj, "last_message", None)
        if message is None:
            return None
        return {"content": message.content[:100], "sender": message.sender_id, "created_at": message.created_at}


class StartConversationSerializer(serializers.Serializer):
    property_id = serializers.IntegerField(required=False, allow_null=True)
    message = serializers.CharField(required=False, allow_blank=True, default="")


class ReplySerializer(serializers.Serializer):
    content = serializers.CharField(required=False, allow_blank=True, default="")
