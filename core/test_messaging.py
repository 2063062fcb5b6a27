from django.test import TestCase

from .models import Conversation, Message
from .services.messaging import MessagingService
from .testutils import api_client, make_property, make_user


class MessagingTest(TestCase):
    def setUp(self):
        self.owner = make_user("property_owner")
        self.guest = make_user()
        self.listing = make_property(self.owner)

    def start(self, user=None, **payload):
        data = {"property_id": self.listing.pk, "message": "  Is early check-in possible?  "}
        data.update(payload)
        return api_client(user or self.guest).post("/api/messages/start", data, format="json")

    def test_guest_starts_and_host_reads(self):
        response = self.start()
        self.assertEqual(response.status_code, 201)
        conversation_id = response.json()["data"]["conversationId"]
        conversation = Conversation.objects.get(pk=conversation_id)
        self.assertEqual((conversation.guest, conversation.host), (self.guest, self.owner))
        self.assertEqual(Message.objects.get().content, "Is early check-in possible?")

        host = api_client(self.owner)
        listed = host.get("/api/messages").json()["data"]["conversations"]
        self.assertEqual(listed[0]["unread_count"], 1)
        self.assertEqual(listed[0]["other_user"]["id"], self.guest.pk)
        self.assertEqual(listed[0]["last_message"]["content"], "Is early check-in possible?")

        thread = host.get(f"/api/messages/{conversation_id}").json()["data"]
        self.assertEqual(len(thread["messages"]), 1)
        self.assertTrue(Message.objects.get().is_read)
        self.assertEqual(host.get("/api/messages").json()["data"]["conversations"][0]["unread_count"], 0)

    def test_second_message_reuses_the_conversation(self):
        first = self.start().json()["data"]["conversationId"]
        second = self.start(message="One more thing").json()["data"]["conversationId"]
        self.assertEqual(first, second)
        self.assertEqual(Message.objects.count(), 2)

    def test_reply(self):
        conversation_id = self.start().json()["data"]["conversationId"]
        response = api_client(self.owner).post(
            f"/api/messages/{conversation_id}/reply", {"content": "Yes, from noon."}, format="json"
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["message"]["sender"], self.owner.pk)

    def test_owner_cannot_message_about_own_listing(self):
        response = self.start(user=self.owner)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "You cannot start a conversation about your own property")

    def test_message_is_required(self):
        response = self.start(message="   ")
        self.assertEqual(response.json()["message"], "Property ID and message are required")

    def test_non_numeric_property_id(self):
        response = self.start(property_id="abc")
        self.assertEqual(response.status_code, 400)
        self.assertFalse(Conversation.objects.exists())

    def test_outsiders_are_kept_out(self):
        conversation_id = self.start().json()["data"]["conversationId"]
        outsider = api_client(make_user())
        self.assertEqual(outsider.get(f"/api/messages/{conversation_id}").status_code, 404)
        response = outsider.post(f"/api/messages/{conversation_id}/reply", {"content": "Hi"}, format="json")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "Access denied or conversation not found")

    def test_login_required(self):
        self.assertEqual(api_client().get("/api/messages").status_code, 401)


class ConversationListTest(TestCase):
    def test_latest_message_per_conversation_in_fixed_queries(self):
        owner = make_user("property_owner")
        guest = make_user()
        for number in range(3):
            listing = make_property(owner, title=f"Cabin {number}")
            conversation = Conversation.objects.create(guest=guest, host=owner, property=listing)
            Message.objects.create(conversation=conversation, sender=guest, content=f"Question {number}")
            Message.objects.create(conversation=conversation, sender=owner, content=f"Answer {number}")

        with self.assertNumQueries(3):
            conversations = MessagingService(guest).conversations()
            latest = {conversation.property.title: conversation.last_message.content for conversation in conversations}
        self.assertEqual(latest, {"Cabin 0": "Answer 0", "Cabin 1": "Answer 1", "Cabin 2": "Answer 2"})
        self.assertEqual({conversation.unread_count for conversation in conversations}, {1})
