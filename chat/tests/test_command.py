from io import StringIO
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from chat.models import Message
from user_settings.models import Profile

from .fakes import ScriptedProxy

User = get_user_model()


class ChatCommandTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="frizzle@example.com", email="frizzle@example.com", password="secret1",
        )
        self.proxy = ScriptedProxy(reply=lambda m: f"You said: {m}")
        patcher = patch("chat.controller.get_completion_proxy", return_value=self.proxy)
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_chat(self, lines):
        out = StringIO()
        call_command("chat", email="Frizzle@Example.com", stdin=StringIO(lines), stdout=out)
        return out.getvalue()

    def test_session_greets_chats_and_signs_out(self):
        output = self.run_chat("Hello there\n\n/quit\n")

        self.assertIn("welcome, frizzle", output)
        self.assertIn("Ask me anything about your studies!", output)
        self.assertIn("[assistant] You said: Hello there", output)
        self.assertIn("Signed out successfully", output)
        self.assertEqual(Message.objects.count(), 2)
        self.assertEqual(self.proxy.calls, ["Hello there"])

    def test_history_is_replayed_on_next_session(self):
        self.run_chat("first question\n")
        output = self.run_chat("")

        self.assertIn("[you] first question", output)
        self.assertIn("[assistant] You said: first question", output)
        self.assertNotIn("Ask me anything", output)

    def test_rename_updates_profile(self):
        output = self.run_chat("/name Ms. Frizzle\n/quit\n")

        self.assertIn("Display name updated!", output)
        self.assertEqual(Profile.objects.get(pk=str(self.user.pk)).display_name, "Ms. Frizzle")

    def test_words_starting_with_name_command_are_sent_as_chat(self):
        output = self.run_chat("/namesake means someone with your name\n")

        self.assertIn("[assistant] You said: /namesake means someone with your name", output)
        self.assertNotIn("Display name updated!", output)
        self.assertIsNone(Profile.objects.get(pk=str(self.user.pk)).display_name)

    def test_failed_send_prints_notice(self):
        self.proxy.fail = True
        output = self.run_chat("hello\n")
        self.assertIn("Failed to send message. Please try again.", output)
        self.assertEqual(Message.objects.count(), 1)

    def test_unknown_email_is_command_error(self):
        with self.assertRaises(CommandError):
            call_command("chat", email="nobody@example.com", stdin=StringIO(""), stdout=StringIO())
