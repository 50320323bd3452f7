import sys

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from chat.controller import SubmitStatus, build_controller
from chat.repo import Role

User = get_user_model()

QUIT = "/quit"
RENAME = "/name"


class Command(BaseCommand):
    stealth_options = ("stdin",)
    help = "Chat with the ClassBridge assistant as an existing user. /name <new name> renames, /quit signs out."

    def add_arguments(self, parser):
        parser.add_argument("--email", required=True, help="Email of the account to chat as")

    def handle(self, *args, **options):
        email = options["email"].strip().lower()
        try:
            user = User.objects.get(username=email, is_active=True)
        except User.DoesNotExist:
            raise CommandError(f"No active account for {email}")

        controller = build_controller(str(user.pk))
        controller.start()
        self._flush_notices(controller)

        label = controller.profile.label if controller.profile else "User"
        self.stdout.write(self.style.MIGRATE_HEADING(f"ClassBridge AI Assistant - welcome, {label}"))
        if len(controller.view) == 0:
            self.stdout.write("Hello! I'm your AI assistant. Ask me anything about your studies!")
        for entry in controller.view:
            self._write_entry(entry.role, entry.content)

        stdin = options.get("stdin") or sys.stdin
        while True:
            self.stdout.write("> ", ending="")
            self.stdout.flush()
            line = stdin.readline()
            if not line or line.strip() == QUIT:
                break

            text = line.rstrip("\n")
            command, _, argument = text.strip().partition(" ")
            if command == RENAME:
                controller.update_display_name(argument)
            else:
                result = controller.submit(text)
                if result.status is SubmitStatus.SENT:
                    self._write_entry(Role.ASSISTANT, result.messages[-1].content)
            self._flush_notices(controller)

        controller.sign_out()
        self.stdout.write(self.style.SUCCESS("Signed out successfully"))

    def _write_entry(self, role, content):
        prefix = "you" if role is Role.USER else "assistant"
        self.stdout.write(f"[{prefix}] {content}")

    def _flush_notices(self, controller):
        for notice in controller.drain_notices():
            style = self.style.ERROR if notice.level == "error" else self.style.SUCCESS
            self.stdout.write(style(notice.text))
