from types import SimpleNamespace as NS
from unittest.mock import MagicMock, Mock

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase

from user_settings.models import Profile
from user_settings.services.profiles import (
    DjangoProfileRepository,
    ProfileError,
    ProfileNotFound,
    ProfileService,
    SupabaseProfileRepository,
    UserProfile,
)

User = get_user_model()


class UserProfileLabelTests(SimpleTestCase):
    def test_label_prefers_display_name(self):
        self.assertEqual(UserProfile(id="1", email="ada@example.com", display_name="Ada").label, "Ada")

    def test_label_falls_back_to_email_local_part(self):
        self.assertEqual(UserProfile(id="1", email="ada@example.com").label, "ada")

    def test_label_last_resort(self):
        self.assertEqual(UserProfile(id="1", email="").label, "User")


class ProfileServiceTests(SimpleTestCase):
    def setUp(self):
        self.repo = Mock()
        self.service = ProfileService(repository=self.repo)

    def test_whitespace_name_touches_nothing(self):
        result = self.service.update_display_name("1", "   ")
        self.assertFalse(result.success)
        self.assertEqual(result.message, "Display name is required")
        self.repo.save_display_name.assert_not_called()

    def test_name_is_trimmed_before_saving(self):
        result = self.service.update_display_name("1", "  Grace  ")
        self.assertTrue(result.success)
        self.assertEqual(result.display_name, "Grace")
        self.repo.save_display_name.assert_called_once_with("1", "Grace")

    def test_overlong_name_is_rejected(self):
        result = self.service.update_display_name("1", "x" * 151)
        self.assertFalse(result.success)
        self.repo.save_display_name.assert_not_called()

    def test_store_errors_propagate(self):
        self.repo.get.side_effect = ProfileError("boom")
        with self.assertRaises(ProfileError):
            self.service.load("1")


class DjangoProfileRepositoryTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="kim@example.com", email="kim@example.com", password="secret1")
        self.user_id = str(self.user.pk)
        self.service = ProfileService(repository=DjangoProfileRepository())

    def test_signup_creates_empty_profile(self):
        profile = Profile.objects.get(pk=self.user_id)
        self.assertEqual(profile.email, "kim@example.com")
        self.assertIsNone(profile.display_name)

    def test_update_then_load_returns_new_name(self):
        self.service.update_display_name(self.user_id, "Kim")
        self.assertEqual(self.service.load(self.user_id).display_name, "Kim")

    def test_saving_user_again_keeps_profile(self):
        self.service.update_display_name(self.user_id, "Kim")
        self.user.first_name = "K"
        self.user.save()
        self.assertEqual(Profile.objects.filter(pk=self.user_id).count(), 1)
        self.assertEqual(self.service.load(self.user_id).display_name, "Kim")

    def test_missing_profile(self):
        with self.assertRaises(ProfileNotFound):
            self.service.load("999")
        with self.assertRaises(ProfileNotFound):
            self.service.update_display_name("999", "Ghost")


class SupabaseProfileRepositoryTests(SimpleTestCase):
    def setUp(self):
        self.client = MagicMock()
        self.table = self.client.table.return_value
        self.repo = SupabaseProfileRepository(client=self.client)

    def test_get_maps_row(self):
        self.table.select.return_value.eq.return_value.limit.return_value.execute.return_value = NS(
            data=[{"id": "u1", "email": "lee@example.com", "display_name": None}]
        )
        profile = self.repo.get("u1")
        self.assertEqual(profile, UserProfile(id="u1", email="lee@example.com"))
        self.table.select.return_value.eq.assert_called_once_with("id", "u1")

    def test_get_empty_is_not_found(self):
        self.table.select.return_value.eq.return_value.limit.return_value.execute.return_value = NS(data=[])
        with self.assertRaises(ProfileNotFound):
            self.repo.get("u1")

    def test_save_updates_display_name(self):
        self.table.update.return_value.eq.return_value.execute.return_value = NS(data=[{"id": "u1"}])
        self.repo.save_display_name("u1", "Lee")
        self.table.update.assert_called_once_with({"display_name": "Lee"})

    def test_client_errors_become_profile_errors(self):
        self.table.update.return_value.eq.return_value.execute.side_effect = Exception("timeout")
        with self.assertRaises(ProfileError):
            self.repo.save_display_name("u1", "Lee")
