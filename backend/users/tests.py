from django.contrib.auth import authenticate, get_user_model
from django.test import TestCase

User = get_user_model()


class CustomUserManagerTests(TestCase):

    def test_create_user(self):
        user = User.objects.create_user(email='Planner@Example.COM', password='testpass123', name='Pat')

        self.assertEqual(user.email, 'planner@example.com')
        self.assertTrue(user.check_password('testpass123'))
        self.assertTrue(user.is_active)
        self.assertFalse(user.is_staff)
        self.assertFalse(user.is_superuser)
        self.assertEqual(user.timezone, 'UTC')
        self.assertEqual(user.get_full_name(), 'Pat')

    def test_create_user_requires_email(self):
        for email in (None, '', '   '):
            with self.assertRaises(ValueError):
                User.objects.create_user(email=email, password='testpass123')

    def test_create_user_without_password(self):
        user = User.objects.create_user(email='nopass@example.com')

        self.assertFalse(user.has_usable_password())

    def test_timezone_is_validated(self):
        valid = User.objects.create_user(email='berlin@example.com', timezone='Europe/Berlin')
        invalid = User.objects.create_user(email='mars@example.com', timezone='Mars/Olympus_Mons')

        self.assertEqual(valid.timezone, 'Europe/Berlin')
        self.assertEqual(invalid.timezone, 'UTC')

    def test_create_superuser(self):
        admin = User.objects.create_superuser(email='admin@example.com', password='testpass123')

        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_superuser)
        self.assertTrue(admin.is_active)
        with self.assertRaises(ValueError):
            User.objects.create_superuser(email='half@example.com', password='x', is_superuser=False)

    def test_login_email_is_case_insensitive(self):
        User.objects.create_user(email='casey@example.com', password='testpass123')

        user = authenticate(username='CASEY@example.com', password='testpass123')

        self.assertIsNotNone(user)
        self.assertEqual(user.get_full_name(), 'casey@example.com')
        self.assertEqual(str(user), 'casey@example.com')
