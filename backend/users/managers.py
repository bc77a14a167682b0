import zoneinfo

from django.contrib.auth.base_user import BaseUserManager

DEFAULT_TIMEZONE = 'UTC'


class CustomUserManager(BaseUserManager):
    """
    Manager for accounts keyed by email.
    Emails are stored lower-cased so lookups are case-insensitive.
    """
    use_in_migrations = True

    @classmethod
    def normalize_email(cls, email):
        email = super().normalize_email(email or '')
        return email.strip().lower()

    @staticmethod
    def normalize_timezone(value):
        """Unknown or empty zone names fall back to UTC."""
        if not value:
            return DEFAULT_TIMEZONE
        try:
            zoneinfo.ZoneInfo(value)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError):
            return DEFAULT_TIMEZONE
        return value

    def get_by_natural_key(self, username):
        return self.get(**{f'{self.model.USERNAME_FIELD}__iexact': username})

    def create_user(self,email,password=None,**extra_fields):
        email=self.normalize_email(email)
        if not email:
            raise ValueError('The email must be set!')

        extra_fields['timezone']=self.normalize_timezone(extra_fields.get('timezone'))

        user=self.model(email=email,**extra_fields)

        # password=None leaves the account with an unusable password
        user.set_password(password)

        user.save(using=self._db)

        return user

    def create_superuser(self,email,password,**extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)
