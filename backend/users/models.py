from django.db import models
from django.contrib.auth.models import AbstractBaseUser,PermissionsMixin
from django.utils.translation import gettext_lazy as _
from .managers import CustomUserManager

# Create your models here.
class CustomUser(AbstractBaseUser,PermissionsMixin):
    """
    Account owning tasks and a cached today plan.
    Uses email as the unique auth field.
    """
    email=models.EmailField(
        _('email_address'),
        unique=True
    )

    # Display name, optional at registration
    name=models.CharField(_('name'),max_length=60,blank=True,default='')

    is_staff = models.BooleanField(
        _('staff status'),
        default=False,
        help_text=_('Designates whether the user can log into this admin site.'),
    )
    is_active = models.BooleanField(
        _('active'),
        default=True,
        help_text=_(
            'Designates whether this user should be treated as active. '
            'Unselect this instead of deleting accounts.'
        ),
    )
    date_joined = models.DateTimeField(_('date joined'), auto_now_add=True)

    timezone = models.CharField(
        _('Timezone'),
        max_length=60,
        default='UTC',
        help_text=_('User timezone for daily planning.'),
    )

    # ------------------ Model Configuration ------------------
    objects = CustomUserManager()

    # The field used for authentication (login)
    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')

    def get_full_name(self):
        """Returns the display name, or the email when none was given."""
        return self.name or self.email

    def get_short_name(self):
        return self.get_full_name()

    def __str__(self):
        return self.email
