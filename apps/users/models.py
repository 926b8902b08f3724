"""Models for the users app."""

from django.db import models
from django.contrib.auth.models import AbstractUser
from django.utils.translation import gettext_lazy as _
from core.models import TimeStampedModel


class User(AbstractUser, TimeStampedModel):
    """Custom user model for GetTogether. Either a ticket buyer or an event organizer."""

    ROLE_USER = 'user'
    ROLE_ORGANIZER = 'organizer'

    email = models.EmailField(
        _('email address'),
        unique=True,
        error_messages={
            'unique': _("A user with that email already exists."),
        }
    )
    phone_number = models.CharField(
        _("phone number"),
        max_length=30,
        blank=True,
        null=True
    )
    is_organizer = models.BooleanField(
        _("organizer status"),
        default=False,
        help_text=_("Designates whether this user creates events instead of booking them."),
    )
    organization_name = models.CharField(
        _("organization name"),
        max_length=255,
        blank=True,
    )

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        verbose_name = _("user")
        verbose_name_plural = _("users")
        ordering = ['-date_joined']

    def __str__(self):
        return self.email

    def get_full_name(self):
        """Return the user's full name."""
        full_name = f"{self.first_name} {self.last_name}"
        return full_name.strip() or self.username

    @property
    def role(self):
        return self.ROLE_ORGANIZER if self.is_organizer else self.ROLE_USER
