"""Signals for the users app."""

from django.db.models.signals import post_save
from django.dispatch import receiver
from django.contrib.auth.models import Group

from .models import User


@receiver(post_save, sender=User)
def assign_user_groups(sender, instance, created, **kwargs):
    """
    Assign the role group to newly created users.
    """
    if not created:
        return

    group_name = 'organizers' if instance.is_organizer else 'users'
    group, _ = Group.objects.get_or_create(name=group_name)
    instance.groups.add(group)
