"""Custom DRF permissions for the GetTogether platform."""

from rest_framework import permissions


class IsEndUser(permissions.BasePermission):
    """Permission for ticket buyers (authenticated users without the organizer role)."""

    message = 'This action is only available to user accounts.'

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated and
            not request.user.is_organizer
        )


class IsOrganizer(permissions.BasePermission):
    """Permission to check if user is an organizer."""

    message = 'This action is only available to organizer accounts.'

    def has_permission(self, request, view):
        """Check if user has the organizer role."""
        return request.user.is_authenticated and request.user.is_organizer

    def has_object_permission(self, request, view, obj):
        """Check if the object belongs to one of the user's events."""
        if hasattr(obj, 'organizer_id'):
            return obj.organizer_id == request.user.id
        if hasattr(obj, 'event'):
            return obj.event.organizer_id == request.user.id
        return False


class IsOrganizerOrReadOnly(IsOrganizer):
    """Anyone may read; only the owning organizer may write."""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return super().has_permission(request, view)

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        return super().has_object_permission(request, view, obj)
