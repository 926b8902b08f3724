"""
SuperAdmin permissions.

Only authenticated users with is_superuser=True may reach SuperAdmin endpoints.
"""

from rest_framework.permissions import IsAuthenticated


class IsSuperUser(IsAuthenticated):
    """
    Allow access only to authenticated superusers.

    Inherits from IsAuthenticated so the JWT is checked first, then
    is_superuser.

    Usage:
        @permission_classes([IsSuperUser])
        def my_view(request):
            ...
    """

    message = 'Superuser authentication is required to access this resource.'

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        return request.user.is_superuser
