"""URL Configuration for API v1."""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

# Import viewsets
from api.v1.bookings.views import BookingViewSet
from api.v1.events.views import EventViewSet

# Create a router and register our viewsets with it
router = DefaultRouter()
router.register(r'events', EventViewSet, basename='event')
router.register(r'bookings', BookingViewSet, basename='booking')

# Wire up our API using automatic URL routing
urlpatterns = [
    path('', include(router.urls)),
    path('auth/', include('api.v1.auth.urls')),
    path('superadmin/', include('api.v1.superadmin.urls')),
]
