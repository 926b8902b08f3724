from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.renderers import JSONRenderer
from rest_framework.exceptions import PermissionDenied
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from django.contrib.auth import authenticate, get_user_model
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.utils.decorators import method_decorator

from apps.payouts.models import SystemSettings
from .serializers import UserLoginSerializer, UserProfileSerializer, UserRegistrationSerializer
import logging

logger = logging.getLogger(__name__)
User = get_user_model()


def _token_response(user, status_code=status.HTTP_200_OK, message=None):
    refresh = RefreshToken.for_user(user)
    body = {
        'access': str(refresh.access_token),
        'refresh': str(refresh),
        'user': UserProfileSerializer(user).data,
    }
    if message:
        body['message'] = message
    return Response(body, status=status_code)


@method_decorator(csrf_exempt, name='dispatch')
class RegistrationView(APIView):
    """Create an account and return a token pair."""
    permission_classes = [AllowAny]
    renderer_classes = [JSONRenderer]

    def post(self, request):
        if not SystemSettings.load().allow_new_registrations:
            raise PermissionDenied('New registrations are temporarily disabled')

        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"👤 [AUTH] Registered {user.role} account {user.email}")
        return _token_response(user, status.HTTP_201_CREATED, 'Registration successful')


@method_decorator(csrf_exempt, name='dispatch')
class EmailTokenObtainPairView(APIView):
    """Obtain a JWT pair with email and password."""
    permission_classes = [AllowAny]
    renderer_classes = [JSONRenderer]

    def post(self, request):
        serializer = UserLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data['email']
        password = serializer.validated_data['password']

        user = authenticate(request, username=email, password=password)
        if not user:
            logger.info(f"👤 [AUTH] Failed login for {email}")
            return Response({'message': 'Invalid credentials'}, status=status.HTTP_401_UNAUTHORIZED)

        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])
        return _token_response(user)


class UserProfileView(APIView):
    """Get or update the current user's profile."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({'user': UserProfileSerializer(request.user).data})

    def patch(self, request):
        serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response({'message': 'Profile updated', 'user': UserProfileSerializer(user).data})


class LogoutView(APIView):
    """Blacklist the given refresh token."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get('refresh')
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as e:
                logger.info(f"👤 [AUTH] Logout with unusable refresh token for user {request.user.id}: {e}")
        return Response({'message': 'Logged out'})
