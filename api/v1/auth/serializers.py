from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password

from core.phone_utils import normalize_phone_e164
from core.utils import generate_unique_code

User = get_user_model()


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate_email(self, value):
        return value.lower().strip()


class UserProfileSerializer(serializers.ModelSerializer):
    """Serializer for user profile."""

    name = serializers.CharField(source='get_full_name', read_only=True)
    role = serializers.CharField(read_only=True)
    phone = serializers.CharField(source='phone_number', required=False, allow_blank=True, allow_null=True)
    organizationName = serializers.CharField(source='organization_name', required=False, allow_blank=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'first_name', 'last_name', 'name', 'phone',
            'role', 'is_organizer', 'organizationName', 'date_joined'
        ]
        read_only_fields = ['id', 'email', 'role', 'is_organizer', 'date_joined']

    def validate_phone(self, value):
        if not value:
            return value
        normalized = normalize_phone_e164(value)
        if not normalized:
            raise serializers.ValidationError('Invalid phone number')
        return normalized


class UserRegistrationSerializer(serializers.ModelSerializer):
    """Serializer for account registration as a ticket buyer or an organizer."""

    password = serializers.CharField(write_only=True, min_length=6)
    role = serializers.ChoiceField(choices=[User.ROLE_USER, User.ROLE_ORGANIZER], default=User.ROLE_USER)
    phone = serializers.CharField(source='phone_number', required=False, allow_blank=True)
    organizationName = serializers.CharField(source='organization_name', required=False, allow_blank=True)

    class Meta:
        model = User
        fields = ['email', 'password', 'first_name', 'last_name', 'phone', 'role', 'organizationName']
        extra_kwargs = {
            'email': {'required': True},
            'first_name': {'required': True},
        }

    def validate_email(self, value):
        value = value.lower().strip()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('A user with that email already exists.')
        return value

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate_phone(self, value):
        if not value:
            return ''
        normalized = normalize_phone_e164(value)
        if not normalized:
            raise serializers.ValidationError('Invalid phone number')
        return normalized

    def validate(self, attrs):
        if attrs.get('role') == User.ROLE_ORGANIZER and not attrs.get('organization_name'):
            raise serializers.ValidationError({'organizationName': 'Organization name is required for organizers'})
        return attrs

    def create(self, validated_data):
        role = validated_data.pop('role', User.ROLE_USER)
        password = validated_data.pop('password')
        username = validated_data['email'].split('@')[0][:120] + generate_unique_code('-', 6).lower()
        user = User(username=username, is_organizer=role == User.ROLE_ORGANIZER, **validated_data)
        user.set_password(password)
        user.save()
        return user
