from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from django.contrib.auth.password_validation import validate_password
from django.db import transaction

from .models import Profile


class ProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profile
        fields = ['id', 'email', 'name', 'mobile', 'role', 'date_joined']
        read_only_fields = ['id', 'email', 'role', 'date_joined']


class SignUpSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])
    role = serializers.ChoiceField(choices=Profile.Role.choices, default=Profile.Role.CUSTOMER)

    class Meta:
        model = Profile
        fields = ['id', 'email', 'password', 'name', 'mobile', 'role']
        read_only_fields = ['id']

    def validate_email(self, value):
        value = Profile.objects.normalize_email(value)
        if Profile.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('User with this email already exists')
        return value

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required')
        return value

    @transaction.atomic
    def create(self, validated_data):
        password = validated_data.pop('password')
        return Profile.objects.create_user(password=password, **validated_data)


def tokens_for(profile):
    refresh = RefreshToken.for_user(profile)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


class LoginSerializer(TokenObtainPairSerializer):
    """
    Email/password sign-in returning the JWT pair together with the profile,
    so clients can route on ``role`` without a second request.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        token['name'] = user.name
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = ProfileSerializer(self.user).data
        data['role'] = self.user.role
        return data
