import logging

from rest_framework import generics, status, permissions
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView
from drf_spectacular.utils import extend_schema, OpenApiExample

from .serializers import ProfileSerializer, SignUpSerializer, LoginSerializer, tokens_for

logger = logging.getLogger(__name__)


# =============== AUTHENTICATION VIEWS ===============

class SignUpView(generics.CreateAPIView):
    """
    Register a new profile and sign it in straight away.
    """
    serializer_class = SignUpSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Sign up",
        description="Create a profile with email, password, display name, mobile and role.",
        request=SignUpSerializer,
        responses={
            201: {
                'type': 'object',
                'properties': {
                    'refresh': {'type': 'string', 'description': 'JWT refresh token'},
                    'access': {'type': 'string', 'description': 'JWT access token'},
                    'user': {'type': 'object', 'description': 'Profile information'},
                }
            },
            400: {'description': 'Validation errors'},
        },
        examples=[
            OpenApiExample(
                'Customer sign up',
                value={
                    "email": "student@campus.edu",
                    "password": "SecurePassword123!",
                    "name": "Asha Rao",
                    "mobile": "+919876543210",
                    "role": "customer"
                }
            ),
        ]
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile = serializer.save()
        logger.info(f"Profile created: {profile.email} as {profile.role}")

        return Response({
            **tokens_for(profile),
            'user': ProfileSerializer(profile).data,
        }, status=status.HTTP_201_CREATED)


class CustomTokenObtainPairView(TokenObtainPairView):
    """
    JWT sign-in with email and password. The response carries the profile and
    its role next to the token pair.
    """
    serializer_class = LoginSerializer

    @extend_schema(
        summary="User Login with JWT Token",
        request=LoginSerializer,
        responses={
            200: {
                'type': 'object',
                'properties': {
                    'refresh': {'type': 'string', 'description': 'JWT refresh token'},
                    'access': {'type': 'string', 'description': 'JWT access token'},
                    'user': {'type': 'object', 'description': 'Profile information'},
                    'role': {'type': 'string', 'enum': ['customer', 'employee', 'admin']},
                }
            },
            401: {'description': 'Invalid credentials'},
        },
        examples=[
            OpenApiExample(
                'Employee Login',
                value={
                    "email": "counter@campus.edu",
                    "password": "SecurePassword123!"
                }
            )
        ]
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


# =============== USER PROFILE ===============

class MyProfileView(generics.RetrieveUpdateAPIView):
    """Read or edit the signed-in profile (name and mobile only)"""
    serializer_class = ProfileSerializer
    http_method_names = ['get', 'patch', 'head', 'options']

    def get_object(self):
        return self.request.user
