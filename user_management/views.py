import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .models import xx_User
from .serializers import (
    LoginSerializer,
    ProfileSerializer,
    RegisterSerializer,
    UserSummarySerializer,
)

logger = logging.getLogger("user_management")


class RegisterView(APIView):
    """Register a new user"""

    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            duplicate = any(
                "User already exists." in [str(error) for error in errors]
                for errors in serializer.errors.values()
            )
            return Response(
                {"status": "fail", "errors": serializer.errors},
                status=status.HTTP_409_CONFLICT if duplicate else status.HTTP_400_BAD_REQUEST,
            )

        user = serializer.save()
        logger.info(f"User registered: id={user.id} username={user.username}")
        refresh = RefreshToken.for_user(user)

        return Response(
            {
                "status": "success",
                "data": RegisterSerializer(user).data,
                "token": str(refresh.access_token),
                "refresh": str(refresh),
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """Authenticate a user and return a token"""

    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"status": "fail", "message": "Invalid credentials"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        user = serializer.validated_data
        refresh = RefreshToken.for_user(user)

        return Response(
            {
                "status": "success",
                "data": UserSummarySerializer(user).data,
                "message": "Login successful.",
                "token": str(refresh.access_token),
                "refresh": str(refresh),
            },
            status=status.HTTP_200_OK,
        )


class LogoutView(APIView):
    """Blacklist the caller's refresh token so it can no longer mint access tokens"""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token_str = request.data.get("refresh")

        if refresh_token_str:
            try:
                refresh_token = RefreshToken(refresh_token_str)
            except TokenError:
                return Response(
                    {"status": "fail", "message": "Invalid or expired token."},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            if str(refresh_token.get("user_id")) != str(request.user.id):
                return Response(
                    {"status": "fail", "message": "Token does not belong to this user."},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            refresh_token.blacklist()

        logger.info(f"User logged out: id={request.user.id}")
        return Response(
            {"status": "success", "message": "Logged out successfully"},
            status=status.HTTP_200_OK,
        )


class MeView(APIView):
    """Read or update the authenticated user's profile"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"status": "success", "data": ProfileSerializer(request.user).data})

    def patch(self, request):
        serializer = ProfileSerializer(request.user, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(
                {"status": "fail", "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        serializer.save()
        return Response({"status": "success", "data": serializer.data})


class ListUsersView(APIView):
    """Directory of active users, used to pick assignees"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        users = xx_User.objects.filter(is_active=True).order_by("username")
        return Response(
            {"status": "success", "data": UserSummarySerializer(users, many=True).data}
        )
