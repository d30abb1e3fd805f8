from rest_framework import generics, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from core_backend.base.viewsets import ReadOnlyBaseViewSet
from .models import User
from .permissions import IsAdminRole
from .serializers import SetRoleSerializer, UserRegistrationSerializer, UserSerializer
from .services import UserService


class RegisterView(generics.CreateAPIView):
    serializer_class = UserRegistrationSerializer
    permission_classes = [permissions.AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserService.register_customer(**serializer.validated_data)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class CurrentUserView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class UserViewSet(ReadOnlyBaseViewSet):
    """
    Admin-only user directory with role management.
    """

    queryset = User.objects.all()
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    filterset_fields = ["role", "is_active"]
    ordering_fields = ["email", "name", "date_joined", "role"]
    ordering = ["-date_joined"]

    @action(detail=True, methods=["post"], url_path="role")
    def set_role(self, request, pk=None):
        user = self.get_object()
        serializer = SetRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        UserService.set_role(user, serializer.validated_data["role"], changed_by=request.user)
        return Response(UserSerializer(user).data)
