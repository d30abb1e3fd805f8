from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from .views import CurrentUserView, RegisterView, UserViewSet

app_name = "users"

urlpatterns = [
    # Auth
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("users/me/", CurrentUserView.as_view(), name="me"),

    # User management (admin)
    path("users/", UserViewSet.as_view({'get': 'list'}), name="user-list"),
    path("users/<int:pk>/", UserViewSet.as_view({'get': 'retrieve'}), name="user-detail"),
    path("users/<int:pk>/role/", UserViewSet.as_view({'post': 'set_role'}), name="user-set-role"),
]
