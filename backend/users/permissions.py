from rest_framework import permissions
from .models import User


def _has_role(request, *roles):
    user = request.user
    return bool(user and user.is_authenticated and user.role in roles)


class IsAdminRole(permissions.BasePermission):
    def has_permission(self, request, view):
        return _has_role(request, User.Role.ADMIN)


class IsCashierOrAdmin(permissions.BasePermission):
    def has_permission(self, request, view):
        return _has_role(request, User.Role.CASHIER, User.Role.ADMIN)


class IsKitchenOrAdmin(permissions.BasePermission):
    def has_permission(self, request, view):
        return _has_role(request, User.Role.KITCHEN, User.Role.ADMIN)


class IsStaffRole(permissions.BasePermission):
    """
    Cashier, kitchen and admin users; customers are excluded.
    """

    def has_permission(self, request, view):
        return _has_role(request, *User.STAFF_ROLES)


class IsAdminOrReadOnly(permissions.BasePermission):
    """
    Anyone may read, only admins may create/update/delete.
    """

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return _has_role(request, User.Role.ADMIN)
