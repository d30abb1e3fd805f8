import logging

from django.db import transaction

from .models import User

logger = logging.getLogger(__name__)


class UserService:
    @staticmethod
    @transaction.atomic
    def register_customer(email: str, password: str, name: str = "") -> User:
        """
        Self-service registration always creates a CUSTOMER account.
        """
        user = User.objects.create_user(
            email=email,
            password=password,
            name=name,
            role=User.Role.CUSTOMER,
        )
        logger.info(f"Registered customer account {user.email} (id={user.id})")
        return user

    @staticmethod
    @transaction.atomic
    def set_role(user: User, role: str, changed_by: User) -> User:
        previous = user.role
        user.role = role
        user.save(update_fields=["role", "updated_at"])
        logger.info(
            f"User {user.email} role changed {previous} -> {role} by {changed_by.email}"
        )
        return user
