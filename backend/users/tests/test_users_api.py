"""
Users API tests: registration, token login, cookie authentication and
admin role management.
"""
import pytest
from django.conf import settings
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from users.models import User


@pytest.mark.django_db
class TestRegistration:
    def test_register_creates_customer(self, api_client):
        response = api_client.post(
            "/api/auth/register/",
            {"email": "New.Person@Example.com", "password": "s3cret-pass", "name": "New Person"},
            format="json",
        )

        assert response.status_code == 201, response.data
        assert response.data["role"] == "CUSTOMER"
        user = User.objects.get(email="new.person@example.com")
        assert user.check_password("s3cret-pass")

    def test_role_in_payload_is_ignored(self, api_client):
        response = api_client.post(
            "/api/auth/register/",
            {"email": "sneaky@example.com", "password": "s3cret-pass", "role": "ADMIN"},
            format="json",
        )

        assert response.status_code == 201
        assert User.objects.get(email="sneaky@example.com").role == User.Role.CUSTOMER

    def test_duplicate_email(self, api_client, customer_user):
        response = api_client.post(
            "/api/auth/register/",
            {"email": "CUSTOMER@example.com", "password": "s3cret-pass"},
            format="json",
        )

        assert response.status_code == 400
        assert "email" in response.data

    def test_short_password(self, api_client):
        response = api_client.post(
            "/api/auth/register/", {"email": "short@example.com", "password": "abc"}, format="json"
        )
        assert response.status_code == 400


@pytest.mark.django_db
class TestAuthentication:
    def test_token_login(self, api_client, cashier_user):
        response = api_client.post(
            "/api/auth/token/",
            {"email": "cashier@example.com", "password": "testpass123"},
            format="json",
        )

        assert response.status_code == 200
        assert {"access", "refresh"} <= set(response.data)

    def test_wrong_password(self, api_client, cashier_user):
        response = api_client.post(
            "/api/auth/token/",
            {"email": "cashier@example.com", "password": "nope"},
            format="json",
        )
        assert response.status_code == 401

    def test_me_with_bearer_token(self, kitchen_client, kitchen_user):
        response = kitchen_client.get("/api/users/me/")

        assert response.status_code == 200
        assert response.data["email"] == kitchen_user.email
        assert response.data["role"] == "KITCHEN"

    def test_me_with_cookie(self, kitchen_user):
        client = APIClient()
        client.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = str(
            RefreshToken.for_user(kitchen_user).access_token
        )

        response = client.get("/api/users/me/")

        assert response.status_code == 200
        assert response.data["id"] == kitchen_user.id

    def test_me_requires_auth(self, api_client):
        assert api_client.get("/api/users/me/").status_code == 401

    def test_inactive_user_rejected(self, client_for, customer_user):
        client = client_for(customer_user)
        customer_user.is_active = False
        customer_user.save()

        assert client.get("/api/users/me/").status_code == 401


@pytest.mark.django_db
class TestRoleManagement:
    def test_admin_lists_users(self, admin_client, customer_user, cashier_user):
        response = admin_client.get("/api/users/", {"role": "CASHIER"})

        assert response.status_code == 200
        assert [u["email"] for u in response.data["results"]] == [cashier_user.email]

    def test_admin_changes_role(self, admin_client, customer_user):
        response = admin_client.post(
            f"/api/users/{customer_user.id}/role/", {"role": "KITCHEN"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["role"] == "KITCHEN"
        customer_user.refresh_from_db()
        assert customer_user.role == User.Role.KITCHEN

    def test_unknown_role(self, admin_client, customer_user):
        response = admin_client.post(
            f"/api/users/{customer_user.id}/role/", {"role": "OWNER"}, format="json"
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("client_fixture", ["customer_client", "cashier_client", "kitchen_client"])
    def test_only_admins_manage_users(self, request, client_fixture, customer_user):
        client = request.getfixturevalue(client_fixture)

        assert client.get("/api/users/").status_code == 403
        response = client.post(f"/api/users/{customer_user.id}/role/", {"role": "ADMIN"}, format="json")
        assert response.status_code == 403


@pytest.mark.django_db
class TestUserModel:
    def test_superuser_is_admin(self):
        user = User.objects.create_superuser(email="root@example.com", password="pw123456")

        assert user.role == User.Role.ADMIN
        assert user.is_staff and user.is_superuser
        assert user.is_admin_role and user.is_staff_role

    def test_email_is_required(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email="", password="pw123456")

    def test_display_name_falls_back_to_email(self):
        user = User.objects.create_user(email="noname@example.com", password="pw123456")
        assert user.display_name == "noname@example.com"
