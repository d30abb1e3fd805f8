"""
Tests for JWTAuthMiddleware on event stream connections.
"""
import pytest
from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.tokens import RefreshToken

from core_backend.jwt_websocket_middleware import JWTAuthMiddleware, parse_cookies


async def resolve_scope(scope):
    captured = {}

    async def inner(scope, receive, send):
        captured.update(scope)

    await JWTAuthMiddleware(inner)(scope, None, None)
    return captured


def http_scope(*headers, **extra):
    return {"type": "http", "path": "/api/orders/stream/", "headers": list(headers), **extra}


def test_parse_cookies():
    assert parse_cookies("a=1; access_token=abc.def=; theme=dark") == {
        "a": "1",
        "access_token": "abc.def=",
        "theme": "dark",
    }


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
class TestJWTAuthMiddleware:
    async def test_bearer_token(self, kitchen_user):
        token = str(RefreshToken.for_user(kitchen_user).access_token)

        scope = await resolve_scope(http_scope((b"authorization", f"Bearer {token}".encode())))

        assert scope["user"].pk == kitchen_user.pk

    async def test_cookie_token(self, kitchen_user):
        token = str(RefreshToken.for_user(kitchen_user).access_token)
        cookie = f"theme=dark; {settings.SIMPLE_JWT['AUTH_COOKIE']}={token}"

        scope = await resolve_scope(http_scope((b"cookie", cookie.encode())))

        assert scope["user"].pk == kitchen_user.pk

    async def test_invalid_token(self):
        scope = await resolve_scope(http_scope((b"authorization", b"Bearer not-a-jwt")))

        assert isinstance(scope["user"], AnonymousUser)

    async def test_refresh_token_is_not_accepted(self, kitchen_user):
        token = str(RefreshToken.for_user(kitchen_user))

        scope = await resolve_scope(http_scope((b"authorization", f"Bearer {token}".encode())))

        assert isinstance(scope["user"], AnonymousUser)

    async def test_no_token(self):
        scope = await resolve_scope(http_scope())

        assert isinstance(scope["user"], AnonymousUser)

    async def test_existing_scope_user_kept_without_token(self, kitchen_user):
        scope = await resolve_scope(http_scope(user=kitchen_user))

        assert scope["user"] is kitchen_user

    async def test_other_scope_types_untouched(self):
        scope = await resolve_scope({"type": "lifespan"})

        assert "user" not in scope
