"""
JWT Authentication Middleware for Django Channels.

Authenticates long-lived HTTP (event stream) and WebSocket connections using
the JWT access token from the auth cookie or an `Authorization: Bearer` header.
This lets ASGI consumers read `scope["user"]` just like DRF views.
"""
import jwt
import logging
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser

logger = logging.getLogger(__name__)

AUTHENTICATED_SCOPE_TYPES = ('http', 'websocket')


def parse_cookies(cookie_header):
    cookies = {}
    for cookie in cookie_header.split(';'):
        if '=' in cookie:
            key, value = cookie.strip().split('=', 1)
            cookies[key] = value
    return cookies


class JWTAuthMiddleware(BaseMiddleware):
    """
    Adds the authenticated user to the connection scope.

    Runs inside AuthMiddlewareStack, so a session user already present in
    the scope is only replaced when a valid token is supplied.
    """

    async def __call__(self, scope, receive, send):
        if scope['type'] not in AUTHENTICATED_SCOPE_TYPES:
            return await super().__call__(scope, receive, send)

        token = self.get_token(scope)
        if token:
            scope['user'] = await self.get_user_from_jwt(token)
        elif 'user' not in scope:
            scope['user'] = AnonymousUser()

        return await super().__call__(scope, receive, send)

    def get_token(self, scope):
        headers = dict(scope.get('headers', []))

        authorization = headers.get(b'authorization', b'').decode('utf-8')
        if authorization.startswith('Bearer '):
            return authorization[len('Bearer '):].strip()

        cookie_header = headers.get(b'cookie', b'').decode('utf-8')
        if not cookie_header:
            return None

        return parse_cookies(cookie_header).get(settings.SIMPLE_JWT.get('AUTH_COOKIE'))

    async def get_user_from_jwt(self, access_token):
        jwt_config = settings.SIMPLE_JWT
        user_model = get_user_model()

        try:
            payload = jwt.decode(
                access_token,
                jwt_config.get('SIGNING_KEY', settings.SECRET_KEY),
                algorithms=[jwt_config.get('ALGORITHM', 'HS256')],
                options={
                    'verify_signature': True,
                    'verify_exp': True,
                }
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Expired JWT token on stream connection")
            return AnonymousUser()
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid JWT token on stream connection: {e}")
            return AnonymousUser()

        if payload.get(jwt_config.get('TOKEN_TYPE_CLAIM', 'token_type')) != 'access':
            logger.warning("Non-access JWT presented on stream connection")
            return AnonymousUser()

        user_id = payload.get(jwt_config.get('USER_ID_CLAIM', 'user_id'))
        if not user_id:
            logger.warning("JWT payload missing user_id")
            return AnonymousUser()

        try:
            user = await database_sync_to_async(user_model.objects.get)(
                id=user_id,
                is_active=True
            )
        except user_model.DoesNotExist:
            logger.warning(f"User {user_id} from JWT not found")
            return AnonymousUser()

        logger.info(f"Stream connection authenticated: user={user.email}, role={user.role}")
        return user
