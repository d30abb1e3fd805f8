from rest_framework_simplejwt.authentication import JWTAuthentication
from django.conf import settings


class CookieJWTAuthentication(JWTAuthentication):
    """
    Reads the JWT access token from the auth cookie.

    Browser surfaces (kitchen display, cashier screen) keep the token in an
    HttpOnly cookie; API clients keep sending `Authorization: Bearer`, which
    the next authentication class handles.
    """

    def authenticate(self, request):
        access_token = request.COOKIES.get(settings.SIMPLE_JWT["AUTH_COOKIE"])
        if not access_token:
            return None

        validated_token = self.get_validated_token(access_token)
        return self.get_user(validated_token), validated_token
