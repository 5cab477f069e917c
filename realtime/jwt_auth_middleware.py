"""
Websocket authentication with the same SimpleJWT access tokens the REST API issues.
Sockets without a usable token are let through as AnonymousUser.
"""

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from urllib.parse import parse_qs
import jwt
import logging

logger = logging.getLogger("realtime")


def token_from_scope(scope):
    """``?token=`` wins over an ``Authorization: Bearer`` header."""
    query_params = parse_qs(scope.get('query_string', b'').decode())
    token = query_params.get('token', [None])[0]
    if token:
        return token

    headers = dict(scope.get('headers', []))
    scheme, _, credentials = headers.get(b'authorization', b'').decode().partition(' ')
    if scheme == 'Bearer' and credentials:
        return credentials
    return None


@database_sync_to_async
def get_user_from_token(token):
    """
    Resolve an access token to an active user.

    Returns:
        the user, or AnonymousUser for expired, malformed or refresh tokens
        and for unknown or inactive users
    """
    User = get_user_model()
    jwt_settings = getattr(settings, "SIMPLE_JWT", {})
    user_id = None

    try:
        claims = jwt.decode(
            token,
            jwt_settings.get("SIGNING_KEY", settings.SECRET_KEY),
            algorithms=[jwt_settings.get("ALGORITHM", "HS256")],
        )
        if claims.get("token_type") != "access":
            logger.warning("Non-access token offered for websocket auth")
            return AnonymousUser()

        user_id = claims.get(jwt_settings.get("USER_ID_CLAIM", "user_id"))
        if not user_id:
            logger.warning("JWT payload missing user id")
            return AnonymousUser()

        user = User.objects.get(id=user_id, is_active=True)
    except jwt.ExpiredSignatureError:
        logger.warning("JWT token expired")
        return AnonymousUser()
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid JWT token: {e}")
        return AnonymousUser()
    except User.DoesNotExist:
        logger.warning(f"No active user for websocket token (id={user_id})")
        return AnonymousUser()

    logger.info(f"🔐 Websocket user {user.id} ({user.username}) authenticated")
    return user


class JWTAuthMiddleware(BaseMiddleware):
    """
    Sets scope['user'] for websocket connections.

    ws://host/ws/notifications/?token=<access token>
    or an ``Authorization: Bearer <access token>`` header.
    """

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        token = token_from_scope(scope)
        scope['user'] = await get_user_from_token(token) if token else AnonymousUser()
        return await super().__call__(scope, receive, send)


def JWTAuthMiddlewareStack(inner):
    """Drop-in for channels' AuthMiddlewareStack in asgi.py"""
    return JWTAuthMiddleware(inner)
