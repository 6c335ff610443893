""" Bearer token authentication for the JSON API.

    Tokens are HS256 JWTs signed with SECRET_KEY whose ``sub`` claim is
    the user id. The user's organization scopes every query they make.
"""

import logging

from flask import current_app as app

from loggingmanager import set_user_id
from models import User, UserStatus

from .errors import UnauthorizedError

logger = logging.getLogger(__name__)


def bearer_token(request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def load_user_from_request(request):
    token = bearer_token(request)
    if token is None:
        return None

    user = User.get_by_api_token(app.config["SECRET_KEY"], token)
    if user is None:
        logger.info("Rejected invalid or expired API token")
        return None

    if user.status != UserStatus.APPROVED:
        logger.info("Rejected API token for %s user %s", user.status, user.id)
        return None

    set_user_id(user.id, user.organization_id)
    return user


def unauthorized():
    raise UnauthorizedError()
