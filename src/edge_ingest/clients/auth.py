"""
Application default credentials.

One AuthorizedSession is created at startup and shared by every client.
The session refreshes its own access token, so clients never fetch tokens.
"""

import logging

import google.auth
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from google.auth.transport.requests import AuthorizedSession, Request

from ..errors import CredentialsError
from ..utils.constants import CLOUD_PLATFORM_SCOPE

logger = logging.getLogger(__name__)


def create_session(scopes: list[str] | None = None) -> AuthorizedSession:
    """
    Build an authorized requests session from application default credentials.

    The initial token is fetched eagerly so missing or broken credentials
    fail at startup rather than on the first message.

    Raises:
        CredentialsError: If credentials cannot be found or refreshed
    """
    scopes = scopes or [CLOUD_PLATFORM_SCOPE]
    try:
        credentials, default_project = google.auth.default(scopes=scopes)
        credentials.refresh(Request())
    except (DefaultCredentialsError, RefreshError) as e:
        raise CredentialsError(f"Could not obtain application default credentials: {e}") from e

    logger.info(f"Authorized with application default credentials (project: {default_project})")
    return AuthorizedSession(credentials)
