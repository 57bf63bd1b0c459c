"""Session state: bearer token and identity of the logged-in user"""

import logging
from typing import Optional, Tuple

from finance_tracker.domain.exceptions import NotAuthenticatedError
from finance_tracker.domain.models import User
from finance_tracker.infrastructure.clients.finance import FinanceServiceClient

logger = logging.getLogger(__name__)


class SessionState:
    """
    Holds the current credential and gates every other operation.

    The token is opaque and kept until logout; there is no refresh or expiry handling.
    """

    def __init__(self, client: FinanceServiceClient):
        self._client = client
        self.token: Optional[str] = None
        self.user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    async def register(self, username: str, email: str, password: str) -> str:
        """Create an account; does not log in. Returns the service message."""
        message = await self._client.register(username, email, password)
        logger.info("Registered account", extra={"email": email})
        return message

    async def login(self, email: str, password: str) -> Tuple[str, User]:
        """
        Authenticate and keep the returned token and identity.

        Raises:
            ServiceRejectedError: Credentials refused; the message is the service's own
            FinanceServiceError: Service unreachable
        """
        token, user = await self._client.login(email, password)
        self.token = token
        self.user = user
        logger.info("Logged in", extra={"user_id": str(user.id)})
        return token, user

    def logout(self) -> None:
        self.token = None
        self.user = None

    def require_token(self) -> str:
        if self.token is None:
            raise NotAuthenticatedError("Not logged in")
        return self.token
