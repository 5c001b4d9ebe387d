from dataclasses import dataclass
from typing import Optional, Protocol

from redeemhub.config import settings
from redeemhub.exceptions import AuthenticationError

ROLE_ADMIN = "admin"
ROLE_USER = "user"


@dataclass
class Principal:
    role: str
    username: str
    name: str


class CredentialVerifier(Protocol):
    def verify(self, username: Optional[str], password: Optional[str], role: Optional[str]) -> Principal:
        """Return the authenticated principal or raise AuthenticationError."""
        ...


class StaticCredentialVerifier:
    """
    Placeholder login: a fixed admin credential pair, and a shared password
    for every user name. Swap in a real verifier through
    get_credential_verifier.
    """

    def __init__(
        self,
        admin_username: str = None,
        admin_password: str = None,
        user_password: str = None,
    ):
        self.admin_username = admin_username or settings.ADMIN_USERNAME
        self.admin_password = admin_password or settings.ADMIN_PASSWORD
        self.user_password = user_password or settings.USER_PASSWORD

    def verify(self, username, password, role) -> Principal:
        if role == ROLE_ADMIN:
            if username == self.admin_username and password == self.admin_password:
                return Principal(role=ROLE_ADMIN, username=username, name="Administrator")
            raise AuthenticationError("Invalid admin credentials")

        if password == self.user_password:
            return Principal(
                role=ROLE_USER, username=username or "user", name=username or "User"
            )
        raise AuthenticationError(f"Invalid password. Use password: {self.user_password}")


def get_credential_verifier() -> CredentialVerifier:
    return StaticCredentialVerifier()
