"""
Identity

Authentication is delegated to an external identity provider. The
dashboard only ever sees the result: an opaque user identifier, or
nothing for an anonymous visitor. Nothing downstream branches on HOW
the identity was established.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel

from capital_dashboard.config import IdentitySettings, get_settings


ANONYMOUS_USER_ID = "anonymous"


class Identity(BaseModel):
    """Who is using the dashboard."""

    user_id: Optional[str] = None
    email: str = ""
    display_name: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return not self.user_id

    @property
    def storage_key(self) -> str:
        """Key used for the user's collections in the document store."""
        return self.user_id or ANONYMOUS_USER_ID

    @property
    def first_name(self) -> str:
        """First word of the display name, for greetings."""
        if self.display_name:
            return self.display_name.split(" ")[0]
        return "Ospite"


class IdentityProvider(ABC):
    """Supplies the current identity."""

    @abstractmethod
    def current_identity(self) -> Identity:
        pass


class AnonymousIdentityProvider(IdentityProvider):
    """Always anonymous (demo mode)."""

    def current_identity(self) -> Identity:
        return Identity()


class SettingsIdentityProvider(IdentityProvider):
    """
    Identity handed over by the hosting environment through
    DASHBOARD_USER_ID / DASHBOARD_EMAIL / DASHBOARD_DISPLAY_NAME.
    """

    def __init__(self, settings: Optional[IdentitySettings] = None):
        self._settings = settings or get_settings().identity

    def current_identity(self) -> Identity:
        user_id = (self._settings.user_id or "").strip() or None
        return Identity(
            user_id=user_id,
            email=self._settings.email,
            display_name=self._settings.display_name,
        )
