"""Identity package."""

from capital_dashboard.auth.identity import (
    ANONYMOUS_USER_ID,
    AnonymousIdentityProvider,
    Identity,
    IdentityProvider,
    SettingsIdentityProvider,
)

__all__ = [
    "ANONYMOUS_USER_ID",
    "AnonymousIdentityProvider",
    "Identity",
    "IdentityProvider",
    "SettingsIdentityProvider",
]
