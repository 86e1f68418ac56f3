"""
Session provider interface.

A session provider exchanges the raw forum cookie for an authenticated
portal session.
"""
from abc import ABC, abstractmethod

from cfxupload.upload.models import AuthSession


class SessionProvider(ABC):
    """Abstract interface for session provider implementations."""

    @abstractmethod
    async def get_session(self, cookie: str) -> AuthSession:
        """
        Authenticate against the portal.

        Returns:
            AuthSession: Cookie header and the provider that produced it
        """
        pass
