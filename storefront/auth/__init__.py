"""Customer authentication session."""

from .session import AuthError, AuthSession

__all__ = ['AuthError', 'AuthSession']
