"""Public auth exports for fuzzydrive."""

from __future__ import annotations

from .authorization import AuthorizationFlow, FlowState
from .callback import CallbackServer
from .credential import Credential
from .credential_store import CredentialStore
from .manager import CredentialManager
from .token_client import READONLY_SCOPES, REDIRECT_URI, TokenClient

__all__ = [
    "Credential",
    "CredentialStore",
    "CredentialManager",
    "TokenClient",
    "AuthorizationFlow",
    "FlowState",
    "CallbackServer",
    "READONLY_SCOPES",
    "REDIRECT_URI",
]
