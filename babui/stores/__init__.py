"""
Session-scoped stores.

Each store holds the in-memory state for one user session and talks to the
backend through the repositories in `babui.db`.
"""

from babui.stores.auth_store import AuthStore, SignUpResult
from babui.stores.chat_store import ChatStore
from babui.stores.property_store import PropertyStore

__all__ = ["AuthStore", "ChatStore", "PropertyStore", "SignUpResult"]
