"""Protocols for the session and entitlement providers the core consumes."""

from __future__ import annotations

from typing import Optional, Protocol


class SessionProvider(Protocol):
    """Supplies the opaque identity used to scope ledger queries."""

    def current_user(self) -> Optional[str]:
        ...

    def sign_out(self) -> None:
        ...


class EntitlementProvider(Protocol):
    """Answers whether mutating operations are allowed for a user."""

    def is_active(self, user_id: str) -> bool:
        ...
