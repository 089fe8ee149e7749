"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from sqlmodel import Session

from .config import BaseConfig
from .domain.collaborators import EntitlementProvider, SessionProvider
from .errors import EntitlementRequired
from .infra.database import create_db_engine, create_session_factory, init_database
from .infra.gateways import SQLModelLedgerGateway
from .services.ledger_engine import LedgerEngine


class ConfigSessionProvider:
    """Identity taken from ``CASHBOOK_USER_ID``; sign-out forgets it."""

    def __init__(self, config: BaseConfig):
        self._user_id: Optional[str] = config.USER_ID

    def current_user(self) -> Optional[str]:
        return self._user_id

    def sign_out(self) -> None:
        self._user_id = None


class ConfigEntitlementProvider:
    """Entitlement flag taken from ``CASHBOOK_ENTITLEMENT_ACTIVE``."""

    def __init__(self, config: BaseConfig):
        self._active = config.ENTITLEMENT_ACTIVE

    def is_active(self, user_id: str) -> bool:
        return bool(user_id) and self._active


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    config: BaseConfig
    session_factory: Callable[[], Session]
    sessions: SessionProvider
    entitlements: EntitlementProvider
    gateway: SQLModelLedgerGateway
    engine: LedgerEngine

    def require_user_id(self) -> str:
        """Return the current user id or raise if not set."""

        user_id = self.sessions.current_user()
        if not user_id:
            raise RuntimeError("User is not authenticated")
        return user_id

    def require_active(self) -> None:
        """Block mutating operations when the user's entitlement is inactive."""

        if not self.entitlements.is_active(self.require_user_id()):
            raise EntitlementRequired("Subscription inactive: subscribe to record entries.")


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    sessions: Optional[SessionProvider] = None,
    entitlements: Optional[EntitlementProvider] = None,
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    sessions = sessions or ConfigSessionProvider(config)
    entitlements = entitlements or ConfigEntitlementProvider(config)
    user_id = sessions.current_user()
    if not user_id:
        raise RuntimeError("User is not authenticated")

    gateway = SQLModelLedgerGateway(session_factory, user_id=user_id)
    return AppContext(
        config=config,
        session_factory=session_factory,
        sessions=sessions,
        entitlements=entitlements,
        gateway=gateway,
        engine=LedgerEngine(gateway, config=config),
    )
