"""
Session Accessor

Resolves the principal every query is scoped to. Accessors are passed
explicitly into the query service so the fetch layer can be exercised
without a real session.
"""

import logging
from typing import Optional

from bizhub.errors import NotAuthenticated
from bizhub.models.domain import Principal
from bizhub.utils.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class SessionAccessor:
    """Base accessor: subclasses return the principal or None."""

    def _load_principal(self) -> Optional[Principal]:
        raise NotImplementedError

    def get_current_principal(self) -> Principal:
        """
        Get the signed-in principal.

        Raises:
            NotAuthenticated: If there is no signed-in principal
        """
        principal = self._load_principal()
        if principal is None:
            logger.warning("Query attempted without an authenticated principal")
            raise NotAuthenticated()
        return principal


class StaticSessionAccessor(SessionAccessor):
    """Accessor bound to a fixed principal (None for an anonymous session)."""

    def __init__(self, principal: Optional[Principal] = None):
        self.principal = principal

    def _load_principal(self) -> Optional[Principal]:
        return self.principal


class SettingsSessionAccessor(SessionAccessor):
    """Accessor reading SESSION_USER_ID and friends from settings."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def _load_principal(self) -> Optional[Principal]:
        if not self.config.SESSION_USER_ID:
            return None
        return Principal(
            id=self.config.SESSION_USER_ID,
            email=self.config.SESSION_EMAIL,
            access_token=self.config.SESSION_ACCESS_TOKEN,
        )
