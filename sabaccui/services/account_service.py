"""Account and credential management"""

import logging
from typing import Any, Dict, Optional

from ..api.catalog import CatalogClient
from ..api.exceptions import AuthRequiredError
from ..constants import CATALOG_HOST, STORYBLOK_HOST
from ..core.credentials import Credentials, CredentialStore

logger = logging.getLogger(__name__)


class AccountService:
    """Login state for the catalog and the Storyblok token"""

    def __init__(self, catalog: CatalogClient, credential_store: Optional[CredentialStore] = None):
        self.catalog = catalog
        self.credential_store = credential_store or catalog.credential_store

    def current_user(self) -> Optional[str]:
        credentials = self.credential_store.get(CATALOG_HOST)
        return credentials.email if credentials and credentials.token else None

    async def login(self, email: str, password: str) -> Credentials:
        """
        Log in and store the access token

        Raises:
            AuthRequiredError: If the catalog rejects the login or returns no token
        """
        data = await self.catalog.login(email, password)
        token = _extract_token(data)
        if not token:
            raise AuthRequiredError("Login failed: no access token returned.")

        credentials = Credentials(email=email, token=token)
        self.credential_store.set(credentials, CATALOG_HOST)
        logger.info(f"Logged in as {email}")
        return credentials

    async def register(self, email: str, password: str) -> Credentials:
        """Create an account; stores the token when the catalog issues one"""
        data = await self.catalog.register(email, password)
        token = _extract_token(data)
        credentials = Credentials(email=email, token=token or "")
        if token:
            self.credential_store.set(credentials, CATALOG_HOST)
        return credentials

    async def logout(self) -> None:
        """Revoke the token remotely when possible and forget it locally"""
        try:
            await self.catalog.logout()
        except AuthRequiredError:
            logger.debug("Token already invalid, removing local credentials only")
        finally:
            self.credential_store.clear(CATALOG_HOST)

    async def activate_license(self, license_key: str) -> Dict[str, Any]:
        return await self.catalog.license(license_key)

    def store_storyblok_token(self, token: str, email: str = "") -> None:
        self.credential_store.set(Credentials(email=email, token=token), STORYBLOK_HOST)

    def clear_storyblok_token(self) -> None:
        self.credential_store.clear(STORYBLOK_HOST)


def _extract_token(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    token = data.get('access_token') or data.get('token')
    if token is None and isinstance(data.get('data'), dict):
        token = data['data'].get('access_token') or data['data'].get('token')
    return token
