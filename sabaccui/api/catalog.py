"""Client for the SabaccUI catalog API"""

import logging
import os
from typing import Any, Dict, List, Optional

import httpx

from ..__version__ import __version__
from ..constants import (
    ArtifactKind,
    CATALOG_HOST,
    DEFAULT_API_URL,
    DEFAULT_HTTP_TIMEOUT,
    ENV_API_URL,
)
from ..core.credentials import CredentialStore
from .exceptions import (
    AccessDeniedError,
    ApiError,
    AuthRequiredError,
    NotFoundError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


def raise_for_response(response: httpx.Response,
                       kind: Optional[str] = None,
                       key: Optional[str] = None) -> None:
    """
    Map an unsuccessful response onto the exception hierarchy

    Args:
        response: HTTP response
        kind: Resource label for not-found messages ("Template", "Blok")
        key: Resource key for not-found messages

    Raises:
        AuthRequiredError: 401
        AccessDeniedError: 403
        NotFoundError: 404
        ValidationFailedError: 422
        ApiError: Any other non-2xx status
    """
    if response.is_success:
        return

    status = response.status_code
    body = _json_or_none(response)
    message = body.get('message') if isinstance(body, dict) else None

    if status == 401:
        raise AuthRequiredError()
    if status == 403:
        raise AccessDeniedError(message or "Access denied. Please check your license.")
    if status == 404:
        raise NotFoundError(kind, key)
    if status == 422:
        errors = body.get('errors') if isinstance(body, dict) else None
        raise ValidationFailedError(errors if isinstance(errors, dict) else {}, message)

    raise ApiError(f"API error: {response.reason_phrase or message or status}", status=status)


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class CatalogClient:
    """Async access to templates, bloks and account endpoints"""

    def __init__(self,
                 token: Optional[str] = None,
                 base_url: Optional[str] = None,
                 credential_store: Optional[CredentialStore] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 timeout: float = DEFAULT_HTTP_TIMEOUT):
        """
        Initialize catalog client

        Args:
            token: Bearer token, looked up in the credential store if omitted
            base_url: API base URL
            credential_store: Store used to resolve the token
            transport: Custom httpx transport
            timeout: Request timeout in seconds
        """
        self.base_url = base_url or os.environ.get(ENV_API_URL) or DEFAULT_API_URL
        self.credential_store = credential_store or CredentialStore()
        self._token = token
        self._transport = transport
        self._timeout = timeout

    @property
    def token(self) -> str:
        if self._token:
            return self._token

        credentials = self.credential_store.get(CATALOG_HOST)
        if not credentials or not credentials.token:
            raise AuthRequiredError("Not logged in. Please login first.")

        self._token = credentials.token
        return self._token

    def _client(self, authenticated: bool = True) -> httpx.AsyncClient:
        headers = {
            'Accept': 'application/json',
            'User-Agent': f'sabaccui-cli/{__version__}',
        }
        if authenticated:
            headers['Authorization'] = f'Bearer {self.token}'

        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            transport=self._transport,
            timeout=self._timeout
        )

    async def _request(self,
                       method: str,
                       path: str,
                       authenticated: bool = True,
                       kind: Optional[str] = None,
                       key: Optional[str] = None,
                       **kwargs) -> httpx.Response:
        async with self._client(authenticated) as client:
            try:
                response = await client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                raise ApiError(f"API error: {e}")

        logger.debug(f"{method} {path} -> {response.status_code}")
        raise_for_response(response, kind, key)
        return response

    async def _list(self, path: str) -> List[Dict[str, Any]]:
        response = await self._request('GET', path)
        data = response.json()
        if isinstance(data, dict):
            return data.get('data', [])
        return data

    # Account

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Exchange email and password for an access token"""
        response = await self._request(
            'POST', '/auth/v1/token', authenticated=False,
            json={'email': email, 'password': password}
        )
        return response.json()

    async def register(self, email: str, password: str) -> Dict[str, Any]:
        response = await self._request(
            'POST', '/auth/v1/register', authenticated=False,
            json={'email': email, 'password': password}
        )
        return response.json()

    async def logout(self) -> None:
        await self._request('POST', '/auth/v1/logout')

    async def license(self, license_key: str) -> Dict[str, Any]:
        """Attach a license key to the logged in account"""
        response = await self._request('POST', '/api/v1/license', json={'license': license_key})
        return response.json()

    # Catalog

    async def list_components(self) -> List[Dict[str, Any]]:
        return await self._list('/api/v1/components')

    async def list_bloks(self) -> List[Dict[str, Any]]:
        return await self._list('/api/v1/bloks')

    async def list_templates(self) -> List[Dict[str, Any]]:
        return await self._list('/api/v1/templates')

    async def download_artifact(self, kind: ArtifactKind, key: str) -> bytes:
        """
        Download a template or blok archive

        Args:
            kind: Artifact kind
            key: Artifact key

        Returns:
            Archive bytes
        """
        response = await self._request(
            'GET', f'/api/v1/{kind.value}/{key}/download',
            kind=kind.label, key=key
        )
        logger.debug(f"Downloaded {kind.label.lower()} {key} ({len(response.content)} bytes)")
        return response.content
