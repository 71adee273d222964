"""Client for the Storyblok management API"""

import logging
import os
from typing import Any, Dict, List, Optional

import httpx

from ..__version__ import __version__
from ..constants import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_STORYBLOK_API_URL,
    ENV_STORYBLOK_API_URL,
    ENV_STORYBLOK_TOKEN,
    STORYBLOK_HOST,
    TAG_OBJECT_TYPE,
)
from ..core.credentials import CredentialStore
from .exceptions import ApiError, AuthRequiredError

logger = logging.getLogger(__name__)


class StoryblokClient:
    """Space scoped access to internal tags and components"""

    def __init__(self,
                 space: str,
                 token: Optional[str] = None,
                 base_url: Optional[str] = None,
                 credential_store: Optional[CredentialStore] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 timeout: float = DEFAULT_HTTP_TIMEOUT):
        """
        Initialize Storyblok client

        Args:
            space: Target space id
            token: Personal access token, resolved from the environment or
                credential store if omitted
            base_url: Management API base URL
            credential_store: Store used to resolve the token
            transport: Custom httpx transport
            timeout: Request timeout in seconds
        """
        self.space = str(space)
        base_url = base_url or os.environ.get(ENV_STORYBLOK_API_URL) or DEFAULT_STORYBLOK_API_URL
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'
        self.credential_store = credential_store or CredentialStore()
        self._token = token
        self._transport = transport
        self._timeout = timeout

    @property
    def token(self) -> str:
        if self._token:
            return self._token

        token = os.environ.get(ENV_STORYBLOK_TOKEN)
        if not token:
            credentials = self.credential_store.get(STORYBLOK_HOST)
            token = credentials.token if credentials else None
        if not token:
            raise AuthRequiredError(
                "No Storyblok token found. Run 'sabaccui storyblok-login' first."
            )

        self._token = token
        return self._token

    async def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None,
                      params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Send a request relative to the API base URL

        Raises:
            AuthRequiredError: 401
            ApiError: Any other non-2xx status or transport failure
        """
        headers = {
            'Accept': 'application/json',
            'Content-Type': 'application/json',
            'Authorization': self.token,
            'User-Agent': f'sabaccui-cli/{__version__}',
        }

        async with httpx.AsyncClient(base_url=self.base_url,
                                     headers=headers,
                                     transport=self._transport,
                                     timeout=self._timeout) as client:
            try:
                response = await client.request(method, path.lstrip('/'), json=body, params=params)
            except httpx.HTTPError as e:
                raise ApiError(f"Storyblok API error: {e}")

        logger.debug(f"{method} {path} -> {response.status_code}")

        if response.status_code == 401:
            raise AuthRequiredError("Storyblok rejected the access token.")
        if not response.is_success:
            raise ApiError(
                f"Storyblok API error: HTTP {response.status_code} {response.reason_phrase}",
                status=response.status_code
            )

        if not response.content:
            return {}
        return response.json()

    async def list_internal_tags(self) -> List[Dict[str, Any]]:
        data = await self.request('GET', f'spaces/{self.space}/internal_tags')
        return data.get('internal_tags') or []

    async def create_internal_tag(self, name: str, object_type: str = TAG_OBJECT_TYPE) -> Dict[str, Any]:
        data = await self.request('POST', f'spaces/{self.space}/internal_tags',
                                  {'name': name, 'object_type': object_type})
        return data.get('internal_tag') or {}

    async def search_components(self, name: str) -> List[Dict[str, Any]]:
        data = await self.request('GET', f'spaces/{self.space}/components', params={'search': name})
        return data.get('components') or []

    async def create_component(self, definition: Dict[str, Any]) -> Dict[str, Any]:
        data = await self.request('POST', f'spaces/{self.space}/components',
                                  {'component': definition})
        return data.get('component') or data

    async def update_component(self, component_id: Any, definition: Dict[str, Any]) -> Dict[str, Any]:
        data = await self.request('PUT', f'spaces/{self.space}/components/{component_id}',
                                  {'component': definition})
        return data.get('component') or data
