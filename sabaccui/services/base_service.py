"""Shared plumbing for installation services"""

import logging
from typing import Callable, Optional

from rich.console import Console

from ..api.catalog import CatalogClient
from ..api.storyblok import StoryblokClient
from ..core.process_runner import AsyncProcessRunner, ProcessRunner

logger = logging.getLogger(__name__)

StoryblokFactory = Callable[[str], StoryblokClient]


class BaseService:
    """Holds the collaborators every installer needs"""

    def __init__(self,
                 catalog: CatalogClient,
                 runner: Optional[ProcessRunner] = None,
                 storyblok_factory: Optional[StoryblokFactory] = None,
                 console: Optional[Console] = None):
        """
        Initialize service

        Args:
            catalog: Catalog API client
            runner: Process runner for package managers, git and migrations
            storyblok_factory: Builds a Storyblok client for a space id
            console: Console used for progress output
        """
        self.catalog = catalog
        self.runner = runner or AsyncProcessRunner()
        self.storyblok_factory = storyblok_factory or self._default_storyblok
        self.console = console or Console()

    def _default_storyblok(self, space: str) -> StoryblokClient:
        return StoryblokClient(space, credential_store=self.catalog.credential_store)

    def output(self, message: str, silent: bool = False) -> None:
        """Print a progress line unless running silently"""
        if silent:
            logger.debug(message)
        else:
            self.console.print(message)
