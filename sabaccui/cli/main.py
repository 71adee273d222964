# sabaccui/cli/main.py
"""Main CLI entry point for sabaccui-cli"""

import logging
import os
import sys
from typing import Optional

import click
from rich.logging import RichHandler

from ..__version__ import __version__
from ..api.catalog import CatalogClient
from ..constants import APP_NAME, ENV_LOG_LEVEL, LOG_FORMAT
from ..core.credentials import CredentialStore
from ..core.process_runner import AsyncProcessRunner, ProcessRunner
from ..core.tag_synchronizer import TagCatalog
from ..core.user_config import UserConfig
from ..services.account_service import AccountService
from ..services.base_service import StoryblokFactory
from ..services.blok_service import BlokService
from ..services.template_service import TemplateService
from .utils.output import console

# Import all commands
from .commands import (
    account,
    add,
    catalog,
    config,
    init,
    setup,
)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.getLevelName(os.environ.get(ENV_LOG_LEVEL, 'WARNING').upper())
        if not isinstance(level, int):
            level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazily created collaborators

    Everything is built on first access so that commands which never talk to
    the catalog do not need credentials or configuration files. Tests pass
    prebuilt collaborators instead.
    """

    def __init__(self,
                 catalog: Optional[CatalogClient] = None,
                 runner: Optional[ProcessRunner] = None,
                 credential_store: Optional[CredentialStore] = None,
                 user_config: Optional[UserConfig] = None,
                 storyblok_factory: Optional[StoryblokFactory] = None):
        self._catalog = catalog
        self._runner = runner
        self._credential_store = credential_store
        self._user_config = user_config
        self.storyblok_factory = storyblok_factory
        self.verbose: bool = False
        self.debug: bool = False

    @property
    def user_config(self) -> UserConfig:
        if self._user_config is None:
            self._user_config = UserConfig()
        return self._user_config

    @property
    def credential_store(self) -> CredentialStore:
        if self._credential_store is None:
            self._credential_store = CredentialStore()
        return self._credential_store

    @property
    def catalog(self) -> CatalogClient:
        if self._catalog is None:
            self._catalog = CatalogClient(
                base_url=self.user_config.get('apiUrl'),
                credential_store=self.credential_store
            )
        return self._catalog

    @property
    def runner(self) -> ProcessRunner:
        if self._runner is None:
            self._runner = AsyncProcessRunner()
        return self._runner

    @property
    def tag_catalog(self) -> TagCatalog:
        return TagCatalog.resolve(self.user_config.get('tagCatalog'))

    def account_service(self) -> AccountService:
        return AccountService(self.catalog, self.credential_store)

    def blok_service(self) -> BlokService:
        return BlokService(
            self.catalog,
            runner=self.runner,
            storyblok_factory=self.storyblok_factory,
            tag_catalog=self.tag_catalog,
            console=console
        )

    def template_service(self) -> TemplateService:
        return TemplateService(
            self.catalog,
            runner=self.runner,
            storyblok_factory=self.storyblok_factory,
            tag_catalog=self.tag_catalog,
            user_config=self.user_config,
            console=console
        )


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.version_option(__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx, verbose, debug, quiet):
    """SabaccUI - Scaffold Storyblok projects from templates and bloks

    Templates create new projects; bloks add components to an existing
    project and push their definitions to your Storyblok space.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.ensure_object(Context)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(account.login)
cli.add_command(account.logout)
cli.add_command(account.register)
cli.add_command(account.license)
cli.add_command(account.buy)
cli.add_command(account.storyblok_login)
cli.add_command(config.config)
cli.add_command(init.init)
cli.add_command(setup.setup)
cli.add_command(catalog.templates)
cli.add_command(catalog.bloks)
cli.add_command(add.add)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
