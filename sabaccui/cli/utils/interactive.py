"""Interactive utilities for CLI commands"""

import re
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt

from ...constants import STORYBLOK_TOKEN_URL
from ...models.project import SetupAnswers

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


def ask_required(console: Console, message: str, default: Optional[str] = None,
                 password: bool = False, error: str = "A value is required") -> str:
    """Prompt until a non-empty answer is given"""
    while True:
        value = Prompt.ask(message, default=default, password=password, console=console)
        if value and value.strip():
            return value.strip()
        console.print(f"[red]{error}[/red]")


def ask_email(console: Console, default: Optional[str] = None) -> str:
    while True:
        email = ask_required(console, "Email address", default=default)
        if EMAIL_PATTERN.match(email):
            return email
        console.print("[red]Please enter a valid email address[/red]")


class SetupWizard:
    """Collects the answers needed to set up a project"""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def run(self, defaults: SetupAnswers, assume_defaults: bool = False) -> SetupAnswers:
        """
        Ask for every answer not already known

        Args:
            defaults: Known answers, used as prompt defaults
            assume_defaults: Do not prompt; return ``defaults`` unchanged

        Returns:
            SetupAnswers
        """
        if assume_defaults:
            return defaults

        self.console.print("\n[bold cyan]Project Setup[/bold cyan]\n")

        name = ask_required(self.console, "What is your project named?", default=defaults.name,
                            error="Please enter a valid project name")

        space = defaults.space or ask_required(
            self.console, "Enter your Storyblok space id", error="Please enter a valid space id"
        )

        token = defaults.storyblok_token
        if not token:
            token_url = STORYBLOK_TOKEN_URL.format(space=space)
            self.console.print(f"[dim]Get your access token at {token_url}[/dim]")
            token = ask_required(
                self.console, "Enter your Storyblok access token", password=True,
                error=f"Visit {token_url} to get your API token"
            )

        domain = defaults.domain
        if domain is None:
            domain = Prompt.ask("What will be the target domain of the project",
                                default="", console=self.console) or None

        return SetupAnswers(name=name, space=space, domain=domain, storyblok_token=token)
