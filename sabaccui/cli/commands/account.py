"""Account commands: login, logout, register, license, buy, storyblok-login"""

import sys

import click
from rich.prompt import Prompt

from ..decorators import handle_errors
from ..utils.interactive import ask_email, ask_required
from ..utils.output import console, print_info, print_success
from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, PRICING_URL
from ...utils.async_utils import run_async


@click.command()
@click.option('--email', '-e', help='Account email address')
@click.option('--password', help='Account password (prompted if omitted)')
@click.pass_obj
@handle_errors
def login(obj, email, password):
    """Login to SabaccUI"""
    email = email or ask_email(console)
    password = password or ask_required(console, "Password", password=True,
                                        error="Please enter a valid password")

    run_async(obj.account_service().login(email, password))
    console.print(
        f"[green]{EMOJI_SUCCESS}[/green] Logged in successfully! "
        f"Session token is stored in your .netrc file."
    )


@click.command()
@click.pass_obj
@handle_errors
def logout(obj):
    """Logout of SabaccUI"""
    service = obj.account_service()
    if not service.current_user():
        print_info("Not logged in")
        return

    run_async(service.logout())
    console.print("Logged out")


@click.command()
@click.option('--email', '-e', help='Account email address')
@click.option('--password', help='Account password (prompted if omitted)')
@click.pass_obj
@handle_errors
def register(obj, email, password):
    """Create a SabaccUI account"""
    email = email or ask_email(console)
    if not password:
        password = ask_required(console, "Password", password=True)
        confirmation = ask_required(console, "Repeat password", password=True)
        if password != confirmation:
            console.print(f"[red]{EMOJI_ERROR}[/red] Passwords do not match")
            sys.exit(1)

    credentials = run_async(obj.account_service().register(email, password))
    console.print(f"[green]{EMOJI_SUCCESS}[/green] Account created for {credentials.email}")
    if not credentials.token:
        print_info("Run 'sabaccui login' to start a session")


@click.command()
@click.argument('license_key', required=False)
@click.pass_obj
@handle_errors
def license(obj, license_key):
    """Enter your license key"""
    license_key = license_key or ask_required(console, "License key",
                                              error="Please enter a valid license key")

    run_async(obj.account_service().activate_license(license_key))
    print_success("License key stored successfully!")


@click.command()
def buy():
    """Buy a license"""
    if sys.stdout.isatty():
        click.launch(PRICING_URL)
    console.print(f"Here is the link to buy a license: {PRICING_URL}")


@click.command(name='storyblok-login')
@click.option('--token', '-t', help='Storyblok personal access token')
@click.option('--email', '-e', default='', help='Storyblok account email')
@click.option('--clear', is_flag=True, help='Remove the stored token')
@click.pass_obj
@handle_errors
def storyblok_login(obj, token, email, clear):
    """Store the Storyblok personal access token used to push bloks"""
    service = obj.account_service()
    if clear:
        service.clear_storyblok_token()
        console.print("Storyblok token removed")
        return

    token = token or Prompt.ask("Storyblok personal access token", password=True, console=console)
    if not token:
        console.print(f"[red]{EMOJI_ERROR}[/red] No token given")
        sys.exit(1)

    service.store_storyblok_token(token, email)
    console.print(f"[green]{EMOJI_SUCCESS}[/green] Storyblok token stored in your .netrc file.")
