"""
Command-line interface for the member directory.

This module provides a CLI for listing community members, showing one member's
upcoming events and serving the HTTP API.
"""

import asyncio
import datetime
import json as json_lib
import logging
import sys
from typing import List, Optional

import click

from member_directory import __version__
from member_directory.storage import SQLiteBackend

from .constants import DB_ENV_VAR
from .core import MemberDirectory
from .errors import StoreUnavailable
from .managers.selection import Loaded, LoadFailed
from .models import EventSummary


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--connection-string",
    envvar=DB_ENV_VAR,
    help=f"Path to the SQLite database (env: {DB_ENV_VAR})",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Seconds to wait for a member's events before giving up",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug mode",
)
@click.pass_context
def cli(
    ctx: click.Context,
    connection_string: Optional[str],
    timeout: Optional[float],
    debug: bool,
):
    """Member Directory: browse community members and their upcoming events."""
    if debug:
        click.echo("Debug mode enabled")

        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stdout)],
        )

    storage = SQLiteBackend(connection_string)

    ctx.ensure_object(dict)
    ctx.obj["directory"] = MemberDirectory(storage=storage, fetch_timeout=timeout)


def format_start_time(value: datetime.datetime) -> str:
    """Format like "Oct 19, 3:05 PM"."""
    hour = value.hour % 12 or 12
    return f"{value:%b} {value.day}, {hour}:{value:%M} {value:%p}"


def echo_events(events: List[EventSummary], placeholder: str) -> None:
    if not events:
        click.echo(f"  {placeholder}")
        return
    for event in events:
        click.echo(f"  {event.display_vibe} {event.title}")
        click.echo(f"     {format_start_time(event.start_time)}")


@cli.command()
@click.option("--json", is_flag=True, help="Output results as JSON")
@click.pass_context
def members(ctx: click.Context, json: bool):
    """List community members."""
    directory: MemberDirectory = ctx.obj["directory"]

    listing = directory.load_directory()
    if not listing.loaded:
        click.echo(f"Error: could not load the directory: {listing.error}", err=True)
        ctx.exit(1)

    if json:
        click.echo(
            json_lib.dumps([member.model_dump(mode="json") for member in listing.members])
        )
        return

    click.echo(f"Found {len(listing.members)} members:")
    for member in listing.members:
        header = member.display_name
        if member.hosted_events_count > 0:
            header += f"  [{member.hosted_events_count} events]"
        click.echo(f"\n{header}")
        if member.bio:
            click.echo(f"   {member.bio}")
        if member.vibes:
            click.echo(f"   {' '.join(member.vibes)}")


@cli.command()
@click.argument("user_id", type=int)
@click.option("--json", is_flag=True, help="Output results as JSON")
@click.pass_context
def show(ctx: click.Context, user_id: int, json: bool):
    """Show a member's upcoming hosted and attended events."""
    directory: MemberDirectory = ctx.obj["directory"]

    try:
        member = directory.find_member(user_id)
    except StoreUnavailable as e:
        click.echo(f"Error: {e.message}", err=True)
        ctx.exit(1)

    if member is None:
        click.echo(f"Error: member {user_id} not found", err=True)
        ctx.exit(1)

    state = asyncio.run(directory.selection.select(member))
    if isinstance(state, LoadFailed):
        click.echo(f"Error: could not load events: {state.error}", err=True)
        ctx.exit(1)
    assert isinstance(state, Loaded)
    events = state.events

    if json:
        click.echo(
            json_lib.dumps(
                {
                    "member": member.model_dump(mode="json"),
                    "events": events.model_dump(mode="json"),
                }
            )
        )
        return

    click.echo(member.display_name)
    if member.vibes:
        click.echo(" ".join(member.vibes))
    if member.bio:
        click.echo("\nAbout")
        click.echo(f"  {member.bio}")

    for failed in events.failed:
        click.echo(f"Warning: could not load {failed} events", err=True)

    click.echo("\nHosting")
    echo_events(events.hosting, "No upcoming events hosted")
    click.echo("\nAttending")
    echo_events(events.attending, "No upcoming events attending")


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, help="Port to bind to")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int):
    """Start the directory API server."""
    click.echo(f"Starting directory server on http://{host}:{port}...")
    click.echo("Press Ctrl+C to stop the server.")

    # Import here to avoid loading uvicorn for the other commands
    import uvicorn

    from member_directory.server import create_app

    directory: MemberDirectory = ctx.obj["directory"]

    app = create_app(directory=directory)

    uvicorn.run(app, host=host, port=port)


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
