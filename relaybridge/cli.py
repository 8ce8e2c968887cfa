"""Click CLI for running and inspecting the relay bridge."""

from __future__ import annotations

import json
import logging
import sys
from typing import TextIO

import click
import uvicorn

from relaybridge.admission.allow_list import load_allow_list_from_file
from relaybridge.admission.filter import AdmissionFilter
from relaybridge.models import InboundMessage
from relaybridge.webhook.response import extract_reply

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, stream=sys.stderr)


@click.group()
def cli() -> None:
    """WhatsApp to workflow-webhook relay bridge."""


@cli.command()
@click.option("--host", default="0.0.0.0", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Bind port.")
@click.option(
    "--log-level", default=None, envvar="LOG_LEVEL",
    help="Console log level (default INFO).",
)
def serve(host: str, port: int, log_level: str | None) -> None:
    """Run the gateway that receives WAHA webhooks."""
    level = log_level or "INFO"
    configure_logging(level)
    uvicorn.run(
        "relaybridge.gateway.app:create_app_from_env",
        factory=True,
        host=host,
        port=port,
        log_level=level.lower(),
    )


@cli.command()
@click.option("--allow-list", "allow_list_path", default="config/allow-list.json",
              help="Path to allow-list JSON.")
@click.option("--chat", "chat_id", required=True, help="Conversation identity.")
@click.option("--sender", "sender_id", default=None,
              help="Sender identity (defaults to --chat).")
@click.option("--mention", "mentions", multiple=True, help="Mentioned identity.")
@click.option("--from-me", is_flag=True, help="Message was sent by the bot account.")
def admit(
    allow_list_path: str,
    chat_id: str,
    sender_id: str | None,
    mentions: tuple[str, ...],
    from_me: bool,
) -> None:
    """Show whether a message would be admitted for relay."""
    admission = AdmissionFilter(load_allow_list_from_file(allow_list_path))
    message = InboundMessage(
        id="cli",
        chat_id=chat_id,
        sender_id=sender_id or chat_id,
        from_me=from_me,
        mentioned_ids=mentions,
    )
    decision = admission.evaluate(message)
    click.echo(json.dumps({
        "admitted": decision.admitted,
        "reason": decision.reason,
        "kind": decision.kind.value,
    }, indent=2))


@cli.command("extract-reply")
@click.argument("response_file", type=click.File("r"))
def extract_reply_command(response_file: TextIO) -> None:
    """Print the reply carried by a saved webhook response."""
    reply = extract_reply(json.load(response_file))
    if reply is None:
        click.echo("No 'output' field found", err=True)
        sys.exit(1)
    click.echo(reply)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
