"""CLI entrypoints for partychat."""

from __future__ import annotations

import httpx
import typer
from rich.console import Console
from rich.prompt import Prompt

from partychat.api import serve
from partychat.client import ConversationClient, render_entry, render_thread
from partychat.client.render import THINKING
from partychat.config import load_settings
from partychat.errors import PartychatError
from partychat.logging import configure_logging, get_logger
from partychat.search import get_search_gateway

app = typer.Typer(add_completion=False, help="Web-grounded party assistant")
logger = get_logger(__name__)

app.command("serve", help="Start the API server.")(serve.main)


@app.command()
def chat(
    base_url: str = typer.Option("http://127.0.0.1:8000", "--base-url", help="partychat API base URL"),
    timeout: float = typer.Option(120.0, "--timeout", help="HTTP timeout in seconds"),
) -> None:
    """Chat with the assistant. An empty line or Ctrl-D exits."""

    settings = load_settings()
    configure_logging(settings.log_level)
    console = Console()
    logger.info("CLI chat session started", extra={"base_url": base_url})

    with httpx.Client(base_url=base_url, timeout=timeout) as http:
        client = ConversationClient(http)
        render_thread(console, client.log, party_name=settings.party_name)
        while True:
            try:
                client.input = Prompt.ask("Ask a question…", console=console, default="", show_default=False)
            except (EOFError, KeyboardInterrupt):
                break
            if not client.input.strip():
                break
            with console.status(THINKING):
                client.submit()
            console.print(render_entry(client.log.entries()[-1]))
            console.print()


@app.command()
def search(query: str = typer.Argument(..., help="Search query")) -> None:
    """Run a raw web search and print the provider payload."""

    settings = load_settings()
    configure_logging(settings.log_level)

    try:
        data = get_search_gateway(settings).search_raw(query)
    except PartychatError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1) from e
    Console().print_json(data=data)


if __name__ == "__main__":
    app()
