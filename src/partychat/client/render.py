"""Terminal rendering of a conversation thread."""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console, Group, RenderableType
from rich.markdown import Markdown
from rich.rule import Rule
from rich.style import Style
from rich.text import Text

from partychat.client.conversation import Entry
from partychat.models.chat import ChatExchange

THINKING = "Thinking…"


def render_entry(entry: Entry) -> RenderableType:
    """Render one message: speaker, then the text, then its sources.

    Assistant replies are Markdown (title, bullets); user input is shown as typed.
    """

    speaker = "You" if entry.role == "user" else "Assistant"
    parts: list[RenderableType] = [
        Text(f"{speaker}:", style="bold" if entry.role == "user" else ""),
        Markdown(entry.content) if entry.role == "assistant" else Text(entry.content),
    ]
    if isinstance(entry, ChatExchange) and entry.sources:
        sources = Text("Sources:\n", style="bold dim")
        for i, source in enumerate(entry.sources, start=1):
            sources.append(f"  [{i}] {source.title}", style=Style(link=source.url) if source.url else "")
            sources.append(f"  {source.url}\n", style="dim")
        parts.append(sources)
    return Group(*parts)


def render_thread(
    console: Console,
    entries: Iterable[Entry],
    *,
    party_name: str,
    loading: bool = False,
) -> None:
    console.print(Rule(f"{party_name} Assistant"))
    for entry in entries:
        console.print(render_entry(entry))
        console.print()
    if loading:
        console.print(Text(THINKING, style="italic"))
