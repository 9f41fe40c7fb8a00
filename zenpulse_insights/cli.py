"""
Command-line interface tools for the ZenPulse insight service.
"""

import asyncio
import json
from collections.abc import Coroutine
from datetime import date
from pathlib import Path
from typing import Any

import httpx
import typer

from .models import ChatReply, EntryInsight

DEFAULT_BASE_URL = "http://localhost:8000"

# Generous enough for a provider fallback chain behind the server.
REQUEST_TIMEOUT = 60.0

app = typer.Typer(help="ZenPulse Insights CLI tools")


# MARK: - Commands


@app.command()
def pep_talk(
    mood: int = typer.Argument(..., min=1, max=5, help="Mood level from 1 to 5"),
    journal: str = typer.Argument("", help="Journal text for the entry"),
    tone: str = typer.Option("gentle", "--tone", "-t", help="Pep talk tone"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the ZenPulse service"
    ),
) -> None:
    """Get a pep talk and sentiment for a journal entry."""

    async def _pep_talk() -> None:
        result = await _post(
            base_url,
            "/insights/entry",
            {"mood": mood, "journal": journal, "tone": tone},
        )
        insight = EntryInsight.model_validate(result)
        print(insight.pep_talk)
        print(f"Sentiment: {insight.sentiment.value}")

    _run_with_error_handling(_pep_talk(), base_url)


@app.command()
def chat(
    message: str = typer.Argument(..., help="Message to send"),
    mood: int | None = typer.Option(
        None, "--mood", "-m", min=1, max=5, help="Today's mood, if logged"
    ),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the ZenPulse service"
    ),
) -> None:
    """Send a chat message and print the reply."""

    async def _chat() -> None:
        result = await _post(base_url, "/chat", {"message": message, "mood": mood})
        reply = ChatReply.model_validate(result)
        print(f"[{reply.sentiment.value}] {reply.response}")

    _run_with_error_handling(_chat(), base_url)


@app.command()
def burnout(
    moods: list[int] = typer.Argument(..., help="Mood levels, most recent first"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the ZenPulse service"
    ),
) -> None:
    """Check a sequence of daily moods for burnout risk."""

    async def _burnout() -> None:
        result = await _post(
            base_url, "/insights/burnout", {"entries": _entries_from_moods(moods)}
        )
        print("Burnout risk detected" if result["burnout_risk"] else "No burnout risk")

    _run_with_error_handling(_burnout(), base_url)


@app.command()
def summary(
    entries_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="JSON file with a list of entries (date, mood, journal), newest first",
    ),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the ZenPulse service"
    ),
) -> None:
    """Print the weekly summary for the entries in a JSON file."""
    entries = json.loads(entries_file.read_text(encoding="utf-8"))

    async def _summary() -> None:
        result = await _post(
            base_url, "/insights/summary", {"entries": entries, "newest_first": True}
        )
        print(result["summary"])

    _run_with_error_handling(_summary(), base_url)


@app.command()
def demo(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the ZenPulse service"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """Run every insight once against sample entries."""

    async def _demo() -> None:
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
            response = await client.get(f"{base_url}/insights/demo")
            response.raise_for_status()
            result = response.json()

        if json_output:
            print(json.dumps(result, indent=2))
            return

        print(f"Pep Talk: {result['pep_talk']}")
        print(f"Sentiment: {result['sentiment']}")
        print(f"Burnout detected: {result['burnout']}")
        print(f"Summary: {result['summary']}")

    _run_with_error_handling(_demo(), base_url)


# MARK: - Private Helpers


def _entries_from_moods(moods: list[int]) -> list[dict[str, Any]]:
    """Build placeholder entries dated today for a bare list of moods."""
    today = date.today().isoformat()
    return [{"date": today, "mood": mood} for mood in moods]


async def _post(base_url: str, path: str, payload: dict[str, Any]) -> dict[str, Any]:
    async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
        response = await client.post(f"{base_url}{path}", json=payload)
        response.raise_for_status()
        return response.json()


def _run_with_error_handling(coro: Coroutine[Any, Any, Any], base_url: str) -> None:
    """Run an async coroutine with standardized error handling."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        print("\nStopped")
        raise typer.Exit(0)
    except httpx.ConnectError:
        print(f"Error: Could not connect to {base_url}")
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        print(f"Error: HTTP {e.response.status_code}")
        raise typer.Exit(1)
    except Exception as e:
        error_msg = str(e) if str(e) else f"Unknown error of type {type(e).__name__}"
        print(f"Error: {error_msg}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
