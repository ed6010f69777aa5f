"""Confirmation utility for API calls."""

import json
import logging
from collections.abc import Iterable
from typing import Any

import httpx
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from todoist_sync.request import decode_form

logger = logging.getLogger(__name__)
console = Console()

SENSITIVE_HEADERS = {"authorization", "x-api-key", "x-access-token", "cookie"}
SENSITIVE_FIELDS = {"token"}
JSON_FIELDS = {"commands", "resource_types"}


def _redact_sensitive_data(text: str) -> str:
    """Redact sensitive data from strings like tokens and API keys.

    Args:
        text: Text that may contain sensitive data.

    Returns:
        Text with sensitive data redacted.
    """
    # keep first 4 and last 4 chars
    if len(text) <= 8:
        return "****"

    return f"{text[:4]}...{text[-4:]}"


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers like Authorization and X-Api-Key.

    Args:
        headers: Original headers dictionary.

    Returns:
        Dictionary with sensitive values redacted.
    """
    redacted = {}

    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            redacted[key] = _redact_sensitive_data(value)
        else:
            redacted[key] = value

    return redacted


def redact_form(fields: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Redact the API token in decoded form fields.

    Args:
        fields: (name, value) pairs of a form body.

    Returns:
        Pairs with sensitive values redacted.
    """
    return [
        (name, _redact_sensitive_data(value) if name in SENSITIVE_FIELDS else value)
        for name, value in fields
    ]


def _format_value(name: str, value: str) -> str:
    """Pretty-print JSON encoded form values.

    Args:
        name: Form field name.
        value: Decoded field value.

    Returns:
        Formatted value.
    """
    if name not in JSON_FIELDS:
        return value

    try:
        return json.dumps(json.loads(value), indent=2)
    except ValueError:
        return value


def _prompt_for_confirmation() -> bool:
    """Prompt user for confirmation to proceed with API call.

    Returns:
        True if user confirms (y), False if user declines (n).
    """
    while True:
        response = console.input(
            "[bold cyan]Proceed with this API call? [y/n][/bold cyan] "
        ).strip().lower()

        if response in ("y", "yes"):
            return True
        elif response in ("n", "no"):
            return False
        else:
            console.print("[yellow]Please enter 'y' or 'n'[/yellow]")


class ConfirmationDeclined(httpx.RequestError):
    """The user declined to send a request."""


class ConfirmationTransport(httpx.BaseTransport):
    """Custom httpx transport that prompts for confirmation before each request."""

    def __init__(self, transport: httpx.BaseTransport) -> None:
        """Initialize confirmation transport with underlying transport.

        Args:
            transport: The underlying httpx transport to wrap.
        """
        self.transport = transport

    def show_request(self, request: httpx.Request) -> None:
        """Print method, URL, headers and form fields of a request."""
        console.print("\n" + "=" * 80)
        console.print("[bold blue]API Request[/bold blue]")
        console.print("=" * 80)

        console.print(f"[bold cyan]Method:[/bold cyan] {request.method}")
        console.print(f"[bold cyan]URL:[/bold cyan] {request.url}")

        if request.headers:
            redacted_headers = _redact_headers(dict(request.headers))
            table = Table(title="Headers", show_header=True, header_style="bold magenta")
            table.add_column("Key", style="cyan")
            table.add_column("Value", style="green")

            for key, value in redacted_headers.items():
                table.add_row(key, value)

            console.print(table)

        if request.content:
            console.print("\n[bold cyan]Form fields:[/bold cyan]")
            for name, value in redact_form(decode_form(request.content)):
                console.print(f"[cyan]{name}[/cyan]")
                formatted = _format_value(name, value)
                if name in JSON_FIELDS:
                    console.print(Syntax(formatted, "json", theme="monokai", line_numbers=False))
                else:
                    console.print(f"  {formatted}")

        console.print("=" * 80)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Handle request with confirmation prompt.

        Args:
            request: The HTTP request.

        Returns:
            The HTTP response.

        Raises:
            ConfirmationDeclined: If user declines confirmation.
        """
        self.show_request(request)

        if not _prompt_for_confirmation():
            console.print("[bold red]✗ API call cancelled by user[/bold red]\n")
            raise ConfirmationDeclined("API call cancelled by user", request=request)

        console.print("[bold green]✓ Proceeding with API call[/bold green]\n")
        return self.transport.handle_request(request)

    def close(self) -> None:
        self.transport.close()


def create_confirming_transport(transport: httpx.BaseTransport | None = None) -> ConfirmationTransport:
    """Wrap a transport so every request is confirmed first.

    Args:
        transport: Transport to wrap. Defaults to httpx.HTTPTransport().

    Returns:
        Confirming transport, suitable for ClientConfig.transport.
    """
    return ConfirmationTransport(transport or httpx.HTTPTransport())
