"""Client commands - Query a running agent over HTTP."""

import json
from typing import Any, Optional

import httpx
import typer
from rich.console import Console
from rich.markdown import Markdown

app = typer.Typer(help="Talk to a running Migration Pathways Agent")
console = Console()

DEFAULT_AGENT_URL = "http://localhost:8080"


def build_send_request(query: str, task_id: Optional[str] = None, request_id: Any = 1) -> dict:
    """Build a ``tasks/send`` JSON-RPC request for a text query."""
    params: dict[str, Any] = {
        "message": {
            "role": "user",
            "parts": [{"type": "text", "text": query}],
        }
    }
    if task_id:
        params["id"] = task_id
    return {"jsonrpc": "2.0", "method": "tasks/send", "params": params, "id": request_id}


@app.command("card")
def get_card(
    url: str = typer.Option(DEFAULT_AGENT_URL, "--url", "-u", help="Agent base URL"),
):
    """Fetch and print the agent card."""
    try:
        response = httpx.get(f"{url.rstrip('/')}/.well-known/agent.json", timeout=30.0)
        response.raise_for_status()
    except httpx.HTTPError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print("[bold]Agent Card[/bold]")
    console.print_json(data=response.json())


@app.command("query")
def send_query(
    query: str = typer.Argument(..., help="Migration query, e.g. \"Nurse from India wanting to move to UK\""),
    url: str = typer.Option(DEFAULT_AGENT_URL, "--url", "-u", help="Agent base URL"),
    task_id: Optional[str] = typer.Option(None, "--task-id", "-t", help="Task id (generated by the agent if omitted)"),
    raw: bool = typer.Option(False, "--raw", help="Print the raw JSON-RPC response"),
):
    """Send a migration query as a tasks/send request.

    Examples:
        migration-agent client query "I'm a software engineer from Nigeria, want to move to Canada"
        migration-agent client query "Data scientist looking to relocate to USA with $5000 budget"
    """
    try:
        response = httpx.post(
            f"{url.rstrip('/')}/",
            json=build_send_request(query, task_id),
            timeout=120.0,
        )
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, json.JSONDecodeError) as e:
        console.print(f"[red]Error sending request:[/red] {e}")
        raise typer.Exit(1)

    if raw:
        console.print_json(data=payload)
        return

    error = payload.get("error")
    if error:
        console.print(f"[red]Error:[/red] {error.get('message')} (code: {error.get('code')})")
        if error.get("data"):
            console.print(f"   Details: {error['data']}")
        raise typer.Exit(1)

    task = payload.get("result") or {}
    status = task.get("status") or {}
    console.print("[bold]Migration Pathways Result[/bold]")
    console.print(f"Task ID: [cyan]{task.get('id')}[/cyan]")
    console.print(f"Status: {status.get('state')}\n")

    texts = [
        part.get("text", "")
        for artifact in task.get("artifacts") or []
        for part in artifact.get("parts") or []
        if part.get("type") == "text"
    ]
    if texts:
        for text in texts:
            console.print(Markdown(text))
    elif status.get("message"):
        for part in status["message"].get("parts") or []:
            console.print(part.get("text", ""))

    if status.get("state") == "failed":
        raise typer.Exit(1)
