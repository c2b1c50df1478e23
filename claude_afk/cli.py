"""
CLI for Claude AFK.

Provides device pairing, notification switches, and the hook entry point
that Claude Code calls for permission requests and idle notifications.
"""

import io
import json
import shutil
import sys
import logging
from pathlib import Path
from typing import Optional

import click
import qrcode
from rich.console import Console
from rich.panel import Panel

from claude_afk import __version__
from claude_afk.client import BackendClient
from claude_afk.config import AfkConfig, config_path, get_backend_url, load_config, save_config
from claude_afk.constants import APP_NAME, DECISION_TIMEOUT, IDLE_NOTIFICATION_TYPE, SETUP_TIMEOUT
from claude_afk.errors import AfkError, ConfigUnavailable, PollTimeout
from claude_afk.hook import PERMISSION_EVENTS, run_hook
from claude_afk.logger import clear_logs as _clear_log_file, log_file_path, setup_logging
from claude_afk.poller import PairingPoller


console = Console()
logger = logging.getLogger(__name__)

CLAUDE_SETTINGS_PATH = Path.home() / ".claude" / "settings.json"


def get_config(quiet: bool = False) -> Optional[AfkConfig]:
    """Load the persisted config.

    Args:
        quiet: If True, return None instead of printing error and exiting.
               Used by the hook entry point, which must fail silently.
    """
    try:
        return load_config()
    except ConfigUnavailable as e:
        if quiet:
            logger.warning("%s", e)
            return None
        console.print(f"[red]Configuration error:[/red] {e}")
        console.print(f"\nFix or delete {config_path()} and run 'claude-afk setup' again.")
        sys.exit(1)


def _save(config: AfkConfig):
    try:
        save_config(config)
    except OSError as e:
        console.print(f"[red][FAIL][/red] Could not write {config_path()}: {e}")
        sys.exit(1)


def render_qr(data: str) -> str:
    """Render data as a terminal QR code (light modules on dark background)."""
    qr = qrcode.QRCode(border=1)
    qr.add_data(data)
    qr.make(fit=True)
    buf = io.StringIO()
    qr.print_ascii(out=buf, invert=True)
    return buf.getvalue()


def _hook_command() -> str:
    exe = shutil.which(APP_NAME) or APP_NAME
    return f"{Path(exe).as_posix()} notify"


def hook_settings(command: Optional[str] = None) -> dict:
    """settings.json fragment registering claude-afk for both hook events.

    The hook timeout leaves headroom over the decision ceiling so Claude Code
    never kills the poll loop before it can answer.
    """
    command = command or _hook_command()
    entry = {"type": "command", "command": command, "timeout": int(DECISION_TIMEOUT) + 30}
    return {
        "hooks": {
            "PermissionRequest": [{"matcher": "*", "hooks": [entry]}],
            "Notification": [{"matcher": IDLE_NOTIFICATION_TYPE, "hooks": [dict(entry, timeout=30)]}],
        }
    }


def hooks_installed(settings_path: Optional[Path] = None) -> bool:
    """True if settings.json registers claude-afk for a permission and a Notification hook."""
    settings_path = settings_path or CLAUDE_SETTINGS_PATH
    try:
        settings = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return False
    if not isinstance(settings, dict) or not isinstance(settings.get("hooks"), dict):
        return False

    def registered(event: str) -> bool:
        entries = settings["hooks"].get(event)
        if not isinstance(entries, list):
            return False
        return any(
            APP_NAME in str(h.get("command", ""))
            for entry in entries if isinstance(entry, dict)
            for h in entry.get("hooks", []) if isinstance(h, dict)
        )

    has_permission = any(registered(event) for event in PERMISSION_EVENTS)
    return has_permission and registered("Notification")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(__version__, prog_name=APP_NAME)
def main(verbose: bool):
    """Claude AFK - Push notifications and remote approvals for Claude Code."""
    setup_logging(verbose)


@main.command()
def setup():
    """Pair a phone by scanning a QR code."""
    config = get_config()
    backend_url = get_backend_url(config)

    console.print()
    console.print("  [cyan]◆[/cyan] [bold]Claude AFK Pairing[/bold]")
    console.print(f"  [dim]→ {backend_url}[/dim]")
    console.print()

    with BackendClient(backend_url) as client:
        try:
            session = client.initiate_pairing()
        except AfkError as e:
            console.print(f"  [red]✗ Could not start pairing:[/red] {e}")
            sys.exit(1)

        pairing_url = f"{backend_url}/pair/{session.pairing_token}"
        console.print("  📱 Scan this QR code with your phone:")
        console.print()
        click.echo(render_qr(pairing_url))
        console.print(f"  [dim]Or open:[/dim] [cyan underline]{pairing_url}[/cyan underline]")
        console.print()
        console.print("  [yellow]◌[/yellow] Waiting for pairing... [dim](press Ctrl+C to cancel)[/dim]")

        try:
            device_token = PairingPoller(client).wait_for_device_token(session.pairing_id)
        except PollTimeout:
            console.print()
            console.print(f"  [red]✗ Pairing timed out after {int(SETUP_TIMEOUT // 60)} minutes[/red]")
            sys.exit(1)
        except AfkError as e:
            console.print()
            console.print(f"  [red]✗ Pairing failed:[/red] {e}")
            sys.exit(1)

    config.device_token = device_token
    config.backend_url = backend_url
    config.active = True
    _save(config)

    console.print()
    console.print("  [bold green]✓ Pairing successful![/bold green]")
    console.print("    [dim]→[/dim] Notifications are now [green]enabled[/green]")
    if not hooks_installed():
        console.print(f"    [dim]→[/dim] Run [cyan]{APP_NAME} hook-config[/cyan] to see the hooks to install")
    console.print()


main.add_command(setup, name="pair")


@main.command()
@click.argument("json_input", required=False)
def notify(json_input: Optional[str]):
    """
    Hook entry point for Claude Code.

    Reads the hook JSON from JSON_INPUT or stdin. Prints a permission
    decision for PermissionRequest/PreToolUse events; stays silent for
    Notification events.
    """
    config = get_config(quiet=True)
    if config is None or not config.should_notify():
        sys.exit(0)

    raw = json_input if json_input is not None else sys.stdin.read()
    result = run_hook(raw, config)
    if result.output is not None:
        click.echo(result.output.to_json())
    sys.exit(result.exit_code)


@main.command()
def status():
    """Show pairing, notification, and hook status."""
    config = get_config()
    paired = bool(config.device_token)
    installed = hooks_installed()

    def row(ok: bool, label: str, yes: str, no: str, no_style: str = "yellow") -> str:
        if ok:
            return f"[green]✓[/green] {label:<15} [green]{yes}[/green]"
        marker = "✗" if no_style == "red" else "○"
        return f"[{no_style}]{marker}[/{no_style}] {label:<15} [{no_style}]{no}[/{no_style}]"

    console.print(Panel(
        row(paired, "Device", "Paired", "Not paired", "red") + "\n"
        + row(config.active, "Notifications", "Active", "Inactive") + "\n"
        + row(installed, "Hooks", "Installed", "Not installed") + "\n\n"
        + f"[dim]Backend: {get_backend_url(config)}\n"
        + f"Config:  {config_path()}[/dim]",
        title="Claude AFK Status",
    ))

    if not paired:
        console.print(f"[dim]Tip:[/dim] Run [cyan]{APP_NAME} setup[/cyan] to set up notifications")
    elif not installed:
        console.print(f"[dim]Tip:[/dim] Run [cyan]{APP_NAME} hook-config[/cyan] to see the Claude Code hooks")
    elif not config.active:
        console.print(f"[dim]Tip:[/dim] Run [cyan]{APP_NAME} activate[/cyan] to enable notifications")


@main.command()
def activate():
    """Enable notifications."""
    config = get_config()

    if not config.device_token:
        console.print("[red][FAIL][/red] No device paired")
        console.print(f"  Run [cyan]{APP_NAME} setup[/cyan] first")
        sys.exit(1)

    if config.active:
        console.print("[yellow][-][/yellow] Notifications are already active")
        return

    config.active = True
    _save(config)
    console.print("[green][OK][/green] Notifications activated")
    console.print("  You'll receive push notifications when Claude needs input")


@main.command()
def deactivate():
    """Disable notifications without unpairing."""
    config = get_config()

    if not config.active:
        console.print("[yellow][-][/yellow] Notifications are already inactive")
        return

    config.active = False
    _save(config)
    console.print("[green][OK][/green] Notifications deactivated")
    console.print(f"  Run [cyan]{APP_NAME} activate[/cyan] to re-enable")


@main.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def clear(yes: bool):
    """Forget the paired device."""
    config = get_config()

    if not config.device_token:
        console.print("[dim][-] No device pairing to clear[/dim]")
        return

    if not yes and not click.confirm("Clear the paired device?"):
        console.print("Cancelled")
        return

    config.device_token = None
    config.active = False
    _save(config)
    console.print("[green][OK][/green] Device pairing cleared")
    console.print(f"  Run [cyan]{APP_NAME} setup[/cyan] to pair a new device")


@main.command(name="hook-config")
@click.option("--command", "hook_cmd", help="Command Claude Code should run (defaults to the installed claude-afk)")
def hook_config(hook_cmd: Optional[str]):
    """Print the hooks to merge into ~/.claude/settings.json."""
    click.echo(json.dumps(hook_settings(hook_cmd), indent=2))


@main.command(name="clear-logs")
def clear_logs():
    """Delete the debug log."""
    path = log_file_path()
    if _clear_log_file(path):
        console.print(f"[green][OK][/green] Debug log cleared: {path}")
    else:
        console.print("[dim][-] No debug log to clear[/dim]")


if __name__ == "__main__":
    main()
