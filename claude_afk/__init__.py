"""
Claude AFK - Push notifications and remote approvals for Claude Code.

Pairs a phone with this machine, forwards idle notifications, and turns
permission requests into a blocking approve/deny round trip:
  claude-afk setup        - pair a device by QR code
  claude-afk notify       - hook entry point (JSON on argv or stdin)
  claude-afk hook-config  - print the settings.json hooks to install
"""

__version__ = "0.3.0"

__all__ = [
    "__version__",
]
