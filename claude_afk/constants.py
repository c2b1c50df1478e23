"""Fixed names, endpoints and timing budgets."""

APP_NAME = "claude-afk"
DEFAULT_API_URL = "https://claude-afk.treeleaf.dev"

# Pairing: the phone has 5 minutes to scan and confirm
POLL_INTERVAL = 2.0
SETUP_TIMEOUT = 300.0

# Decisions: the hook blocks Claude Code for at most 2 minutes
DECISION_POLL_INTERVAL = 2.0
DECISION_TIMEOUT = 120.0

HTTP_TIMEOUT = 10.0

IDLE_NOTIFICATION_TITLE = "Claude is waiting"
IDLE_NOTIFICATION_TYPE = "idle_prompt"

ENV_API_URL = "CLAUDE_AFK_API_URL"
ENV_CONFIG_DIR = "CLAUDE_AFK_CONFIG_DIR"
ENV_DEBUG = "CLAUDE_AFK_DEBUG"
