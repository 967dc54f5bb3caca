# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Nothing here is imported at runtime; it only lists the knobs the app understands.
"""

ENV_VARS = {
    # App / logging
    "TASKIQUE_APP_NAME": "App display name (default: taskique).",
    "TASKIQUE_LOG_LEVEL": "Console logging level (default: INFO).",
    # Connectors
    "TASKIQUE_CONSOLE_ENABLED": "Run the interactive console (true/false). False = refresh once and exit.",
    # Remote task service
    "TASKIQUE_API_BASE_URL": (
        "Task service base URL (default: https://techpix-hackathon-task-management.onrender.com)."
    ),
    "TASKIQUE_REQUEST_TIMEOUT_SECONDS": "Per-request timeout; empty or <= 0 waits forever (default).",
    # Paths (gitignored)
    "TASKIQUE_DATA_DIR": "Local data directory (default: .local/taskique).",
    "TASKIQUE_STORAGE_PATH": "Key-value storage file for tags and theme (default: <data_dir>/storage.json).",
    "TASKIQUE_LOG_DIR": "Directory for taskique.log (default: <data_dir>).",
}
