# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/tasksync/config.py for parsing and defaults.
"""

ENV_VARS = {
    # App / logging
    "TASKSYNC_APP_NAME": "App display name (default: tasksync).",
    "TASKSYNC_LOG_LEVEL": "Console logging level (default: INFO).",
    # Local data (gitignored)
    "TASKSYNC_DATA_DIR": "Local data directory (default: .local/tasksync).",
    "TASKSYNC_DB_PATH": "Client key-value SQLite path (default: <data_dir>/tasksync.sqlite3).",
    # Sync client
    "TASKSYNC_SERVER_URL": "Base URL of the sync server (default: http://127.0.0.1:5000).",
    "TASKSYNC_SYNC_ENABLED": "Run the background sync loop (true/false, default: true).",
    "TASKSYNC_SYNC_INTERVAL_SECONDS": "Seconds between sync passes (default: 60, minimum: 1).",
    # Front end
    "TASKSYNC_CONSOLE_ENABLED": "Enable the console front end (true/false, default: true).",
    # Reconciliation server
    "TASKSYNC_SERVER_HOST": "Bind host for tasksync-server (default: 127.0.0.1).",
    "TASKSYNC_SERVER_PORT": "Bind port for tasksync-server (default: 5000).",
    "TASKSYNC_SERVER_DB_PATH": (
        "Optional SQLite path for the server's task map (default: in-memory, lost on restart)."
    ),
}
