# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKDESK_APP_NAME": "App display name (default: taskdesk).",
    "TASKDESK_LOG_LEVEL": "Console logging level (default: WARNING; the log file always gets DEBUG).",
    # Paths (gitignored)
    "TASKDESK_DATA_DIR": "Local data directory (default: .local/taskdesk).",
    "TASKDESK_STORE_DB_PATH": "Key-value store SQLite path (default: <data_dir>/store.sqlite3).",
    "TASKDESK_BACKUP_DIR": "Where /export writes backups (default: <data_dir>/backups).",
    # Default admin (username is always Admin_00)
    "TASKDESK_ADMIN_EMAIL": "Email of the bootstrapped admin (default: admin@system.com).",
    "TASKDESK_ADMIN_PASSWORD": "Password of the bootstrapped admin (default: admin123).",
}
