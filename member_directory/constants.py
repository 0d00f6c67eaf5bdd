import os

DEFAULT_DB_DIR = os.path.join(os.path.expanduser("~"), ".member-directory")
DEFAULT_DB_NAME = "directory.db"

# Environment variable overriding the database path for the CLI
DB_ENV_VAR = "MEMBER_DIRECTORY_DB"

# Shown for events that carry no vibe of their own
DEFAULT_VIBE = "🎯"

HOSTING = "hosting"
ATTENDING = "attending"
