"""
Runtime configuration for the LEGIT chat application.

Settings come from environment variables, optionally loaded from a '.env' file
in the working directory. Secrets (API keys) are looked up in '/secrets/<NAME>'
first and in the environment second.

Environment variables:
    BACKEND             gemini (default), openai or ollama
    MODEL               model override for the selected backend
    GEMINI_API_KEY      required for the gemini backend
    OPENAI_API_KEY      required for the openai backend
    LEGIT_STORAGE_PATH  JSON file holding local chat history (default ~/.legit/storage.json)
    LEGIT_USER          user id to sign in with (defaults to the OS login name)
"""

import getpass
import os
from pathlib import Path

from dotenv import load_dotenv

from legit_toolkit.conversation_database.local_store import DEFAULT_STORAGE_KEY

load_dotenv()

SEED = 42
DEFAULT_BACKEND = "gemini"
DEFAULT_MODELS = {
    "gemini": "gemini-1.5-flash-latest",
    "openai": "gpt-4o-mini",
    "ollama": "mistral-nemo:12b",
}
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
OLLAMA_BASE_URL = "http://localhost:11434/v1"

STORAGE_KEY = DEFAULT_STORAGE_KEY
DEFAULT_STORAGE_PATH = Path.home() / ".legit" / "storage.json"


def get_secret(name: str) -> str:
    """Load a secret from a mounted secret file or an environment variable.

    Checks in order:
    1. /secrets/<name>
    2. <name> environment variable

    Raises ValueError if neither is available.
    """
    secret_file = Path(f"/secrets/{name}")
    if secret_file.exists():
        return secret_file.read_text().strip()
    key = os.environ.get(name, "")
    if not key:
        raise ValueError(
            f"{name} not found. Either:\n"
            f"  - Mount it as a secret file at /secrets/{name}, or\n"
            f"  - Set the {name} environment variable (a .env file works too)."
        )
    return key


def get_backend() -> str:
    return os.getenv("BACKEND") or DEFAULT_BACKEND


def get_model_name() -> str | None:
    return os.getenv("MODEL") or None


def get_storage_path() -> Path:
    configured = os.getenv("LEGIT_STORAGE_PATH")
    return Path(configured).expanduser() if configured else DEFAULT_STORAGE_PATH


def get_user_id() -> str:
    return os.getenv("LEGIT_USER") or getpass.getuser()
