"""Runtime settings read from the environment and an optional .env file."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DB_PATH = str(Path.home() / ".aceprep" / "aceprep.db")
DEFAULT_MODEL = "gemini-3-pro-preview"


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    model: str = DEFAULT_MODEL
    db_path: str = DEFAULT_DB_PATH
    log_level: str = "WARNING"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build settings from the process environment.

    Values already present in the environment win over the .env file.
    """
    load_dotenv(env_file, override=False)
    return Settings(
        api_key=os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY"),
        model=os.environ.get("ACEPREP_MODEL") or DEFAULT_MODEL,
        db_path=os.environ.get("ACEPREP_DB_PATH") or DEFAULT_DB_PATH,
        log_level=(os.environ.get("ACEPREP_LOG_LEVEL") or "WARNING").upper(),
    )
