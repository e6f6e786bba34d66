"""Application settings loaded from the environment / .env via pydantic-settings."""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration — values come from ARTIST_SHUFFLE_* variables or .env."""

    # Shuffle
    max_lookahead: int = 10
    rating_step: int = 200
    seed: Optional[int] = None

    # Discovery
    include_hidden: bool = False
    follow_symlinks: bool = False
    extensions: List[str] = []  # e.g. [".mp3", ".flac"]; empty accepts everything

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "ARTIST_SHUFFLE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def accepts(self, filename: str) -> bool:
        """True if *filename* passes the extension filter."""
        if not self.extensions:
            return True
        lowered = filename.lower()
        return any(lowered.endswith(ext.lower()) for ext in self.extensions)


@lru_cache
def get_settings() -> Settings:
    """Cached singleton so .env is read only once."""
    return Settings()
