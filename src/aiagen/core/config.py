"""Configuration Management."""

import tempfile
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="AIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Server
    api_host: str = Field(default="127.0.0.1", description="HTTP bind address")
    api_port: int = Field(default=4000, gt=0, lt=65536, description="HTTP port")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Workspace
    workspace_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "aiagen",
        description="Parent directory for per-request scratch workspaces",
    )

    # Project format
    extension_namespace: str = Field(
        default="com.appybuilder", min_length=1, description="Package prefix for extension ids"
    )
    default_search_prompt: str = Field(
        default="Enter search term", min_length=1, description="Hint used when no search prompt is given"
    )

    # Upload limits
    max_extension_files: int = Field(default=10, gt=0, description="Max extension uploads")
    max_design_images: int = Field(default=5, gt=0, description="Max design image uploads")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
