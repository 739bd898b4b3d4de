"""Configuration Management."""

from functools import lru_cache
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

MIB = 1024 * 1024


class Settings(BaseSettings):
    """Runtime settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="EDITOR_CONFIG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Worker threads
    worker_stack_size: int = Field(default=8 * MIB, gt=0, description="Worker thread stack size (bytes)")
    join_timeout: float | None = Field(
        default=None, gt=0, description="Seconds to wait for a worker before giving up"
    )
    thread_name_prefix: str = Field(default="editor-config", min_length=1, description="Worker thread name prefix")

    # Interpreter
    script_max_stack_size: int = Field(
        default=6 * MIB, gt=0, description="QuickJS stack limit (bytes)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    @model_validator(mode="after")
    def check_stack_sizes(self) -> "Settings":
        """The interpreter must hit its own limit before the thread stack runs out."""
        if self.script_max_stack_size >= self.worker_stack_size:
            raise ValueError(
                f"script_max_stack_size ({self.script_max_stack_size}) must be below "
                f"worker_stack_size ({self.worker_stack_size})"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
