"""Configuration management for show schedule generation.

All configuration is read from environment variables (NO .env files).
"""
import os
from dataclasses import dataclass, field

from src.supabase_store.models import StoreConfig

MAX_CATALOG_LIMIT = 1000
MAX_MODEL_TIMEOUT_SECONDS = 300


@dataclass(frozen=True)
class PromptDefaults:
    """Placeholders substituted for hints the user left out."""

    duration_default: str = "Not specified"
    genre_default: str = "Any"
    energy_default: str = "Mixed"

    @classmethod
    def from_environment(cls) -> 'PromptDefaults':
        return cls(
            duration_default=os.getenv('SCHEDULER_DURATION_DEFAULT', cls.duration_default),
            genre_default=os.getenv('SCHEDULER_GENRE_DEFAULT', cls.genre_default),
            energy_default=os.getenv('SCHEDULER_ENERGY_DEFAULT', cls.energy_default),
        )


@dataclass
class SchedulerConfig:
    """Configuration for schedule generation (reads from environment)."""

    # Required: hosted store
    supabase_url: str
    supabase_anon_key: str

    # Required: OpenAI
    openai_api_key: str

    # Optional
    openai_model: str = "gpt-4"
    model_timeout_seconds: float = 30.0
    catalog_limit: int = MAX_CATALOG_LIMIT
    workspace_ttl_seconds: float = 3600.0
    workspace_max_sessions: int = 100
    prompt_defaults: PromptDefaults = field(default_factory=PromptDefaults)

    @classmethod
    def from_environment(cls) -> 'SchedulerConfig':
        """Load configuration from environment variables (NO .env files).

        Returns:
            SchedulerConfig: Loaded and validated configuration

        Raises:
            EnvironmentError: If required environment variables are missing
            ValueError: If optional values are out of range
        """
        required = {
            'SUPABASE_URL': os.getenv('SUPABASE_URL') or os.getenv('NEXT_PUBLIC_SUPABASE_URL'),
            'SUPABASE_ANON_KEY': (
                os.getenv('SUPABASE_ANON_KEY') or os.getenv('NEXT_PUBLIC_SUPABASE_ANON_KEY')
            ),
            'OPENAI_API_KEY': os.getenv('OPENAI_API_KEY') or os.getenv('OPENAI_KEY'),
        }

        missing = [var for var, value in required.items() if not value]
        if missing:
            raise EnvironmentError(
                f"Required environment variables missing: {', '.join(missing)}\n"
                f"These variables must be set in your shell environment (NOT in .env files).\n"
                f"Example: export SUPABASE_URL='https://your-project.supabase.co'"
            )

        config = cls(
            supabase_url=required['SUPABASE_URL'],
            supabase_anon_key=required['SUPABASE_ANON_KEY'],
            openai_api_key=required['OPENAI_API_KEY'],
            openai_model=os.getenv('OPENAI_MODEL', 'gpt-4'),
            model_timeout_seconds=float(os.getenv('SCHEDULER_MODEL_TIMEOUT_SECONDS', '30')),
            catalog_limit=int(os.getenv('SCHEDULER_CATALOG_LIMIT', str(MAX_CATALOG_LIMIT))),
            workspace_ttl_seconds=float(os.getenv('SCHEDULER_WORKSPACE_TTL_SECONDS', '3600')),
            workspace_max_sessions=int(os.getenv('SCHEDULER_WORKSPACE_MAX_SESSIONS', '100')),
            prompt_defaults=PromptDefaults.from_environment(),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate optional numeric settings.

        Raises:
            ValueError: If a value is out of range
        """
        if not 0 < self.model_timeout_seconds <= MAX_MODEL_TIMEOUT_SECONDS:
            raise ValueError(
                f"Invalid model_timeout_seconds: {self.model_timeout_seconds}. "
                f"Must be > 0 and <= {MAX_MODEL_TIMEOUT_SECONDS}"
            )
        if not 0 < self.catalog_limit <= MAX_CATALOG_LIMIT:
            raise ValueError(
                f"Invalid catalog_limit: {self.catalog_limit}. Must be 1-{MAX_CATALOG_LIMIT}"
            )
        if self.workspace_ttl_seconds <= 0:
            raise ValueError(
                f"Invalid workspace_ttl_seconds: {self.workspace_ttl_seconds}. Must be > 0"
            )
        if self.workspace_max_sessions <= 0:
            raise ValueError(
                f"Invalid workspace_max_sessions: {self.workspace_max_sessions}. Must be > 0"
            )

    def to_store_config(self) -> StoreConfig:
        """Convert to StoreConfig for the store client."""
        return StoreConfig(url=self.supabase_url, anon_key=self.supabase_anon_key)

    def __repr__(self) -> str:
        """Return string representation with sensitive data masked."""
        return (
            f"SchedulerConfig("
            f"supabase_url='{self.supabase_url}', "
            f"supabase_anon_key='***', "
            f"openai_api_key='***', "
            f"openai_model='{self.openai_model}', "
            f"model_timeout_seconds={self.model_timeout_seconds}, "
            f"catalog_limit={self.catalog_limit}, "
            f"workspace_ttl_seconds={self.workspace_ttl_seconds}, "
            f"workspace_max_sessions={self.workspace_max_sessions}"
            f")"
        )
