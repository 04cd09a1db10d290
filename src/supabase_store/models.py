"""Data models for the hosted Postgres REST store."""

from dataclasses import dataclass

@dataclass
class StoreConfig:
    """Connection settings for the hosted store.

    Attributes:
        url: Project URL (e.g., "https://abc.supabase.co")
        anon_key: Public anon key (a JWT)
        schema: Postgres schema exposed through the REST interface
        timeout_seconds: Per-request timeout
    """

    url: str
    anon_key: str
    schema: str = "public"
    timeout_seconds: float = 30.0

    def __post_init__(self):
        """Validate configuration on initialization."""
        if not self.url or not self.url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid store URL format: {self.url}")
        if not self.anon_key:
            raise ValueError("anon_key is required")
        if not self.anon_key.startswith("eyJ"):
            raise ValueError('Invalid anon key format - should be a JWT token starting with "eyJ"')
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

    def __repr__(self) -> str:
        return f"StoreConfig(url='{self.url}', anon_key='***', schema='{self.schema}')"
