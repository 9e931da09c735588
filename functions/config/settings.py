"""RenoQuote configuration settings.

Loads configuration from environment variables with sensible defaults.
"""

import os
from typing import Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load .env file for non-secret configuration (emulator hosts, latencies, etc.)
load_dotenv()


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # Firebase Configuration
    firebase_project_id: Optional[str] = field(default_factory=lambda: os.getenv("FIREBASE_PROJECT_ID"))
    use_firebase_emulators: bool = field(default_factory=lambda: os.getenv("USE_FIREBASE_EMULATORS", "false").lower() == "true")
    firestore_emulator_host: str = field(default_factory=lambda: os.getenv("FIRESTORE_EMULATOR_HOST", "localhost:8081"))

    # Simulated latencies (seconds)
    estimate_latency_seconds: float = field(default_factory=lambda: float(os.getenv("ESTIMATE_LATENCY_SECONDS", "1.5")))
    quote_latency_seconds: float = field(default_factory=lambda: float(os.getenv("QUOTE_LATENCY_SECONDS", "2.0")))

    # Quote simulation
    quote_variance: float = field(default_factory=lambda: float(os.getenv("QUOTE_VARIANCE", "0.05")))
    quote_validity_days: int = field(default_factory=lambda: int(os.getenv("QUOTE_VALIDITY_DAYS", "7")))

    # Activity log
    activity_log_max_entries: int = field(default_factory=lambda: int(os.getenv("ACTIVITY_LOG_MAX_ENTRIES", "1000")))

    # Project store retries
    store_max_retries: int = field(default_factory=lambda: int(os.getenv("STORE_MAX_RETRIES", "3")))
    store_retry_wait_seconds: float = field(default_factory=lambda: float(os.getenv("STORE_RETRY_WAIT_SECONDS", "0.5")))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def validate(self) -> None:
        """Validate settings values.

        Raises:
            ValueError: If a setting is out of range.
        """
        if self.estimate_latency_seconds < 0 or self.quote_latency_seconds < 0:
            raise ValueError("Simulated latencies must be non-negative")
        if not 0 <= self.quote_variance < 1:
            raise ValueError("QUOTE_VARIANCE must be in [0, 1)")
        if self.store_max_retries < 1:
            raise ValueError("STORE_MAX_RETRIES must be at least 1")

    @property
    def is_emulator_mode(self) -> bool:
        """Check if running in emulator mode."""
        return self.use_firebase_emulators


# Singleton settings instance
settings = Settings()
