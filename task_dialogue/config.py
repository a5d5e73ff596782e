from typing import Dict, List, Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.registry import AFFIRMATIVE_PHRASES

class Settings(BaseSettings):
    # Security: Read from .env, never hardcode defaults here
    OPENAI_API_KEY: str
    OPENAI_BASE_URL: Optional[str] = None

    # Extra headers sent with every oracle request (gateway routing, tracing ids)
    OPENAI_EXTRA_HEADERS: Dict[str, str] = {}

    OPENAI_MODEL: str = "gpt-4o"

    # Generation Parameters
    LLM_TEMPERATURE: float = 0.0
    # Oracle failures are surfaced once, never retried
    MAX_RETRIES: int = 0

    # Timeouts (seconds); expiry becomes "no intent" for the oracle and ERROR for actions
    ORACLE_TIMEOUT_SECONDS: float = 30.0
    ACTION_TIMEOUT_SECONDS: float = 30.0

    # State Store Configuration
    STATE_BACKEND: Literal["memory", "postgres"] = "memory"
    DATABASE_URL: Optional[str] = None

    # Dialogue behaviour
    MAX_HISTORY_MESSAGES: int = 20
    AFFIRMATIVE_PHRASES: List[str] = list(AFFIRMATIVE_PHRASES)
    # A resumed parent task is confirmed again before it runs
    RECONFIRM_RESUMED_TASK: bool = True

    LOG_LEVEL: str = "INFO"

    # Loads from a .env file in the root directory
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

# Singleton instance
settings = Settings()
