"""Configuration management for the mirror-explorer engine."""

from __future__ import annotations

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

# Load environment variables
load_dotenv()

SCROLL_DEDUP_STRATEGIES = ["exact", "levenshtein", "proximity"]
COMPONENT_DETECTION_MODES = ["heuristic", "llm_first_screen", "llm_every_screen", "llm_fallback"]
LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class Config(BaseSettings):
    """Configuration class for the exploration engine."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore unexpected env vars rather than raising errors
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_dir: str = Field(default="logs")
    log_to_file: bool = Field(default=False, description="Write rotating log files under log_dir")

    # Scroll deduplication
    scroll_dedup_strategy: str = Field(default="exact", description="exact, levenshtein or proximity")
    scroll_dedup_levenshtein_max: int = Field(default=3, description="Max edit distance for fuzzy text dedup")
    scroll_dedup_proximity_pt: float = Field(default=15.0, description="Max point distance for proximity dedup")

    # Screen identity
    fingerprint_similarity_threshold: float = Field(
        default=0.8, description="Jaccard index at or above which two screens are the same"
    )

    # Component detection
    component_detection: str = Field(default="heuristic")

    # Exploration budget
    exploration_max_depth: int = Field(default=6)
    exploration_max_screens: int = Field(default=30)
    exploration_max_time_seconds: int = Field(default=300)
    exploration_max_actions_per_screen: int = Field(default=5)
    exploration_scroll_limit: int = Field(default=3)
    exploration_max_scouts_per_screen: int = Field(default=8)
    skip_elements: list[str] = Field(default_factory=list, description="Extra skip patterns")

    def validate_config(self) -> bool:
        """Validate configuration values.

        Raises:
            ConfigurationError: If any value is outside its allowed range or vocabulary.
        """
        if self.scroll_dedup_strategy not in SCROLL_DEDUP_STRATEGIES:
            raise ConfigurationError(
                "scroll_dedup_strategy", self.scroll_dedup_strategy, SCROLL_DEDUP_STRATEGIES
            )

        if self.component_detection not in COMPONENT_DETECTION_MODES:
            raise ConfigurationError(
                "component_detection", self.component_detection, COMPONENT_DETECTION_MODES
            )

        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError("log_level", self.log_level, LOG_LEVELS)

        if not 0.0 <= self.fingerprint_similarity_threshold <= 1.0:
            raise ConfigurationError(
                "fingerprint_similarity_threshold", self.fingerprint_similarity_threshold
            )

        if self.scroll_dedup_levenshtein_max < 0:
            raise ConfigurationError("scroll_dedup_levenshtein_max", self.scroll_dedup_levenshtein_max)

        if self.scroll_dedup_proximity_pt < 0:
            raise ConfigurationError("scroll_dedup_proximity_pt", self.scroll_dedup_proximity_pt)

        if self.exploration_max_depth <= 0:
            raise ConfigurationError("exploration_max_depth", self.exploration_max_depth)

        return True


# Global configuration instance
config = Config()
