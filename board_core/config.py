from typing import Dict, Any
from dataclasses import dataclass, asdict

from .exceptions import ConfigurationError


@dataclass
class BoardConfig:
    """
    Configuration for building a board.
    """

    # Board shape
    category_count: int = 6
    questions_per_category: int = 5

    # How many candidate categories to request before sampling
    candidate_pool_size: int = 100

    # Category fetching
    parallel_fetch: bool = False
    max_fetch_workers: int = 4

    @property
    def cell_count(self) -> int:
        """Number of clue cells on a board built with this configuration."""
        return self.category_count * self.questions_per_category

    def validate(self) -> 'BoardConfig':
        """
        Check that the configuration can produce a board.

        Returns:
            Self for chaining

        Raises:
            ConfigurationError: If any value is out of range
        """
        for name in ('category_count', 'questions_per_category', 'candidate_pool_size', 'max_fetch_workers'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {type(value).__name__}")
            if value < 1:
                raise ConfigurationError(f"{name} must be at least 1, got {value}")

        if self.candidate_pool_size < self.category_count:
            raise ConfigurationError(
                f"candidate_pool_size ({self.candidate_pool_size}) must be at least "
                f"category_count ({self.category_count})"
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BoardConfig':
        """Create from dictionary."""
        return cls(**data)

    @classmethod
    def from_settings(cls, settings: Any) -> 'BoardConfig':
        """
        Create from a settings object carrying JEOPARDY_* attributes.

        Missing attributes fall back to the defaults.
        """
        defaults = cls()
        return cls(
            category_count=getattr(settings, 'JEOPARDY_CATEGORY_COUNT', defaults.category_count),
            questions_per_category=getattr(settings, 'JEOPARDY_QUESTIONS_PER_CATEGORY', defaults.questions_per_category),
            candidate_pool_size=getattr(settings, 'JEOPARDY_CANDIDATE_POOL_SIZE', defaults.candidate_pool_size),
            parallel_fetch=getattr(settings, 'JEOPARDY_PARALLEL_FETCH', defaults.parallel_fetch),
            max_fetch_workers=getattr(settings, 'JEOPARDY_MAX_FETCH_WORKERS', defaults.max_fetch_workers),
        )
