"""Base services container for dependency injection."""

from config import Config
from services.gatherer import GatherService
from services.paths import PathService
from services.recurrence import RecurrenceService
from services.scenarios import ScenarioService


class Services:
    """Container for all projection services.

    This class provides a centralized way to access all services and makes
    it easy to inject mock services for testing.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        """Initialize services with configuration.

        Args:
            config: Config object containing application configuration.
        """
        self.config = config
        self.recurrence = RecurrenceService(
            cache_enabled=config.recurrence_cache_enabled
        )
        self.gatherer = GatherService(self.recurrence)
        self.paths = PathService(self.gatherer)
        self.scenarios = ScenarioService(self.gatherer, self.paths)
