"""Process-wide container for the dashboard engines."""

import logging
from dataclasses import dataclass

from .config import DashboardConfig
from .dependencies.graph import DependencyGraphBuilder
from .dependencies.parser import DependencyParser
from .dependencies.validator import DependencyValidator
from .notifications import EventBroadcaster
from .storage.cache import ResultCache
from .time_tracking.session_manager import TimeSessionManager

logger = logging.getLogger(__name__)


@dataclass
class DashboardServices:
    """Engines shared by every request in one process.

    Created once at startup and handed to the HTTP app or CLI command that
    needs it.
    """

    config: DashboardConfig
    parser: DependencyParser
    graph_builder: DependencyGraphBuilder
    validator: DependencyValidator
    sessions: TimeSessionManager
    events: EventBroadcaster
    parse_cache: ResultCache
    graph_cache: ResultCache

    @classmethod
    def init(
        cls,
        config: DashboardConfig | None = None,
        sessions: TimeSessionManager | None = None,
    ) -> "DashboardServices":
        """Build the engines from configuration."""
        config = config or DashboardConfig()
        logger.debug(
            f"Initializing services (parse TTL {config.parse_cache_ttl}s, "
            f"graph TTL {config.graph_cache_ttl}s)"
        )
        return cls(
            config=config,
            parser=DependencyParser(),
            graph_builder=DependencyGraphBuilder(
                match_by_number_only=config.level_by_number
            ),
            validator=DependencyValidator(),
            sessions=sessions or TimeSessionManager(),
            events=EventBroadcaster(),
            parse_cache=ResultCache(config.parse_cache_ttl),
            graph_cache=ResultCache(config.graph_cache_ttl),
        )
