"""FitFX service container."""

from pathlib import Path

from fitfx_app.config import FitFXConfig
from fitfx_app.logging_config import configure_logging, get_logger
from models.outfit_catalog import DEFAULT_CATALOG, OutfitCatalog
from tools.calendar_overrides import CalendarOverrideStore, CalendarPlanner
from tools.document_store import DocumentStore, InMemoryDocumentStore, SQLiteDocumentStore
from tools.local_cache import JSONFileCache
from tools.outfit_generator import OutfitGenerator
from tools.subscription_tools import SubscriptionService
from tools.wardrobe_tools import WardrobeService


LOGGER = get_logger(__name__)


class FitFXApp:
    """Wires stores and services together from a config."""

    def __init__(
        self,
        config: FitFXConfig | None = None,
        document_store: DocumentStore | None = None,
        catalog: OutfitCatalog | None = None,
    ) -> None:
        self.config = config or FitFXConfig.from_env()
        configure_logging()

        self.document_store = document_store or self._build_document_store()
        self.cache = JSONFileCache(self.config.cache_path or "data/local_cache.json")
        self.subscriptions = SubscriptionService(self.document_store)
        self.wardrobe = WardrobeService(self.document_store, self.subscriptions)
        self.calendar = CalendarPlanner(CalendarOverrideStore(self.cache), catalog or DEFAULT_CATALOG)
        self.outfit_generator = OutfitGenerator(self.config)
        LOGGER.info(
            "FitFX services ready",
            extra={
                "environment": self.config.environment or "local",
                "document_store_backend": self.config.document_store_backend,
            },
        )

    def _build_document_store(self) -> DocumentStore:
        if self.config.document_store_backend == "memory":
            return InMemoryDocumentStore()
        return SQLiteDocumentStore(Path(self.config.document_store_path or "data/fitfx.db"))


__all__ = ["FitFXApp"]
