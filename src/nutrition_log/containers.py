"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_log.adapters.fdc_client import HttpxFdcClient
from nutrition_log.adapters.memory_catalog_store import InMemoryCatalogStore
from nutrition_log.adapters.supabase_catalog_store import SupabaseCatalogStore
from nutrition_log.config import Settings
from nutrition_log.services.cache import InMemoryCache
from nutrition_log.services.catalog import CatalogIndexer, CatalogStore
from nutrition_log.services.curator import FavoritesCurator
from nutrition_log.services.importer import CatalogImportService
from nutrition_log.services.nutrition import NutritionService
from nutrition_log.services.search import QueryPlanner


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_store: CatalogStore
    indexer: CatalogIndexer
    query_planner: QueryPlanner
    curator: FavoritesCurator
    import_service: CatalogImportService | None
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    catalog_store: CatalogStore
    if resolved_settings.uses_supabase:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        catalog_store = SupabaseCatalogStore(
            supabase_client, table=resolved_settings.catalog_table
        )
    else:
        catalog_store = InMemoryCatalogStore()

    indexer = CatalogIndexer(catalog_store)
    query_planner = QueryPlanner(indexer)
    curator = FavoritesCurator(store=catalog_store, indexer=indexer)

    fdc_client: HttpxFdcClient | None = None
    import_service: CatalogImportService | None = None
    if resolved_settings.fdc_api_key:
        fdc_client = HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
        )
        import_service = CatalogImportService(
            nutrition_service=NutritionService(
                fdc_client=fdc_client, cache=InMemoryCache()
            ),
            store=catalog_store,
            indexer=indexer,
        )

    async def close_resources() -> None:
        if fdc_client is not None:
            await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog_store=catalog_store,
        indexer=indexer,
        query_planner=query_planner,
        curator=curator,
        import_service=import_service,
        close_resources=close_resources,
    )
