from fastapi import FastAPI
import httpx

from catgallery.api_client import CatApiClient
from catgallery.config import Settings
from catgallery.connectivity import ConnectivityHelper
from catgallery.data_store import CatImageStore
from catgallery.db import init_db, make_engine, make_session_factory
from catgallery.logging import configure_logging, get_logger
from catgallery.repository import CatImageRepository
from catgallery.routers.images import router as images_router
from catgallery.routers.thumbnails import router as thumbnails_router
from catgallery.viewmodel import CatImageViewModel

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    api_client: CatApiClient | None = None,
    connectivity: ConnectivityHelper | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the gallery app. The keyword overrides replace the collaborators
    that would otherwise be built from ``settings`` at startup."""
    settings = settings or Settings()

    app = FastAPI(title="Cat Gallery")
    app.state.settings = settings

    # Routers
    app.include_router(images_router, prefix="/v1")
    app.include_router(thumbnails_router, prefix="/v1")

    # --- Startup / shutdown: one gallery screen per process ---
    @app.on_event("startup")
    async def on_startup():
        configure_logging(settings.log_level)

        engine = make_engine(settings.resolved_database_url())
        init_db(engine)
        store = CatImageStore(make_session_factory(engine))

        owns_http = http_client is None
        http = http_client or httpx.AsyncClient(follow_redirects=True, timeout=settings.http_timeout)
        api = api_client or CatApiClient(http, settings.api_base_url, size=settings.image_size)
        oracle = connectivity or ConnectivityHelper.for_base_url(
            settings.api_base_url,
            timeout=settings.connectivity_timeout,
            force_offline=settings.offline,
        )

        app.state.engine = engine
        app.state.store = store
        app.state.http = http
        app.state.owns_http = owns_http
        app.state.viewmodel = CatImageViewModel(CatImageRepository(api, store, oracle))
        logger.info("gallery_started", api_base_url=settings.api_base_url)

    @app.on_event("shutdown")
    async def on_shutdown():
        app.state.viewmodel.close()
        if app.state.owns_http:
            await app.state.http.aclose()
        app.state.engine.dispose()
        logger.info("gallery_stopped")

    # --- Health ---
    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
