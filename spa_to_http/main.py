from contextlib import asynccontextmanager
from fastapi import FastAPI
from starlette.middleware.gzip import GZipMiddleware
from spa_to_http.api.static import SPAStaticFiles
from spa_to_http.config import Settings, settings as default_settings
from spa_to_http.middleware.logging import LogRequestMiddleware, LogRequestOptions
from typing import Optional
import structlog
import uvicorn

logger = structlog.get_logger()


def configure_logging(pretty: bool = False):
    renderer = structlog.dev.ConsoleRenderer(colors=False) if pretty else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer
        ]
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "server_started",
            directory=settings.directory,
            base_path=settings.mount_path,
            spa_mode=settings.spa_mode,
            gzip=settings.gzip,
            request_logging=settings.logger
        )
        yield

    app = FastAPI(title="SPA to HTTP", docs_url=None, redoc_url=None, openapi_url=None, lifespan=lifespan)

    app.mount(
        settings.mount_path,
        SPAStaticFiles(
            directory=settings.directory,
            spa_mode=settings.spa_mode,
            cache_max_age=settings.cache_max_age,
            no_cache_paths=settings.no_cache_paths
        ),
        name="spa"
    )

    if settings.gzip:
        app.add_middleware(GZipMiddleware, minimum_size=settings.threshold)

    # added last so it wraps everything, including compression
    if settings.logger:
        app.add_middleware(
            LogRequestMiddleware,
            options=LogRequestOptions(
                pretty=settings.log_pretty,
                trust_forwarded_headers=settings.trust_forwarded_headers
            )
        )

    return app


def run():
    configure_logging(default_settings.log_pretty)
    uvicorn.run(
        create_app(default_settings),
        host=default_settings.address,
        port=default_settings.port,
        access_log=False,
        proxy_headers=False
    )


if __name__ == "__main__":
    run()
