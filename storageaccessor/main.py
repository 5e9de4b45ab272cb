"""Storage accessor admission webhook."""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from storageaccessor.api.middleware.logging import LoggingMiddleware
from storageaccessor.api.v1.router import build_api_router
from storageaccessor.core.config import Settings, get_settings
from storageaccessor.core.logging import get_logger, setup_logging
from storageaccessor.core.tls import (CertificateSource, FileCertificateSource,
                                      build_server_ssl_context)
from storageaccessor.repositories import (AccessorRepository, ClusterClient,
                                          ScopeRepository, get_cluster_client)
from storageaccessor.services import (AuthorizationValidator,
                                      ClaimAdmissionHandler)

logger = get_logger(__name__)


def build_admission_handler(
    settings: Settings, cluster_client: ClusterClient
) -> ClaimAdmissionHandler:
    """Wire resolvers, validator and handler over one cluster client."""
    validator = AuthorizationValidator(
        ScopeRepository(cluster_client),
        workspace_label_key=settings.workspace_label_key,
    )
    return ClaimAdmissionHandler(
        AccessorRepository(cluster_client),
        validator,
        storage_class_annotation=settings.storage_class_annotation,
    )


def create_app(
    settings: Optional[Settings] = None,
    cluster_client: Optional[ClusterClient] = None,
    certificate_source: Optional[CertificateSource] = None,
) -> FastAPI:
    """Build the webhook application from explicit configuration."""
    settings = settings or get_settings()
    if cluster_client is None:
        cluster_client = get_cluster_client()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Starting {settings.app_name} v{settings.app_version}",
            extra={
                "environment": settings.environment.value,
                "webhook_path": settings.webhook_path,
            },
        )
        yield
        logger.info("Shutting down")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Validating webhook gating PersistentVolumeClaim creation",
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.admission_handler = build_admission_handler(settings, cluster_client)
    app.state.certificate_source = certificate_source

    app.add_middleware(
        LoggingMiddleware,
        quiet_paths=(
            settings.health_check_path,
            settings.readiness_check_path,
            settings.metrics_path,
        ),
    )

    app.include_router(build_api_router(settings))

    if settings.metrics_enabled:
        app.mount(settings.metrics_path, make_asgi_app())

    return app


def run() -> None:
    """Serve the webhook over TLS with a hot-reloadable certificate."""
    settings = get_settings()
    setup_logging(settings)

    source = FileCertificateSource(settings.tls_cert_file, settings.tls_key_file)
    # Fail fast on a missing pair rather than on the first handshake
    source.current_context()

    app = create_app(settings, certificate_source=source)

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.value.lower(),
        log_config=None,
    )
    config.load()
    config.ssl = build_server_ssl_context(source)

    uvicorn.Server(config).run()


if __name__ == "__main__":
    run()
