import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.api.error import register_exception_handlers
from src.api.routes import entitlements, pricing, subscriptions, tiers

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if config.ENABLE_SENTRY:
        import sentry_sdk

        sentry_sdk.init(
            dsn=config.DSN_SENTRY,
            environment=config.SENTRY_ENVIRONMENT,
            traces_sample_rate=0.1,
        )
        logger.info(f"Sentry enabled for environment {config.SENTRY_ENVIRONMENT}")

    app = FastAPI(
        title="Pet-Care Subscription Service",
        description="Subscription lifecycle, pricing and entitlement accounting",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(tiers.router, prefix=config.API_PREFIX)
    app.include_router(pricing.router, prefix=config.API_PREFIX)
    app.include_router(subscriptions.router, prefix=config.API_PREFIX)
    app.include_router(subscriptions.me_router, prefix=config.API_PREFIX)
    app.include_router(entitlements.router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
