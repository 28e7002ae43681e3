from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, settings as default_settings
from app.core.logging import configure_logging
from app.core.errors import register_exception_handlers
from app.api.middleware import REQUEST_ID_HEADER, RequestLoggingMiddleware
from app.api.routes import conversations, users


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Sin auth propia: cualquier origen puede llamar
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        expose_headers=["X-Users-Complete", REQUEST_ID_HEADER],
        max_age=3600,
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(conversations.router, tags=["conversations"])
    app.include_router(users.router, tags=["users"])

    @app.get("/healthz")
    async def healthz() -> dict:
        return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=int(default_settings.PORT), reload=True)
