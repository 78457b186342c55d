from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import get_settings

# API routers
from .api.models import router as models_router
from .api.pages import router as pages_router
from .core.logging import setup_logging


def create_app() -> FastAPI:
    settings = get_settings()
    # Setup logging early
    setup_logging(settings.log_level.upper())
    app = FastAPI(title="SiteGen Model Server", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(o).rstrip("/") for o in settings.allowed_origins],
        # Robust local dev: allow both localhost and 127.0.0.1 on port 3000 via regex
        allow_origin_regex=r"https?://(localhost|127\.0\.0\.1):3000",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(models_router, prefix="/api")
    app.include_router(pages_router)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    return app


app = create_app()
