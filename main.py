from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.database import init_db
from core.errors import register_exception_handlers
from core.logging_config import setup_logging
from core.settings import get_settings
from modules.costing.router import router as pricing_router
from modules.materials.router import router as materials_router
from modules.products.router import router as products_router
from modules.user_settings.router import router as settings_router


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.log_json)
    app = FastAPI(title=settings.app_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(pricing_router)
    app.include_router(materials_router)
    app.include_router(products_router)
    app.include_router(settings_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


@app.on_event("startup")
def on_startup():
    init_db()
