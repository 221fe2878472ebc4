from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from alphaomega.api.routes import router
from alphaomega.config import settings as default_settings
from alphaomega.monitor import Monitor
from alphaomega.services import Forecaster
from alphaomega.vision.capture import build_source


def create_app(settings=None, source_factory=None, forecaster: Forecaster | None = None) -> FastAPI:
    settings = settings or default_settings
    fc = forecaster or Forecaster()
    monitor = Monitor(
        dispatch=fc.add_outcome,
        source_factory=source_factory or (lambda: build_source(settings)),
        sensitivity=settings.sensitivity,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=getattr(logging, settings.log_level.upper(), logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        yield
        monitor.stop()

    app = FastAPI(title="Alpha/Omega Forecaster", lifespan=lifespan)
    app.state.settings = settings
    app.state.forecaster = fc
    app.state.monitor = monitor
    app.include_router(router)

    @app.get("/")
    def home():
        return {"ok": True, "app": "Alpha/Omega Forecaster"}

    return app


app = create_app()
