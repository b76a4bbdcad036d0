import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from hrdrift.api.dropzone import router as dropzone_router
from hrdrift.api.strava import router as strava_router
from hrdrift.clients.strava import StravaClient, StravaSession
from hrdrift.core.config import Settings, settings
from hrdrift.dropzone import DropZoneController
from hrdrift.pipeline import DropPipeline
from hrdrift.validator import ActivityDataValidator


def configure_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(cfg: Settings = settings, entry_point=None) -> FastAPI:
    configure_logging(cfg.log_level)

    app = FastAPI()

    # Allow CORS for local frontend
    origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # One drop target and one linked athlete per process
    app.state.pipeline = DropPipeline(
        controller=DropZoneController(cfg=cfg),
        validator=ActivityDataValidator(entry_point, cfg=cfg),
    )
    app.state.strava_session = StravaSession()
    app.state.strava_client = StravaClient(cfg)

    app.include_router(dropzone_router)
    app.include_router(strava_router)

    @app.get("/")
    def root():
        return {"message": "Heart rate drift backend is running"}

    return app


app = create_app()
