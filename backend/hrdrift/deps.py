from fastapi import Request

from hrdrift.clients.strava import StravaClient, StravaSession
from hrdrift.pipeline import DropPipeline


# Dependencies we use in FastAPI routes. Everything lives on app.state so
# tests can swap a piece without touching module globals.
def get_pipeline(request: Request) -> DropPipeline:
    return request.app.state.pipeline


def get_strava_session(request: Request) -> StravaSession:
    return request.app.state.strava_session


def get_strava_client(request: Request) -> StravaClient:
    return request.app.state.strava_client
