import logging

from fastapi import APIRouter, Depends, HTTPException

from hrdrift.clients.strava import StravaClient, StravaSession
from hrdrift.deps import get_pipeline, get_strava_client, get_strava_session
from hrdrift.errors import StravaError, StravaNotLinked, ValidationError
from hrdrift.pipeline import DropPipeline
from hrdrift.schemas.activity import DropAccepted
from hrdrift.validator import parse_activity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/strava", tags=["strava"])


@router.get("/auth_url")
def get_auth_url(client: StravaClient = Depends(get_strava_client)):
    if not (client.cfg.strava_client_id and client.cfg.strava_redirect_uri):
        raise HTTPException(status_code=400, detail="Strava client not configured")
    return {"url": client.auth_url()}


@router.get("/callback")
def oauth_callback(
    code: str,
    client: StravaClient = Depends(get_strava_client),
    session: StravaSession = Depends(get_strava_session),
):
    if not (client.cfg.strava_client_id and client.cfg.strava_client_secret):
        raise HTTPException(status_code=400, detail="Strava client not configured")
    try:
        tok = client.exchange_code(code)
    except StravaError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not tok.get("access_token"):
        raise HTTPException(status_code=400, detail="Strava auth failed: no access token")
    session.store(tok)
    logger.info("Strava account linked")
    return {"message": "Strava linked. You can close this window."}


@router.get("/status")
def link_status(session: StravaSession = Depends(get_strava_session)):
    return {"authenticated": session.is_authenticated()}


@router.post("/activities/{activity_id}/drift", response_model=DropAccepted)
def activity_drift(
    activity_id: int,
    client: StravaClient = Depends(get_strava_client),
    session: StravaSession = Depends(get_strava_session),
    pipeline: DropPipeline = Depends(get_pipeline),
):
    """Fetch an activity's streams and hand them to the drift routine."""
    try:
        body = client.get_activity_streams(session, activity_id)
    except StravaNotLinked as e:
        raise HTTPException(status_code=401, detail=str(e))
    except StravaError as e:
        logger.error("Activity %s fetch failed: %s", activity_id, e)
        raise HTTPException(status_code=502, detail=str(e))

    try:
        series = parse_activity(body)
    except ValidationError as e:
        logger.error("Activity %s streams rejected: %s", activity_id, e)
        raise HTTPException(status_code=422, detail=str(e))

    pipeline.validator.dispatch(series)
    return DropAccepted(
        heartrate_samples=len(series.heartrate),
        time_samples=len(series.time),
    )
