from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from hrdrift.deps import get_pipeline
from hrdrift.core.constants import INVALID_DROP_ALERT
from hrdrift.dropzone import DragEvent, UploadedFile
from hrdrift.errors import DropInProgress, InvalidDropError, ValidationError
from hrdrift.pipeline import DropPipeline
from hrdrift.schemas.activity import DropAccepted, DropZoneState

router = APIRouter(prefix="/dropzone", tags=["dropzone"])


def _state(pipeline: DropPipeline) -> DropZoneState:
    last = pipeline.last_outcome
    return DropZoneState(
        visual_state=pipeline.controller.visual_state.value,
        state=pipeline.state.value,
        last_outcome=last.value if last is not None else None,
    )


@router.get("", response_model=DropZoneState)
def get_dropzone(pipeline: DropPipeline = Depends(get_pipeline)):
    return _state(pipeline)


@router.post("/dragover", response_model=DropZoneState)
def drag_over(pipeline: DropPipeline = Depends(get_pipeline)):
    pipeline.controller.on_drag_over(DragEvent())
    return _state(pipeline)


@router.post("/dragleave", response_model=DropZoneState)
def drag_leave(pipeline: DropPipeline = Depends(get_pipeline)):
    pipeline.controller.on_drag_leave(DragEvent())
    return _state(pipeline)


@router.post("/drop", response_model=DropAccepted, status_code=202)
async def drop(
    files: Optional[list[UploadFile]] = File(None),
    pipeline: DropPipeline = Depends(get_pipeline),
):
    """Handle a drop on the target.

    Only the first file is read. The response reports how many samples were
    handed to the drift routine.
    """
    event = DragEvent(files=[UploadedFile(f) for f in files or []])
    try:
        series = await pipeline.handle_drop(event)
    except InvalidDropError as e:
        raise HTTPException(status_code=400 if e.empty else 415, detail=INVALID_DROP_ALERT)
    except DropInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return DropAccepted(
        heartrate_samples=len(series.heartrate),
        time_samples=len(series.time),
    )
