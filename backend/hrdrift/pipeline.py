"""Drop handling as an explicit state machine.

    idle -> reading -> validated | failed -> idle

At most one drop is processed at a time. A drop arriving while another is
being read is rejected with DropInProgress and leaves the first untouched.
"""
import logging
from enum import Enum
from typing import Optional

from hrdrift.dropzone import DragEvent, DropZoneController, InvalidDrop
from hrdrift.errors import DropInProgress, InvalidDropError
from hrdrift.schemas.activity import HeartRateSeries
from hrdrift.validator import ActivityDataValidator

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    idle = "idle"
    reading = "reading"
    validated = "validated"
    failed = "failed"


class DropPipeline:
    def __init__(
        self,
        controller: Optional[DropZoneController] = None,
        validator: Optional[ActivityDataValidator] = None,
    ):
        self.controller = controller or DropZoneController()
        self.validator = validator or ActivityDataValidator()
        self.state = PipelineState.idle
        self.last_outcome: Optional[PipelineState] = None

    @property
    def busy(self) -> bool:
        return self.state is not PipelineState.idle

    def _finish(self, outcome: PipelineState):
        logger.debug("Drop finished: %s", outcome.value)
        self.last_outcome = outcome
        self.state = PipelineState.idle

    async def handle_drop(self, event: DragEvent) -> HeartRateSeries:
        if self.busy:
            event.prevent_default()
            logger.warning("Drop rejected: previous drop still %s", self.state.value)
            raise DropInProgress()

        outcome = self.controller.on_drop(event)
        if isinstance(outcome, InvalidDrop):
            self.last_outcome = PipelineState.failed
            raise InvalidDropError(outcome.reason, empty=outcome.empty)

        self.state = PipelineState.reading
        try:
            series = await self.validator.validate_and_dispatch(outcome.file)
        except Exception:
            # Entry point failures propagate unwrapped but still reset the zone
            self._finish(PipelineState.failed)
            raise
        self._finish(PipelineState.validated)
        return series
