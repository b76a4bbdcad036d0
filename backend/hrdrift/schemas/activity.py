from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt

# Booleans and numeric strings are not samples
Sample = Union[StrictInt, StrictFloat]


class SampleStream(BaseModel):
    """One `{"data": [...]}` stream, as Strava returns with key_by_type."""

    data: list[Sample]

    model_config = ConfigDict(extra="ignore")


class ActivityDocument(BaseModel):
    """Minimum shape of a dropped or fetched activity document.

    Field order matters: validation errors are reported for `heartrate`
    before `time`.
    """

    heartrate: SampleStream
    time: SampleStream

    model_config = ConfigDict(extra="ignore")


@dataclass(frozen=True)
class HeartRateSeries:
    heartrate: list[float]
    time: list[float]

    @property
    def aligned(self) -> bool:
        return len(self.heartrate) == len(self.time)


class DropAccepted(BaseModel):
    heartrate_samples: int
    time_samples: int


class DropZoneState(BaseModel):
    visual_state: str
    state: str
    last_outcome: str | None = None
