import json
import logging
from typing import Optional

import pydantic

from hrdrift.compute import EntryPoint, resolve_entry_point
from hrdrift.core.config import Settings, settings as default_settings
from hrdrift.core.constants import HEARTRATE_FIELD, TIME_FIELD
from hrdrift.dropzone import DroppedFile
from hrdrift.errors import Malformed, MissingField
from hrdrift.schemas.activity import ActivityDocument, HeartRateSeries, SampleStream

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    # json.loads accepts NaN/Infinity; browsers' JSON.parse does not
    raise ValueError(f"Invalid constant {name}")


def _missing_field(err: pydantic.ValidationError) -> MissingField:
    """Map the first schema error to the sample array it concerns."""
    errors = err.errors()
    loc = errors[0]["loc"] if errors else ()
    if loc and loc[0] == "time":
        return MissingField(TIME_FIELD)
    return MissingField(HEARTRATE_FIELD)


def _as_floats(stream: SampleStream, field_name: str) -> list[float]:
    try:
        return [float(v) for v in stream.data]
    except OverflowError as e:
        # JSON integers can exceed the float range
        raise MissingField(field_name) from e


def parse_activity(text: str) -> HeartRateSeries:
    """Parse and validate activity JSON text.

    Raises Malformed for text that is not JSON and MissingField when either
    `heartrate.data` or `time.data` is absent or not a list of numbers.
    """
    try:
        document = json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise Malformed(str(e)) from e
    except RecursionError as e:
        raise Malformed("document is nested too deeply") from e

    try:
        doc = ActivityDocument.model_validate(document)
    except pydantic.ValidationError as e:
        raise _missing_field(e) from e

    series = HeartRateSeries(
        heartrate=_as_floats(doc.heartrate, HEARTRATE_FIELD),
        time=_as_floats(doc.time, TIME_FIELD),
    )
    if not series.aligned:
        # Passed through as-is; the drift routine decides what to do
        logger.warning(
            "Heart rate and time series differ in length (%d vs %d)",
            len(series.heartrate),
            len(series.time),
        )
    return series


class ActivityDataValidator:
    def __init__(self, entry_point: Optional[EntryPoint] = None, cfg: Settings = default_settings):
        self._entry_point = entry_point
        self._cfg = cfg

    @property
    def entry_point(self) -> EntryPoint:
        if self._entry_point is None:
            self._entry_point = resolve_entry_point(self._cfg.drift_entry_point)
        return self._entry_point

    def dispatch(self, series: HeartRateSeries) -> None:
        # Fire-and-forget: the return value is not ours to interpret
        self.entry_point(series.heartrate, series.time)

    async def validate_and_dispatch(self, file: DroppedFile) -> HeartRateSeries:
        try:
            text = await file.read_text()
        except UnicodeDecodeError as e:
            err = Malformed(f"file is not UTF-8 text ({e.reason})")
            logger.error("Error parsing JSON from %s: %s", file.filename, err)
            raise err from e

        try:
            series = parse_activity(text)
        except (Malformed, MissingField) as e:
            logger.error("Error parsing JSON from %s: %s", file.filename, e)
            raise

        self.dispatch(series)
        return series
