"""Drop target lifecycle.

The browser forwards its dragover / dragleave / drop events here. The
controller owns the hover flag and turns a drop into exactly one outcome:
`FileDropped` with the first file, or `InvalidDrop` with a reason.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Union

from fastapi import UploadFile

from hrdrift.core.config import Settings, settings as default_settings
from hrdrift.core.constants import INVALID_DROP_ALERT

logger = logging.getLogger(__name__)


class VisualState(str, Enum):
    idle = "idle"
    hover = "hover"


class DroppedFile(ABC):
    """Read-only handle on user-supplied content and its declared type."""

    def __init__(self, filename: str | None, content_type: str | None):
        self.filename = filename
        self.content_type = content_type

    @abstractmethod
    async def read_bytes(self) -> bytes:
        ...

    async def read_text(self) -> str:
        # utf-8-sig drops a leading BOM, as FileReader.readAsText does
        raw = await self.read_bytes()
        return raw.decode("utf-8-sig")


class UploadedFile(DroppedFile):
    def __init__(self, upload: UploadFile):
        super().__init__(upload.filename, upload.content_type)
        self._upload = upload

    async def read_bytes(self) -> bytes:
        return await self._upload.read()


class BytesFile(DroppedFile):
    def __init__(self, content: bytes, content_type: str | None, filename: str | None = None):
        super().__init__(filename, content_type)
        self._content = content

    async def read_bytes(self) -> bytes:
        return self._content


@dataclass
class DragEvent:
    files: list[DroppedFile] = field(default_factory=list)
    default_prevented: bool = False

    def prevent_default(self):
        self.default_prevented = True


@dataclass(frozen=True)
class FileDropped:
    file: DroppedFile


@dataclass(frozen=True)
class InvalidDrop:
    reason: str
    empty: bool = False


DropOutcome = Union[FileDropped, InvalidDrop]


def is_json_media_type(content_type: str | None, cfg: Settings = default_settings) -> bool:
    """True for the configured JSON types, ignoring parameters and case."""
    if not content_type:
        return False
    essence = content_type.split(";", 1)[0].strip().lower()
    if essence in {t.lower() for t in cfg.json_media_types}:
        return True
    if cfg.accept_json_suffix:
        major, _, minor = essence.partition("/")
        return major == "application" and minor.endswith("+json") and len(minor) > len("+json")
    return False


class DropZoneController:
    def __init__(
        self,
        alert: Optional[Callable[[str], None]] = None,
        cfg: Settings = default_settings,
    ):
        self.visual_state = VisualState.idle
        self._alert = alert or (lambda message: logger.warning("Alert: %s", message))
        self._cfg = cfg

    def on_drag_over(self, event: DragEvent) -> None:
        event.prevent_default()
        self.visual_state = VisualState.hover

    def on_drag_leave(self, event: DragEvent) -> None:
        self.visual_state = VisualState.idle

    def on_drop(self, event: DragEvent) -> DropOutcome:
        event.prevent_default()
        self.visual_state = VisualState.idle

        # Only the first file is considered; extra files are ignored
        file = event.files[0] if event.files else None
        if file is None:
            outcome = InvalidDrop("No file was dropped", empty=True)
        elif not is_json_media_type(file.content_type, self._cfg):
            outcome = InvalidDrop(f"Unsupported file type: {file.content_type or 'unknown'}")
        else:
            return FileDropped(file)

        logger.info("Rejected drop: %s", outcome.reason)
        self._alert(INVALID_DROP_ALERT)
        return outcome
