"""Resolution of the heart-rate drift computation entry point.

The drift algorithm itself lives outside this service. Settings name the
callable as "module:attribute"; it is called with two positional lists,
heart-rate samples first and time samples second.
"""
import importlib
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

EntryPoint = Callable[[list[float], list[float]], Any]


def record_heart_rate_series(heartrate: list[float], time: list[float]) -> None:
    """Default entry point: log what would be handed to the drift routine."""
    logger.info(
        "Heart rate drift requested for %d heart rate / %d time samples",
        len(heartrate),
        len(time),
    )


def resolve_entry_point(path: str) -> EntryPoint:
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Entry point must look like 'module:attribute', got {path!r}")
    module = importlib.import_module(module_name)
    func = getattr(module, attr, None)
    if func is None or not callable(func):
        raise ValueError(f"Entry point {path!r} is not callable")
    return func
