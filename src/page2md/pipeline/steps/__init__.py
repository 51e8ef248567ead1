"""Pipeline step implementations."""

from .extract import ExtractStep
from .fetch import FetchStep
from .render import RenderStep
from .validate import ValidateStep

__all__ = [
    "ExtractStep",
    "FetchStep",
    "RenderStep",
    "ValidateStep",
]
