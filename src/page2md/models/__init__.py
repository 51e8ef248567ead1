"""page2md configuration, article and event models."""

from .api import ConvertRequest, ConvertResponse
from .article import Article
from .config import (
    ByteSize,
    NetworkConfig,
    PerformanceConfig,
    RenderConfig,
    SecurityConfig,
    ServerConfig,
    ServiceConfig,
)
from .events import EventType, PipelineEvent

__all__ = [
    # Config
    "ByteSize",
    "NetworkConfig",
    "PerformanceConfig",
    "RenderConfig",
    "SecurityConfig",
    "ServerConfig",
    "ServiceConfig",
    # Data
    "Article",
    "ConvertRequest",
    "ConvertResponse",
    # Events
    "EventType",
    "PipelineEvent",
]
