"""Aria - multi-backend answer orchestrator for camera-and-voice wearables."""

__version__ = "0.1.0"
__author__ = "Aria Team"

from aria.config import Config, load_config
from aria.orchestrator import ResponseOrchestrator

__all__ = ["Config", "load_config", "ResponseOrchestrator", "__version__"]
