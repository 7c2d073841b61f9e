"""
Configuration module.

Dataclass settings for extraction and rendering, and the YAML loader that
builds them once at process start.
"""

from .loader import ConfigLoader, load_config, CONFIG_ENV_VAR
from .models import (
    ExtractionSettings,
    LegacyDocSettings,
    PdfSettings,
    PipelineConfig,
    PlainTextSettings,
    RenderSettings,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "CONFIG_ENV_VAR",
    "ExtractionSettings",
    "LegacyDocSettings",
    "PdfSettings",
    "PipelineConfig",
    "PlainTextSettings",
    "RenderSettings",
]
