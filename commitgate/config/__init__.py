"""Configuration handling for the pre-commit pipeline."""

from .models import (
    CheckKind,
    CheckDefinition,
    ExclusionRules,
    ReportFormat,
    ReportingConfig,
    NotificationConfig,
    PipelineConfig,
)
from .loader import ConfigLoader, ConfigError

__all__ = [
    "CheckKind",
    "CheckDefinition",
    "ExclusionRules",
    "ReportFormat",
    "ReportingConfig",
    "NotificationConfig",
    "PipelineConfig",
    "ConfigLoader",
    "ConfigError",
]
