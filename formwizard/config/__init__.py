"""Configuration handling for the form wizard."""

from .models import (
    FieldKind,
    RuleKind,
    FieldConfig,
    StepConfig,
    FlowConfig,
    AutosaveConfig,
    SubmissionConfig,
    LoggingConfig,
    WizardSettings,
)
from .loader import ConfigLoader, ConfigError

__all__ = [
    "FieldKind",
    "RuleKind",
    "FieldConfig",
    "StepConfig",
    "FlowConfig",
    "AutosaveConfig",
    "SubmissionConfig",
    "LoggingConfig",
    "WizardSettings",
    "ConfigLoader",
    "ConfigError",
]
