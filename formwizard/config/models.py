"""
Pydantic models for configuration validation.

These models define the schema for wizard flows (steps and fields)
and for the runtime settings of the engine: autosave, submission
and logging.
"""

import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class FieldKind(str, Enum):
    """Value variants a form field can hold."""
    TEXT = "text"
    SELECT = "select"
    MULTISELECT = "multiselect"
    BOOLEAN = "boolean"
    FILE = "file"
    FILES = "files"


class RuleKind(str, Enum):
    """Validation rules from the rule catalogue."""
    REQUIRED_STRING = "required-string"
    EMAIL = "email"
    PHONE = "phone"
    REQUIRED_SELECT = "required-select"
    REQUIRED_MULTISELECT = "required-multiselect"
    REQUIRED_TRUE = "required-true"
    REQUIRED_FILE = "required-file"
    REQUIRED_FILES = "required-files"
    NUMERIC_OPTIONAL = "numeric-optional"


# Field kinds each rule may be attached to
RULE_FIELD_KINDS: Dict[RuleKind, frozenset] = {
    RuleKind.REQUIRED_STRING: frozenset({FieldKind.TEXT, FieldKind.SELECT}),
    RuleKind.EMAIL: frozenset({FieldKind.TEXT}),
    RuleKind.PHONE: frozenset({FieldKind.TEXT}),
    RuleKind.REQUIRED_SELECT: frozenset({FieldKind.SELECT, FieldKind.TEXT}),
    RuleKind.REQUIRED_MULTISELECT: frozenset({FieldKind.MULTISELECT}),
    RuleKind.REQUIRED_TRUE: frozenset({FieldKind.BOOLEAN}),
    RuleKind.REQUIRED_FILE: frozenset({FieldKind.FILE}),
    RuleKind.REQUIRED_FILES: frozenset({FieldKind.FILES}),
    RuleKind.NUMERIC_OPTIONAL: frozenset({FieldKind.TEXT}),
}

# Rules that can fail on a present-but-malformed value
FORMAT_RULES = frozenset({RuleKind.EMAIL, RuleKind.PHONE, RuleKind.NUMERIC_OPTIONAL})

FILE_KINDS = frozenset({FieldKind.FILE, FieldKind.FILES})


def humanize(name: str) -> str:
    """
    Turn a camelCase or snake_case field name into a display label.

    >>> humanize("interestedRegions")
    'Interested Regions'
    """
    spaced = re.sub(r"([A-Z])", r" \1", name.replace("_", " "))
    spaced = " ".join(spaced.split())
    return spaced[:1].upper() + spaced[1:]


# ============================================================
# Flow Configuration
# ============================================================

class FieldConfig(BaseModel):
    """Configuration for a single form field."""

    name: str = Field(..., min_length=1, description="Field name (form data key)")
    label: Optional[str] = Field(None, description="Display label")
    kind: FieldKind = Field(default=FieldKind.TEXT, description="Value variant")
    rule: Optional[RuleKind] = Field(None, description="Validation rule")
    required_message: Optional[str] = Field(None, description="Message when the value is missing")
    invalid_message: Optional[str] = Field(None, description="Message when the value is malformed")
    options: List[str] = Field(default_factory=list, description="Choices for select fields")
    default: Any = Field(None, description="Initial value")

    @model_validator(mode="after")
    def check_rule_and_default(self):
        """Check the rule fits the kind and fill in labels, messages and defaults."""
        if self.label is None:
            self.label = humanize(self.name)

        if self.rule is not None:
            if self.kind not in RULE_FIELD_KINDS[self.rule]:
                raise ValueError(
                    f"Rule '{self.rule.value}' cannot be used on {self.kind.value} field '{self.name}'"
                )
            if self.required_message is None:
                self.required_message = f"{self.label} is required."
            if self.invalid_message is None and self.rule in FORMAT_RULES:
                self.invalid_message = f"Invalid {self.label.lower()}."

        self.default = self._check_default(self.default)
        return self

    def _check_default(self, value: Any) -> Any:
        if self.kind in (FieldKind.TEXT, FieldKind.SELECT):
            if value is None:
                return ""
            if not isinstance(value, str):
                raise ValueError(f"Default for '{self.name}' must be a string")
            return value
        if self.kind == FieldKind.BOOLEAN:
            if value is None:
                return False
            if not isinstance(value, bool):
                raise ValueError(f"Default for '{self.name}' must be a boolean")
            return value
        if self.kind == FieldKind.MULTISELECT:
            if value is None:
                return []
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"Default for '{self.name}' must be a list of strings")
            return value
        # File fields always start empty
        if value not in (None, []):
            raise ValueError(f"File field '{self.name}' cannot have a default")
        return None


class StepConfig(BaseModel):
    """Configuration for one wizard step (one page of fields)."""

    label: str = Field(..., min_length=1, description="Step label shown in progress")
    description: str = Field(default="", description="Help text for the step")
    fields: List[FieldConfig] = Field(default_factory=list, description="Fields on this step")


class FlowConfig(BaseModel):
    """Configuration for a complete wizard flow."""

    name: str = Field(..., min_length=1, description="Flow identifier (e.g. buyer)")
    title: str = Field(default="", description="Heading shown by hosts")
    steps: List[StepConfig] = Field(..., min_length=1, description="Ordered steps")
    storage_key: Optional[str] = Field(None, description="Draft store key")
    submit_latency: float = Field(default=1.5, ge=0, description="Simulated completion latency in seconds")

    @model_validator(mode="after")
    def check_fields(self):
        """Field names must be unique across the whole flow."""
        seen = set()
        for step in self.steps:
            for spec in step.fields:
                if spec.name in seen:
                    raise ValueError(f"Duplicate field name in flow '{self.name}': {spec.name}")
                seen.add(spec.name)

        if not self.title:
            self.title = f"{humanize(self.name)} Onboarding"
        if self.storage_key is None:
            self.storage_key = f"{self.name}OnboardingForm"
        return self


# ============================================================
# Runtime Settings
# ============================================================

class AutosaveConfig(BaseModel):
    """Draft autosave configuration."""

    enabled: bool = Field(default=True, description="Persist drafts while editing")
    delay_ms: int = Field(default=800, ge=0, description="Quiet period before a draft is written")
    draft_dir: Optional[str] = Field(None, description="Directory for file-backed drafts")


class SubmissionConfig(BaseModel):
    """Submission configuration."""

    validate_all_steps: bool = Field(
        default=True,
        description="Re-validate every step (not only the last) before submitting",
    )
    simulate_latency: bool = Field(default=True, description="Wait the flow's submit_latency")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Root log level")
    file: Optional[str] = Field(None, description="Log file path (no file logging if unset)")
    log_to_console: bool = Field(default=False, description="Also log to stderr")
    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="Rotate after this size")
    backup_count: int = Field(default=3, ge=0, description="Rotated files to keep")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level


class WizardSettings(BaseModel):
    """Top-level engine settings."""

    autosave: AutosaveConfig = Field(default_factory=AutosaveConfig)
    submission: SubmissionConfig = Field(default_factory=SubmissionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    flows: Dict[str, FlowConfig] = Field(default_factory=dict, description="Flow overrides by name")
