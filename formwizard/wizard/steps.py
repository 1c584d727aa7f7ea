"""
Wizard Steps

Builds the ordered step registry of a flow from its configuration.
Each step declares its fields and their rules, so the buyer and
seller flows differ only in configuration.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..config.loader import ConfigLoader
from ..config.models import FILE_KINDS, FieldConfig, FlowConfig
from .errors import UnknownFieldError
from .fields import FormData, initial_value
from .validators import ErrorMap, validate_fields


@dataclass(frozen=True)
class StepDefinition:
    """One page of fields with its own validation rule set."""
    index: int
    label: str
    fields: Tuple[FieldConfig, ...] = ()
    description: str = ""

    @property
    def field_names(self) -> List[str]:
        return [spec.name for spec in self.fields]

    def validate(self, form_data: Mapping[str, Any]) -> ErrorMap:
        """Validate this step's fields only."""
        return validate_fields(self.fields, form_data)


class Flow:
    """
    An ordered, fixed set of steps built from a FlowConfig.

    Steps cannot be added or removed after construction.
    """

    def __init__(self, config: FlowConfig):
        """
        Initialize the flow.

        Args:
            config: Validated flow configuration
        """
        self.config = config
        self.name = config.name
        self.title = config.title
        self.storage_key = config.storage_key
        self.submit_latency = config.submit_latency

        self.steps: Tuple[StepDefinition, ...] = tuple(
            StepDefinition(
                index=i,
                label=step.label,
                fields=tuple(step.fields),
                description=step.description,
            )
            for i, step in enumerate(config.steps)
        )

        self._fields: Dict[str, FieldConfig] = {}
        for step in self.steps:
            for spec in step.fields:
                self._fields[spec.name] = spec

    def __repr__(self) -> str:
        return f"Flow(name={self.name!r}, steps={self.step_count})"

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def last_index(self) -> int:
        return len(self.steps) - 1

    @property
    def fields(self) -> List[FieldConfig]:
        """All fields in declared order."""
        return list(self._fields.values())

    @property
    def file_fields(self) -> List[str]:
        """Names of file-kind fields."""
        return [spec.name for spec in self._fields.values() if spec.kind in FILE_KINDS]

    def has_field(self, name: str) -> bool:
        return name in self._fields

    def field(self, name: str) -> FieldConfig:
        """
        Get a field's configuration.

        Raises:
            UnknownFieldError: If the flow has no such field
        """
        try:
            return self._fields[name]
        except KeyError:
            raise UnknownFieldError(self.name, name) from None

    def defaults(self) -> FormData:
        """Initial form data from the declared field defaults."""
        return {spec.name: initial_value(spec) for spec in self._fields.values()}

    def validate_step(self, index: int, form_data: Mapping[str, Any]) -> ErrorMap:
        """
        Validate the fields belonging to one step.

        Raises:
            IndexError: If the step index is out of range
        """
        if not 0 <= index < len(self.steps):
            raise IndexError(f"Step {index} out of range for flow '{self.name}'")
        return self.steps[index].validate(form_data)

    def first_invalid_step(self, form_data: Mapping[str, Any]) -> Optional[int]:
        """Index of the first step with errors, or None when all pass."""
        for step in self.steps:
            if step.validate(form_data):
                return step.index
        return None


def validate_step(flow: Flow, index: int, form_data: Mapping[str, Any]) -> ErrorMap:
    """Validate step `index` of `flow` against a form-data snapshot."""
    return flow.validate_step(index, form_data)


def validate_all(flow: Flow, form_data: Mapping[str, Any]) -> ErrorMap:
    """Validate every step of `flow` and merge the errors."""
    return validate_fields(flow.fields, form_data)


def get_flow(name: str, loader: Optional[ConfigLoader] = None) -> Flow:
    """
    Build a flow by name.

    Args:
        name: Flow name (built-in or loaded from configuration)
        loader: Config loader to resolve the name with

    Returns:
        The constructed Flow
    """
    loader = loader or ConfigLoader()
    return Flow(loader.get_flow(name))
