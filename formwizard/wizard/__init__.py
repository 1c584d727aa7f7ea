"""
Form Wizard Engine

A generic multi-step form wizard: step-scoped validation, directional
navigation, a final review, and debounced draft autosave with
resume-on-reload.
"""

from .controller import WizardController
from .fields import FieldChange, FileHandle
from .navigator import NavigationController, NavigationOutcome
from .persistence import DraftPersistence, FileStore, MemoryStore, SaveStatus
from .scheduler import AsyncioScheduler, ManualScheduler, ThreadScheduler
from .state import SubmissionState, WizardSession, initialize, toggle_multi_value, update_field
from .steps import Flow, StepDefinition, get_flow, validate_step
from .submission import SubmissionCoordinator

__all__ = [
    "WizardController",
    "FieldChange",
    "FileHandle",
    "NavigationController",
    "NavigationOutcome",
    "DraftPersistence",
    "FileStore",
    "MemoryStore",
    "SaveStatus",
    "AsyncioScheduler",
    "ManualScheduler",
    "ThreadScheduler",
    "SubmissionState",
    "WizardSession",
    "initialize",
    "toggle_multi_value",
    "update_field",
    "Flow",
    "StepDefinition",
    "get_flow",
    "validate_step",
    "SubmissionCoordinator",
]
