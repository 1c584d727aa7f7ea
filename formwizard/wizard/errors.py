"""
Wizard Errors

Exception types raised by the wizard engine.
"""


class WizardError(Exception):
    """Base class for wizard engine errors."""
    pass


class UnknownFieldError(WizardError, KeyError):
    """A field name that the flow does not declare."""

    def __init__(self, flow: str, name: str):
        super().__init__(f"Flow '{flow}' has no field named '{name}'")
        self.flow = flow
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class FieldKindError(WizardError, TypeError):
    """A field change whose declared kind disagrees with the field's kind."""
    pass


class PersistenceError(WizardError):
    """Draft store read, write or delete failure."""
    pass


class SubmissionError(WizardError):
    """The completion operation or the completion callback failed."""
    pass
