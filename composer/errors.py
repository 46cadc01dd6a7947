"""Error taxonomy for workflow generation."""


class GenerationError(Exception):
    """Base class for request failures surfaced to the user."""
    code = "generation_error"


class EmptyPromptError(GenerationError):
    """Raised when the prompt is shorter than the minimum length."""
    code = "empty_prompt"


class UnresolvedTriggerError(GenerationError):
    """Raised when no clause can be resolved to a trigger node."""
    code = "unresolved_trigger"


class InvalidTimezoneError(GenerationError):
    """Raised when the requested timezone is not supported."""
    code = "invalid_timezone"


class InvalidNameError(GenerationError):
    """Raised when the workflow name is empty."""
    code = "invalid_name"


class CatalogError(ValueError):
    """Raised when the node catalog file is malformed."""
    pass


class GraphValidationError(ValueError):
    """Raised when a built workflow graph breaks a structural invariant."""
    pass
