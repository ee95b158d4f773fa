"""Action engine exception definitions.

Custom exception hierarchy for building and resolving actions.
"""


class ActionError(Exception):
    """Base exception for action operations."""

    pass


class ValidationError(ActionError):
    """Action payload failed a contract check.

    Attributes:
        field: Name of the offending payload field.
        rule: Name of the violated rule (e.g. "string", "choice").
    """

    def __init__(self, field: str, rule: str, message: str | None = None) -> None:
        super().__init__(message or f"{field} failed '{rule}' check.")
        self.field = field
        self.rule = rule


class UnknownTypeError(ActionError):
    """No variant is registered under the requested type name.

    Attributes:
        type_name: The requested type name.
    """

    def __init__(self, type_name: str) -> None:
        super().__init__(f"Unknown action type: '{type_name}'.")
        self.type_name = type_name


class AttributePathError(ActionError):
    """An attribute path does not exist or its value is undefined.

    Attributes:
        path: The dotted attribute path that could not be read.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Attribute path '{path}' does not exist or its value is undefined.")
        self.path = path


class TypeMismatchError(ActionError):
    """Operand kinds are incompatible for the requested operation.

    Attributes:
        subject: Attribute path or operator the mismatch was found on.
        expected: Kind that was required.
        actual: Kind that was found.
    """

    def __init__(self, subject: str, expected: str, actual: str) -> None:
        super().__init__(f"'{subject}': expected {expected} value, got {actual}.")
        self.subject = subject
        self.expected = expected
        self.actual = actual


class AuthorizationError(ActionError):
    """The caller may not resolve actions under the configured policy."""

    def __init__(self, message: str = "Caller is not allowed to use actions.") -> None:
        super().__init__(message)


class HandleResolutionError(ActionError):
    """A document handle could not be resolved to a live document.

    Attributes:
        handle: The unresolvable document handle.
    """

    def __init__(self, handle: str) -> None:
        super().__init__(f"Invalid document handle: '{handle}'.")
        self.handle = handle
