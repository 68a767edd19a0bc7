"""Exception hierarchy and process exit codes."""
from typing import Optional

# Process exit codes, one per failure category
EXIT_OK = 0
EXIT_HELP = 1
EXIT_USAGE = 2
EXIT_MALFORMED = 3
EXIT_RESOURCE = 4
EXIT_UNKNOWN = 5


class Eagle2GedaError(Exception):
    """Base class for all converter errors."""

    pass


class ConfigError(Eagle2GedaError):
    """Raised when the configuration file or a config value is invalid."""

    pass


class MalformedInputError(Eagle2GedaError):
    """Raised when the Eagle document breaks the board grammar.

    ``line`` is the approximate input line (None when unknown).  The reader
    fills it in when the error escapes a parser callback without one.
    """

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self):
        if self.line is None:
            return self.message
        return f"{self.message} (near line {self.line})"


class GrammarError(MalformedInputError):
    """Raised for an element opened or closed where the grammar forbids it."""

    def __init__(self, tag: str, message: str, region: str = "", line: Optional[int] = None):
        super().__init__(f"<{tag}>: {message}", line=line)
        self.tag = tag
        self.region = region


class ContractViolation(MalformedInputError):
    """Raised when a model object is used against its set-once contract."""

    pass


class DuplicateAttributeError(ContractViolation):
    """Raised when an attribute is set a second time on the same element."""

    def __init__(self, name: str, owner: str):
        super().__init__(f"duplicate attribute '{name}' in {owner} definition")
        self.name = name
        self.owner = owner


class UnsetFieldError(ContractViolation):
    """Raised when reading a field that was never set."""

    def __init__(self, name: str, owner: str):
        super().__init__(f"field '{name}' of {owner} was never set")
        self.name = name
        self.owner = owner
