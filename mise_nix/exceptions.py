"""Shared exception classes for mise-nix."""


class MiseNixError(Exception):
    """Base exception for mise-nix errors."""


class FlakeFormatError(MiseNixError):
    """Raised when a reference has a '#' separator but no attribute after it."""


class NotAFlakeReferenceError(MiseNixError):
    """Raised when a build is requested for a string that is not a flake reference."""


class SecurityError(MiseNixError):
    """Raised when a reference is refused by the security checks."""


class BuildError(MiseNixError):
    """Raised when `nix build` fails or returns no output paths."""

    def __init__(self, message: str, reference: str, stderr: str = "") -> None:
        super().__init__(message)
        self.reference = reference
        self.stderr = stderr


class ValidationError(MiseNixError):
    """Raised when hook input is invalid (e.g., an empty tool name)."""


class ConfigParseError(MiseNixError):
    """Raised when the config file cannot be parsed."""


class ConfigValidationError(MiseNixError):
    """Raised when the config file contains invalid values."""
