"""
Custom Exception Hierarchy for the landing zone naming engine

This module provides the exception hierarchy shared by the naming, region and
configuration components. Every error carries a machine-readable error code,
structured context and an optional recovery suggestion.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple


class LandingZoneError(Exception):
    """
    Base exception class for all landing zone naming and configuration errors.

    Provides structured error information including context, error codes,
    and optional recovery suggestions.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context
            cause: Optional underlying exception that caused this error
            recovery_suggestion: Optional suggestion for error recovery
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.recovery_suggestion = recovery_suggestion

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        result = self.message
        if self.error_code:
            result = f"[{self.error_code}] {result}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            result += f" (context: {context_str})"
        if self.cause:
            result += f" (caused by: {self.cause})"
        if self.recovery_suggestion:
            result += f" (suggestion: {self.recovery_suggestion})"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "recovery_suggestion": self.recovery_suggestion,
        }


# Naming-related exceptions
class NamingError(LandingZoneError):
    """Base class for resource naming errors."""

    pass


class UnknownResourcePurposeError(NamingError):
    """Raised when a module has no naming template for a resource purpose."""

    def __init__(
        self,
        message: str,
        purpose: Optional[str] = None,
        module: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if purpose:
            context["purpose"] = purpose
        if module:
            context["module"] = module
        kwargs["context"] = context
        kwargs.setdefault("error_code", "UNKNOWN_RESOURCE_PURPOSE")
        super().__init__(message, **kwargs)


class InvalidNamingContextError(NamingError):
    """Raised when a naming context cannot be built from the given inputs."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs: Any) -> None:
        context = kwargs.get("context", {})
        if field:
            context["field"] = field
        kwargs["context"] = context
        kwargs.setdefault("error_code", "INVALID_NAMING_CONTEXT")
        super().__init__(message, **kwargs)


# Configuration-related exceptions
class ConfigurationError(LandingZoneError):
    """Base class for configuration-related errors."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when an override document disagrees with the default schema.

    All problems found in a single resolution are reported together in
    ``issues`` as ``(path, message)`` pairs.
    """

    def __init__(
        self,
        message: str,
        issues: Optional[Sequence[Tuple[str, str]]] = None,
        config_section: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.issues: List[Tuple[str, str]] = list(issues or [])
        context = kwargs.get("context", {})
        if config_section:
            context["config_section"] = config_section
        if self.issues:
            context["issues"] = "; ".join(f"{path}: {msg}" for path, msg in self.issues)
        kwargs["context"] = context
        kwargs.setdefault("error_code", "INVALID_CONFIG")
        kwargs.setdefault(
            "recovery_suggestion", "Check configuration file and environment variables"
        )
        super().__init__(message, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["issues"] = [{"path": path, "message": msg} for path, msg in self.issues]
        return data


class ConfigLoadError(ConfigurationError):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs: Any) -> None:
        context = kwargs.get("context", {})
        if path:
            context["path"] = path
        kwargs["context"] = context
        kwargs.setdefault("error_code", "CONFIG_LOAD_FAILED")
        super().__init__(message, **kwargs)


# Suffix state exceptions
class SuffixStateError(LandingZoneError):
    """Raised when the persisted random suffix state is unusable."""

    def __init__(
        self, message: str, deployment_key: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if deployment_key:
            context["deployment_key"] = deployment_key
        kwargs["context"] = context
        kwargs.setdefault("error_code", "SUFFIX_STATE_ERROR")
        super().__init__(message, **kwargs)


# Utility functions for exception handling
def wrap_validation_error(
    exc: Exception, section: Optional[str] = None, prefix: str = ""
) -> ConfigValidationError:
    """
    Wrap a pydantic ValidationError in our custom exception hierarchy.

    Args:
        exc: The original pydantic ValidationError
        section: Optional configuration section (module) name
        prefix: Dotted path prepended to every reported location

    Returns:
        ConfigValidationError: Wrapped exception listing every failing field
    """
    issues: List[Tuple[str, str]] = []
    errors = getattr(exc, "errors", None)
    if callable(errors):
        for error in errors():
            loc = ".".join(str(part) for part in error.get("loc", ()))
            path = ".".join(part for part in (prefix, loc) if part)
            issues.append((path or "<root>", error.get("msg", "invalid value")))
    else:
        issues.append((prefix or "<root>", str(exc)))

    return ConfigValidationError(
        "Configuration validation failed",
        issues=issues,
        config_section=section,
        cause=exc,
    )
