"""
Custom exception classes for Realments.

Build-time anomalies are never raised (defaults are substituted instead);
these exceptions cover the collaborators that can genuinely fail: the
configuration file, language files and rich-text editor resources.
"""

import logging
from pathlib import Path
from typing import Optional, Dict, Any, List

logger = logging.getLogger(__name__)


class RealmentsError(Exception):
    """
    Base exception for Realments errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class ConfigurationLoadError(RealmentsError):
    """
    Exception raised when configuration file loading fails.

    This includes YAML parsing errors, unreadable files and files whose
    top level is not a mapping.
    """

    def __init__(self, config_path: Path, original_error: Exception,
                 message: Optional[str] = None):
        self.config_path = config_path
        self.original_error = original_error

        if message is None:
            message = f"Failed to load configuration from {config_path}: {str(original_error)}"

        context = {
            'config_path': str(config_path),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }

        recovery_suggestions = [
            "Check if config.yaml exists and is readable",
            "Verify YAML syntax is correct",
            "Application will use default configuration as fallback"
        ]

        super().__init__(message, context, recovery_suggestions)


class EditorLoadError(RealmentsError):
    """Raised when a rich-text editor's resources cannot be resolved."""

    def __init__(self, editor: str, reason: str, message: Optional[str] = None):
        self.editor = editor
        self.reason = reason

        if message is None:
            message = f"Failed to load {editor} editor: {reason}"

        super().__init__(
            message,
            context={'editor': editor, 'reason': reason},
            recovery_suggestions=[
                f"Check the wysiwyg_editors.{editor} entry in config.yaml",
                "The field falls back to a plain textarea"
            ]
        )


class TranslationLoadError(RealmentsError):
    """Raised when a language file exists but cannot be parsed."""

    def __init__(self, locale: str, path: Path, original_error: Exception):
        self.locale = locale
        self.path = path
        self.original_error = original_error

        super().__init__(
            f"Failed to load translations for '{locale}' from {path}: {original_error}",
            context={
                'locale': locale,
                'path': str(path),
                'original_error_type': type(original_error).__name__
            },
            recovery_suggestions=[
                "Verify the language file is valid YAML",
                "Untranslated keys are shown as-is until the file is fixed"
            ]
        )


def log_error_with_context(error: RealmentsError, operation: str) -> None:
    """
    Log error with full context information.

    Args:
        error: RealmentsError instance
        operation: Description of the operation that failed
    """
    logger.error(f"Realments error during {operation}")
    logger.error(f"Error type: {type(error).__name__}")
    logger.error(f"Error message: {error.message}")

    if error.context:
        logger.error("Error context:")
        for key, value in error.context.items():
            logger.error(f"  {key}: {value}")

    if error.recovery_suggestions:
        logger.info("Recovery suggestions:")
        for i, suggestion in enumerate(error.recovery_suggestions, 1):
            logger.info(f"  {i}. {suggestion}")
