"""
Error reporting for the Realments playground.

A failure is logged, then shown as one friendly line, followed by the
suggestions a RealmentsError carries and any one-click recovery actions.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type

import streamlit as st

from .exceptions import RealmentsError
from .session import SessionStore

logger = logging.getLogger(__name__)


class ErrorType:
    """Playground areas an error is reported from."""
    CONFIGURATION = "configuration"
    SCHEMA = "schema"
    RENDER = "render"
    EDITOR = "editor"
    SYSTEM = "system"


# error type -> (ordered (exception class, message) pairs, fallback message)
FRIENDLY_MESSAGES: Dict[str, Tuple[Sequence[Tuple[Type[BaseException], str]], str]] = {
    ErrorType.CONFIGURATION: (
        [(FileNotFoundError, "⚙️ config.yaml could not be found. Default settings are in use.")],
        "⚙️ Configuration problem. Default settings are in use.",
    ),
    ErrorType.SCHEMA: (
        [
            (json.JSONDecodeError, "📋 The form payload is not valid JSON."),
            (KeyError, "📋 The form payload is missing a required key."),
            (ValueError, "📋 The form payload contains invalid values."),
        ],
        "📋 The form payload could not be read.",
    ),
    ErrorType.RENDER: ([], "🧩 Part of the form could not be rendered."),
    ErrorType.EDITOR: ([], "📝 The rich-text editor is unavailable; a plain text area is shown instead."),
    ErrorType.SYSTEM: (
        [(ImportError, "💻 A required component is missing. Check the installed dependencies.")],
        "💻 System error occurred. Please try again.",
    ),
}


@dataclass
class RecoveryAction:
    """A button offered next to an error message."""
    title: str
    description: str
    button_text: str
    action: Callable[[], None]


def use_demo_form() -> None:
    st.session_state.pop('custom_payload', None)
    st.rerun()


def reload_configuration() -> None:
    from .config_loader import reload_config
    reload_config()
    st.success("⚙️ Configuration reloaded")
    st.rerun()


def reset_field_state() -> None:
    """Forget per-field UI state together with any flashed errors and input."""
    session = SessionStore()
    session.clear_field_state()
    session.pull_errors()
    session.pull_old_input()
    st.success("🔄 Field state reset")
    st.rerun()


class ErrorHandler:
    """Log-and-show error reporting for the playground."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        actions: Optional[List[RecoveryAction]] = None
    ) -> None:
        """
        Log an error and show it to the user.

        Args:
            error: The exception that occurred
            context: What the playground was doing, e.g. "rendering payload"
            error_type: One of the ErrorType constants
            user_message: Overrides the friendly message for error_type
            actions: Recovery buttons to show under the message
        """
        logger.error(f"Error in {context}: {error}", exc_info=True)
        message = user_message or ErrorHandler.friendly_message(error, error_type)
        ErrorHandler._display_error(message, error, actions)

    @staticmethod
    def friendly_message(error: Exception, error_type: str) -> str:
        matches, fallback = FRIENDLY_MESSAGES.get(error_type, FRIENDLY_MESSAGES[ErrorType.SYSTEM])
        for exception_class, message in matches:
            if isinstance(error, exception_class):
                return message
        return fallback

    @staticmethod
    def _display_error(message: str, error: Exception, actions: Optional[List[RecoveryAction]] = None) -> None:
        st.error(message)

        if isinstance(error, RealmentsError):
            for suggestion in error.recovery_suggestions:
                st.caption(f"• {suggestion}")

        for index, option in enumerate(actions or []):
            text_col, button_col = st.columns([3, 1])
            with text_col:
                st.write(f"**{option.title}**")
                st.caption(option.description)
            with button_col:
                if st.button(option.button_text, key=f"recovery_{index}"):
                    try:
                        option.action()
                    except Exception as e:
                        logger.error(f"Recovery action '{option.title}' failed: {e}")
                        st.error(f"Recovery action failed: {e}")

    @staticmethod
    def with_error_handling(
        func: Callable[[], Any],
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        actions: Optional[List[RecoveryAction]] = None,
        default_return: Any = None
    ) -> Any:
        """Run func, reporting any exception and returning default_return instead."""
        try:
            return func()
        except Exception as e:
            ErrorHandler.handle_error(e, context, error_type, user_message, actions)
            return default_return

    @staticmethod
    def recovery_actions(context: str) -> List[RecoveryAction]:
        """Recovery buttons that make sense for the given context."""
        context = context.lower()
        actions: List[RecoveryAction] = []

        if "payload" in context:
            actions.append(RecoveryAction(
                'Use Demo Form', 'Discard the pasted payload and render the built-in demo form',
                '📋 Demo Form', use_demo_form
            ))
        if "config" in context:
            actions.append(RecoveryAction(
                'Reload Configuration', 'Read config.yaml again', '⚙️ Reload', reload_configuration
            ))
        actions.append(RecoveryAction(
            'Reset Field State', 'Forget all per-field UI state and flashed input', '🔄 Reset', reset_field_state
        ))
        return actions


class SafeOperations:
    """Safe wrappers for common operations."""

    @staticmethod
    def safe_json_payload(text: str, default: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """Parse a pasted wire payload, showing a friendly error when it is not a JSON object."""

        def parse() -> Dict[str, Any]:
            payload = json.loads(text)
            if not isinstance(payload, dict):
                raise ValueError("payload must be a JSON object")
            if 'elements' not in payload:
                raise KeyError('elements')
            return payload

        return ErrorHandler.with_error_handling(
            parse,
            "parsing pasted payload",
            ErrorType.SCHEMA,
            actions=ErrorHandler.recovery_actions("payload"),
            default_return=default
        )
