"""
Unit tests for error_handler module.
"""

import json
from unittest.mock import MagicMock, patch

from realments import error_handler
from realments.error_handler import (
    ErrorHandler,
    ErrorType,
    RecoveryAction,
    SafeOperations,
)
from realments.exceptions import EditorLoadError


class TestFriendlyMessages:
    """Test cases for the per-type message table."""

    def test_configuration(self):
        message = ErrorHandler.friendly_message(FileNotFoundError("config.yaml"), ErrorType.CONFIGURATION)
        assert "could not be found" in message.lower()
        assert "⚙️" in message

        message = ErrorHandler.friendly_message(OSError("boom"), ErrorType.CONFIGURATION)
        assert "configuration problem" in message.lower()

    def test_schema(self):
        """Test that JSON errors win over the broader ValueError entry."""
        error = json.JSONDecodeError("Invalid JSON", "doc", 0)
        assert "not valid json" in ErrorHandler.friendly_message(error, ErrorType.SCHEMA).lower()

        message = ErrorHandler.friendly_message(KeyError("elements"), ErrorType.SCHEMA)
        assert "missing a required key" in message.lower()

        message = ErrorHandler.friendly_message(ValueError("bad"), ErrorType.SCHEMA)
        assert "invalid values" in message.lower()

    def test_editor(self):
        message = ErrorHandler.friendly_message(EditorLoadError('quill', 'offline'), ErrorType.EDITOR)
        assert "plain text area" in message.lower()

    def test_unknown_type_uses_system_messages(self):
        message = ErrorHandler.friendly_message(RuntimeError("x"), "no_such_type")
        assert "system error occurred" in message.lower()


class TestErrorHandler:
    """Test cases for reporting errors."""

    def test_display_error_shows_recovery_suggestions(self):
        with patch('realments.error_handler.st') as mock_st:
            ErrorHandler._display_error("Editor down", EditorLoadError('quill', 'offline'))

        mock_st.error.assert_called_once_with("Editor down")
        assert mock_st.caption.call_count == 2
        first_caption = mock_st.caption.call_args_list[0][0][0]
        assert first_caption == "• Check the wysiwyg_editors.quill entry in config.yaml"

    def test_display_error_runs_clicked_action(self):
        callback = MagicMock()
        actions = [RecoveryAction('Retry', 'Try again', 'Retry', callback)]

        with patch('realments.error_handler.st') as mock_st:
            mock_st.columns.return_value = (MagicMock(), MagicMock())
            mock_st.button.return_value = True
            ErrorHandler._display_error("Failed", ValueError("x"), actions)

        callback.assert_called_once()
        mock_st.button.assert_called_once_with('Retry', key='recovery_0')

    def test_failing_action_is_reported(self):
        actions = [RecoveryAction('Retry', 'Try again', 'Retry', MagicMock(side_effect=RuntimeError('nope')))]

        with patch('realments.error_handler.st') as mock_st:
            mock_st.columns.return_value = (MagicMock(), MagicMock())
            mock_st.button.return_value = True
            ErrorHandler._display_error("Failed", ValueError("x"), actions)

        assert mock_st.error.call_args_list[-1][0][0] == "Recovery action failed: nope"

    def test_unclicked_action_does_not_run(self):
        callback = MagicMock()

        with patch('realments.error_handler.st') as mock_st:
            mock_st.columns.return_value = (MagicMock(), MagicMock())
            mock_st.button.return_value = False
            ErrorHandler._display_error("Failed", ValueError("x"), [RecoveryAction('a', 'b', 'c', callback)])

        callback.assert_not_called()

    def test_handle_error_uses_friendly_message(self):
        error = KeyError('elements')

        with patch.object(ErrorHandler, '_display_error') as mock_display:
            ErrorHandler.handle_error(error, "parsing payload", ErrorType.SCHEMA)

        args = mock_display.call_args[0]
        assert "missing a required key" in args[0].lower()
        assert args[1] is error

    def test_handle_error_custom_message(self):
        with patch.object(ErrorHandler, '_display_error') as mock_display:
            ErrorHandler.handle_error(ValueError("x"), "ctx", user_message="Custom")

        assert mock_display.call_args[0][0] == "Custom"

    def test_with_error_handling_success(self):
        assert ErrorHandler.with_error_handling(lambda: 42, "answer") == 42

    def test_with_error_handling_failure_returns_default(self):
        def failing():
            raise ValueError("bad")

        with patch.object(ErrorHandler, 'handle_error') as mock_handle:
            result = ErrorHandler.with_error_handling(failing, "ctx", ErrorType.RENDER, default_return='fallback')

        assert result == 'fallback'
        assert mock_handle.call_args[0][1] == "ctx"
        assert mock_handle.call_args[0][2] == ErrorType.RENDER

    def test_recovery_actions_per_context(self):
        payload_actions = ErrorHandler.recovery_actions("parsing pasted payload")
        config_actions = ErrorHandler.recovery_actions("loading Config")
        other_actions = ErrorHandler.recovery_actions("rendering")

        assert [a.title for a in payload_actions] == ['Use Demo Form', 'Reset Field State']
        assert [a.title for a in config_actions] == ['Reload Configuration', 'Reset Field State']
        assert [a.title for a in other_actions] == ['Reset Field State']
        assert payload_actions[0].action is error_handler.use_demo_form

    def test_use_demo_form_drops_custom_payload(self):
        with patch('realments.error_handler.st') as mock_st:
            mock_st.session_state = {'custom_payload': {'elements': []}, 'other': 1}
            error_handler.use_demo_form()

        assert mock_st.session_state == {'other': 1}
        mock_st.rerun.assert_called_once()


class TestSafeOperations:
    """Test cases for the safe wrappers."""

    def test_valid_payload(self):
        payload = SafeOperations.safe_json_payload('{"formId": "f", "elements": []}')
        assert payload == {'formId': 'f', 'elements': []}

    def test_invalid_json_returns_default(self):
        with patch.object(ErrorHandler, '_display_error') as mock_display:
            payload = SafeOperations.safe_json_payload('{not json', default={'elements': []})

        assert payload == {'elements': []}
        assert "not valid json" in mock_display.call_args[0][0].lower()
        assert [a.title for a in mock_display.call_args[0][2]] == ['Use Demo Form', 'Reset Field State']

    def test_non_object_payload(self):
        with patch.object(ErrorHandler, '_display_error') as mock_display:
            assert SafeOperations.safe_json_payload('[1, 2]') is None

        assert "invalid values" in mock_display.call_args[0][0].lower()

    def test_payload_without_elements(self):
        with patch.object(ErrorHandler, '_display_error') as mock_display:
            assert SafeOperations.safe_json_payload('{"formId": "f"}') is None

        assert "missing a required key" in mock_display.call_args[0][0].lower()
