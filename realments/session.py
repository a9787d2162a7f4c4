"""
Session storage for Realments forms.

Holds the flashed validation errors and old input between a failed submission
and the next render, plus the per-field UI state buckets. Backed by Streamlit's
session state by default; any mutable mapping works (tests pass a plain dict).
"""

import streamlit as st
from typing import Dict, Any, List, Optional, Iterable, MutableMapping
import logging

logger = logging.getLogger(__name__)

ERRORS_KEY = '_realments_errors'
OLD_INPUT_KEY = '_realments_old_input'
FIELD_STATE_KEY = '_realments_field_state'

# Never restored into a re-rendered form
DONT_FLASH = ('password', 'password_confirmation', 'password-confirmation')


class SessionStore:
    """Flash-and-consume store for errors and old input."""

    def __init__(self, backing: Optional[MutableMapping[str, Any]] = None):
        self._backing = backing

    @property
    def backing(self) -> MutableMapping[str, Any]:
        if self._backing is None:
            return st.session_state
        return self._backing

    def flash_errors(self, errors: Dict[str, Any]) -> None:
        """
        Store validation errors for the next render.

        Args:
            errors: Field name mapped to one message or a list of messages
        """
        normalized: Dict[str, List[str]] = {}
        for field, messages in (errors or {}).items():
            if isinstance(messages, (list, tuple)):
                normalized[field] = [str(m) for m in messages]
            elif messages:
                normalized[field] = [str(messages)]

        self.backing[ERRORS_KEY] = normalized
        logger.debug(f"Flashed errors for fields: {list(normalized.keys())}")

    def flash_input(self, data: Dict[str, Any], exclude: Iterable[str] = DONT_FLASH) -> None:
        """
        Store submitted values so the next render can restore them.

        Args:
            data: Submitted values keyed by field name
            exclude: Field names that must not be restored
        """
        excluded = set(exclude)
        kept = {k: v for k, v in (data or {}).items() if k not in excluded}
        self.backing[OLD_INPUT_KEY] = kept
        logger.debug(f"Flashed old input for {len(kept)} field(s)")

    def has_errors(self) -> bool:
        return bool(self.backing.get(ERRORS_KEY))

    def pull_errors(self) -> Dict[str, List[str]]:
        """Return and remove the flashed errors."""
        errors = self.backing.get(ERRORS_KEY) or {}
        if ERRORS_KEY in self.backing:
            del self.backing[ERRORS_KEY]
        return dict(errors)

    def pull_old_input(self) -> Dict[str, Any]:
        """Return and remove the flashed old input."""
        old_input = self.backing.get(OLD_INPUT_KEY) or {}
        if OLD_INPUT_KEY in self.backing:
            del self.backing[OLD_INPUT_KEY]
        return dict(old_input)

    def field_state_bucket(self, form_id: str) -> Dict[str, Any]:
        """
        Get the mutable mapping that holds UI state for one form.

        Created on first use; the same dict is returned on every call so state
        survives reruns.
        """
        buckets = self.backing.get(FIELD_STATE_KEY)
        if buckets is None:
            buckets = {}
            self.backing[FIELD_STATE_KEY] = buckets

        if form_id not in buckets:
            buckets[form_id] = {}
        return buckets[form_id]

    def clear_field_state(self, form_id: Optional[str] = None) -> None:
        buckets = self.backing.get(FIELD_STATE_KEY) or {}
        if form_id is None:
            buckets.clear()
        else:
            buckets.pop(form_id, None)
        logger.info(f"Cleared field state for {form_id or 'all forms'}")
