"""
Form renderer for Realments.

Turns a wire payload into an element tree: resolves each field's effective
value (old input over the descriptor default) and first error, dispatches to
the type-specific renderer and nests the fields inside the <form> opened by
the form_open marker. A field that fails to render is replaced by a visible
placeholder; the rest of the form still renders.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Union

from markupsafe import Markup

from .config_loader import get_config
from .descriptors import (
    FieldDescriptor, FieldType, FormCloseField, FormOpenField, FormPayload,
    UnknownElement, parse_descriptor,
)
from .editor_loader import EditorAsset, EditorLoader
from .elements import RENDERERS, FieldView, render_failure, render_unknown
from .field_state import FieldStateStore
from .i18n import Translator
from .markup import Element, h, raw
from .themes import derive_classes, normalize_framework, normalize_theme

logger = logging.getLogger(__name__)

_uncovered = [t.value for t in FieldType if t not in RENDERERS]
if _uncovered:
    raise RuntimeError(f"No renderer registered for field types: {', '.join(_uncovered)}")


@dataclass
class RenderContext:
    """Per-render state combined with the schema; never written back into it."""
    errors: Dict[str, List[str]] = field(default_factory=dict)
    old_input: Dict[str, Any] = field(default_factory=dict)
    css_framework: str = 'bootstrap'
    theme_mode: str = 'light'
    csrf_token: Optional[str] = None

    def has_old_input(self, name: str) -> bool:
        return bool(name) and self.old_input.get(name) is not None

    def value_for(self, descriptor: FieldDescriptor) -> Any:
        if self.has_old_input(descriptor.name):
            return self.old_input[descriptor.name]
        return descriptor.value

    def error_for(self, name: str) -> Optional[str]:
        """First message for the field, including ``name.*`` keys for array fields."""
        if not name:
            return None

        messages = self.errors.get(name)
        if not messages:
            prefix = f"{name}."
            for key, values in self.errors.items():
                if key.startswith(prefix) and values:
                    messages = values
                    break

        if not messages:
            return None
        if isinstance(messages, str):
            return messages
        return str(messages[0])


def _payload_dict(payload: Union[FormPayload, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(payload, FormPayload):
        return payload.to_wire()
    return payload or {}


class FormRenderer:
    """
    Renders wire payloads to element trees and HTML.

    Args:
        translator: Translator for labels and messages
        editor_loader: Loader consulted for rich-text editor assets
        state_store: Per-field UI state (a fresh in-memory store if omitted)
        csrf_token: Token emitted into non-GET forms
        container_id: Id of the mount container (defaults to ``forms.container_id``)
    """

    def __init__(self, translator: Optional[Translator] = None,
                 editor_loader: Optional[EditorLoader] = None,
                 state_store: Optional[FieldStateStore] = None,
                 csrf_token: Optional[str] = None,
                 container_id: Optional[str] = None):
        config = get_config()
        self.translator = translator or Translator()
        self.editor_loader = editor_loader
        self.state_store = state_store or FieldStateStore()
        self.csrf_token = csrf_token
        self.container_id = container_id or config.get('forms', {}).get('container_id', 'realments-form')
        self.settings = {'captcha': config.get('captcha', {})}

    def context_for(self, payload: Union[FormPayload, Dict[str, Any]]) -> RenderContext:
        data = _payload_dict(payload)
        return RenderContext(
            errors=dict(data.get('errors') or {}),
            old_input=dict(data.get('oldInput') or {}),
            css_framework=normalize_framework(data.get('cssFramework')),
            theme_mode=normalize_theme(data.get('themeMode')),
            csrf_token=self.csrf_token
        )

    def render_element(self, descriptor: Union[FieldDescriptor, UnknownElement, Dict[str, Any]],
                       context: RenderContext) -> Optional[Element]:
        """
        Render one field.

        Args:
            descriptor: Descriptor model or raw wire dict
            context: Errors, old input and theme for this render

        Returns:
            The field's element, or None for the form_close marker
        """
        parsed = parse_descriptor(descriptor)
        if isinstance(parsed, UnknownElement):
            return render_unknown(parsed, self.translator)

        error = context.error_for(parsed.name)
        view = FieldView(
            descriptor=parsed,
            value=context.value_for(parsed),
            error=error,
            has_old_input=context.has_old_input(parsed.name),
            classes=derive_classes(context.css_framework, context.theme_mode, error is not None),
            translator=self.translator,
            states=self.state_store,
            editor_loader=self.editor_loader,
            csrf_token=context.csrf_token,
            settings=self.settings
        )

        try:
            return RENDERERS[parsed.field_type](view)
        except Exception as e:
            logger.exception(f"Failed to render {parsed.type} field '{parsed.name}': {e}")
            return render_failure(parsed, self.translator)

    def render(self, payload: Union[FormPayload, Dict[str, Any]]) -> Element:
        """
        Render a whole payload into its mount container.

        Fields between form_open and form_close are nested inside the <form>.
        """
        data = _payload_dict(payload)
        context = self.context_for(data)
        classes = derive_classes(context.css_framework, context.theme_mode)

        container = Element('div', {
            'id': self.container_id,
            'class': classes.container,
            'data-form-id': data.get('formId'),
            'data-css-framework': context.css_framework,
            'data-theme': context.theme_mode,
        })
        parent = container

        for raw_element in data.get('elements') or []:
            parsed = parse_descriptor(raw_element)

            if isinstance(parsed, FormCloseField):
                parent = container
                continue

            node = self.render_element(parsed, context)
            if node is None:
                continue

            if isinstance(parsed, FormOpenField):
                container.append(node)
                parent = node
            else:
                parent.append(node)

        logger.debug(f"Rendered form {data.get('formId')} ({context.css_framework}/{context.theme_mode})")
        return container

    def render_html(self, payload: Union[FormPayload, Dict[str, Any]]) -> Markup:
        return self.render(payload).render()

    def mount_markup(self, payload: Union[FormPayload, Dict[str, Any]]) -> Markup:
        """Empty mount container plus the payload as JSON, for a client-side bundle."""
        data = _payload_dict(payload)
        encoded = json.dumps(data).replace('</', '<\\/')
        container = h('div', {'id': self.container_id, 'data-form-id': data.get('formId')})
        script = h('script', {'type': 'application/json', 'id': f"{self.container_id}-data"}, raw(encoded))
        return Markup(container.render() + script.render())

    @staticmethod
    def editors_in(payload: Union[FormPayload, Dict[str, Any]]) -> List[str]:
        editors: List[str] = []
        for raw_element in _payload_dict(payload).get('elements') or []:
            wysiwyg = getattr(parse_descriptor(raw_element), 'wysiwyg', None)
            if wysiwyg is not None and wysiwyg.enabled and wysiwyg.editor not in editors:
                editors.append(wysiwyg.editor)
        return editors

    async def prepare(self, payload: Union[FormPayload, Dict[str, Any]]) -> Dict[str, Optional[EditorAsset]]:
        """Load every rich-text editor the payload uses before the first render."""
        editors = self.editors_in(payload)
        if not editors or self.editor_loader is None:
            return {}
        return await self.editor_loader.preload(editors)

    async def aclose(self) -> None:
        """Cancel pending editor loads."""
        if self.editor_loader is not None:
            await self.editor_loader.aclose()
