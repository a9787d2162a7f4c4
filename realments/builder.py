"""
Fluent form builder for Realments.

Usage:

    form = FormBuilder()
    form.open({'action': '/register', 'css_framework': 'tailwind'})
    form.text('Full Name').rules('required|min:3')
    form.email('Email').rules('required|email')
    form.select('Country', {0: 'Pick one', 'id': 'Indonesia', 'sg': 'Singapore'})
    form.close('Register')
    payload = form.render()

Every field method returns a FieldHandle bound to the descriptor it created.
Malformed input never raises; defaults are substituted instead.
"""

import json
import logging
from typing import Dict, Any, List, Optional, Type, Union

from pydantic import BaseModel, ValidationError

from .config_loader import get_config_value
from .descriptors import (
    AddButtonConfig, AddMoreConfig, AutocompleteField, ButtonField, CaptchaField,
    CheckboxField, ColorField, DateRangeField, FieldDescriptor, FileField,
    FormCloseField, FormOpenField, FormPayload, FormSchema, HiddenField,
    InputField, RadioField, RangeField, RichTextField, SelectField, SwitchField,
    TagSettings, TagsField, TemporalField, TextareaField, ThumbnailConfig,
    ValidationSpec, WysiwygConfig, format_choice_options, format_radio_options,
    format_select_options, make_descriptor, random_suffix, slugify,
)
from .session import SessionStore
from .themes import button_class

logger = logging.getLogger(__name__)

DEFAULT_ENCTYPE = 'application/x-www-form-urlencoded'
MULTIPART_ENCTYPE = 'multipart/form-data'


class FieldHandle:
    """
    Reference to one descriptor created by a builder method.

    ``rules()`` attaches validation to exactly this descriptor. Any other
    attribute is looked up on the builder, so chains keep reading naturally:
    ``form.text('Name').rules('required').email('Email')``.
    """

    def __init__(self, builder: 'FormBuilder', descriptor: FieldDescriptor):
        self._builder = builder
        self._descriptor = descriptor

    @property
    def descriptor(self) -> FieldDescriptor:
        return self._descriptor

    @property
    def builder(self) -> 'FormBuilder':
        return self._builder

    def rules(self, rules: Union[str, List[Any]], messages: Optional[Dict[str, str]] = None) -> 'FieldHandle':
        if isinstance(messages, dict):
            messages = {str(k): str(v) for k, v in messages.items()}
        else:
            messages = {}
        self._descriptor.validation = _sub_config(ValidationSpec, {
            'rules': '' if rules is None else rules,
            'messages': messages
        })
        logger.debug(f"Attached rules to '{self._descriptor.name}': {rules}")
        return self

    def __getattr__(self, item: str):
        if item.startswith('_'):
            raise AttributeError(item)
        return getattr(self._builder, item)

    def __repr__(self) -> str:
        return f"FieldHandle({self._descriptor.type}:{self._descriptor.name})"


class FormBuilder:
    """Accumulates field descriptors for one form instance."""

    def __init__(self, css_framework: Optional[str] = None, theme_mode: Optional[str] = None):
        self.form_id = f"form_{random_suffix(8)}"
        self.method = get_config_value('forms', 'default_method', 'POST')
        self.action = ''
        self.enctype = DEFAULT_ENCTYPE
        self.css_framework = css_framework or get_config_value('forms', 'default_css_framework', 'bootstrap')
        self.theme_mode = theme_mode or get_config_value('forms', 'default_theme_mode', 'light')
        self.elements: List[FieldDescriptor] = []
        self._opened = False
        self._explicit_enctype = False
        self._current: Optional[FieldHandle] = None

    # Form boundaries

    def open(self, attributes: Optional[Dict[str, Any]] = None) -> 'FormBuilder':
        """
        Start a new form, discarding any previously added fields.

        Args:
            attributes: Form settings and extra HTML attributes. Recognized keys:
                id, method, action, enctype, files, css_framework, theme_mode

        Returns:
            The builder
        """
        attrs = dict(attributes or {})
        self.elements = []
        self._current = None
        self.method = get_config_value('forms', 'default_method', 'POST')
        self.action = ''
        self.enctype = DEFAULT_ENCTYPE
        self._explicit_enctype = False

        if attrs.get('id'):
            self.form_id = str(attrs.pop('id'))
        else:
            attrs.pop('id', None)

        if attrs.get('method'):
            self.method = str(attrs.pop('method')).upper()
        if 'action' in attrs:
            self.action = str(attrs.pop('action') or '')

        files = attrs.pop('files', False)
        if attrs.get('enctype'):
            self.enctype = str(attrs.pop('enctype'))
            self._explicit_enctype = True
        elif files:
            self.enctype = MULTIPART_ENCTYPE

        if attrs.get('css_framework'):
            self.css_framework = str(attrs.pop('css_framework'))
        if attrs.get('theme_mode'):
            self.theme_mode = str(attrs.pop('theme_mode'))

        self.elements.append(FormOpenField(
            form_id=self.form_id,
            method=self.method,
            action=self.action,
            enctype=self.enctype,
            attributes=attrs,
            css_framework=self.css_framework,
            theme_mode=self.theme_mode
        ))
        self._opened = True
        logger.debug(f"Opened form {self.form_id} ({self.method} {self.action or '<self>'})")
        return self

    def close(self, submit_text: Optional[str] = 'Submit',
              attributes: Optional[Dict[str, Any]] = None) -> 'FormBuilder':
        """
        Finish the form with an optional submit button.

        Args:
            submit_text: Button text, or None to omit the button entirely
            attributes: Extra attributes merged over the button defaults

        Returns:
            The builder
        """
        self._ensure_open()
        self._current = None
        attrs = dict(attributes or {})

        if submit_text is not None:
            button_attrs = {'type': 'submit', 'class': button_class(self.css_framework)}
            button_attrs.update(attrs)
            self.elements.append(ButtonField(
                text=str(submit_text),
                attributes=button_attrs,
                css_framework=self.css_framework,
                theme_mode=self.theme_mode
            ))

        self.elements.append(FormCloseField(
            submit_text=submit_text,
            attributes=attrs,
            css_framework=self.css_framework,
            theme_mode=self.theme_mode
        ))
        logger.debug(f"Closed form {self.form_id} with {len(self.elements)} element(s)")
        return self

    def rules(self, rules: Union[str, List[Any]], messages: Optional[Dict[str, str]] = None) -> 'FormBuilder':
        """
        Attach validation to the field added by the previous call.

        A no-op when there is no such field (before any field, or directly
        after open() or close()).
        """
        if self._current is None:
            logger.debug("rules() called with no current field; ignoring")
            return self

        self._current.rules(rules, messages)
        return self

    # Internals

    def _ensure_open(self) -> None:
        if not self._opened:
            logger.warning("Field added before open(); opening form with defaults")
            self.open()

    def _add(self, descriptor: FieldDescriptor) -> FieldHandle:
        self.elements.append(descriptor)
        handle = FieldHandle(self, descriptor)
        self._current = handle
        return handle

    def _make(self, model, field_type: str, name: Any, attributes: Optional[Dict[str, Any]], **fields) -> FieldDescriptor:
        return make_descriptor(
            model, field_type, name, attributes,
            css_framework=self.css_framework,
            theme_mode=self.theme_mode,
            **fields
        )

    def _input(self, field_type: str, name: Any, value: Any, attributes: Optional[Dict[str, Any]]) -> FieldHandle:
        self._ensure_open()
        attrs = dict(attributes or {})
        add_more = _pop_add_more(attrs)
        return self._add(self._make(InputField, field_type, name, attrs, value=value, add_more=add_more))

    # Scalar inputs

    def text(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        return self._input('text', name, value, attributes)

    def email(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        return self._input('email', name, value, attributes)

    def number(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        return self._input('number', name, value, attributes)

    def password(self, name: Any, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        return self._input('password', name, None, attributes)

    def hidden(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        attrs = dict(attributes or {})
        attrs.setdefault('label', False)
        return self._add(self._make(HiddenField, 'hidden', name, attrs, value=value))

    def color(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        return self._add(self._make(ColorField, 'color', name, attributes, value=value))

    def range(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        return self._add(self._make(RangeField, 'range', name, attributes, value=value))

    def captcha(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        return self._add(self._make(CaptchaField, 'captcha', name, attributes, value=value))

    # Dates

    def date(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        return self._add(self._make(TemporalField, 'date', name, attributes, value=value))

    def time(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        return self._add(self._make(TemporalField, 'time', name, attributes, value=value))

    def datetime(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        return self._add(self._make(TemporalField, 'datetime', name, attributes, value=value))

    def daterange(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        return self._add(self._make(DateRangeField, 'daterange', name, attributes, value=_pair(value)))

    # Long text

    def textarea(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        attrs = dict(attributes or {})
        wysiwyg = _pop_wysiwyg(attrs, enabled_default=False)
        return self._add(self._make(TextareaField, 'textarea', name, attrs, value=value, wysiwyg=wysiwyg))

    def richtext(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        attrs = dict(attributes or {})
        wysiwyg = _pop_wysiwyg(attrs, enabled_default=True)
        return self._add(self._make(RichTextField, 'richtext', name, attrs, value=value, wysiwyg=wysiwyg))

    # Choices

    def select(self, name: Any, values: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        """
        Add a select.

        Args:
            name: Field name
            values: Option map; the entry keyed 0 is the placeholder
            attributes: HTML attributes plus multiselect, selected, add_button,
                max_additions, button_position, button_class, button_text, added_items

        Returns:
            Handle to the new select descriptor
        """
        self._ensure_open()
        attrs = dict(attributes or {})
        multiselect = attrs.pop('multiselect', False) is True
        selected = attrs.pop('selected', None)

        add_button = _sub_config(AddButtonConfig, {
            'enabled': attrs.pop('add_button', False) is True,
            'max': _as_int(attrs.pop('max_additions', 5), 5),
            'position': attrs.pop('button_position', 'right'),
            'text': attrs.pop('button_text', 'Add'),
            'class_name': attrs.pop('button_class', None) or button_class(self.css_framework, 'primary', 'sm'),
            'added_items': _as_list(attrs.pop('added_items', None))
        })

        options = format_select_options(values, selected)
        value = [o.value for o in options if o.selected]
        if not multiselect:
            value = value[0] if value else None

        return self._add(self._make(
            SelectField, 'select', name, attrs,
            options=options, multiselect=multiselect, add_button=add_button, value=value
        ))

    def radio(self, name: Any, options: Any = None, checked: Any = None,
              attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        formatted_name = slugify(name)
        radio_options = format_radio_options(formatted_name, options, checked)
        return self._add(self._make(
            RadioField, 'radio', name, attributes,
            options=radio_options, value=checked
        ))

    def checkbox(self, name: Any, value: Any = '1', checked: bool = False,
                 attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        """
        Add a checkbox, or a checkbox group when ``attributes['options']`` is given.

        In group mode ``attributes['selected']`` (or a list ``value``) marks the
        initially checked options and the descriptor value is that list.
        """
        self._ensure_open()
        attrs = dict(attributes or {})
        choices = attrs.pop('options', None)

        if choices:
            selected = attrs.pop('selected', value if isinstance(value, (list, tuple)) else None)
            options = format_choice_options(choices, selected)
            return self._add(self._make(
                CheckboxField, 'checkbox', name, attrs,
                options=options, value=[o.value for o in options if o.selected], checked=False
            ))

        return self._add(self._make(
            CheckboxField, 'checkbox', name, attrs, value=value, checked=bool(checked)
        ))

    def switch(self, name: Any, value: Any = '1', checked: bool = False,
               attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        return self._add(self._make(SwitchField, 'switch', name, attributes, value=value, checked=bool(checked)))

    def autocomplete(self, name: Any, options: Any = None, value: Any = None,
                     attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        if isinstance(options, dict):
            suggestions = [str(v) for v in options.values()]
        else:
            suggestions = [str(v) for v in (options or [])]
        return self._add(self._make(AutocompleteField, 'autocomplete', name, attributes,
                                    options=suggestions, value=value))

    def tags(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        attrs = dict(attributes or {})
        settings = _sub_config(TagSettings, {
            'suggestions': [str(s) for s in _as_list(attrs.pop('suggestions', None))],
            'max_tags': _as_int(attrs.pop('max_tags', None), None),
            'allow_duplicates': bool(attrs.pop('allow_duplicates', False))
        })
        return self._add(self._make(TagsField, 'tags', name, attrs,
                                    value=_tag_list(value), tag_settings=settings))

    # Files

    def file(self, name: Any, value: Any = None, attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        attrs = dict(attributes or {})
        thumbnail = attrs.pop('thumbnail', False)
        if isinstance(thumbnail, dict):
            thumbnail_config = _sub_config(ThumbnailConfig, thumbnail)
        else:
            thumbnail_config = _sub_config(ThumbnailConfig, {
                'enabled': bool(thumbnail),
                'size': _as_int(attrs.pop('thumbnail_size', 100), 100),
                'position': attrs.pop('thumbnail_position', 'bottom')
            })
        multiple = bool(attrs.pop('multiple', False))

        if not self._explicit_enctype and self.enctype != MULTIPART_ENCTYPE:
            self._switch_to_multipart()

        return self._add(self._make(FileField, 'file', name, attrs, value=value,
                                    thumbnail=thumbnail_config, multiple=multiple))

    def _switch_to_multipart(self) -> None:
        self.enctype = MULTIPART_ENCTYPE
        for element in self.elements:
            if isinstance(element, FormOpenField):
                element.enctype = MULTIPART_ENCTYPE
        logger.debug(f"Form {self.form_id} switched to {MULTIPART_ENCTYPE} for file upload")

    # Buttons

    def button(self, text: str = 'Submit', attributes: Optional[Dict[str, Any]] = None) -> FieldHandle:
        self._ensure_open()
        attrs = {'type': 'button', 'class': button_class(self.css_framework, 'secondary')}
        attrs.update(attributes or {})
        return self._add(ButtonField(
            name=slugify(attrs.get('name', '')),
            text=str(text),
            attributes=attrs,
            css_framework=self.css_framework,
            theme_mode=self.theme_mode
        ))

    # Output

    def schema(self) -> FormSchema:
        return FormSchema(
            form_id=self.form_id,
            method=self.method,
            action=self.action,
            enctype=self.enctype,
            css_framework=self.css_framework,
            theme_mode=self.theme_mode,
            elements=list(self.elements)
        )

    def payload(self, errors: Optional[Dict[str, List[str]]] = None,
                old_input: Optional[Dict[str, Any]] = None) -> FormPayload:
        return FormPayload(
            form_id=self.form_id,
            elements=list(self.elements),
            errors=errors or {},
            old_input=old_input or {},
            css_framework=self.css_framework,
            theme_mode=self.theme_mode
        )

    def render(self, session: Optional[SessionStore] = None) -> Dict[str, Any]:
        """
        Serialize the form with the flashed errors and old input.

        Errors and old input are consumed, so they apply to this render only.

        Args:
            session: Session store (defaults to one backed by st.session_state)

        Returns:
            Wire payload dict
        """
        if session is None:
            session = SessionStore()

        errors = session.pull_errors()
        old_input = session.pull_old_input()
        if errors:
            logger.info(f"Rendering form {self.form_id} with errors on {len(errors)} field(s)")

        return self.payload(errors, old_input).to_wire()

    def to_json(self, session: Optional[SessionStore] = None, **kwargs) -> str:
        return json.dumps(self.render(session), **kwargs)


def _as_int(value: Any, default: Optional[int]) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _pair(value: Any) -> Optional[List[Optional[str]]]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        items = [None if v in (None, '') else str(v) for v in list(value)[:2]]
        return items + [None] * (2 - len(items))
    return [str(value), None]


def _tag_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [t.strip() for t in value.split(',') if t.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(t) for t in value]
    return [str(value)]


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _sub_config(model: Type[BaseModel], values: Dict[str, Any]) -> BaseModel:
    """
    Build a settings model, dropping values that fail validation.

    Fields whose value is rejected fall back to the model default. If what
    is left still fails, the all-default model is returned.
    """
    try:
        return model.model_validate(values)
    except ValidationError as e:
        rejected = {str(err['loc'][0]) for err in e.errors() if err.get('loc')}

    for name, info in model.model_fields.items():
        if info.alias in rejected:
            rejected.add(name)
    logger.warning(f"Ignoring invalid {model.__name__} settings: {', '.join(sorted(rejected))}")

    try:
        return model.model_validate({k: v for k, v in values.items() if str(k) not in rejected})
    except ValidationError:
        logger.warning(f"Using default {model.__name__} settings")
        return model()


def _pop_add_more(attrs: Dict[str, Any]) -> AddMoreConfig:
    add_more = attrs.pop('add_more', False)
    if isinstance(add_more, dict):
        return _sub_config(AddMoreConfig, add_more)
    return _sub_config(AddMoreConfig, {
        'enabled': bool(add_more),
        'max': _as_int(attrs.pop('add_more_max', 5), 5),
        'text': attrs.pop('add_more_text', 'Add more')
    })


def _pop_wysiwyg(attrs: Dict[str, Any], enabled_default: bool) -> WysiwygConfig:
    enabled = attrs.pop('wysiwyg', enabled_default)
    editor_config = attrs.pop('editor_config', None)
    return _sub_config(WysiwygConfig, {
        'enabled': enabled is True,
        'editor': attrs.pop('editor', 'tinymce'),
        'config': dict(editor_config) if isinstance(editor_config, dict) else {}
    })
