"""
Field descriptor models for Realments forms.

A form is an ordered list of field descriptors. Each descriptor kind is its
own pydantic model tagged by a ``type`` literal, and ``Descriptor`` is the
discriminated union over all of them. The descriptor factory at the bottom of
this module is the single place where names, labels and ids are normalized.
"""

import logging
import re
import secrets
import string
import unicodedata
from enum import Enum
from string import capwords
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits


class FieldType(str, Enum):
    """Every kind of element a form schema can contain."""
    TEXT = 'text'
    EMAIL = 'email'
    PASSWORD = 'password'
    NUMBER = 'number'
    DATE = 'date'
    TIME = 'time'
    DATETIME = 'datetime'
    DATERANGE = 'daterange'
    TEXTAREA = 'textarea'
    SELECT = 'select'
    CHECKBOX = 'checkbox'
    RADIO = 'radio'
    SWITCH = 'switch'
    FILE = 'file'
    HIDDEN = 'hidden'
    RANGE = 'range'
    COLOR = 'color'
    TAGS = 'tags'
    RICHTEXT = 'richtext'
    CAPTCHA = 'captcha'
    AUTOCOMPLETE = 'autocomplete'
    BUTTON = 'button'
    FORM_OPEN = 'form_open'
    FORM_CLOSE = 'form_close'


class _Model(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)


# Sub-configuration models

class Option(_Model):
    value: Any = ''
    label: str = ''
    selected: bool = False


class RadioOption(_Model):
    id: str
    value: Any
    label: str
    checked: bool = False


class ValidationSpec(_Model):
    """Opaque rule metadata for an external validator, e.g. ``'required|min:3'``."""
    rules: Union[str, List[Any]] = ''
    messages: Dict[str, str] = Field(default_factory=dict)


class WysiwygConfig(_Model):
    enabled: bool = False
    editor: str = 'tinymce'
    config: Dict[str, Any] = Field(default_factory=dict)


class ThumbnailConfig(_Model):
    enabled: bool = False
    size: int = 100
    position: str = 'bottom'


class AddButtonConfig(_Model):
    """Extra select groups the user can add next to the main select."""
    enabled: bool = False
    max: int = 5
    position: str = 'right'
    text: str = 'Add'
    class_name: str = Field(default='', alias='class')
    added_items: List[Any] = Field(default_factory=list)


class AddMoreConfig(_Model):
    """Duplicate inputs sharing one ``name[]`` field."""
    enabled: bool = False
    max: int = 5
    text: str = 'Add more'


class TagSettings(_Model):
    suggestions: List[str] = Field(default_factory=list)
    max_tags: Optional[int] = None
    allow_duplicates: bool = False


# Descriptor variants

class FieldDescriptor(_Model):
    """Attributes shared by every descriptor kind."""
    type: str
    name: str = ''
    label: str = ''
    show_label: bool = True
    value: Any = None
    attributes: Dict[str, Any] = Field(default_factory=dict)
    validation: Optional[ValidationSpec] = None
    css_framework: str = 'bootstrap'
    theme_mode: str = 'light'

    @property
    def field_type(self) -> FieldType:
        return FieldType(self.type)

    @property
    def element_id(self) -> str:
        return str(self.attributes.get('id') or self.name)


class InputField(FieldDescriptor):
    type: Literal['text', 'email', 'number', 'password']
    add_more: AddMoreConfig = Field(default_factory=AddMoreConfig)


class TemporalField(FieldDescriptor):
    type: Literal['date', 'time', 'datetime']


class DateRangeField(FieldDescriptor):
    type: Literal['daterange'] = 'daterange'
    value: Optional[List[Optional[str]]] = None


class TextareaField(FieldDescriptor):
    type: Literal['textarea'] = 'textarea'
    wysiwyg: WysiwygConfig = Field(default_factory=WysiwygConfig)


class RichTextField(FieldDescriptor):
    type: Literal['richtext'] = 'richtext'
    wysiwyg: WysiwygConfig = Field(default_factory=lambda: WysiwygConfig(enabled=True))


class SelectField(FieldDescriptor):
    type: Literal['select'] = 'select'
    options: List[Option] = Field(default_factory=list)
    multiselect: bool = False
    add_button: AddButtonConfig = Field(default_factory=AddButtonConfig)


class CheckboxField(FieldDescriptor):
    type: Literal['checkbox'] = 'checkbox'
    value: Any = '1'
    checked: bool = False
    options: List[Option] = Field(default_factory=list)

    @property
    def is_group(self) -> bool:
        return bool(self.options)


class RadioField(FieldDescriptor):
    type: Literal['radio'] = 'radio'
    options: List[RadioOption] = Field(default_factory=list)


class SwitchField(FieldDescriptor):
    type: Literal['switch'] = 'switch'
    value: Any = '1'
    checked: bool = False


class FileField(FieldDescriptor):
    type: Literal['file'] = 'file'
    thumbnail: ThumbnailConfig = Field(default_factory=ThumbnailConfig)
    multiple: bool = False


class HiddenField(FieldDescriptor):
    type: Literal['hidden'] = 'hidden'


class RangeField(FieldDescriptor):
    type: Literal['range'] = 'range'


class ColorField(FieldDescriptor):
    type: Literal['color'] = 'color'


class TagsField(FieldDescriptor):
    type: Literal['tags'] = 'tags'
    value: Optional[List[str]] = None
    tag_settings: TagSettings = Field(default_factory=TagSettings)


class CaptchaField(FieldDescriptor):
    type: Literal['captcha'] = 'captcha'


class AutocompleteField(FieldDescriptor):
    type: Literal['autocomplete'] = 'autocomplete'
    options: List[str] = Field(default_factory=list)


class ButtonField(FieldDescriptor):
    type: Literal['button'] = 'button'
    text: str = 'Submit'
    show_label: bool = False


class FormOpenField(FieldDescriptor):
    type: Literal['form_open'] = 'form_open'
    form_id: str = ''
    method: str = 'POST'
    action: str = ''
    enctype: str = 'application/x-www-form-urlencoded'
    show_label: bool = False


class FormCloseField(FieldDescriptor):
    type: Literal['form_close'] = 'form_close'
    submit_text: Optional[str] = None
    show_label: bool = False


Descriptor = Annotated[
    Union[
        InputField, TemporalField, DateRangeField, TextareaField, RichTextField,
        SelectField, CheckboxField, RadioField, SwitchField, FileField,
        HiddenField, RangeField, ColorField, TagsField, CaptchaField,
        AutocompleteField, ButtonField, FormOpenField, FormCloseField,
    ],
    Field(discriminator='type'),
]

_descriptor_adapter = TypeAdapter(Descriptor)


class UnknownElement(_Model):
    """Stand-in for a payload entry that is not a valid descriptor."""
    type: str = ''
    reason: str = ''
    raw: Dict[str, Any] = Field(default_factory=dict)

    @property
    def name(self) -> str:
        return str(self.raw.get('name', ''))


class FormSchema(_Model):
    """Ordered descriptors plus form-level metadata for one form instance."""
    form_id: str
    method: str = 'POST'
    action: str = ''
    enctype: str = 'application/x-www-form-urlencoded'
    css_framework: str = 'bootstrap'
    theme_mode: str = 'light'
    elements: List[Descriptor] = Field(default_factory=list)


class FormPayload(_Model):
    """Wire payload handed from the builder to the renderer."""
    form_id: str = Field(alias='formId')
    elements: List[Descriptor] = Field(default_factory=list)
    errors: Dict[str, List[str]] = Field(default_factory=dict)
    old_input: Dict[str, Any] = Field(default_factory=dict, alias='oldInput')
    css_framework: str = Field(default='bootstrap', alias='cssFramework')
    theme_mode: str = Field(default='light', alias='themeMode')

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True)


def parse_descriptor(data: Any) -> Union[FieldDescriptor, UnknownElement]:
    """
    Turn one payload entry into a descriptor model.

    Entries that are already models pass through. Anything that does not
    validate becomes an UnknownElement so the renderer can show a placeholder
    instead of failing the whole form.
    """
    if isinstance(data, (FieldDescriptor, UnknownElement)):
        return data

    if not isinstance(data, Mapping):
        logger.warning(f"Ignoring non-mapping form element: {data!r}")
        return UnknownElement(type='', reason='not a mapping')

    element_type = str(data.get('type', ''))
    try:
        return _descriptor_adapter.validate_python(dict(data))
    except ValidationError as e:
        known = element_type in {t.value for t in FieldType}
        reason = 'invalid element' if known else 'unknown element type'
        logger.warning(f"Could not parse form element of type '{element_type}': {e.error_count()} error(s)")
        return UnknownElement(type=element_type, reason=reason, raw=dict(data))


# Descriptor factory

def slugify(value: Any, separator: str = '-') -> str:
    """
    Slugify a human-readable name into a form field name.

    ASCII-folds, lowercases, turns whitespace, underscores and dashes into
    ``separator`` and drops any other punctuation. Idempotent.
    """
    text = unicodedata.normalize('NFKD', str(value or '')).encode('ascii', 'ignore').decode('ascii')
    text = text.lower().replace('@', ' at ')
    text = re.sub(r'[\s_\-]+', separator, text)
    text = re.sub(rf'[^a-z0-9{re.escape(separator)}]', '', text)
    text = re.sub(rf'{re.escape(separator)}+', separator, text)
    return text.strip(separator)


def title_label(name: Any) -> str:
    """Title-case a raw field name for display ("full_name" -> "Full Name")."""
    words = re.sub(r'[\s_\-]+', ' ', str(name or '')).strip()
    return capwords(words)


def random_suffix(length: int = 5) -> str:
    return ''.join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def generate_id(name: str, length: int = 5) -> str:
    return f"{name}_{random_suffix(length)}"


def resolve_label(name: Any, attributes: Dict[str, Any]) -> Tuple[str, bool]:
    """
    Work out label text and visibility, consuming ``attributes['label']``.

    Only an explicit ``False`` hides the label; a string replaces the text.
    """
    label_setting = attributes.pop('label', None)
    show_label = label_setting is not False
    if isinstance(label_setting, str) and label_setting:
        return label_setting, show_label
    return title_label(name), show_label


def _iter_choices(values: Any):
    if isinstance(values, Mapping):
        return list(values.items())
    if isinstance(values, (list, tuple)):
        return list(enumerate(values))
    return []


def _is_placeholder_key(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool) and key == 0


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def format_select_options(values: Any, selected: Any = None) -> List[Option]:
    """
    Build select options from a caller-supplied map.

    The entry keyed ``0`` becomes a non-selectable placeholder. String keys
    are option values; for other keys the item itself is the value.
    """
    selected_values = {str(v) for v in _as_list(selected)}
    options: List[Option] = []

    for key, item in _iter_choices(values):
        if _is_placeholder_key(key):
            options.append(Option(
                value='',
                label=str(item) if item is not None else 'Select an option',
                selected=False
            ))
            continue

        option_value = key if isinstance(key, str) else item
        options.append(Option(
            value=option_value,
            label=title_label(str(item).replace('_', ' ')),
            selected=str(option_value) in selected_values
        ))

    return options


def format_choice_options(values: Any, selected: Any = None) -> List[Option]:
    """Checkbox-group options: like select options but without a placeholder."""
    selected_values = {str(v) for v in _as_list(selected)}
    options: List[Option] = []

    for key, item in _iter_choices(values):
        option_value = key if isinstance(key, str) else item
        options.append(Option(
            value=option_value,
            label=title_label(str(item).replace('_', ' ')),
            selected=str(option_value) in selected_values
        ))

    return options


def format_radio_options(name: str, values: Any, checked: Any = None) -> List[RadioOption]:
    options: List[RadioOption] = []

    for key, item in _iter_choices(values):
        option_value = key if isinstance(key, str) else item
        options.append(RadioOption(
            id=f"{name}_{slugify(option_value, '_')}_{random_suffix(3)}",
            value=option_value,
            label=title_label(str(item).replace('_', ' ')),
            checked=checked is not None and str(option_value) == str(checked)
        ))

    return options


def make_descriptor(model: Type[FieldDescriptor], field_type: str, name: Any,
                    attributes: Optional[Dict[str, Any]] = None, *,
                    css_framework: str = 'bootstrap', theme_mode: str = 'light',
                    assign_id: bool = True, **fields: Any) -> FieldDescriptor:
    """
    Shared descriptor factory used by every builder method.

    Args:
        model: Descriptor class to instantiate
        field_type: Value for the ``type`` tag
        name: Raw, human-readable field name
        attributes: Caller attributes; builder-only keys must already be removed,
            except ``label`` which is consumed here
        css_framework: Framework recorded on the descriptor
        theme_mode: Theme recorded on the descriptor
        assign_id: Whether to generate ``attributes['id']`` when missing
        **fields: Variant-specific fields

    Returns:
        The new descriptor
    """
    attrs = dict(attributes or {})
    formatted_name = slugify(name)
    label, show_label = resolve_label(name, attrs)

    if assign_id and not attrs.get('id'):
        attrs['id'] = generate_id(formatted_name or field_type)

    return model(
        type=field_type,
        name=formatted_name,
        label=label,
        show_label=show_label,
        attributes=attrs,
        css_framework=css_framework,
        theme_mode=theme_mode,
        **fields
    )
