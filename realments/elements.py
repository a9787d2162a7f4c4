"""
Type-specific element renderers.

Each renderer takes a FieldView (descriptor plus everything resolved for this
render: effective value, first error, class bundle, translator and state) and
returns an Element tree. ``RENDERERS`` maps every FieldType to its renderer.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .descriptors import (
    AutocompleteField, ButtonField, CheckboxField, DateRangeField,
    FieldDescriptor, FieldType, FileField, FormOpenField, InputField,
    RadioField, SelectField, SwitchField, TagsField, TemporalField,
    TextareaField, UnknownElement,
)
from .editor_loader import STATUS_FAILED, EditorLoader
from .field_state import (
    AutocompleteState, CaptchaState, CheckGroupState, CheckState, ColorState,
    DateRangeState, FieldStateStore, FileState, InputState, PasswordState,
    RadioState, RangeState, RichTextState, SelectState, TagsState, DEFAULT_COLOR,
)
from .i18n import Translator
from .markup import Element, h
from .themes import ClassBundle, join_classes
from .validation import html5_attributes, parse_rules

logger = logging.getLogger(__name__)

SPOOFABLE_METHODS = ('GET', 'POST')

TEMPORAL_INPUT_TYPES = {
    'date': 'date',
    'time': 'time',
    'datetime': 'datetime-local',
}


@dataclass
class FieldView:
    """One descriptor resolved against a render context."""
    descriptor: FieldDescriptor
    value: Any
    error: Optional[str]
    has_old_input: bool
    classes: ClassBundle
    translator: Translator
    states: FieldStateStore
    editor_loader: Optional[EditorLoader] = None
    csrf_token: Optional[str] = None
    settings: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def element_id(self) -> str:
        return self.descriptor.element_id

    def t(self, key: str, default: Optional[str] = None, **params: Any) -> str:
        return self.translator.t(key, default, **params)

    def state(self, seed: Any, factory: Callable[[], Any]) -> Any:
        key = FieldStateStore.key(self.descriptor.type, self.name)
        return self.states.get(key, seed, factory)


def _as_list(value: Any) -> List[Any]:
    if value is None or value == '':
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


# Shared pieces

def control_attrs(view: FieldView, slot: str, input_type: Optional[str] = None,
                  name: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    """
    Attributes for a form control.

    Caller attributes are kept, the slot class is merged with any caller
    class, rules are mirrored as HTML5 constraints and the parsed rules are
    exposed as ``data-rules`` for client scripts.
    """
    caller = dict(view.descriptor.attributes)
    caller.pop('label', None)
    extra_class = caller.pop('class', None)

    attrs: Dict[str, Any] = {}
    if input_type:
        attrs['type'] = input_type
    attrs['id'] = caller.pop('id', None) or view.element_id
    attrs['name'] = view.name if name is None else name
    attrs['class'] = join_classes(view.classes.get(slot), extra_class)

    validation = view.descriptor.validation
    if validation is not None and validation.rules:
        for key, value in html5_attributes(validation.rules, view.descriptor.type).items():
            caller.setdefault(key, value)
        attrs['data-rules'] = parse_rules(validation.rules)

    if view.error:
        attrs['aria-invalid'] = 'true'
        attrs['aria-describedby'] = f"{view.element_id}_error"

    attrs.update(caller)
    attrs.update(extra)
    return attrs


def label_for(view: FieldView, target_id: Optional[str] = None, slot: str = 'label') -> Optional[Element]:
    if not view.descriptor.show_label:
        return None
    return h('label', {'for': target_id or view.element_id, 'class': view.classes.get(slot)},
             view.t(view.descriptor.label))


def error_for(view: FieldView) -> Optional[Element]:
    if not view.error:
        return None
    return h('div', {'id': f"{view.element_id}_error", 'class': view.classes.error}, view.error)


def form_group(view: FieldView, *children: Any) -> Element:
    return Element('div', {
        'class': view.classes.form_group,
        'data-field': view.name,
        'data-type': view.descriptor.type,
    }, list(children))


def action_button(view: FieldView, action: str, text: str, slot: str = 'secondary_button',
                  disabled: bool = False, **data: Any) -> Element:
    attrs: Dict[str, Any] = {
        'type': 'button',
        'class': view.classes.get(slot),
        'data-action': action,
        'data-target': view.element_id,
    }
    for key, value in data.items():
        attrs[f"data-{key.replace('_', '-')}"] = value
    attrs['disabled'] = disabled
    return h('button', attrs, text)


# Text-like inputs

def render_input(view: FieldView) -> Element:
    descriptor: InputField = view.descriptor
    if descriptor.type == 'password':
        return render_password(view)

    add_more = descriptor.add_more
    if add_more.enabled:
        return _render_add_more(view)

    state: InputState = view.state(view.value, lambda: InputState.from_value(view.value))
    control = h('input', control_attrs(view, 'input', descriptor.type, value=state.value))
    return form_group(view, label_for(view), control, error_for(view))


def _render_add_more(view: FieldView) -> Element:
    descriptor: InputField = view.descriptor
    add_more = descriptor.add_more
    state: InputState = view.state(
        view.value, lambda: InputState.from_value(view.value, add_more.max)
    )

    rows = []
    for index, value in enumerate(state.values):
        row_id = view.element_id if index == 0 else f"{view.element_id}_{index}"
        control = h('input', control_attrs(
            view, 'input', descriptor.type, name=f"{view.name}[]", id=row_id, value=value
        ))
        remove = None
        if len(state.values) > 1:
            remove = action_button(view, 'remove-row', view.t('ui.remove', 'Remove'),
                                   slot='danger_button', index=index)
        rows.append(h('div', {'class': view.classes.input_group, 'data-row': index}, control, remove))

    add = action_button(view, 'add-row', view.t(add_more.text),
                        disabled=not state.can_add, max=add_more.max)
    return form_group(view, label_for(view), *rows, add, error_for(view))


def render_password(view: FieldView) -> Element:
    state: PasswordState = view.state(None, PasswordState)
    control = h('input', control_attrs(view, 'input', state.input_type))
    toggle = action_button(
        view, 'toggle-visibility',
        view.t('ui.hide', 'Hide') if state.visible else view.t('ui.show', 'Show'),
        pressed='true' if state.visible else 'false'
    )
    return form_group(
        view, label_for(view),
        h('div', {'class': view.classes.input_group}, control, toggle),
        error_for(view)
    )


def render_temporal(view: FieldView) -> Element:
    descriptor: TemporalField = view.descriptor
    input_type = TEMPORAL_INPUT_TYPES[descriptor.type]
    value = '' if view.value is None else str(view.value)
    control = h('input', control_attrs(view, 'input', input_type, value=value))
    return form_group(view, label_for(view), control, error_for(view))


def render_daterange(view: FieldView) -> Element:
    descriptor: DateRangeField = view.descriptor
    attrs = descriptor.attributes
    pair = _as_list(view.value) + [None, None]

    state: DateRangeState = view.state(view.value, lambda: DateRangeState(
        start=pair[0] or None,
        end=pair[1] or None,
        attr_min=attrs.get('min'),
        attr_max=attrs.get('max')
    ))

    start = h('input', control_attrs(
        view, 'input', 'date', name=f"{view.name}[0]",
        id=f"{view.element_id}_start", value=state.start or '',
        min=state.attr_min, max=state.start_max
    ))
    end = h('input', control_attrs(
        view, 'input', 'date', name=f"{view.name}[1]",
        id=f"{view.element_id}_end", value=state.end or '',
        min=state.end_min, max=state.attr_max
    ))
    separator = h('span', {'class': 'realments-daterange-separator'}, view.t('ui.to', 'to'))

    return form_group(
        view, label_for(view, f"{view.element_id}_start"),
        h('div', {'class': view.classes.input_group}, start, separator, end),
        error_for(view)
    )


# Long text

def render_textarea(view: FieldView) -> Element:
    descriptor: TextareaField = view.descriptor
    state: RichTextState = view.state(
        view.value, lambda: RichTextState(content='' if view.value is None else str(view.value))
    )

    if descriptor.wysiwyg.enabled:
        editor_nodes = _render_editor(view, state)
        if editor_nodes is not None:
            return form_group(view, label_for(view), *editor_nodes, error_for(view))

    control = h('textarea', control_attrs(view, 'textarea'), state.content)
    note = None
    if descriptor.wysiwyg.enabled and view.editor_loader is not None \
            and view.editor_loader.status(descriptor.wysiwyg.editor) == STATUS_FAILED:
        note = h('div', {'class': view.classes.help},
                 view.t('ui.editor_unavailable', ':editor editor unavailable, using plain text',
                        editor=descriptor.wysiwyg.editor))
    return form_group(view, label_for(view), control, note, error_for(view))


def _render_editor(view: FieldView, state: RichTextState) -> Optional[List[Element]]:
    """Editor-backed textarea plus its assets, or None to fall back to a plain textarea."""
    wysiwyg = view.descriptor.wysiwyg
    if view.editor_loader is None:
        return None

    asset = view.editor_loader.asset(wysiwyg.editor)
    if asset is None:
        logger.debug(f"{wysiwyg.editor} editor not loaded for '{view.name}', rendering plain textarea")
        return None

    options = dict(asset.options)
    options.update(wysiwyg.config)
    nodes: List[Element] = [
        h('link', {'rel': 'stylesheet', 'href': href}) for href in asset.styles
    ]
    nodes.append(h('textarea', control_attrs(
        view, 'textarea',
        **{'data-editor': wysiwyg.editor, 'data-editor-config': options}
    ), state.content))
    nodes.extend(h('script', {'src': src, 'defer': True}) for src in asset.scripts)
    return nodes


# Choices

def _split_select_value(descriptor: SelectField, value: Any):
    """Main value and added-group values; with add groups the submitted value is a list."""
    if descriptor.add_button.enabled and isinstance(value, list) and value:
        if not descriptor.multiselect or isinstance(value[0], list):
            return value[0], list(value[1:])
    return value, list(descriptor.add_button.added_items)


def _select_control(view: FieldView, selected: Any, name: str, control_id: str) -> Element:
    descriptor: SelectField = view.descriptor
    selected_values = {str(v) for v in _as_list(selected)}

    options = []
    for option in descriptor.options:
        is_placeholder = option.value == ''
        is_selected = str(option.value) in selected_values and not is_placeholder
        options.append(h('option', {
            'value': option.value,
            'selected': is_selected or (is_placeholder and not selected_values and not descriptor.multiselect),
            'disabled': is_placeholder,
        }, view.t(option.label)))

    attrs = control_attrs(view, 'select', name=name, id=control_id, multiple=descriptor.multiselect)
    return Element('select', attrs, options)


def render_select(view: FieldView) -> Element:
    descriptor: SelectField = view.descriptor
    add_button = descriptor.add_button
    main_value, added = _split_select_value(descriptor, view.value)

    state: SelectState = view.state(view.value, lambda: SelectState(
        value=main_value,
        added_items=list(added) if add_button.enabled else [],
        max=add_button.max
    ))

    suffix = '[]' if descriptor.multiselect else ''
    grouped = add_button.enabled
    main_name = f"{view.name}[0]{suffix}" if grouped else f"{view.name}{suffix}"
    main = _select_control(view, state.value, main_name, view.element_id)

    add = None
    if grouped:
        add = h('button', {
            'type': 'button',
            'class': add_button.class_name,
            'data-action': 'add-group',
            'data-target': view.element_id,
            'data-max': add_button.max,
            'disabled': not state.can_add,
        }, view.t(add_button.text))

    groups = []
    for index, item in enumerate(state.added_items):
        group_id = f"{view.element_id}_{index}"
        control = _select_control(view, item, f"{view.name}[{index + 1}]{suffix}", group_id)
        remove = action_button(view, 'remove-group', view.t('ui.remove', 'Remove'),
                               slot='danger_button', index=index)
        groups.append(h('div', {'class': view.classes.input_group, 'data-group': index}, control, remove))

    if grouped and add_button.position == 'right':
        main_row = h('div', {'class': view.classes.input_group}, main, add)
        return form_group(view, label_for(view), main_row, *groups, error_for(view))

    return form_group(view, label_for(view), main, *groups, add, error_for(view))


def render_checkbox(view: FieldView) -> Element:
    descriptor: CheckboxField = view.descriptor
    if descriptor.is_group:
        return _render_checkbox_group(view)

    checked = descriptor.checked
    if view.has_old_input:
        checked = str(view.value) == str(descriptor.value)
    state: CheckState = view.state(checked, lambda: CheckState(checked=checked))

    control = h('input', control_attrs(
        view, 'checkbox', 'checkbox', value=descriptor.value, checked=state.checked
    ))
    label = label_for(view, slot='checkbox_label')
    return h('div', {'class': view.classes.check_wrapper, 'data-field': view.name, 'data-type': 'checkbox'},
             control, label, error_for(view))


def _render_checkbox_group(view: FieldView) -> Element:
    descriptor: CheckboxField = view.descriptor
    seed = [str(v) for v in _as_list(view.value)]
    state: CheckGroupState = view.state(seed, lambda: CheckGroupState(selected=list(seed)))

    items = []
    for index, option in enumerate(descriptor.options):
        option_id = f"{view.element_id}_{index}"
        control = h('input', control_attrs(
            view, 'checkbox', 'checkbox', name=f"{view.name}[]", id=option_id,
            value=option.value, checked=state.is_checked(option.value)
        ))
        items.append(h('div', {'class': view.classes.check_wrapper}, control,
                       h('label', {'for': option_id, 'class': view.classes.checkbox_label}, view.t(option.label))))

    legend = None
    if descriptor.show_label:
        legend = h('div', {'class': view.classes.label}, view.t(descriptor.label))
    return form_group(view, legend, *items, error_for(view))


def render_switch(view: FieldView) -> Element:
    descriptor: SwitchField = view.descriptor
    checked = descriptor.checked
    if view.has_old_input:
        checked = str(view.value) == str(descriptor.value)
    state: CheckState = view.state(checked, lambda: CheckState(checked=checked))

    control = h('input', control_attrs(
        view, 'switch', 'checkbox', value=descriptor.value, checked=state.checked, role='switch'
    ))
    return h('div', {'class': view.classes.switch_wrapper, 'data-field': view.name, 'data-type': 'switch'},
             control, label_for(view, slot='switch_label'), error_for(view))


def render_radio(view: FieldView) -> Element:
    descriptor: RadioField = view.descriptor
    initial = view.value
    if initial is None:
        flagged = [o.value for o in descriptor.options if o.checked]
        initial = flagged[0] if flagged else None
    state: RadioState = view.state(initial, lambda: RadioState(value=None if initial is None else str(initial)))

    items = []
    for option in descriptor.options:
        control = h('input', control_attrs(
            view, 'radio', 'radio', id=option.id, value=option.value,
            checked=state.value is not None and str(option.value) == state.value
        ))
        items.append(h('div', {'class': view.classes.check_wrapper}, control,
                       h('label', {'for': option.id, 'class': view.classes.radio_label}, view.t(option.label))))

    legend = None
    if descriptor.show_label:
        legend = h('div', {'class': view.classes.label}, view.t(descriptor.label))
    return form_group(view, legend, *items, error_for(view))


def render_autocomplete(view: FieldView) -> Element:
    descriptor: AutocompleteField = view.descriptor
    query = '' if view.value is None else str(view.value)
    state: AutocompleteState = view.state(query, lambda: AutocompleteState(
        options=list(descriptor.options), query=query
    ))

    list_id = f"{view.element_id}_suggestions"
    showing = state.open and bool(state.suggestions)
    control = h('input', control_attrs(
        view, 'input', 'text', value=state.query, autocomplete='off', role='combobox',
        **{'aria-expanded': 'true' if showing else 'false', 'aria-controls': list_id}
    ))

    suggestions = None
    if showing:
        items = []
        for index, suggestion in enumerate(state.suggestions):
            active = index == state.highlighted
            items.append(h('li', {
                'class': view.classes.suggestion_active if active else view.classes.suggestion,
                'role': 'option',
                'aria-selected': 'true' if active else 'false',
                'data-index': index,
            }, suggestion))
        suggestions = Element('ul', {'id': list_id, 'class': view.classes.suggestions, 'role': 'listbox'}, items)

    return form_group(view, label_for(view), control, suggestions, error_for(view))


def render_tags(view: FieldView) -> Element:
    descriptor: TagsField = view.descriptor
    settings = descriptor.tag_settings
    seed = [str(t) for t in _as_list(view.value)]
    state: TagsState = view.state(seed, lambda: TagsState(
        tags=list(seed), max_tags=settings.max_tags, allow_duplicates=settings.allow_duplicates
    ))

    chips = []
    for index, tag in enumerate(state.tags):
        remove = h('button', {
            'type': 'button',
            'class': 'realments-tag-remove',
            'data-action': 'remove-tag',
            'data-index': index,
            'aria-label': f"{view.t('ui.remove', 'Remove')} {tag}",
        }, '×')
        chips.append(h(
            'span', {'class': view.classes.tag, 'data-tag': tag},
            tag, remove,
            h('input', {'type': 'hidden', 'name': f"{view.name}[]", 'value': tag})
        ))

    datalist = None
    entry_extra: Dict[str, Any] = {}
    if settings.suggestions:
        datalist_id = f"{view.element_id}_list"
        entry_extra['list'] = datalist_id
        datalist = Element('datalist', {'id': datalist_id},
                           [h('option', {'value': s}) for s in settings.suggestions])

    entry_attrs = control_attrs(view, 'input', 'text', name='', value=state.input_text,
                                placeholder=view.t('ui.add_tag', 'Type and press Enter'), **entry_extra)
    del entry_attrs['name']
    entry = h('input', entry_attrs)

    return form_group(
        view, label_for(view),
        Element('div', {'class': 'realments-tags', 'data-count': len(state.tags)}, chips),
        entry, datalist, error_for(view)
    )


# Files

def render_file(view: FieldView) -> Element:
    descriptor: FileField = view.descriptor
    thumbnail = descriptor.thumbnail
    state: FileState = view.state(view.value, lambda: FileState.from_value(view.value, thumbnail.enabled))

    name = f"{view.name}[]" if descriptor.multiple else view.name
    control = h('input', control_attrs(view, 'file', 'file', name=name, multiple=descriptor.multiple))

    file_name = h('span', {'class': view.classes.help, 'data-file-name': state.file_name or None},
                  state.file_name or view.t('ui.no_file', 'No file chosen'))
    clear = None
    if state.file_name:
        clear = action_button(view, 'clear', view.t('ui.clear', 'Clear'), slot='danger_button')

    preview = None
    if thumbnail.enabled and state.preview_url:
        preview = h('img', {
            'src': state.preview_url,
            'alt': state.file_name,
            'class': 'realments-thumbnail',
            'width': thumbnail.size,
            'style': f"max-width: {thumbnail.size}px; max-height: {thumbnail.size}px;",
        })

    body = [control, file_name, clear]
    if preview is not None:
        if thumbnail.position in ('top', 'left'):
            body.insert(0, preview)
        else:
            body.append(preview)

    layout = 'd-flex align-items-center gap-2' if thumbnail.position in ('left', 'right') else ''
    return form_group(view, label_for(view), Element('div', {'class': layout or None}, body), error_for(view))


# Simple controls

def render_hidden(view: FieldView) -> Element:
    if isinstance(view.value, (list, tuple)):
        inputs = [h('input', {'type': 'hidden', 'name': f"{view.name}[]", 'value': v}) for v in view.value]
        return Element('div', {'hidden': True, 'data-field': view.name, 'data-type': 'hidden'}, inputs)

    attrs = dict(view.descriptor.attributes)
    attrs.pop('label', None)
    attrs.pop('class', None)
    return h('input', {
        'type': 'hidden',
        'id': attrs.pop('id', None) or view.element_id,
        'name': view.name,
        'value': '' if view.value is None else view.value,
        **attrs
    })


def render_range(view: FieldView) -> Element:
    attrs = view.descriptor.attributes
    initial = view.value if view.value not in (None, '') else attrs.get('min', 0)
    state: RangeState = view.state(initial, lambda: RangeState(value=initial))

    control = h('input', control_attrs(view, 'range', 'range', value=state.value))
    output = h('output', {'for': view.element_id, 'class': view.classes.help}, str(state.value))
    return form_group(view, label_for(view), control, output, error_for(view))


def render_color(view: FieldView) -> Element:
    initial = view.value or DEFAULT_COLOR
    state: ColorState = view.state(initial, lambda: ColorState(value=str(initial)))

    control = h('input', control_attrs(view, 'color', 'color', value=state.value))
    hex_value = h('code', {'class': view.classes.help}, state.value)
    return form_group(view, label_for(view), h('div', {'class': view.classes.input_group}, control, hex_value),
                      error_for(view))


def render_captcha(view: FieldView) -> Element:
    state: CaptchaState = view.state(None, CaptchaState)
    captcha = view.settings.get('captcha', {})
    template = captcha.get('image_url', 'https://dummyimage.com/150x50/000/fff&text=CAPTCHA{token}')

    image = h('img', {
        'src': state.image_url(template),
        'alt': view.t('ui.captcha_alt', 'CAPTCHA challenge'),
        'width': captcha.get('width', 150),
        'height': captcha.get('height', 50),
        'data-refresh': state.refresh_count,
    })
    refresh = action_button(view, 'refresh', view.t('ui.refresh', 'Refresh'))
    control = h('input', control_attrs(view, 'input', 'text', value=state.text, autocomplete='off'))
    return form_group(view, label_for(view), h('div', {'class': 'realments-captcha'}, image, refresh),
                      control, error_for(view))


def render_button(view: FieldView) -> Element:
    descriptor: ButtonField = view.descriptor
    attrs = dict(descriptor.attributes)
    attrs.pop('label', None)
    attrs.setdefault('type', 'button')
    attrs.setdefault('class', view.classes.button)
    return h('button', attrs, view.t(descriptor.text))


# Form boundaries

def render_form_open(view: FieldView) -> Element:
    """The <form> element; the renderer nests the following fields inside it."""
    descriptor: FormOpenField = view.descriptor
    method = (descriptor.method or 'POST').upper()
    caller = dict(descriptor.attributes)
    extra_class = caller.pop('class', None)

    attrs: Dict[str, Any] = {
        'id': descriptor.form_id or None,
        'method': 'GET' if method == 'GET' else 'POST',
        'action': descriptor.action or None,
        'enctype': descriptor.enctype if method != 'GET' else None,
        'class': join_classes(view.classes.form, extra_class) or None,
        'novalidate': True,
    }
    attrs.update(caller)

    form = Element('form', attrs)
    if method not in SPOOFABLE_METHODS:
        form.append(h('input', {'type': 'hidden', 'name': '_method', 'value': method}))
    if method != 'GET':
        if view.csrf_token:
            form.append(h('input', {'type': 'hidden', 'name': '_token', 'value': view.csrf_token}))
        else:
            logger.debug(f"No CSRF token available for form {descriptor.form_id}")
    return form


def render_form_close(view: FieldView) -> None:
    """Marks the end of the current form; produces no markup of its own."""
    return None


def render_unknown(element: UnknownElement, translator: Translator) -> Element:
    if element.reason == 'unknown element type' or not element.type:
        text = translator.t('ui.unknown_element', 'Unknown element type: :type', type=element.type or '?')
    else:
        text = translator.t('ui.invalid_element', 'Invalid element: :type', type=element.type)
    return h('div', {'class': 'realments-unknown', 'role': 'alert', 'data-type': element.type}, text)


def render_failure(descriptor: FieldDescriptor, translator: Translator) -> Element:
    text = translator.t('ui.element_error', 'Could not render :name', name=descriptor.name or descriptor.type)
    return h('div', {'class': 'realments-render-error', 'role': 'alert', 'data-field': descriptor.name}, text)


RENDERERS: Dict[FieldType, Callable[[FieldView], Optional[Element]]] = {
    FieldType.TEXT: render_input,
    FieldType.EMAIL: render_input,
    FieldType.NUMBER: render_input,
    FieldType.PASSWORD: render_input,
    FieldType.DATE: render_temporal,
    FieldType.TIME: render_temporal,
    FieldType.DATETIME: render_temporal,
    FieldType.DATERANGE: render_daterange,
    FieldType.TEXTAREA: render_textarea,
    FieldType.RICHTEXT: render_textarea,
    FieldType.SELECT: render_select,
    FieldType.CHECKBOX: render_checkbox,
    FieldType.RADIO: render_radio,
    FieldType.SWITCH: render_switch,
    FieldType.FILE: render_file,
    FieldType.HIDDEN: render_hidden,
    FieldType.RANGE: render_range,
    FieldType.COLOR: render_color,
    FieldType.TAGS: render_tags,
    FieldType.CAPTCHA: render_captcha,
    FieldType.AUTOCOMPLETE: render_autocomplete,
    FieldType.BUTTON: render_button,
    FieldType.FORM_OPEN: render_form_open,
    FieldType.FORM_CLOSE: render_form_close,
}
