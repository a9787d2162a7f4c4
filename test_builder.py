"""
Unit tests for the fluent form builder.
"""

import json

import pytest

from realments.builder import DEFAULT_ENCTYPE, MULTIPART_ENCTYPE, FieldHandle, FormBuilder
from realments.descriptors import (
    ButtonField,
    CheckboxField,
    FormCloseField,
    FormOpenField,
    HiddenField,
    RichTextField,
    SelectField,
    TextareaField,
)
from realments.session import SessionStore


class TestFormBoundaries:
    """Test cases for open() and close()."""

    def test_open_records_settings(self):
        form = FormBuilder()
        form.open({'id': 'signup', 'method': 'put', 'action': '/users/1',
                   'css_framework': 'tailwind', 'theme_mode': 'dark', 'data-x': '1'})

        opened = form.elements[0]
        assert isinstance(opened, FormOpenField)
        assert form.form_id == 'signup'
        assert opened.method == 'PUT'
        assert opened.action == '/users/1'
        assert opened.css_framework == 'tailwind'
        assert opened.theme_mode == 'dark'
        assert opened.attributes == {'data-x': '1'}

    def test_open_resets_fields(self):
        form = FormBuilder()
        form.open()
        form.text('Name')
        form.open()

        assert len(form.elements) == 1
        assert isinstance(form.elements[0], FormOpenField)

    def test_reopen_resets_enctype_after_file(self):
        form = FormBuilder()
        form.file('Avatar')
        form.close()
        form.open({'id': 'g'})
        form.text('Name')

        assert form.enctype == DEFAULT_ENCTYPE
        assert form.render(SessionStore({}))['elements'][0]['enctype'] == DEFAULT_ENCTYPE
        assert form.schema().enctype == DEFAULT_ENCTYPE

    def test_reopen_forgets_explicit_enctype(self):
        form = FormBuilder()
        form.open({'enctype': 'text/plain'})
        form.open()
        form.file('Avatar')

        assert form.enctype == MULTIPART_ENCTYPE

    def test_reopen_resets_method_and_action(self):
        form = FormBuilder()
        form.open({'method': 'put', 'action': '/users/1'})
        form.open()

        opened = form.elements[0]
        assert opened.method == 'POST'
        assert opened.action == ''

    def test_field_before_open_opens_implicitly(self):
        form = FormBuilder()
        form.text('Name')

        assert isinstance(form.elements[0], FormOpenField)
        assert form.elements[1].name == 'name'

    def test_close_appends_submit_button_and_marker(self):
        form = FormBuilder()
        form.open()
        form.close('Register')

        button, closed = form.elements[-2], form.elements[-1]
        assert isinstance(button, ButtonField)
        assert button.text == 'Register'
        assert button.attributes == {'type': 'submit', 'class': 'btn btn-primary'}
        assert isinstance(closed, FormCloseField)

    def test_close_with_none_omits_button(self):
        form = FormBuilder()
        form.open()
        form.close(None)

        assert [e.type for e in form.elements] == ['form_open', 'form_close']

    def test_close_merges_button_attributes(self):
        form = FormBuilder('bulma')
        form.open()
        form.close('Go', {'class': 'button is-link', 'name': 'go'})

        button = form.elements[-2]
        assert button.attributes == {'type': 'submit', 'class': 'button is-link', 'name': 'go'}


class TestRules:
    """Test cases for attaching validation rules."""

    def test_rules_on_handle(self):
        form = FormBuilder()
        form.open()
        handle = form.text('Full Name').rules('required|min:3', {'min': 'Too short'})

        assert isinstance(handle, FieldHandle)
        assert handle.descriptor.validation.rules == 'required|min:3'
        assert handle.descriptor.validation.messages == {'min': 'Too short'}

    def test_rules_after_open_is_noop(self):
        """Test that rules() with no current field neither raises nor attaches anything."""
        form = FormBuilder()
        form.open()
        result = form.rules('required')

        assert result is form
        assert all(e.validation is None for e in form.elements)

    def test_rules_before_any_field_is_noop(self):
        form = FormBuilder()
        form.rules('required')
        assert form.elements == []

    def test_rules_after_close_is_noop(self):
        form = FormBuilder()
        form.open()
        form.text('Name')
        form.close()
        form.rules('required')

        assert all(e.validation is None for e in form.elements)

    def test_builder_rules_targets_last_field(self):
        form = FormBuilder()
        form.open()
        form.text('First')
        form.text('Second')
        form.rules('required')

        assert form.elements[1].validation is None
        assert form.elements[2].validation.rules == 'required'

    def test_handle_chains_to_builder_methods(self):
        form = FormBuilder()
        form.open()
        form.text('Name').rules('required').email('Email').rules('email')

        assert form.elements[1].validation.rules == 'required'
        assert form.elements[2].validation.rules == 'email'

    def test_handle_private_attribute_raises(self):
        form = FormBuilder()
        handle = form.text('Name')
        with pytest.raises(AttributeError):
            handle._missing


class TestMalformedInput:
    """Test cases for settings the builder has to repair instead of rejecting."""

    @pytest.mark.parametrize("build", [
        lambda form: form.text('Name').rules(None),
        lambda form: form.text('Name').rules('required', {'required': 5}),
        lambda form: form.text('Name').rules(42, ['not', 'a', 'mapping']),
        lambda form: form.select('Country', {'id': 'Indonesia'}, {'add_button': True, 'button_position': None}),
        lambda form: form.select('Country', {'id': 'Indonesia'}, {'added_items': 7, 'button_text': 3}),
        lambda form: form.file('Avatar', None, {'thumbnail': {'size': 'big'}}),
        lambda form: form.file('Avatar', None, {'thumbnail': True, 'thumbnail_position': ['top']}),
        lambda form: form.text('Phone', None, {'add_more': {'max': 'lots'}}),
        lambda form: form.textarea('Bio', None, {'wysiwyg': True, 'editor': None, 'editor_config': 'dark'}),
        lambda form: form.tags('Skills', 12, {'suggestions': 'python', 'max_tags': 'many'}),
    ])
    def test_never_raises(self, build):
        form = FormBuilder()
        form.open()
        build(form)

        assert len(form.elements) == 2
        json.dumps(form.render(SessionStore({})))

    def test_none_rules_become_empty(self):
        form = FormBuilder()
        handle = form.text('Name').rules(None)

        assert handle.descriptor.validation.rules == ''

    def test_messages_coerced_to_text(self):
        form = FormBuilder()
        handle = form.text('Name').rules('required', {'required': 5})

        assert handle.descriptor.validation.rules == 'required'
        assert handle.descriptor.validation.messages == {'required': '5'}

    def test_invalid_button_position_keeps_other_settings(self):
        form = FormBuilder()
        select = form.select('Country', {'id': 'Indonesia'}, {
            'add_button': True, 'button_position': None, 'max_additions': 3
        }).descriptor

        assert select.add_button.enabled is True
        assert select.add_button.position == 'right'
        assert select.add_button.max == 3
        assert select.add_button.class_name == 'btn btn-primary btn-sm'

    def test_invalid_thumbnail_size_uses_default(self):
        form = FormBuilder()
        avatar = form.file('Avatar', None, {'thumbnail': {'enabled': True, 'size': 'big'}}).descriptor

        assert avatar.thumbnail.enabled is True
        assert avatar.thumbnail.size == 100

    def test_invalid_add_more_max_uses_default(self):
        form = FormBuilder()
        phone = form.text('Phone', None, {'add_more': {'enabled': True, 'max': 'lots'}}).descriptor

        assert phone.add_more.enabled is True
        assert phone.add_more.max == 5

    def test_rejected_settings_are_logged(self, caplog):
        form = FormBuilder()
        with caplog.at_level('WARNING', logger='realments.builder'):
            form.text('Phone', None, {'add_more': {'max': 'lots'}})

        assert "Ignoring invalid AddMoreConfig settings: max" in caplog.text


class TestFieldMethods:
    """Test cases for the per-type builder methods."""

    def test_text_defaults(self):
        form = FormBuilder()
        form.open()
        descriptor = form.text('Full Name', 'Jane').descriptor

        assert descriptor.type == 'text'
        assert descriptor.name == 'full-name'
        assert descriptor.label == 'Full Name'
        assert descriptor.value == 'Jane'
        assert descriptor.attributes['id'].startswith('full-name_')

    def test_label_false_hides_label(self):
        form = FormBuilder()
        descriptor = form.email('Email', None, {'label': False}).descriptor
        assert descriptor.show_label is False

    def test_hidden_has_no_label(self):
        form = FormBuilder()
        descriptor = form.hidden('Token', 'abc').descriptor
        assert isinstance(descriptor, HiddenField)
        assert descriptor.show_label is False

    def test_password_never_has_value(self):
        form = FormBuilder()
        assert form.password('Password').descriptor.value is None

    def test_add_more(self):
        form = FormBuilder()
        descriptor = form.text('Website', None, {'add_more': True, 'add_more_max': 3}).descriptor

        assert descriptor.add_more.enabled is True
        assert descriptor.add_more.max == 3
        assert 'add_more' not in descriptor.attributes
        assert 'add_more_max' not in descriptor.attributes

    def test_select_placeholder_and_selected(self):
        form = FormBuilder()
        descriptor = form.select('Letters', {0: 'Pick one', 'a': 'Alpha', 'b': 'Beta'}, {'selected': 'b'}).descriptor

        assert isinstance(descriptor, SelectField)
        assert descriptor.options[0].label == 'Pick one'
        assert descriptor.options[0].value == ''
        assert descriptor.value == 'b'
        assert 'selected' not in descriptor.attributes

    def test_multiselect_value_is_list(self):
        form = FormBuilder()
        descriptor = form.select('Tags', {'a': 'A', 'b': 'B'}, {'multiselect': True, 'selected': ['a', 'b']}).descriptor

        assert descriptor.multiselect is True
        assert descriptor.value == ['a', 'b']

    def test_select_add_button(self):
        form = FormBuilder()
        descriptor = form.select('Languages', {'en': 'English'}, {
            'add_button': True, 'max_additions': 2, 'button_text': 'Add language', 'button_position': 'bottom'
        }).descriptor

        add_button = descriptor.add_button
        assert add_button.enabled is True
        assert add_button.max == 2
        assert add_button.text == 'Add language'
        assert add_button.position == 'bottom'
        assert add_button.class_name == 'btn btn-primary btn-sm'

    def test_select_bad_max_additions_uses_default(self):
        form = FormBuilder()
        descriptor = form.select('Languages', {}, {'add_button': True, 'max_additions': 'lots'}).descriptor
        assert descriptor.add_button.max == 5

    def test_radio(self):
        form = FormBuilder()
        descriptor = form.radio('Plan', {'basic': 'Basic', 'pro': 'Pro'}, 'pro').descriptor

        assert descriptor.value == 'pro'
        assert [o.checked for o in descriptor.options] == [False, True]
        assert descriptor.options[1].id.startswith('plan_pro_')

    def test_checkbox_single(self):
        form = FormBuilder()
        descriptor = form.checkbox('Accept Terms', 'yes', True).descriptor

        assert isinstance(descriptor, CheckboxField)
        assert descriptor.is_group is False
        assert descriptor.value == 'yes'
        assert descriptor.checked is True

    def test_checkbox_group(self):
        form = FormBuilder()
        descriptor = form.checkbox('Interests', None, False, {
            'options': {'music': 'Music', 'sport': 'Sport'}, 'selected': ['sport']
        }).descriptor

        assert descriptor.is_group is True
        assert [o.value for o in descriptor.options] == ['music', 'sport']
        assert descriptor.value == ['sport']
        assert 'options' not in descriptor.attributes

    def test_daterange_value_pair(self):
        form = FormBuilder()
        assert form.daterange('Stay', ['2023-07-01', '']).descriptor.value == ['2023-07-01', None]
        assert form.daterange('Other', '2023-07-01').descriptor.value == ['2023-07-01', None]

    def test_tags_from_comma_string(self):
        form = FormBuilder()
        descriptor = form.tags('Skills', 'python, pydantic ,', {'max_tags': 3, 'suggestions': ['yaml']}).descriptor

        assert descriptor.value == ['python', 'pydantic']
        assert descriptor.tag_settings.max_tags == 3
        assert descriptor.tag_settings.suggestions == ['yaml']

    def test_autocomplete_options(self):
        form = FormBuilder()
        descriptor = form.autocomplete('City', {'jkt': 'Jakarta', 'bdg': 'Bandung'}).descriptor
        assert descriptor.options == ['Jakarta', 'Bandung']

    def test_textarea_and_richtext_wysiwyg(self):
        form = FormBuilder()
        textarea = form.textarea('Bio', None, {'wysiwyg': True, 'editor': 'quill', 'editor_config': {'theme': 'bubble'}}).descriptor
        richtext = form.richtext('Letter').descriptor

        assert isinstance(textarea, TextareaField)
        assert textarea.wysiwyg.enabled is True
        assert textarea.wysiwyg.editor == 'quill'
        assert textarea.wysiwyg.config == {'theme': 'bubble'}
        assert isinstance(richtext, RichTextField)
        assert richtext.wysiwyg.enabled is True
        assert richtext.wysiwyg.editor == 'tinymce'

    def test_file_switches_enctype(self):
        form = FormBuilder()
        form.open()
        assert form.enctype == DEFAULT_ENCTYPE

        descriptor = form.file('Avatar', None, {'thumbnail': True, 'thumbnail_size': 64}).descriptor

        assert form.enctype == MULTIPART_ENCTYPE
        assert form.elements[0].enctype == MULTIPART_ENCTYPE
        assert descriptor.thumbnail.enabled is True
        assert descriptor.thumbnail.size == 64

    def test_file_keeps_explicit_enctype(self):
        form = FormBuilder()
        form.open({'enctype': 'text/plain'})
        form.file('Avatar')

        assert form.enctype == 'text/plain'
        assert form.elements[0].enctype == 'text/plain'

    def test_fields_record_framework_and_theme(self):
        form = FormBuilder('tailwind', 'dark')
        descriptor = form.text('Name').descriptor

        assert descriptor.css_framework == 'tailwind'
        assert descriptor.theme_mode == 'dark'


class TestRender:
    """Test cases for serializing the form."""

    def test_render_wire_shape(self):
        form = FormBuilder()
        form.open({'id': 'f1'})
        form.text('Name')
        form.close()

        wire = form.render(SessionStore({}))

        assert set(wire.keys()) == {'formId', 'elements', 'errors', 'oldInput', 'cssFramework', 'themeMode'}
        assert wire['formId'] == 'f1'
        assert [e['type'] for e in wire['elements']] == ['form_open', 'text', 'button', 'form_close']

    def test_render_consumes_flashed_state(self):
        backing = {}
        session = SessionStore(backing)
        session.flash_errors({'name': 'Required'})
        session.flash_input({'name': 'Jo', 'password': 'secret'})

        form = FormBuilder()
        form.open()
        form.text('Name')

        first = form.render(session)
        second = form.render(session)

        assert first['errors'] == {'name': ['Required']}
        assert first['oldInput'] == {'name': 'Jo'}
        assert second['errors'] == {}
        assert second['oldInput'] == {}

    def test_to_json(self):
        form = FormBuilder()
        form.open({'id': 'json_form'})
        data = json.loads(form.to_json(SessionStore({})))
        assert data['formId'] == 'json_form'

    def test_schema(self):
        form = FormBuilder()
        form.open({'id': 's1', 'method': 'get'})
        form.text('Query')
        schema = form.schema()

        assert schema.form_id == 's1'
        assert schema.method == 'GET'
        assert len(schema.elements) == 2

    def test_generated_form_id(self):
        assert FormBuilder().form_id.startswith('form_')
