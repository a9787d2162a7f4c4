"""
Unit tests for descriptor models and the descriptor factory.
"""

import pytest

from realments.descriptors import (
    FieldType,
    FormPayload,
    InputField,
    SelectField,
    TagsField,
    UnknownElement,
    format_choice_options,
    format_radio_options,
    format_select_options,
    generate_id,
    make_descriptor,
    parse_descriptor,
    resolve_label,
    slugify,
    title_label,
)


class TestSlugify:
    """Test cases for field name slugification."""

    @pytest.mark.parametrize("raw, expected", [
        ("Full Name", "full-name"),
        ("E-mail Address", "e-mail-address"),
        ("first_name", "first-name"),
        ("  Padded   Name  ", "padded-name"),
        ("Crème Brûlée", "creme-brulee"),
        ("user@example", "user-at-example"),
        ("What?! No way.", "what-no-way"),
        ("", ""),
    ])
    def test_slugify_values(self, raw, expected):
        """Test slugify on common human-readable names."""
        assert slugify(raw) == expected

    @pytest.mark.parametrize("raw", [
        "Full Name", "already-slugged", "Mixed_Case And-Dashes", "Ünïcödé Ñame", "a -- b __ c", "x@y.z",
    ])
    def test_slugify_is_idempotent(self, raw):
        """Test that slugifying twice gives the same result as once."""
        once = slugify(raw)
        assert slugify(once) == once

    def test_slugify_custom_separator(self):
        """Test slugify with an underscore separator."""
        assert slugify("Full Name", "_") == "full_name"
        assert slugify("full-name", "_") == "full_name"

    def test_slugify_none(self):
        """Test that None slugifies to an empty string."""
        assert slugify(None) == ""


class TestLabels:
    """Test cases for label derivation."""

    def test_title_label(self):
        assert title_label("full_name") == "Full Name"
        assert title_label("stay-period") == "Stay Period"

    def test_resolve_label_default(self):
        """Test that a missing label setting shows the title-cased name."""
        attrs = {}
        assert resolve_label("full name", attrs) == ("Full Name", True)

    def test_resolve_label_false_hides(self):
        """Test that only an explicit False hides the label, and the key is consumed."""
        attrs = {'label': False, 'placeholder': 'x'}
        label, show = resolve_label("email", attrs)

        assert show is False
        assert label == "Email"
        assert attrs == {'placeholder': 'x'}

    def test_resolve_label_custom_text(self):
        attrs = {'label': 'Your e-mail'}
        assert resolve_label("email", attrs) == ("Your e-mail", True)

    @pytest.mark.parametrize("setting", [None, True, 0, ''])
    def test_resolve_label_other_values_show(self, setting):
        """Test that non-False settings keep the label visible."""
        _, show = resolve_label("email", {'label': setting})
        assert show is True


class TestOptionFormatting:
    """Test cases for select, checkbox and radio option formatting."""

    def test_select_placeholder_from_zero_key(self):
        """Test that the entry keyed 0 becomes a non-selectable placeholder."""
        options = format_select_options({0: 'Pick one', 'a': 'Alpha', 'b': 'Beta'})

        assert options[0].value == ''
        assert options[0].label == 'Pick one'
        assert options[0].selected is False
        assert [o.value for o in options[1:]] == ['a', 'b']
        assert not any(o.selected for o in options)

    def test_select_selected_value(self):
        options = format_select_options({0: 'Pick one', 'a': 'Alpha', 'b': 'Beta'}, 'b')

        assert [o.value for o in options if o.selected] == ['b']
        assert options[2].label == 'Beta'

    def test_select_multiple_selected(self):
        options = format_select_options({'a': 'Alpha', 'b': 'Beta', 'c': 'Gamma'}, ['a', 'c'])
        assert [o.value for o in options if o.selected] == ['a', 'c']

    def test_select_label_is_title_cased(self):
        options = format_select_options({'ny': 'new_york'})
        assert options[0].label == 'New York'

    def test_select_empty_values(self):
        """Test that missing options produce an empty list rather than an error."""
        assert format_select_options(None) == []
        assert format_select_options('not a map') == []

    def test_choice_options_have_no_placeholder(self):
        options = format_choice_options(['red', 'green'], ['green'])

        assert [o.value for o in options] == ['red', 'green']
        assert options[1].selected is True

    def test_radio_options_ids_and_checked(self):
        options = format_radio_options('plan', {'basic': 'Basic', 'pro': 'Pro'}, 'pro')

        assert options[0].id.startswith('plan_basic_')
        assert options[1].id.startswith('plan_pro_')
        assert options[1].checked is True
        assert options[0].checked is False


class TestDescriptorFactory:
    """Test cases for make_descriptor and id generation."""

    def test_generate_id(self):
        generated = generate_id('email')
        assert generated.startswith('email_')
        assert len(generated) == len('email_') + 5

    def test_make_descriptor_normalizes(self):
        descriptor = make_descriptor(InputField, 'text', 'Full Name', {'placeholder': 'Jane'})

        assert descriptor.type == 'text'
        assert descriptor.name == 'full-name'
        assert descriptor.label == 'Full Name'
        assert descriptor.show_label is True
        assert descriptor.attributes['placeholder'] == 'Jane'
        assert descriptor.attributes['id'].startswith('full-name_')

    def test_make_descriptor_keeps_explicit_id(self):
        descriptor = make_descriptor(InputField, 'email', 'Email', {'id': 'contact-email'})
        assert descriptor.attributes['id'] == 'contact-email'
        assert descriptor.element_id == 'contact-email'

    def test_make_descriptor_does_not_mutate_caller_attributes(self):
        attrs = {'label': False}
        make_descriptor(InputField, 'text', 'Name', attrs)
        assert attrs == {'label': False}

    def test_make_descriptor_without_name(self):
        """Test that a missing name falls back to the type for the id."""
        descriptor = make_descriptor(InputField, 'text', None)
        assert descriptor.name == ''
        assert descriptor.attributes['id'].startswith('text_')


class TestParseDescriptor:
    """Test cases for turning payload entries into models."""

    def test_parse_known_type(self):
        parsed = parse_descriptor({'type': 'email', 'name': 'email'})

        assert isinstance(parsed, InputField)
        assert parsed.field_type == FieldType.EMAIL

    def test_parse_passes_models_through(self):
        model = TagsField(name='skills')
        assert parse_descriptor(model) is model

    def test_parse_unknown_type(self):
        parsed = parse_descriptor({'type': 'signature', 'name': 'sig'})

        assert isinstance(parsed, UnknownElement)
        assert parsed.type == 'signature'
        assert parsed.reason == 'unknown element type'
        assert parsed.name == 'sig'

    def test_parse_invalid_known_type(self):
        parsed = parse_descriptor({'type': 'select', 'name': 'x', 'options': 'not-a-list'})

        assert isinstance(parsed, UnknownElement)
        assert parsed.reason == 'invalid element'

    def test_parse_non_mapping(self):
        parsed = parse_descriptor(['text'])
        assert isinstance(parsed, UnknownElement)
        assert parsed.reason == 'not a mapping'

    def test_parse_ignores_extra_keys(self):
        parsed = parse_descriptor({'type': 'select', 'name': 'c', 'options': [], 'extra': 1})
        assert isinstance(parsed, SelectField)


class TestFormPayload:
    """Test cases for the wire payload model."""

    def test_wire_keys(self):
        payload = FormPayload(form_id='form_abc', elements=[InputField(type='text', name='a')])
        wire = payload.to_wire()

        assert set(wire.keys()) == {'formId', 'elements', 'errors', 'oldInput', 'cssFramework', 'themeMode'}
        assert wire['formId'] == 'form_abc'
        assert wire['elements'][0]['type'] == 'text'
        assert wire['cssFramework'] == 'bootstrap'
        assert wire['themeMode'] == 'light'

    def test_payload_accepts_wire_aliases(self):
        payload = FormPayload.model_validate({
            'formId': 'f1',
            'elements': [{'type': 'tags', 'name': 'skills', 'value': ['a']}],
            'oldInput': {'skills': ['b']},
            'themeMode': 'dark',
        })

        assert payload.form_id == 'f1'
        assert isinstance(payload.elements[0], TagsField)
        assert payload.old_input == {'skills': ['b']}
        assert payload.theme_mode == 'dark'

    def test_add_button_class_uses_class_key_on_the_wire(self):
        select = SelectField(name='langs')
        select.add_button.class_name = 'btn btn-sm'
        wire = FormPayload(form_id='f', elements=[select]).to_wire()

        assert wire['elements'][0]['add_button']['class'] == 'btn btn-sm'
