"""
Unit tests for CSS framework class derivation.
"""

from dataclasses import fields

import pytest

from realments.themes import (
    CONTROL_SLOTS,
    ERROR_TOKENS,
    FRAMEWORK_CLASSES,
    ClassBundle,
    button_class,
    derive_classes,
    join_classes,
    normalize_framework,
    normalize_theme,
)


class TestClassTables:
    """Test cases for the per-framework class tables."""

    @pytest.mark.parametrize("framework", sorted(FRAMEWORK_CLASSES))
    def test_every_slot_defined(self, framework):
        """Test that each framework defines a light and dark class for every slot."""
        table = FRAMEWORK_CLASSES[framework]
        for slot in fields(ClassBundle):
            assert slot.name in table, f"{framework} is missing slot {slot.name}"
            assert len(table[slot.name]) == 2

    def test_every_framework_has_error_token(self):
        assert set(ERROR_TOKENS) == set(FRAMEWORK_CLASSES)


class TestDeriveClasses:
    """Test cases for derive_classes."""

    def test_bootstrap_light(self):
        classes = derive_classes('bootstrap', 'light')

        assert classes.input == 'form-control'
        assert classes.label == 'form-label'
        assert classes.error == 'invalid-feedback d-block'

    def test_bootstrap_dark_with_error(self):
        """Test that dark mode and the invalid marker combine on the input."""
        tokens = derive_classes('bootstrap', 'dark', True).input.split()

        assert 'is-invalid' in tokens
        assert 'bg-dark' in tokens
        assert 'text-light' in tokens
        assert 'form-control' in tokens

    @pytest.mark.parametrize("framework", ['bootstrap', 'tailwind', 'bulma'])
    def test_error_token_on_control_slots_only(self, framework):
        classes = derive_classes(framework, 'light', True)
        token = ERROR_TOKENS[framework]

        for slot in CONTROL_SLOTS:
            assert token in classes.get(slot).split()
        assert token not in classes.label.split()
        assert token not in classes.form_group.split()

    @pytest.mark.parametrize("framework", ['bootstrap', 'tailwind', 'bulma'])
    def test_error_token_on_choice_controls(self, framework):
        """Test that checkbox, radio and switch inputs show the invalid marker."""
        classes = derive_classes(framework, 'dark', True)
        token = ERROR_TOKENS[framework]

        assert token in classes.checkbox.split()
        assert token in classes.radio.split()
        assert token in classes.switch.split()
        assert token not in classes.check_wrapper.split()
        assert token not in derive_classes(framework, 'dark', False).checkbox.split()

    def test_no_error_token_without_error(self):
        classes = derive_classes('tailwind', 'light', False)
        assert 'border-red-500' not in classes.input.split()

    def test_tailwind_dark_is_defined_not_patched(self):
        light = derive_classes('tailwind', 'light').input.split()
        dark = derive_classes('tailwind', 'dark').input.split()

        assert 'text-gray-700' in light
        assert 'text-gray-700' not in dark
        assert 'bg-gray-700' in dark
        assert 'text-white' in dark

    def test_bulma_dark_label(self):
        assert derive_classes('bulma', 'dark').label == 'label has-text-light'

    def test_unknown_values_fall_back(self):
        assert derive_classes('foundation', 'sepia') == derive_classes('bootstrap', 'light')

    def test_get_unknown_slot(self):
        assert derive_classes('bootstrap', 'light').get('nonexistent') == ''


class TestHelpers:
    """Test cases for small theme helpers."""

    def test_normalize(self):
        assert normalize_framework('bulma') == 'bulma'
        assert normalize_framework(None) == 'bootstrap'
        assert normalize_framework('materialize') == 'bootstrap'
        assert normalize_theme('dark') == 'dark'
        assert normalize_theme('DARK') == 'light'

    def test_join_classes_dedupes(self):
        assert join_classes('a b', 'b c', None, '', 'a') == 'a b c'

    def test_button_class(self):
        assert button_class('bootstrap') == 'btn btn-primary'
        assert button_class('bootstrap', 'secondary', 'sm') == 'btn btn-secondary btn-sm'
        assert button_class('bulma', 'danger', 'lg') == 'button is-danger is-large'
        assert button_class('bulma', 'unknown') == 'button is-primary'
        assert 'bg-red-500' in button_class('tailwind', 'danger')
