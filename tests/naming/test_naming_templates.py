"""Tests for the per-module naming tables."""

import string

import pytest

from alz_naming.naming.context import NamingModule
from alz_naming.naming.templates import (
    NAMING_TABLES,
    ResourcePurpose,
    get_module_naming,
)

ALLOWED_TOKENS = {"env", "service", "region", "suffix"}


def placeholders(pattern):
    return {name for _, name, _, _ in string.Formatter().parse(pattern) if name}


class TestNamingTables:
    def test_every_module_has_a_table(self):
        assert set(NAMING_TABLES) == set(NamingModule)

    @pytest.mark.parametrize("module", list(NamingModule))
    def test_templates_use_known_tokens(self, module):
        """Test templates only reference the four naming tokens."""
        for purpose, template in get_module_naming(module).templates.items():
            if template.fixed:
                assert not placeholders(template.pattern), purpose
            else:
                assert placeholders(template.pattern) <= ALLOWED_TOKENS, purpose

    @pytest.mark.parametrize("module", list(NamingModule))
    def test_suffix_length_supported(self, module):
        assert 4 <= get_module_naming(module).suffix_length <= 6

    def test_globally_unique_names_carry_suffix(self):
        """Test storage accounts and key vaults embed the random suffix."""
        unique = {
            ResourcePurpose.KEY_VAULT,
            ResourcePurpose.PROFILES_STORAGE,
            ResourcePurpose.DIAGNOSTICS_STORAGE,
            ResourcePurpose.STORAGE_ACCOUNT,
        }
        for naming in NAMING_TABLES.values():
            for purpose, template in naming.templates.items():
                if purpose in unique:
                    assert "suffix" in placeholders(template.pattern)
                    assert template.max_length == 24

    def test_storage_templates_have_no_separators(self):
        for naming in NAMING_TABLES.values():
            for purpose, template in naming.templates.items():
                if template.pattern.startswith("st{"):
                    assert "-" not in template.pattern, purpose

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            NAMING_TABLES[NamingModule.AVD] = None  # type: ignore[index]

        with pytest.raises(TypeError):
            get_module_naming(NamingModule.AVD).templates[ResourcePurpose.FIREWALL] = None  # type: ignore[index]

    def test_spoke_has_no_default_service(self):
        assert get_module_naming(NamingModule.SPOKE).default_service is None
        assert get_module_naming(NamingModule.CONNECTIVITY).default_service == "hub"
