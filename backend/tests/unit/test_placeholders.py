"""Unit tests for declaration placeholder rendering

Tests cover:
- Token substitution and unknown tokens
- Postal code (CEP) normalization
- pt-BR long date
- Token map built from a user profile
"""

from datetime import date
from types import SimpleNamespace

import pytest

from domain.declarations.placeholders import (
    build_placeholder_values,
    find_tokens,
    format_long_date,
    format_postal_code,
    render_placeholders,
)


def make_profile(**overrides):
    fields = dict(
        name="Maria Souza",
        street="Rua das Flores",
        house_number="120",
        complement="Apto 12",
        neighborhood="Santana",
        city="São Paulo",
        state="SP",
        postal_code="2403010",
        rg="12.345.678-9",
        cpf="123.456.789-00",
        issuing_agency="SSP/SP",
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestRenderPlaceholders:
    """Test render_placeholders"""

    def test_all_supplied_tokens_replaced(self):
        template = "Eu, {{nome}}, moro em {{cidade}}. {{nome}} assina."
        result = render_placeholders(template, {"nome": "Ana", "cidade": "Recife"})

        assert result == "Eu, Ana, moro em Recife. Ana assina."
        assert "{{nome}}" not in result
        assert "{{cidade}}" not in result

    def test_unknown_tokens_left_verbatim(self):
        result = render_placeholders("{{nome}} - {{desconhecido}}", {"nome": "Ana"})
        assert result == "Ana - {{desconhecido}}"

    def test_values_inserted_literally(self):
        result = render_placeholders("{{nome}}", {"nome": r"A\1 $& {{x}}"})
        assert result == r"A\1 $& {{x}}"

    def test_none_value_renders_empty(self):
        assert render_placeholders("[{{rg}}]", {"rg": None}) == "[]"

    def test_empty_template(self):
        assert render_placeholders(None, {"nome": "Ana"}) == ""

    def test_find_tokens(self):
        assert find_tokens("{{nome}} {{ cep }} {nome}") == {"nome", "cep"}


class TestFormatPostalCode:
    """Test CEP normalization"""

    @pytest.mark.parametrize("raw, expected", [
        ("1234567", "01234-567"),
        ("01310-100", "01310-100"),
        ("123", "00000-123"),
        ("02403010", "02403-010"),
        ("CEP 02.403-010", "02403-010"),
        (2403010, "02403-010"),
    ])
    def test_normalization(self, raw, expected):
        assert format_postal_code(raw) == expected


class TestFormatLongDate:
    """Test pt-BR long dates"""

    def test_day_is_zero_padded(self):
        assert format_long_date(date(2026, 3, 5)) == "05 de março de 2026"

    def test_december(self):
        assert format_long_date(date(2025, 12, 31)) == "31 de dezembro de 2025"


class TestBuildPlaceholderValues:
    """Test the token map built from a profile"""

    def test_complete_profile(self):
        values = build_placeholder_values(make_profile(), date(2026, 3, 5))

        assert values == {
            "nome": "Maria Souza",
            "rua": "Rua das Flores",
            "numero_casa": "120",
            "complemento": " Apto 12",
            "bairro": "Santana",
            "cidade": "São Paulo",
            "estado": "SP",
            "cep": "02403-010",
            "data_atual": "05 de março de 2026",
            "rg": "12.345.678-9",
            "cpf": "123.456.789-00",
            "orgao_emissor": "SSP/SP",
        }

    def test_missing_complement_renders_empty(self):
        values = build_placeholder_values(make_profile(complement=None), date(2026, 3, 5))
        assert values["complemento"] == ""

    def test_missing_optional_fields_render_empty(self):
        values = build_placeholder_values(
            make_profile(rg=None, postal_code=None, street=None),
            date(2026, 3, 5),
        )
        assert values["rg"] == ""
        assert values["cep"] == ""
        assert values["rua"] == ""

    def test_rendered_template_has_no_supplied_tokens_left(self):
        template = "{{nome}}, {{rua}}, {{numero_casa}}{{complemento}} - CEP {{cep}} em {{data_atual}} {{extra}}"
        values = build_placeholder_values(make_profile(), date(2026, 3, 5))

        result = render_placeholders(template, values)

        assert find_tokens(result) == {"extra"}
        assert result.startswith("Maria Souza, Rua das Flores, 120 Apto 12 - CEP 02403-010")
