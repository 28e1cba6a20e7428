"""Placeholder rendering for declaration templates.

Templates carry tokens such as {{nome}} or {{cep}}. Rendering substitutes
every supplied token and leaves unknown tokens untouched so a template typo
shows up verbatim in the generated document instead of failing the batch.

The token names are part of the stored template data and therefore stay in
Portuguese, the language the templates are written in.
"""

import re
from datetime import date
from typing import Any, Dict, Mapping

POSTAL_CODE_DIGITS = 8

# pt-BR month names, lower case as used in the long date form
PT_BR_MONTHS = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

TOKEN_PATTERN = re.compile(r"\{\{\s*([A-Za-z0-9_]+)\s*\}\}")


def render_placeholders(template: str, values: Mapping[str, str]) -> str:
    """Replace every {{name}} token for which a value is supplied.

    Values are inserted literally. Tokens without a value are left as-is.

    Example:
        >>> render_placeholders("Eu, {{nome}}, {{x}}", {"nome": "Ana"})
        'Eu, Ana, {{x}}'
    """
    result = template or ""
    for key, value in values.items():
        result = result.replace("{{" + key + "}}", "" if value is None else str(value))
    return result


def find_tokens(template: str) -> set:
    """Return the token names referenced by a template."""
    return set(TOKEN_PATTERN.findall(template or ""))


def format_postal_code(value: Any) -> str:
    """Normalize a Brazilian postal code (CEP) to NNNNN-NNN.

    Non-digits are stripped and the result is left-padded with zeros to
    eight digits before being split 5/3.

    Examples:
        >>> format_postal_code("1234567")
        '01234-567'
        >>> format_postal_code("01310-100")
        '01310-100'
        >>> format_postal_code("123")
        '00000-123'
    """
    digits = re.sub(r"\D", "", "" if value is None else str(value))
    padded = digits.zfill(POSTAL_CODE_DIGITS)
    return f"{padded[:5]}-{padded[5:]}"


def format_long_date(value: date) -> str:
    """Format a date in the pt-BR long form used by the declarations.

    Example:
        >>> format_long_date(date(2026, 3, 5))
        '05 de março de 2026'
    """
    return f"{value.day:02d} de {PT_BR_MONTHS[value.month - 1]} de {value.year}"


def build_placeholder_values(user: Any, today: date) -> Dict[str, str]:
    """Assemble the token map for one user.

    Args:
        user: Profile with name, address and identity-document attributes
        today: Date printed as {{data_atual}}

    Returns:
        Mapping of token name to replacement text
    """
    complement = getattr(user, "complement", None)

    return {
        "nome": _text(user.name),
        "rua": _text(user.street),
        "numero_casa": _text(user.house_number),
        "complemento": f" {complement}" if complement else "",
        "bairro": _text(user.neighborhood),
        "cidade": _text(user.city),
        "estado": _text(user.state),
        "cep": format_postal_code(user.postal_code) if user.postal_code else "",
        "data_atual": format_long_date(today),
        "rg": _text(user.rg),
        "cpf": _text(user.cpf),
        "orgao_emissor": _text(user.issuing_agency),
    }


def _text(value: Any) -> str:
    return "" if value is None else str(value)
