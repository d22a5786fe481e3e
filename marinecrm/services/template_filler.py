"""
Description templates with {{placeholder}} substitution.

Templates come from the product_descriptions table (key -> scope_template).
A missing key yields None so callers can fall back to their own phrasing.
"""
import re
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.orm import Session

from marinecrm.models.product_description import ProductDescription

PLACEHOLDER_RE = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")


def camel_to_snake(name: str) -> str:
    """motorRating -> motor_rating"""
    return _CAMEL_BOUNDARY_RE.sub(r"_\1", name).lower()


def format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class TemplateFiller:
    """Resolves descriptions from a key -> template dictionary."""

    def __init__(self, templates: Optional[Mapping[str, str]] = None):
        self.templates: Dict[str, str] = dict(templates or {})

    def fill(self, key: str, variables: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        template = self.templates.get(key)
        if not template:
            return None
        variables = variables or {}

        def _sub(match):
            name = match.group(1)
            if name in variables:
                return format_value(variables[name])
            snake = camel_to_snake(name)
            if snake in variables:
                return format_value(variables[snake])
            return ""

        return PLACEHOLDER_RE.sub(_sub, template)

    def fill_or(self, key: str, variables: Optional[Mapping[str, Any]], fallback: str) -> str:
        filled = self.fill(key, variables)
        if filled is None or not filled.strip():
            return fallback
        return filled


def load_templates(db: Session) -> Dict[str, str]:
    """Read the whole product_descriptions table into a dict."""
    rows = db.query(ProductDescription).all()
    return {row.key: row.scope_template for row in rows}
