"""Template registry for RenoQuote.

Read-only lookup over the static template catalog. The catalog is parsed
once at import time; templates are immutable afterwards.
"""

from typing import Any, Dict, List, Optional

import structlog

from config.errors import TemplateNotFoundError
from models.template import FieldType, Template
from services.template_catalog import build_catalog
from utils.numbers import is_truthy

logger = structlog.get_logger(__name__)


class TemplateRegistry:
    """Catalog of project templates keyed by id."""

    def __init__(self, templates: Optional[Dict[str, Template]] = None):
        self._templates: Dict[str, Template] = templates if templates is not None else build_catalog()

    def get_template(self, template_id: str) -> Template:
        """Fetch a template by id.

        Raises:
            TemplateNotFoundError: If the id is not in the catalog.
        """
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    def has_template(self, template_id: str) -> bool:
        return template_id in self._templates

    def list_templates(self) -> List[Template]:
        """All templates in catalog order."""
        return list(self._templates.values())

    def template_ids(self) -> List[str]:
        return list(self._templates.keys())


def visible_form_data(template: Template, form_data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop values of fields hidden by an unchecked `depends_on` parent.

    A hidden field is treated as absent, never as zero-with-cost. Keys that
    are not fields of the template are kept untouched.
    """
    visible = dict(form_data or {})
    for field in template.fields:
        if field.depends_on and not is_truthy(visible.get(field.depends_on)):
            visible.pop(field.id, None)
    return visible


def file_field_ids(template: Template) -> List[str]:
    """Ids of the template's file upload fields."""
    return [f.id for f in template.fields if f.type == FieldType.FILE.value]


# Default registry instance
registry = TemplateRegistry()
