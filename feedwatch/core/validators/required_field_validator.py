"""
RequiredFieldValidator - ensures an envelope field is present and not empty.
"""

from collections.abc import Mapping
from typing import Any

from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a required field is present and not null/empty.

    Fails with ``missing <field>`` (or the ``message`` parameter) if the
    field is absent, None, or a blank string.
    """

    def validate(self, value: Any, record: Mapping[str, Any]) -> None:
        if self.field_name not in record or value is None:
            self.fail(f"missing {self.field_name}")

        if isinstance(value, str) and value.strip() == "":
            self.fail(f"missing {self.field_name}")

    @property
    def rule_type(self) -> str:
        return "required_field"
