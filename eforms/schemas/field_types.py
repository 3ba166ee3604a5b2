from enum import Enum
from typing import Optional


class FieldType(str, Enum):
    TEXT = "text"
    MULTILINE = "multiline"
    NUMBER = "number"
    CURRENCY = "currency"
    DATE = "date"
    DROPDOWN = "dropdown"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    YESNO = "yesno"
    PERSON = "person"
    HTMLTABLE = "htmltable"
    HTMLRENDER = "htmlrender"
    PLAINHTML = "plainhtml"

    @property
    def display_name(self) -> str:
        return FIELD_TYPE_LABELS[self]


FIELD_TYPE_LABELS = {
    FieldType.TEXT: "Single line of text",
    FieldType.MULTILINE: "Multiple lines of text",
    FieldType.NUMBER: "Number",
    FieldType.CURRENCY: "Currency",
    FieldType.DATE: "Date and Time",
    FieldType.DROPDOWN: "Dropdown",
    FieldType.RADIO: "Radio Buttons",
    FieldType.CHECKBOX: "Checkboxes (Multiple Select)",
    FieldType.YESNO: "Yes / No",
    FieldType.PERSON: "Person or Group",
    FieldType.HTMLTABLE: "HTML Table",
    FieldType.HTMLRENDER: "HTML Render",
    FieldType.PLAINHTML: "Plain HTML",
}

CHOICE_TYPES = frozenset({FieldType.DROPDOWN, FieldType.RADIO, FieldType.CHECKBOX})
TABLE_TYPES = frozenset({FieldType.HTMLTABLE, FieldType.HTMLRENDER})

MAX_TABLE_ROWS = 200
MAX_TABLE_COLUMNS = 50


def parse_field_type(value) -> Optional[FieldType]:
    """Return the FieldType for a stored type tag, or None when it is not one we know."""
    if isinstance(value, FieldType):
        return value
    try:
        return FieldType(value)
    except ValueError:
        return None
