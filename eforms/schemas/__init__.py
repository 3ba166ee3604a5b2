from .field_types import FieldType, FIELD_TYPE_LABELS, CHOICE_TYPES, TABLE_TYPES, parse_field_type
from .form_schema import CamelModel, ColumnDef, FieldDefinition, FormSchema
from .form_draft import SchemaDraft, FieldPreview
from .controls import Widget, ChoiceOption, Control, RenderedForm

__all__ = [
    "FieldType",
    "FIELD_TYPE_LABELS",
    "CHOICE_TYPES",
    "TABLE_TYPES",
    "parse_field_type",
    "CamelModel",
    "ColumnDef",
    "FieldDefinition",
    "FormSchema",
    "SchemaDraft",
    "FieldPreview",
    "Widget",
    "ChoiceOption",
    "Control",
    "RenderedForm",
]
