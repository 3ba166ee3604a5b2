import logging
import re
from typing import Any, Dict, List, Optional

from eforms.core.exceptions import ValidationError
from eforms.schemas.field_types import (
    CHOICE_TYPES,
    MAX_TABLE_COLUMNS,
    MAX_TABLE_ROWS,
    TABLE_TYPES,
    FieldType,
    parse_field_type,
)
from eforms.schemas.form_draft import FieldPreview, SchemaDraft
from eforms.schemas.form_schema import ColumnDef, FieldDefinition, FormSchema

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


def derive_internal_name(label: str) -> str:
    """'Employee Name!' -> 'EmployeeName'"""
    return _NON_ALPHANUMERIC.sub("", _WHITESPACE.sub("", label))


def next_order(fields: List[FieldDefinition]) -> int:
    if not fields:
        return 1
    return max(f.order for f in fields) + 1


def _cleared_field_inputs() -> Dict[str, Any]:
    return {
        "label": "",
        "internal_name": "",
        "order": None,
        "options": [],
        "table_name": "",
        "table_rows": None,
        "table_columns": None,
        "table_headers": [],
        "table_column_defs": [],
        "table_data": [],
        "header_type": FieldType.TEXT.value,
        "header_options": [],
        "html_content": "",
    }


def _cleared_header_inputs() -> Dict[str, Any]:
    return {"header_type": FieldType.TEXT.value, "header_options": []}


def _without_index(values: List, index: int) -> List:
    return [v for i, v in enumerate(values) if i != index]


def _check_table_size(rows: Optional[int], columns: Optional[int]) -> None:
    if rows is not None and rows > MAX_TABLE_ROWS:
        raise ValidationError(f"Number of rows must be at most {MAX_TABLE_ROWS}.")
    if columns is not None and columns > MAX_TABLE_COLUMNS:
        raise ValidationError(f"Number of columns must be at most {MAX_TABLE_COLUMNS}.")


def _check_table(name: Optional[str], rows: Optional[int], columns: Optional[int], header_count: int) -> None:
    if not (name or "").strip():
        raise ValidationError("Table name is required for HTML Table fields.")
    if not rows or rows < 1:
        raise ValidationError("Number of rows must be at least 1.")
    if not columns or columns < 1:
        raise ValidationError("Number of columns must be at least 1.")
    _check_table_size(rows, columns)
    if header_count != columns:
        raise ValidationError(f"Please provide exactly {columns} column header(s).")


def _check_stored_field(field: FieldDefinition) -> None:
    """The rules build_field applies to pending inputs, applied to a field that is already built."""
    if not field.label.strip():
        raise ValidationError("Column name is required.")
    kind = field.kind
    if kind is None:
        raise ValidationError(f"Unsupported field type: {field.type}")
    if not field.internal_name.strip():
        raise ValidationError(f"Internal name is required for field '{field.label}'.")
    if kind in CHOICE_TYPES and not field.options:
        raise ValidationError("Please add at least one choice option.")
    if kind is FieldType.HTMLTABLE:
        _check_table(field.table_name, field.table_rows, field.table_columns, len(field.column_defs()))
    elif kind is FieldType.HTMLRENDER:
        _check_table_size(field.table_rows, field.table_columns)


class SchemaBuilder:
    """Pure operations over a SchemaDraft. Each one returns a new draft."""

    @staticmethod
    def add_choice_option(draft: SchemaDraft, value: Optional[str]) -> SchemaDraft:
        option = (value or "").strip()
        if not option:
            return draft
        return draft.model_copy(update={"options": [*draft.options, option]})

    @staticmethod
    def remove_choice_option(draft: SchemaDraft, index: int) -> SchemaDraft:
        if not 0 <= index < len(draft.options):
            return draft
        return draft.model_copy(update={"options": _without_index(draft.options, index)})

    @staticmethod
    def add_header_option(draft: SchemaDraft, value: Optional[str]) -> SchemaDraft:
        option = (value or "").strip()
        if not option:
            return draft
        return draft.model_copy(update={"header_options": [*draft.header_options, option]})

    @staticmethod
    def remove_header_option(draft: SchemaDraft, index: int) -> SchemaDraft:
        if not 0 <= index < len(draft.header_options):
            return draft
        return draft.model_copy(update={"header_options": _without_index(draft.header_options, index)})

    @staticmethod
    def add_table_header(
        draft: SchemaDraft,
        name: Optional[str],
        type: Optional[str] = None,
        options: Optional[List[str]] = None,
    ) -> SchemaDraft:
        header = (name or "").strip()
        if not header:
            return draft
        if draft.table_columns and len(draft.table_column_defs) >= draft.table_columns:
            raise ValidationError(f"All {draft.table_columns} column header(s) are already defined.")

        # Without explicit values, use what is pending for the header being defined
        column_type = type or draft.header_type or FieldType.TEXT.value
        header_options = list(options) if options is not None else list(draft.header_options)

        column_def = ColumnDef(name=header, type=column_type, options=header_options or None)
        return draft.model_copy(update={
            "table_headers": [*draft.table_headers, header],
            "table_column_defs": [*draft.table_column_defs, column_def],
            **_cleared_header_inputs(),
        })

    @staticmethod
    def remove_table_header(draft: SchemaDraft, index: int) -> SchemaDraft:
        if index < 0 or index >= max(len(draft.table_headers), len(draft.table_column_defs)):
            return draft
        return draft.model_copy(update={
            "table_headers": _without_index(draft.table_headers, index),
            "table_column_defs": _without_index(draft.table_column_defs, index),
        })

    @staticmethod
    def set_table_dimensions(
        draft: SchemaDraft,
        rows: Optional[int] = None,
        columns: Optional[int] = None,
    ) -> SchemaDraft:
        _check_table_size(rows, columns)
        update: Dict[str, Any] = {}
        if rows is not None:
            update["table_rows"] = rows
        if columns is not None and columns != draft.table_columns:
            update["table_columns"] = columns
            # Headers and cells were laid out for the old column count
            update.update({
                "table_headers": [],
                "table_column_defs": [],
                "table_data": [],
                **_cleared_header_inputs(),
            })
        return draft.model_copy(update=update)

    @staticmethod
    def set_table_cell(draft: SchemaDraft, row: int, col: int, value: str) -> SchemaDraft:
        if row < 0 or col < 0:
            raise ValidationError("Cell position must not be negative.")
        if row >= MAX_TABLE_ROWS or col >= MAX_TABLE_COLUMNS:
            raise ValidationError(
                f"Cell position is outside the largest table ({MAX_TABLE_ROWS} x {MAX_TABLE_COLUMNS})."
            )

        grid = [list(cells) for cells in draft.table_data]
        width = max(draft.table_columns or 0, col + 1)
        while len(grid) <= row:
            grid.append([""] * width)
        target = grid[row]
        while len(target) <= col:
            target.append("")
        target[col] = value

        return draft.model_copy(update={"table_data": grid})

    @staticmethod
    def build_field(draft: SchemaDraft) -> FieldDefinition:
        """Validate the pending inputs and turn them into a FieldDefinition."""
        label = draft.label.strip()
        if not label:
            raise ValidationError("Column name is required.")

        kind = parse_field_type(draft.field_type)
        if kind is None:
            raise ValidationError(f"Unsupported field type: {draft.field_type}")

        if kind in CHOICE_TYPES and not draft.options:
            raise ValidationError("Please add at least one choice option.")

        if kind is FieldType.HTMLTABLE:
            _check_table(draft.table_name, draft.table_rows, draft.table_columns, len(draft.table_column_defs))
        elif kind is FieldType.HTMLRENDER:
            _check_table_size(draft.table_rows, draft.table_columns)

        internal_name = draft.internal_name.strip() or derive_internal_name(label)
        if not internal_name:
            raise ValidationError("Internal name could not be derived from the column name.")
        if any(f.internal_name == internal_name for f in draft.fields):
            raise ValidationError(f"A field with internal name '{internal_name}' already exists.")

        order = draft.order if draft.order is not None else next_order(draft.fields)

        field = FieldDefinition(
            label=label,
            internal_name=internal_name,
            type=kind.value,
            required=draft.required,
            order=order,
        )

        if kind in CHOICE_TYPES:
            field.options = list(draft.options)

        if kind in TABLE_TYPES:
            field.table_name = draft.table_name
            field.table_rows = draft.table_rows or 0
            field.table_columns = draft.table_columns or 0
            if kind is FieldType.HTMLTABLE:
                field.table_headers = [d.name for d in draft.table_column_defs]
            else:
                field.table_headers = list(draft.table_headers)
            field.table_column_defs = [d.model_copy(deep=True) for d in draft.table_column_defs]
            field.table_data = [list(cells) for cells in draft.table_data]

        if kind is FieldType.PLAINHTML:
            field.html_content = draft.html_content

        return field

    @staticmethod
    def add_field(draft: SchemaDraft) -> SchemaDraft:
        field = SchemaBuilder.build_field(draft)
        logger.debug("Added field %s (%s) at order %s", field.internal_name, field.type, field.order)
        return draft.model_copy(update={
            "fields": [*draft.fields, field],
            **_cleared_field_inputs(),
        })

    @staticmethod
    def check_schema(schema: FormSchema) -> None:
        """Gate applied before a schema may be saved."""
        if not schema.form_title.strip():
            raise ValidationError("Form Title is required.")
        if not schema.fields:
            raise ValidationError("Please add at least one field.")

        seen = set()
        for field in schema.fields:
            _check_stored_field(field)
            if field.internal_name in seen:
                raise ValidationError(f"A field with internal name '{field.internal_name}' already exists.")
            seen.add(field.internal_name)

    @staticmethod
    def build_schema(draft: SchemaDraft) -> FormSchema:
        schema = FormSchema(
            form_title=draft.form_title,
            description=draft.description,
            fields=[f.model_copy(deep=True) for f in draft.fields],
        )
        SchemaBuilder.check_schema(schema)
        return schema

    @staticmethod
    def preview(draft: SchemaDraft) -> List[FieldPreview]:
        previews = []
        for field in sorted(draft.fields, key=lambda f: f.order):
            kind = field.kind
            previews.append(FieldPreview(
                order=field.order,
                label=field.label,
                internal_name=field.internal_name,
                type_name=kind.display_name if kind else field.type,
                required=field.required,
                choices=field.options,
                table_name=field.table_name,
                table_rows=field.table_rows,
                table_columns=field.table_columns,
                table_headers=field.table_headers,
            ))
        return previews
