import logging
from typing import Callable, Dict, List, Optional

from eforms.schemas.controls import ChoiceOption, Control, RenderedForm, Widget
from eforms.schemas.field_types import MAX_TABLE_COLUMNS, MAX_TABLE_ROWS, FieldType
from eforms.schemas.form_schema import ColumnDef, FieldDefinition, FormSchema
from eforms.services.schema_serializer import SchemaSerializer

logger = logging.getLogger(__name__)

# Values typed into a rendered form, keyed by internalName (or cell key for tables)
AnswerMap = Dict[str, str]

SELECT_PLACEHOLDER = "Select"
YES = "true"
NO = "false"


def cell_key(internal_name: str, row: int, col: int) -> str:
    return f"{internal_name}-{row}-{col}"


def split_selections(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [s for s in value.split(",") if s]


def yes_no_value(value: Optional[str]) -> str:
    # An unanswered yes/no reads as an explicit "No", never as a blank
    return value if value else NO


def _choices(options: Optional[List[str]], selected: List[str]) -> List[ChoiceOption]:
    return [ChoiceOption(value=o, label=o, selected=o in selected) for o in options or []]


def _input(field: FieldDefinition, answers: AnswerMap, input_type: str, step: Optional[str] = None) -> Control:
    return Control(
        widget=Widget.INPUT,
        name=field.internal_name,
        label=field.label,
        input_type=input_type,
        step=step,
        required=field.required,
        value=answers.get(field.internal_name, ""),
    )


def _render_text(field: FieldDefinition, answers: AnswerMap) -> Control:
    return _input(field, answers, "text")


def _render_number(field: FieldDefinition, answers: AnswerMap) -> Control:
    return _input(field, answers, "number")


def _render_currency(field: FieldDefinition, answers: AnswerMap) -> Control:
    return _input(field, answers, "number", step="0.01")


def _render_date(field: FieldDefinition, answers: AnswerMap) -> Control:
    return _input(field, answers, "date")


def _render_multiline(field: FieldDefinition, answers: AnswerMap) -> Control:
    return Control(
        widget=Widget.TEXTAREA,
        name=field.internal_name,
        label=field.label,
        text_rows=4,
        required=field.required,
        value=answers.get(field.internal_name, ""),
    )


def _render_dropdown(field: FieldDefinition, answers: AnswerMap) -> Control:
    value = answers.get(field.internal_name, "")
    return Control(
        widget=Widget.SELECT,
        name=field.internal_name,
        label=field.label,
        placeholder=SELECT_PLACEHOLDER,
        required=field.required,
        value=value,
        options=_choices(field.options, [value]),
    )


def _render_radio(field: FieldDefinition, answers: AnswerMap) -> Control:
    value = answers.get(field.internal_name, "")
    return Control(
        widget=Widget.RADIO_GROUP,
        name=field.internal_name,
        label=field.label,
        required=field.required,
        value=value,
        options=_choices(field.options, [value]),
    )


def _render_checkbox(field: FieldDefinition, answers: AnswerMap) -> Control:
    value = answers.get(field.internal_name, "")
    return Control(
        widget=Widget.CHECKBOX_GROUP,
        name=field.internal_name,
        label=field.label,
        required=field.required,
        value=value,
        options=_choices(field.options, split_selections(value)),
    )


def _render_yesno(field: FieldDefinition, answers: AnswerMap) -> Control:
    return Control(
        widget=Widget.CHECKBOX,
        name=field.internal_name,
        label=field.label,
        required=field.required,
        value=yes_no_value(answers.get(field.internal_name)),
    )


def _render_person(field: FieldDefinition, answers: AnswerMap) -> Control:
    return Control(
        widget=Widget.PERSON,
        name=field.internal_name,
        label=field.label,
        required=field.required,
        value=answers.get(field.internal_name, ""),
    )


def _table_size(field: FieldDefinition):
    # Documents stored before the size limits existed are cut down to them
    return min(field.table_rows or 0, MAX_TABLE_ROWS), min(field.table_columns or 0, MAX_TABLE_COLUMNS)


def _render_cell(column: ColumnDef, name: str, value: str) -> Control:
    """Editable table cell; the control follows the column's type, not the field's."""
    column_type = column.type
    if column_type in (FieldType.NUMBER.value, FieldType.CURRENCY.value):
        return Control(widget=Widget.INPUT, name=name, input_type="number", value=value)
    if column_type == FieldType.DATE.value:
        return Control(widget=Widget.INPUT, name=name, input_type="date", value=value)
    if column_type in (FieldType.DROPDOWN.value, FieldType.RADIO.value):
        return Control(
            widget=Widget.SELECT,
            name=name,
            placeholder=SELECT_PLACEHOLDER,
            value=value,
            options=_choices(column.options, [value]),
        )
    if column_type == FieldType.CHECKBOX.value:
        return Control(
            widget=Widget.CHECKBOX_GROUP,
            name=name,
            value=value,
            options=_choices(column.options, split_selections(value)),
        )
    if column_type == FieldType.YESNO.value:
        return Control(widget=Widget.CHECKBOX, name=name, value=value)
    if column_type == FieldType.MULTILINE.value:
        return Control(widget=Widget.TEXTAREA, name=name, value=value)
    return Control(widget=Widget.INPUT, name=name, input_type="text", value=value)


def _render_table(field: FieldDefinition, answers: AnswerMap) -> Control:
    rows, cols = _table_size(field)
    headers = [field.column_def(c).name for c in range(cols)]

    cells = []
    for r in range(rows):
        row_controls = []
        for c in range(cols):
            name = cell_key(field.internal_name, r, c)
            column = field.column_def(c)
            value = answers[name] if name in answers else field.cell(r, c)
            if column.type == FieldType.YESNO.value:
                value = yes_no_value(value)
            row_controls.append(_render_cell(column, name, value))
        cells.append(row_controls)

    return Control(
        widget=Widget.TABLE,
        name=field.internal_name,
        label=field.label,
        caption=field.table_name or None,
        required=field.required,
        headers=headers,
        cells=cells,
    )


def _render_stored_table(field: FieldDefinition, answers: AnswerMap) -> Control:
    """Read-only grid; values always come from the stored tableData, never from answers."""
    rows, cols = _table_size(field)
    stored_headers = field.table_headers or []

    headers = []
    for c in range(cols):
        header = stored_headers[c] if c < len(stored_headers) else ""
        headers.append(header or f"Column {c + 1}")

    cells = []
    for r in range(rows):
        row_controls = []
        for c in range(cols):
            value = field.cell(r, c)
            if field.column_def(c).type == FieldType.YESNO.value:
                value = yes_no_value(value)
            row_controls.append(Control(
                widget=Widget.TEXT,
                name=cell_key(field.internal_name, r, c),
                read_only=True,
                value=value,
            ))
        cells.append(row_controls)

    return Control(
        widget=Widget.TABLE,
        name=field.internal_name,
        label=field.label,
        caption=field.table_name or None,
        read_only=True,
        headers=headers,
        cells=cells,
    )


def _render_markup(field: FieldDefinition, answers: AnswerMap) -> Control:
    # Authored by the form admin and passed through as-is: no sanitizing or escaping.
    return Control(
        widget=Widget.MARKUP,
        name=field.internal_name,
        label=field.label,
        read_only=True,
        markup=field.html_content or "",
    )


_FIELD_RENDERERS: Dict[FieldType, Callable[[FieldDefinition, AnswerMap], Control]] = {
    FieldType.TEXT: _render_text,
    FieldType.MULTILINE: _render_multiline,
    FieldType.NUMBER: _render_number,
    FieldType.CURRENCY: _render_currency,
    FieldType.DATE: _render_date,
    FieldType.DROPDOWN: _render_dropdown,
    FieldType.RADIO: _render_radio,
    FieldType.CHECKBOX: _render_checkbox,
    FieldType.YESNO: _render_yesno,
    FieldType.PERSON: _render_person,
    FieldType.HTMLTABLE: _render_table,
    FieldType.HTMLRENDER: _render_stored_table,
    FieldType.PLAINHTML: _render_markup,
}

_unregistered = set(FieldType) - set(_FIELD_RENDERERS)
if _unregistered:
    raise RuntimeError(f"No renderer registered for field types: {sorted(t.value for t in _unregistered)}")


class SchemaRenderer:

    @staticmethod
    def render_field(field: FieldDefinition, answers: Optional[AnswerMap] = None) -> Optional[Control]:
        kind = field.kind
        if kind is None:
            logger.warning("Unsupported field type: %s (field %s)", field.type, field.internal_name)
            return None
        return _FIELD_RENDERERS[kind](field, answers or {})

    @staticmethod
    def render_form(schema: FormSchema, answers: Optional[AnswerMap] = None, form_id: Optional[int] = None) -> RenderedForm:
        controls = []
        for field in SchemaSerializer.sort_fields(schema.fields):
            control = SchemaRenderer.render_field(field, answers)
            if control is not None:
                controls.append(control)
        return RenderedForm(
            id=form_id,
            form_title=schema.form_title,
            description=schema.description,
            controls=controls,
        )

    @staticmethod
    def set_answer(answers: AnswerMap, key: str, value: str) -> AnswerMap:
        return {**answers, key: value}

    @staticmethod
    def toggle_choice(answers: AnswerMap, key: str, option: str, checked: bool) -> AnswerMap:
        """Add or drop one checkbox option in the comma-joined selection stored under key."""
        selections = split_selections(answers.get(key))
        if checked and option not in selections:
            selections.append(option)
        elif not checked:
            selections = [s for s in selections if s != option]
        return {**answers, key: ",".join(selections)}
