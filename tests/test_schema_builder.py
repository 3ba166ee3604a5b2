import pytest

from eforms.core.exceptions import ValidationError
from eforms.schemas.form_draft import SchemaDraft
from eforms.schemas.form_schema import FieldDefinition, FormSchema
from eforms.services.schema_builder import SchemaBuilder, derive_internal_name


def test_internal_name_strips_whitespace_and_symbols():
    assert derive_internal_name("Employee Name!") == "EmployeeName"

    draft = SchemaBuilder.add_field(SchemaDraft(label="Employee Name!"))

    assert draft.fields[0].internal_name == "EmployeeName"


def test_explicit_internal_name_wins():
    draft = SchemaBuilder.add_field(SchemaDraft(label="Employee Name", internal_name="EmpName"))

    assert draft.fields[0].internal_name == "EmpName"


def test_empty_label_is_rejected():
    with pytest.raises(ValidationError):
        SchemaBuilder.add_field(SchemaDraft(label="   "))


def test_unknown_type_is_rejected():
    with pytest.raises(ValidationError):
        SchemaBuilder.add_field(SchemaDraft(label="Mystery", field_type="unknown"))


def test_duplicate_internal_name_is_rejected():
    draft = SchemaBuilder.add_field(SchemaDraft(label="Name"))
    draft = draft.model_copy(update={"label": "Name"})

    with pytest.raises(ValidationError) as exc:
        SchemaBuilder.add_field(draft)

    assert "Name" in str(exc.value)


def test_auto_order_follows_highest_existing_order():
    draft = SchemaDraft(fields=[
        FieldDefinition(label="A", internal_name="A", order=1),
        FieldDefinition(label="B", internal_name="B", order=3),
    ], label="C")

    draft = SchemaBuilder.add_field(draft)

    assert draft.fields[-1].order == 4


def test_first_field_gets_order_one_and_explicit_order_is_kept():
    draft = SchemaBuilder.add_field(SchemaDraft(label="First"))
    assert draft.fields[0].order == 1

    draft = SchemaBuilder.add_field(draft.model_copy(update={"label": "Second", "order": 10}))
    assert draft.fields[1].order == 10


def test_dropdown_needs_an_option():
    draft = SchemaDraft(label="Answer", field_type="dropdown")

    with pytest.raises(ValidationError):
        SchemaBuilder.add_field(draft)

    draft = SchemaBuilder.add_choice_option(draft, "Yes")
    draft = SchemaBuilder.add_field(draft)

    assert draft.fields[0].options == ["Yes"]
    assert draft.options == []


def test_choice_options_are_trimmed_and_blank_ignored():
    draft = SchemaDraft()
    draft = SchemaBuilder.add_choice_option(draft, "  Red ")
    draft = SchemaBuilder.add_choice_option(draft, "   ")
    draft = SchemaBuilder.add_choice_option(draft, "Blue")

    assert draft.options == ["Red", "Blue"]

    draft = SchemaBuilder.remove_choice_option(draft, 0)
    assert draft.options == ["Blue"]
    assert SchemaBuilder.remove_choice_option(draft, 5).options == ["Blue"]


def test_builder_operations_do_not_mutate_the_input_draft():
    draft = SchemaDraft(label="Colour", field_type="radio")
    updated = SchemaBuilder.add_choice_option(draft, "Red")

    assert draft.options == []
    assert updated.options == ["Red"]


def _table_draft(columns=2, **overrides):
    values = {
        "label": "Expenses",
        "field_type": "htmltable",
        "table_name": "Expense lines",
        "table_rows": 2,
        "table_columns": columns,
    }
    values.update(overrides)
    return SchemaDraft(**values)


def test_table_with_missing_header_names_expected_count():
    draft = SchemaBuilder.add_table_header(_table_draft(), "Item")

    with pytest.raises(ValidationError) as exc:
        SchemaBuilder.add_field(draft)

    assert str(exc.value) == "Please provide exactly 2 column header(s)."


@pytest.mark.parametrize("overrides, message", [
    ({"table_name": " "}, "Table name is required for HTML Table fields."),
    ({"table_rows": 0}, "Number of rows must be at least 1."),
    ({"table_rows": None}, "Number of rows must be at least 1."),
])
def test_table_metadata_is_required(overrides, message):
    with pytest.raises(ValidationError) as exc:
        SchemaBuilder.add_field(_table_draft(**overrides))

    assert str(exc.value) == message


def test_table_field_carries_headers_defs_and_cells():
    draft = _table_draft()
    draft = SchemaBuilder.add_table_header(draft, "Item")
    draft = SchemaBuilder.add_table_header(draft, "Paid", type="yesno")
    draft = SchemaBuilder.set_table_cell(draft, 0, 0, "Taxi")

    draft = SchemaBuilder.add_field(draft)
    field = draft.fields[0]

    assert field.table_headers == ["Item", "Paid"]
    assert [(d.name, d.type) for d in field.table_column_defs] == [("Item", "text"), ("Paid", "yesno")]
    assert field.table_data == [["Taxi", ""]]
    assert field.table_rows == 2
    assert field.table_columns == 2

    # transient table input is cleared once the field is added
    assert draft.table_headers == []
    assert draft.table_column_defs == []
    assert draft.table_data == []


def test_table_header_uses_pending_header_options():
    draft = SchemaBuilder.add_header_option(SchemaDraft(header_type="dropdown"), "Low")
    draft = SchemaBuilder.add_header_option(draft, "High")
    draft = SchemaBuilder.remove_header_option(draft, 0)

    draft = SchemaBuilder.add_table_header(draft, " Priority ")

    column = draft.table_column_defs[0]
    assert column.name == "Priority"
    assert column.type == "dropdown"
    assert column.options == ["High"]
    assert draft.header_type == "text"
    assert draft.header_options == []


def test_table_header_without_options_stores_none():
    draft = SchemaBuilder.add_table_header(SchemaDraft(), "Item", options=[])

    assert draft.table_column_defs[0].options is None
    assert SchemaBuilder.add_table_header(draft, "  ") == draft


def test_remove_table_header_keeps_lists_aligned():
    draft = SchemaDraft()
    for name in ("A", "B", "C"):
        draft = SchemaBuilder.add_table_header(draft, name)

    draft = SchemaBuilder.remove_table_header(draft, 1)

    assert draft.table_headers == ["A", "C"]
    assert [d.name for d in draft.table_column_defs] == ["A", "C"]
    assert SchemaBuilder.remove_table_header(draft, 7) == draft
    assert SchemaBuilder.remove_table_header(draft, -1) == draft


def test_set_table_cell_grows_grid_lazily():
    draft = SchemaDraft(table_columns=3)

    draft = SchemaBuilder.set_table_cell(draft, 2, 1, "x")

    assert len(draft.table_data) == 3
    assert draft.table_data[2] == ["", "x", ""]
    assert draft.table_data[0] == ["", "", ""]


def test_set_table_cell_pads_short_rows():
    draft = SchemaDraft(table_columns=2, table_data=[["a"]])

    draft = SchemaBuilder.set_table_cell(draft, 0, 4, "e")

    assert draft.table_data == [["a", "", "", "", "e"]]


def test_set_table_cell_rejects_negative_positions():
    with pytest.raises(ValidationError):
        SchemaBuilder.set_table_cell(SchemaDraft(), -1, 0, "x")


def test_changing_column_count_resets_headers_and_cells():
    draft = SchemaBuilder.set_table_dimensions(SchemaDraft(), rows=2, columns=2)
    draft = SchemaBuilder.add_table_header(draft, "A")
    draft = SchemaBuilder.set_table_cell(draft, 0, 0, "v")

    same = SchemaBuilder.set_table_dimensions(draft, rows=3)
    assert same.table_rows == 3
    assert same.table_headers == ["A"]

    changed = SchemaBuilder.set_table_dimensions(draft, columns=4)
    assert changed.table_columns == 4
    assert changed.table_headers == []
    assert changed.table_column_defs == []
    assert changed.table_data == []


def test_htmlrender_is_added_without_table_validation():
    draft = SchemaDraft(label="Rates", field_type="htmlrender", table_rows=1, table_columns=1, table_name="Rates")
    draft = SchemaBuilder.add_table_header(draft, "Rate")
    draft = SchemaBuilder.set_table_cell(draft, 0, 0, "12")

    field = SchemaBuilder.add_field(draft).fields[0]

    assert field.table_headers == ["Rate"]
    assert field.table_data == [["12"]]


def test_plainhtml_keeps_markup():
    draft = SchemaDraft(label="Intro", field_type="plainhtml", html_content="<b>Hello</b>")

    field = SchemaBuilder.add_field(draft).fields[0]

    assert field.html_content == "<b>Hello</b>"
    assert field.options is None


def test_build_schema_requires_title_and_fields():
    with pytest.raises(ValidationError) as exc:
        SchemaBuilder.build_schema(SchemaDraft(form_title=" "))
    assert str(exc.value) == "Form Title is required."

    with pytest.raises(ValidationError) as exc:
        SchemaBuilder.build_schema(SchemaDraft(form_title="Leave"))
    assert str(exc.value) == "Please add at least one field."

    draft = SchemaBuilder.add_field(SchemaDraft(form_title="Leave", description="Annual", label="Name"))
    schema = SchemaBuilder.build_schema(draft)
    assert schema.form_title == "Leave"
    assert [f.internal_name for f in schema.fields] == ["Name"]


def test_preview_lists_fields_by_order_with_type_names():
    draft = SchemaDraft(fields=[
        FieldDefinition(label="Later", internal_name="Later", type="yesno", order=5),
        FieldDefinition(label="First", internal_name="First", type="checkbox", order=1, options=["a", "b"]),
    ])

    previews = SchemaBuilder.preview(draft)

    assert [p.label for p in previews] == ["First", "Later"]
    assert previews[0].type_name == "Checkboxes (Multiple Select)"
    assert previews[0].choices == ["a", "b"]
    assert previews[1].type_name == "Yes / No"


@pytest.mark.parametrize("rows, columns, message", [
    (201, None, "Number of rows must be at most 200."),
    (None, 51, "Number of columns must be at most 50."),
])
def test_table_dimensions_have_an_upper_limit(rows, columns, message):
    with pytest.raises(ValidationError) as exc:
        SchemaBuilder.set_table_dimensions(SchemaDraft(), rows=rows, columns=columns)

    assert str(exc.value) == message
    assert SchemaBuilder.set_table_dimensions(SchemaDraft(), rows=200, columns=50).table_columns == 50


@pytest.mark.parametrize("row, col", [(200, 0), (0, 50), (20000, 0)])
def test_set_table_cell_rejects_positions_beyond_the_largest_table(row, col):
    with pytest.raises(ValidationError):
        SchemaBuilder.set_table_cell(SchemaDraft(table_columns=3), row, col, "x")


def test_oversized_table_field_is_rejected():
    draft = _table_draft(columns=1, table_rows=500)
    draft = SchemaBuilder.add_table_header(draft, "Item")

    with pytest.raises(ValidationError) as exc:
        SchemaBuilder.add_field(draft)

    assert str(exc.value) == "Number of rows must be at most 200."


def test_table_header_is_rejected_once_every_column_has_one():
    draft = SchemaBuilder.add_table_header(_table_draft(), "Item")
    draft = SchemaBuilder.add_table_header(draft, "Amount")

    with pytest.raises(ValidationError) as exc:
        SchemaBuilder.add_table_header(draft, "Extra")

    assert str(exc.value) == "All 2 column header(s) are already defined."


def _valid_fields():
    return [
        FieldDefinition(label="Name", internal_name="Name", order=1),
        FieldDefinition(label="Colour", internal_name="Colour", type="radio", order=2, options=["Red"]),
    ]


@pytest.mark.parametrize("bad_field, message", [
    (FieldDefinition(label="Other", internal_name="Other", type="bogus"), "Unsupported field type: bogus"),
    (FieldDefinition(label=" ", internal_name="Blank"), "Column name is required."),
    (FieldDefinition(label="Nameless", internal_name=""), "Internal name is required for field 'Nameless'."),
    (FieldDefinition(label="Pick", internal_name="Pick", type="dropdown"), "Please add at least one choice option."),
    (
        FieldDefinition(label="Lines", internal_name="Lines", type="htmltable",
                        table_name="Lines", table_rows=1, table_columns=2),
        "Please provide exactly 2 column header(s).",
    ),
    (
        FieldDefinition(label="Rates", internal_name="Rates", type="htmlrender", table_rows=1, table_columns=80),
        "Number of columns must be at most 50.",
    ),
    (FieldDefinition(label="Again", internal_name="Name"), "A field with internal name 'Name' already exists."),
])
def test_check_schema_validates_every_field(bad_field, message):
    schema = FormSchema(form_title="Survey", fields=[*_valid_fields(), bad_field])

    with pytest.raises(ValidationError) as exc:
        SchemaBuilder.check_schema(schema)

    assert str(exc.value) == message


def test_check_schema_accepts_legacy_table_headers():
    table = FieldDefinition(label="Grid", internal_name="Grid", type="htmltable",
                            table_name="Grid", table_rows=1, table_columns=2, table_headers=["A", "B"])

    SchemaBuilder.check_schema(FormSchema(form_title="Old", fields=[*_valid_fields(), table]))
