from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .field_types import FieldType, parse_field_type


class CamelModel(BaseModel):
    """Stored and exchanged documents use camelCase keys (formTitle, internalName, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ColumnDef(CamelModel):
    name: str
    type: str = FieldType.TEXT.value
    options: Optional[List[str]] = None


class FieldDefinition(CamelModel):
    label: str = ""
    internal_name: str = ""
    type: str = FieldType.TEXT.value
    required: bool = False
    order: int = 0

    # dropdown / radio / checkbox
    options: Optional[List[str]] = None

    # htmltable / htmlrender
    table_name: Optional[str] = None
    table_rows: Optional[int] = None
    table_columns: Optional[int] = None
    table_headers: Optional[List[str]] = None
    table_column_defs: Optional[List[ColumnDef]] = None
    table_data: Optional[List[List[str]]] = None

    # plainhtml
    html_content: Optional[str] = None

    @property
    def kind(self) -> Optional[FieldType]:
        return parse_field_type(self.type)

    def column_defs(self) -> List[ColumnDef]:
        # Schemas saved before per-column types existed only carry tableHeaders.
        if self.table_column_defs is not None:
            return list(self.table_column_defs)
        return [ColumnDef(name=header, type=FieldType.TEXT.value) for header in self.table_headers or []]

    def column_def(self, col: int) -> ColumnDef:
        defs = self.column_defs()
        if col < len(defs):
            return defs[col]
        return ColumnDef(name=f"Column {col + 1}", type=FieldType.TEXT.value)

    def cell(self, row: int, col: int) -> str:
        data = self.table_data or []
        if row < len(data) and col < len(data[row]):
            return data[row][col]
        return ""


class FormSchema(CamelModel):
    form_title: str = ""
    description: str = ""
    fields: List[FieldDefinition] = Field(default_factory=list)
