from typing import List, Optional

from pydantic import Field

from .field_types import FieldType
from .form_schema import CamelModel, ColumnDef, FieldDefinition


class SchemaDraft(CamelModel):
    """
    Everything the admin has typed into the builder so far.

    Builder operations never mutate a draft; they return an updated copy.
    """

    form_title: str = ""
    description: str = ""
    fields: List[FieldDefinition] = Field(default_factory=list)

    # pending field
    label: str = ""
    internal_name: str = ""
    field_type: str = FieldType.TEXT.value
    required: bool = False
    order: Optional[int] = None
    options: List[str] = Field(default_factory=list)

    # pending table
    table_name: str = ""
    table_rows: Optional[int] = None
    table_columns: Optional[int] = None
    table_headers: List[str] = Field(default_factory=list)
    table_column_defs: List[ColumnDef] = Field(default_factory=list)
    table_data: List[List[str]] = Field(default_factory=list)

    # pending table header
    header_type: str = FieldType.TEXT.value
    header_options: List[str] = Field(default_factory=list)

    # pending plainhtml
    html_content: str = ""


class FieldPreview(CamelModel):
    order: int
    label: str
    internal_name: str
    type_name: str
    required: bool = False
    choices: Optional[List[str]] = None
    table_name: Optional[str] = None
    table_rows: Optional[int] = None
    table_columns: Optional[int] = None
    table_headers: Optional[List[str]] = None
