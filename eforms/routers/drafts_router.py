from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from eforms.core.database import get_db
from eforms.core.exceptions import StoreError
from eforms.schemas.field_types import MAX_TABLE_COLUMNS, MAX_TABLE_ROWS
from eforms.schemas.form_draft import FieldPreview, SchemaDraft
from eforms.services.form_config_service import FormConfigService
from eforms.services.schema_builder import SchemaBuilder

router = APIRouter()


class DraftPayload(BaseModel):
    draft: SchemaDraft = Field(default_factory=SchemaDraft)


class ValuePayload(DraftPayload):
    value: str = ""


class IndexPayload(DraftPayload):
    index: int


class TableHeaderPayload(DraftPayload):
    name: str
    type: Optional[str] = None
    options: Optional[List[str]] = None


class TableDimensionsPayload(DraftPayload):
    rows: Optional[int] = Field(None, ge=0, le=MAX_TABLE_ROWS)
    columns: Optional[int] = Field(None, ge=0, le=MAX_TABLE_COLUMNS)


class TableCellPayload(DraftPayload):
    row: int = Field(..., ge=0, lt=MAX_TABLE_ROWS)
    col: int = Field(..., ge=0, lt=MAX_TABLE_COLUMNS)
    value: str = ""


class DraftSubmitResponse(BaseModel):
    id: int
    message: str
    draft: SchemaDraft


@router.post("/fields", response_model=SchemaDraft)
def add_field(payload: DraftPayload):
    try:
        return SchemaBuilder.add_field(payload.draft)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/choice-options", response_model=SchemaDraft)
def add_choice_option(payload: ValuePayload):
    return SchemaBuilder.add_choice_option(payload.draft, payload.value)


@router.post("/choice-options/remove", response_model=SchemaDraft)
def remove_choice_option(payload: IndexPayload):
    return SchemaBuilder.remove_choice_option(payload.draft, payload.index)


@router.post("/table-headers", response_model=SchemaDraft)
def add_table_header(payload: TableHeaderPayload):
    try:
        return SchemaBuilder.add_table_header(payload.draft, payload.name, payload.type, payload.options)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/table-headers/remove", response_model=SchemaDraft)
def remove_table_header(payload: IndexPayload):
    return SchemaBuilder.remove_table_header(payload.draft, payload.index)


@router.post("/header-options", response_model=SchemaDraft)
def add_header_option(payload: ValuePayload):
    return SchemaBuilder.add_header_option(payload.draft, payload.value)


@router.post("/header-options/remove", response_model=SchemaDraft)
def remove_header_option(payload: IndexPayload):
    return SchemaBuilder.remove_header_option(payload.draft, payload.index)


@router.post("/table-dimensions", response_model=SchemaDraft)
def set_table_dimensions(payload: TableDimensionsPayload):
    try:
        return SchemaBuilder.set_table_dimensions(payload.draft, payload.rows, payload.columns)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/table-cells", response_model=SchemaDraft)
def set_table_cell(payload: TableCellPayload):
    try:
        return SchemaBuilder.set_table_cell(payload.draft, payload.row, payload.col, payload.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/preview", response_model=List[FieldPreview])
def preview(payload: DraftPayload):
    return SchemaBuilder.preview(payload.draft)


@router.post("/submit", response_model=DraftSubmitResponse)
def submit_draft(payload: DraftPayload, db: Session = Depends(get_db)):
    try:
        schema = SchemaBuilder.build_schema(payload.draft)
        saved = FormConfigService.save_schema(db, schema)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError:
        raise HTTPException(status_code=500, detail="Error saving form configuration.")

    return DraftSubmitResponse(
        id=saved["id"],
        message="Form configuration saved successfully!",
        draft=SchemaDraft(),
    )
