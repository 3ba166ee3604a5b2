from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from eforms.core.database import get_db
from eforms.core.exceptions import StoreError
from eforms.schemas.controls import RenderedForm
from eforms.schemas.form_schema import FormSchema
from eforms.services.form_config_service import FormConfigService

router = APIRouter()


class FormSummary(BaseModel):
    id: int
    form_title: str
    description: str = ""


class FormLoadError(BaseModel):
    id: int
    title: Optional[str] = None
    error: str


class FormListResponse(BaseModel):
    forms: List[FormSummary]
    errors: List[FormLoadError] = []
    total: int


class FormDetailResponse(BaseModel):
    id: int
    title: str
    status: Optional[str] = None
    created_at: Optional[datetime] = None
    configuration: Optional[FormSchema] = None


class AnswersPayload(BaseModel):
    answers: Dict[str, str] = Field(default_factory=dict)


class SubmitResponse(BaseModel):
    message: str
    id: int
    answers: Dict[str, str]


@router.get("", response_model=FormListResponse)
@router.get("/", response_model=FormListResponse)
def get_forms(db: Session = Depends(get_db)):
    try:
        forms, errors = FormConfigService.list_active_forms(db)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return FormListResponse(forms=forms, errors=errors, total=len(forms))


@router.post("", response_model=FormDetailResponse)
@router.post("/", response_model=FormDetailResponse)
def create_form(form: FormSchema, db: Session = Depends(get_db)):
    try:
        return FormConfigService.save_schema(db, form)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{form_id}", response_model=FormDetailResponse)
def get_form(form_id: int, db: Session = Depends(get_db)):
    try:
        form = FormConfigService.get_form(db, form_id)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form


def _render(form_id: int, answers: Dict[str, str], db: Session) -> RenderedForm:
    try:
        rendered = FormConfigService.render_form(db, form_id, answers)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not rendered:
        raise HTTPException(status_code=404, detail="Form not found")
    return rendered


@router.get("/{form_id}/render", response_model=RenderedForm)
def render_form(form_id: int, db: Session = Depends(get_db)):
    return _render(form_id, {}, db)


@router.post("/{form_id}/render", response_model=RenderedForm)
def render_form_with_answers(form_id: int, payload: AnswersPayload, db: Session = Depends(get_db)):
    return _render(form_id, payload.answers, db)


@router.post("/{form_id}/submit", response_model=SubmitResponse)
def submit_form(form_id: int, payload: AnswersPayload, db: Session = Depends(get_db)):
    try:
        result = FormConfigService.submit_answers(db, form_id, payload.answers)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not result:
        raise HTTPException(status_code=404, detail="Form not found")
    return SubmitResponse(message="Submission received", **result)
