import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from eforms.core.exceptions import ParseError
from eforms.models.config_item import ACTIVE_STATUS, ConfigItem
from eforms.schemas.controls import RenderedForm
from eforms.schemas.form_schema import FormSchema
from eforms.services.list_store import ListStore
from eforms.services.schema_builder import SchemaBuilder
from eforms.services.schema_renderer import AnswerMap, SchemaRenderer
from eforms.services.schema_serializer import UNTITLED_FORM, SchemaSerializer

logger = logging.getLogger(__name__)


class FormConfigService:

    @staticmethod
    def _format_item(item: ConfigItem, schema: Optional[FormSchema]) -> Dict[str, Any]:
        return {
            "id": item.id,
            "title": item.title,
            "status": item.status,
            "created_at": item.created_at,
            "configuration": schema,
        }

    @staticmethod
    def save_schema(db: Session, schema: FormSchema) -> Dict[str, Any]:
        SchemaBuilder.check_schema(schema)

        payload = SchemaSerializer.serialize(schema)
        item = ListStore(db).add(
            title=schema.form_title,
            configuration_json=payload,
            status=ACTIVE_STATUS,
        )
        logger.info("Saved form configuration %s (%s, %d fields)", item.id, item.title, len(schema.fields))

        return FormConfigService._format_item(item, SchemaSerializer.deserialize(payload))

    @staticmethod
    def list_active_forms(db: Session) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """
        Summaries of every active form, sorted by title (case-insensitive).

        An item whose ConfigurationJSON cannot be parsed is reported in the
        second list; the remaining items are still returned.
        """
        items = ListStore(db).query(status=ACTIVE_STATUS)

        forms = []
        errors = []
        for item in items:
            try:
                title, description = SchemaSerializer.summarize(item.configuration_json)
            except ParseError as e:
                logger.warning("Skipping form configuration %s: %s", item.id, e)
                errors.append({"id": item.id, "title": item.title, "error": str(e)})
                continue
            forms.append({"id": item.id, "form_title": title, "description": description})

        forms.sort(key=lambda f: f["form_title"].casefold())
        return forms, errors

    @staticmethod
    def get_form(db: Session, form_id: int) -> Optional[Dict[str, Any]]:
        item = ListStore(db).get_by_id(form_id)
        if not item:
            return None

        try:
            schema = SchemaSerializer.deserialize(item.configuration_json)
        except ParseError as e:
            logger.error("Invalid ConfigurationJSON for form %s: %s", form_id, e)
            schema = None

        return FormConfigService._format_item(item, schema)

    @staticmethod
    def render_form(db: Session, form_id: int, answers: Optional[AnswerMap] = None) -> Optional[RenderedForm]:
        form = FormConfigService.get_form(db, form_id)
        if not form:
            return None

        schema = form["configuration"]
        if schema is None:
            # Nothing usable stored: show the placeholder title and no fields
            return RenderedForm(id=form_id, form_title=UNTITLED_FORM, description="", controls=[])

        return SchemaRenderer.render_form(schema, answers, form_id=form_id)

    @staticmethod
    def submit_answers(db: Session, form_id: int, answers: AnswerMap) -> Optional[Dict[str, Any]]:
        # Answers are not persisted yet; the submission is only acknowledged.
        item = ListStore(db).get_by_id(form_id)
        if not item:
            return None
        logger.info("Received %d answer(s) for form %s", len(answers), form_id)
        return {"id": item.id, "answers": answers}
