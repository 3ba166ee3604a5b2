import json
from typing import List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from eforms.core.exceptions import ParseError
from eforms.schemas.form_schema import FieldDefinition, FormSchema

UNTITLED_FORM = "Untitled Form"


class SchemaSerializer:

    @staticmethod
    def sort_fields(fields: List[FieldDefinition]) -> List[FieldDefinition]:
        # sorted() is stable: equal orders keep their insertion order
        return sorted(fields, key=lambda f: f.order)

    @staticmethod
    def serialize(schema: FormSchema) -> str:
        """Always sort before saving so the stored field order matches the numeric order."""
        ordered = schema.model_copy(update={"fields": SchemaSerializer.sort_fields(schema.fields)})
        return ordered.model_dump_json(by_alias=True, exclude_none=True)

    @staticmethod
    def deserialize(text: Optional[str]) -> Optional[FormSchema]:
        """
        Parse a stored ConfigurationJSON document.

        Returns None when there is no document at all. Raises ParseError when
        the text is not JSON or does not have the form schema shape.
        """
        if text is None or not text.strip():
            return None

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid ConfigurationJSON format: {e.msg}") from e

        if data is None:
            return None

        try:
            return FormSchema.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise ParseError(f"Invalid ConfigurationJSON format: {location} {first.get('msg')}".strip()) from e

    @staticmethod
    def summarize(text: Optional[str]) -> Tuple[str, str]:
        """
        Title and description for the browse list, with placeholders for missing values.

        Only formTitle and description are read, so a document whose fields
        would not load still lists. Raises ParseError for text that is not a
        JSON object.
        """
        if text is None or not text.strip():
            return UNTITLED_FORM, ""

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid ConfigurationJSON format: {e.msg}") from e

        if data is None:
            return UNTITLED_FORM, ""
        if not isinstance(data, dict):
            raise ParseError("Invalid ConfigurationJSON format: expected an object")

        title = data.get("formTitle")
        description = data.get("description")
        return (
            title if isinstance(title, str) and title else UNTITLED_FORM,
            description if isinstance(description, str) else "",
        )
