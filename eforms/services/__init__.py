from .schema_builder import SchemaBuilder
from .schema_serializer import SchemaSerializer
from .schema_renderer import SchemaRenderer
from .list_store import ListStore
from .form_config_service import FormConfigService

__all__ = ["SchemaBuilder", "SchemaSerializer", "SchemaRenderer", "ListStore", "FormConfigService"]
