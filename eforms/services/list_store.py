import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eforms.core.exceptions import StoreError
from eforms.models.config_item import ACTIVE_STATUS, ConfigItem

logger = logging.getLogger(__name__)


class ListStore:
    """Read/write access to the config list: one form schema document per item."""

    def __init__(self, db: Session):
        self.db = db

    def query(self, status: Optional[str] = None) -> List[ConfigItem]:
        try:
            query = self.db.query(ConfigItem)
            if status:
                query = query.filter(ConfigItem.status == status)
            return query.order_by(ConfigItem.id).all()
        except SQLAlchemyError as e:
            logger.error("Error fetching config list items: %s", e)
            raise StoreError("Error fetching form configurations.") from e

    def add(self, title: str, configuration_json: Optional[str], status: str = ACTIVE_STATUS) -> ConfigItem:
        item = ConfigItem(title=title, configuration_json=configuration_json, status=status)
        try:
            self.db.add(item)
            self.db.commit()
            self.db.refresh(item)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Error saving config list item %r: %s", title, e)
            raise StoreError("Error saving form configuration.") from e
        return item

    def get_by_id(self, item_id: int) -> Optional[ConfigItem]:
        try:
            return self.db.query(ConfigItem).filter(ConfigItem.id == item_id).first()
        except SQLAlchemyError as e:
            logger.error("Error fetching config list item %s: %s", item_id, e)
            raise StoreError("Error fetching form configuration.") from e
