from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

ACTIVE_STATUS = "Active"


class ConfigItem(Base):
    __tablename__ = "config_list"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False, index=True)
    status = Column(String(50), nullable=False, default=ACTIVE_STATUS, index=True)
    configuration_json = Column(Text, nullable=True)  # serialized FormSchema
    created_at = Column(DateTime(timezone=True), server_default=func.now())
