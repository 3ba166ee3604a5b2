from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Widget(str, Enum):
    INPUT = "input"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO_GROUP = "radio_group"
    CHECKBOX_GROUP = "checkbox_group"
    CHECKBOX = "checkbox"
    PERSON = "person"
    TABLE = "table"
    TEXT = "text"
    MARKUP = "markup"


class ChoiceOption(BaseModel):
    value: str
    label: str
    selected: bool = False


class Control(BaseModel):
    widget: Widget
    name: str
    label: Optional[str] = None
    input_type: Optional[str] = None
    step: Optional[str] = None
    text_rows: Optional[int] = None
    placeholder: Optional[str] = None
    required: bool = False
    read_only: bool = False
    value: Optional[str] = None
    options: List[ChoiceOption] = Field(default_factory=list)

    # table widgets
    caption: Optional[str] = None
    headers: List[str] = Field(default_factory=list)
    cells: List[List["Control"]] = Field(default_factory=list)

    # raw markup, passed through unescaped
    markup: Optional[str] = None


class RenderedForm(BaseModel):
    id: Optional[int] = None
    form_title: str = ""
    description: str = ""
    controls: List[Control] = Field(default_factory=list)
