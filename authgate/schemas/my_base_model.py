import logging
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class CustomBaseModel(BaseModel):
    """Custom base model for all response schemas.
    - pre-process the data before init
    - set the default value if a simple-typed value cannot be converted
    """

    def __init__(self, **data: Any) -> None:
        fields = self.__class__.model_fields
        for attr, value in data.items():
            if attr not in fields:
                continue
            attr_type = fields[attr].annotation

            # process simple type
            if attr_type in (int, float, str, bool):
                try:  # try to convert the value to the type of the attribute
                    data[attr] = attr_type(value)
                except (TypeError, ValueError):
                    logger.warning("Invalid value for key %s, using default", attr)
                    data[attr] = fields[attr].get_default(call_default_factory=True)
        super().__init__(**data)


class Message(CustomBaseModel):
    success: bool = True
    message: str = ""
