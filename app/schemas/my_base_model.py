import logging
from typing import Any

from pydantic import BaseModel, ConfigDict
from sqlalchemy.engine.row import Row

logger = logging.getLogger(__name__)


class CustomBaseModel(BaseModel):
    """Custom base model for all response schemas.
    - reads attributes straight from ORM rows
    - drops None for non-optional simple fields so the declared default applies
    - helper to build a model from a Row, a dict or an ORM object
    """

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    def __init__(self, **data: Any) -> None:
        for attr in list(data):
            field = self.__class__.model_fields.get(attr)
            if field is None or data[attr] is not None:
                continue
            if field.annotation in (int, float, str, bool) and not field.is_required():
                logger.debug("None for %s.%s, using default", self.__class__.__name__, attr)
                del data[attr]
        super().__init__(**data)

    @classmethod
    def from_record(cls, record: Any):
        if isinstance(record, Row):
            return cls(**record._asdict())
        elif isinstance(record, dict):
            return cls(**record)
        elif hasattr(record, "__table__"):
            return cls.model_validate(record)
        else:
            raise ValueError(f"Invalid record type: {type(record)}")
