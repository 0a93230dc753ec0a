from pydantic import BaseModel, ConfigDict, field_validator
from typing import Any, List, Optional, Union


class Post(BaseModel):
    id: str
    categories: Optional[Union[str, List[str]]] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value
