"""Shared schema helpers."""
import json
from typing import Any, List

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated


def parse_json_list(value: Any) -> List[Any]:
    """
    Normalise an array column.

    Accepts an already-parsed list or a JSON-encoded string; anything else,
    including malformed JSON, becomes an empty list.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, (str, bytes)):
        try:
            decoded = json.loads(value)
        except (TypeError, ValueError):
            return []
        return decoded if isinstance(decoded, list) else []
    return []


JsonList = Annotated[List[Any], BeforeValidator(parse_json_list)]


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
