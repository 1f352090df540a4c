from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str
    id: Optional[str] = None


class BulkDeleteRequest(CamelModel):
    """Body of the bulk DELETE endpoints; emptiness is checked by the service"""
    ids: Optional[List[str]] = None
