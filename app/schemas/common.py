from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Optional

class CamelModel(BaseModel):
    # Request bodies arrive in camelCase (firstName, clinicId, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class ApiResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    count: Optional[int] = None
    data: Any = None
