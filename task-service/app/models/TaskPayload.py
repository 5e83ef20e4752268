from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TaskPayload(BaseModel):
    """Request body for create and update, as decoded before validation.

    Everything is optional here so that a missing title and an empty one
    are reported the same way by ``validate_task``. ``id`` is accepted but
    never trusted; timestamps sent by the client are dropped.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: Optional[str] = None
