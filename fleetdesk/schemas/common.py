from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

# Stored and computed as Decimal, rendered as a JSON number.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class MessageResponse(BaseModel):
    message: str
