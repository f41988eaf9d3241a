from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ResponseModel(BaseModel, Generic[T]):
    """Envelope returned by every successful endpoint."""

    success: bool = True
    message: str
    data: Optional[T] = None
