"""Request and response bodies of the JSON endpoint."""

from typing import Optional

from pydantic import BaseModel


class ConvertRequest(BaseModel):
    url: str = ""


class ConvertResponse(BaseModel):
    """`error` is dropped from the serialized body when it is None."""

    markdown: str = ""
    error: Optional[str] = None

    def to_body(self) -> dict:
        return self.model_dump(exclude_none=True)
