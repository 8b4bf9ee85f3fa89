"""
mbstub Data Model

Form input models (validated with pydantic) and the metadata record kept by
the file store for every saved template.
"""

from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import List, Dict, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD")

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD"]


class QueryParam(BaseModel):
    """Single query parameter row from the form."""

    key: str
    value: str


class Header(BaseModel):
    """Single header row from the form."""

    name: str
    value: str


class StubDraft(BaseModel):
    """
    Request/response description used to build a stub.

    JSON field names are camelCase (statusCode, queryParams, responseBody);
    snake_case attribute names are accepted as well.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "method": "GET",
                "path": "/users",
                "statusCode": 200,
                "queryParams": [{"key": "id", "value": "1"}],
                "headers": [{"name": "Accept", "value": "application/json"}],
                "responseBody": '{"id": 1, "name": "Jane"}'
            }
        }
    )

    method: HttpMethod = "PUT"
    path: str = Field(..., min_length=1)
    status_code: int = Field(..., alias="statusCode", ge=100, le=599)
    query_params: List[QueryParam] = Field(default_factory=list, alias="queryParams")
    headers: List[Header] = Field(default_factory=list)
    response_body: str = Field(default="", alias="responseBody")


class StubFormData(StubDraft):
    """Full form submission: the stub plus where and how to save it."""

    filename: str = Field(..., min_length=1)
    mode: Literal["new", "append"] = "new"


class ParseURLRequest(BaseModel):
    """Body of the parse-url endpoint."""

    url: str


@dataclass
class StoredFile:
    """Metadata record for a saved template file."""

    id: int
    filename: str
    content: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape used by the API."""
        return {
            'id': self.id,
            'filename': self.filename,
            'content': self.content,
            'createdAt': self.created_at.isoformat()
        }
