"""Base for request bodies: unknown fields are an error, text is trimmed."""

from pydantic import BaseModel, ConfigDict


class StrictRequestModel(BaseModel):
    """Request DTO base; a client sending ``status`` on create gets a 422, not a silent drop."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)
