"""Request bodies for the HTTP API."""

from pydantic import BaseModel, Field, model_validator


class ServingRequest(BaseModel):
    """Serving choice for a food: a preset label or custom grams."""

    serving_label: str | None = None
    grams: float | None = None
    quantity: float = 1.0

    @model_validator(mode="after")
    def check_one_serving_choice(self) -> "ServingRequest":
        if self.serving_label is not None and self.grams is not None:
            raise ValueError("Pass either serving_label or grams, not both")
        return self


class ImportRequest(BaseModel):
    """FDC import request."""

    query: str = Field(min_length=2)
    limit: int = Field(default=5, ge=1, le=25)
