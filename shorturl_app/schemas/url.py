from pydantic import BaseModel, ConfigDict, Field


class URLRecord(BaseModel):
    """A stored mapping, independent of the backend that holds it.

    from_attributes=True lets the relational store validate ORM rows
    directly; the Mongo store builds it from document fields.
    """
    original_url: str = Field(..., description="The URL that was shortened")
    short_url: int = Field(..., description="Numeric short URL assigned from the counter")

    # Pydantic V2 style configuration
    model_config = ConfigDict(from_attributes=True, frozen=True)


class ShortURLResponse(BaseModel):
    original_url: str
    short_url: int

    @classmethod
    def from_record(cls, record: URLRecord) -> "ShortURLResponse":
        return cls(original_url=record.original_url, short_url=record.short_url)


class ErrorResponse(BaseModel):
    error: str


class GreetingResponse(BaseModel):
    greeting: str
