"""Pydantic schemas for the HTTP surface."""
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SendTokensRequest(CamelModel):
    """Documented request shape; the handler validates the raw body itself."""

    address: str = Field(..., examples=["0x72dA30dB47C0999F2891cD328Fc45cB3FffBFDa3"])
    points: Union[int, str] = Field(
        ..., description="Positive whole number, as a JSON integer or a string of digits", examples=[100, "100"]
    )


class SendTokensResponse(CamelModel):
    success: bool = True
    transaction_hash: str
    explorer_link: str
    block_number: Optional[int] = None


class PingResponse(CamelModel):
    status: str = "ok"
    network: str
    token_contract: str
    server_address: str


class ErrorResponse(CamelModel):
    success: bool = False
    error: str
    code: Optional[str] = None
    details: Optional[Any] = None
