from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class CredentialsRequest(CamelModel):
    email: Any = None
    password: Any = None


class EmailRequest(CamelModel):
    email: Any = None


class VerifyOtpRequest(CamelModel):
    email: Any = None
    otp: Any = None
