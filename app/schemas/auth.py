from typing import Any

from app.schemas.common import CamelModel


class GoogleVerifyRequest(CamelModel):
    google_token: Any = None
    user_type: Any = None
