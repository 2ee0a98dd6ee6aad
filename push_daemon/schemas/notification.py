from pydantic import BaseModel, Field


class NotificationRequest(BaseModel):
    title: str = ""
    body: str = ""
    device_tokens: list[str] = Field(..., min_length=1)
