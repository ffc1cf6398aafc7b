# app/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Literal


class HealthStatus(BaseModel):
    status: Literal["OK"] = "OK"
    message: str = "Server is running"


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(
        alias="imageUrl",
        description="URL publique de l'image, servie sous /uploads.",
    )


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
