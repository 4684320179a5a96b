"""
Bot listing model

One entry of the application's bot list.
"""
from pydantic import Field

from models.base import PBBaseModel


class BotEntry(PBBaseModel):
    """Read-only projection of a hosted bot."""

    name: str = Field("", alias="botname", description="Bot name")
    description: str = Field("", description="Free-form bot description")
    language: str = Field("", description="Bot language code")
    compiled: str = Field("", description="Timestamp of the last compilation")
    open: str = Field("", description="Visibility flag as sent by the service")
