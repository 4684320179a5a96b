"""
Conversation models

Reply is what one talk turn returns. TalkOptions gathers the optional talk
parameters; only non-default values are sent to the service.
"""
from typing import Dict, List

from pydantic import Field, field_validator

from models.base import PBBaseModel


class Reply(PBBaseModel):
    """Bot reply to one conversational turn."""

    session_id: int = Field(0, alias="sessionid", description="Session to pass to the next turn")
    responses: List[str] = Field(default_factory=list, description="Response utterances in order")

    @field_validator("responses", mode="before")
    @classmethod
    def none_is_empty(cls, v):
        """The service sends null when the bot has nothing to say."""
        return [] if v is None else v

    @property
    def text(self) -> str:
        """All responses joined by newlines."""
        return "\n".join(self.responses)


class TalkOptions(PBBaseModel):
    """Optional talk parameters, including the debug flags."""

    client_name: str = Field("", description="Name of the human talking to the bot")
    session_id: int = Field(0, description="0 starts a new session")
    recent: bool = Field(False, description="Use the most recent session of client_name")
    that: str = Field("", description="Override of the previous bot utterance")
    topic: str = Field("", description="Override of the conversation topic")
    extra: bool = Field(False, description="Return extra debug information")
    reset: bool = Field(False, description="Reset the session before answering")
    trace: bool = Field(False, description="Return the matching trace")
    reload: bool = Field(False, description="Force the bot to reload its files")

    def to_params(self, input_text: str) -> Dict[str, str]:
        """Build the talk query parameters, leaving out default values."""
        params = {"input": input_text}
        if self.client_name:
            params["client_name"] = self.client_name
        if self.session_id != 0:
            params["sessionid"] = str(self.session_id)
        if self.recent:
            params["recent"] = "true"
        if self.that:
            params["that"] = self.that
        if self.topic:
            params["topic"] = self.topic
        for flag in ("extra", "reset", "trace", "reload"):
            if getattr(self, flag):
                params[flag] = "true"
        return params
