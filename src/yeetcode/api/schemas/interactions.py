"""Schemas for Discord interactions and interaction responses."""

from enum import IntEnum
from typing import Any, List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class InteractionType(IntEnum):
    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3
    APPLICATION_COMMAND_AUTOCOMPLETE = 4
    MODAL_SUBMIT = 5


class InteractionResponseType(IntEnum):
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4


class CommandOption(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    type: Optional[int] = None
    value: Any = None

    def string_value(self) -> str:
        return self.value if isinstance(self.value, str) else ""


class ApplicationCommandData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = None
    options: List[CommandOption] = Field(default_factory=list)

    def option(self, name: str) -> Optional[CommandOption]:
        """Return the first option called name, if any."""
        for opt in self.options:
            if opt.name == name:
                return opt
        return None


class Interaction(BaseModel):
    """The subset of an inbound interaction the bot reads."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    type: int
    token: str = ""
    data: Optional[ApplicationCommandData] = None

    def command_data(self) -> ApplicationCommandData:
        return self.data or ApplicationCommandData()


class InteractionResponseData(BaseModel):
    content: Optional[str] = None


class InteractionResponse(BaseModel):
    type: InteractionResponseType
    data: Optional[InteractionResponseData] = None

    @classmethod
    def pong(cls) -> "InteractionResponse":
        return cls(type=InteractionResponseType.PONG)

    @classmethod
    def message(cls, content: str) -> "InteractionResponse":
        return cls(
            type=InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE,
            data=InteractionResponseData(content=content),
        )
