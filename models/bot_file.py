"""
Personality file models

BotFile describes a single file; BotFiles is the listing of a bot with its
files partitioned by kind.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from models.base import PBBaseModel


class BotFile(PBBaseModel):
    """Descriptor of one personality file."""

    name: str = Field("", description="File name")
    size: int = Field(0, description="Size in bytes")
    modified: Optional[datetime] = Field(None, description="Last modification time")
    load_order: int = Field(0, alias="loadorder", description="Position in the load sequence")
    items: int = Field(0, description="Number of items (categories, set members...)")


class BotFiles(PBBaseModel):
    """All personality files of a bot, grouped by kind."""

    username: str = ""
    appname: str = ""
    botname: str = ""
    description: str = ""
    language: str = ""
    created: Optional[datetime] = None
    open: str = ""

    files: List[BotFile] = Field(default_factory=list, description="AIML files")
    sets: List[BotFile] = Field(default_factory=list)
    maps: List[BotFile] = Field(default_factory=list)
    substitutions: List[BotFile] = Field(default_factory=list)
    properties: List[BotFile] = Field(default_factory=list)
    pdefaults: List[BotFile] = Field(default_factory=list)

    @property
    def all_files(self) -> List[BotFile]:
        """Every file of the bot, kinds in upload order."""
        return [
            *self.files, *self.sets, *self.maps,
            *self.substitutions, *self.properties, *self.pdefaults
        ]

    @property
    def total_size(self) -> int:
        """Sum of all file sizes in bytes."""
        return sum(f.size for f in self.all_files)
