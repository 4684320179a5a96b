"""
Data models for the Pandorabots client

Immutable Pydantic models mirroring the service's JSON documents.
"""

from models.base import PBBaseModel
from models.bot import BotEntry
from models.bot_file import BotFile, BotFiles
from models.talk import Reply, TalkOptions

__all__ = [
    'PBBaseModel',
    'BotEntry',
    'BotFile',
    'BotFiles',
    'Reply',
    'TalkOptions',
]
