"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class LikeAction(str, Enum):
    LIKE = "like"
    UNLIKE = "unlike"


class BackendKind(str, Enum):
    MEMORY = "memory"
    FILE = "file"
    KV = "kv"
    DOCUMENT = "document"
    SQL = "sql"
