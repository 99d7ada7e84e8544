"""Custom JSON encoding utilities"""
import json
from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class SummaryEncoder(json.JSONEncoder):
    """JSON encoder for summaries, enums, sets and datetimes"""
    def default(self, obj):
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json")
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (set, frozenset)):
            return sorted(obj)
        return super().default(obj)


def json_dumps(obj, **kwargs) -> str:
    """Helper function to dump JSON with summary handling"""
    return json.dumps(obj, cls=SummaryEncoder, **kwargs)
