"""Text encoding for ordered string lists stored in a single column."""
import json
from typing import List, Optional, Sequence

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator


def encode_list(values: Optional[Sequence[str]]) -> Optional[str]:
    """
    Encode an ordered list of strings as JSON text.

    Order and duplicates are preserved; None stays None (SQL NULL).
    """
    if values is None:
        return None
    return json.dumps(list(values), ensure_ascii=False)


def decode_list(raw: Optional[str]) -> Optional[List[str]]:
    """Decode JSON text produced by encode_list back to a list."""
    if raw is None:
        return None
    decoded = json.loads(raw)
    if not isinstance(decoded, list):
        raise ValueError("Encoded value is not a list")
    return [str(item) for item in decoded]


class StringList(TypeDecorator):
    """Column type storing an ordered list of strings as JSON text."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return encode_list(value)

    def process_result_value(self, value, dialect):
        return decode_list(value)
