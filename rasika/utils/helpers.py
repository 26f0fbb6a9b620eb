from typing import Callable, Hashable, Iterable, List, TypeVar

from bson import ObjectId
from bson.errors import InvalidId

T = TypeVar("T")


def flatten(nested_list):
    return [item for sublist in nested_list for item in sublist]


def unique_by(items: Iterable[T], key: Callable[[T], Hashable]) -> List[T]:
    """Keep the first occurrence of each key, preserving order."""
    seen = set()
    unique = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        unique.append(item)
    return unique


def to_object_id(value: str) -> ObjectId:
    """Parse a document id string; raises ValueError for malformed ids."""
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError) as e:
        raise ValueError(f"invalid document id: {value!r}") from e
