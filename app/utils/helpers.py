from typing import Any, Dict, Iterable


def get_nested_value(data: Dict[str, Any], keys: list) -> Any:
    """Walk a list of keys (dict keys or list indexes). None if any step is missing."""
    current = data
    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        elif isinstance(current, list) and isinstance(key, int) and -len(current) <= key < len(current):
            current = current[key]
        else:
            return None
    return current


def get_first_value(data: Dict[str, Any], paths: Iterable[list]) -> Any:
    """
    First non-empty value among several possible payload locations.
    Intercom puts the same field in different places depending on the topic.
    """
    for path in paths:
        value = get_nested_value(data, path)
        if isinstance(value, str):
            if value.strip():
                return value
        elif value:
            return value
    return None
