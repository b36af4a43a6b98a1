# ABOUTME: Accessors for loosely-typed JSON where one field can be a string, list, or object.
# ABOUTME: Keeps defensive extraction in one place so source parsers stay declarative.

from typing import Any

from pdflibrarian.metadata.normalizer import clean_text, extract_isbn

# Keys probed, in order, when a field value turns out to be an object.
_NESTED_STRING_KEYS = ("name", "value", "text", "label", "title", "id")


def first_string(value: Any) -> str:
    """Return the first non-empty string found in a JSON value, or "".

    Strings are cleaned, numbers are stringified, lists are searched in order
    and objects are searched under a fixed set of common keys.
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return clean_text(value)
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        for element in value:
            found = first_string(element)
            if found:
                return found
        return ""
    if isinstance(value, dict):
        for key in _NESTED_STRING_KEYS:
            found = first_string(value.get(key))
            if found:
                return found
    return ""


def string_list(value: Any) -> list[str]:
    """Coerce a JSON value into a list of non-empty cleaned strings."""
    if isinstance(value, list):
        return [text for text in (first_string(element) for element in value) if text]
    text = first_string(value)
    return [text] if text else []


def find_isbn(value: Any, skip_keys: frozenset[str] = frozenset()) -> str:
    """Search every string inside a JSON value for the first ISBN-like token.

    Object members named in skip_keys are ignored at every depth.
    """
    if isinstance(value, str):
        return extract_isbn(value)
    if isinstance(value, list):
        children = value
    elif isinstance(value, dict):
        children = [child for key, child in value.items() if key not in skip_keys]
    else:
        return ""
    for child in children:
        found = find_isbn(child, skip_keys)
        if found:
            return found
    return ""


def as_dict(value: Any) -> dict[str, Any]:
    """Return value if it is a JSON object, else an empty dict."""
    return value if isinstance(value, dict) else {}


def dict_list(value: Any) -> list[dict[str, Any]]:
    """Return only the object entries of a JSON array."""
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, dict)]
