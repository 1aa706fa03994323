import re

from bson.objectid import ObjectId

# Characters with special meaning in a regular expression
PATTERN_METACHARACTERS = re.compile(r"[-/\\^$*+?.()|\[\]{}]")


def is_object_id(value) -> bool:
    return isinstance(value, str) and ObjectId.is_valid(value)


def normalize_name(name: str) -> str:
    """Upper-case the first character, leave the rest untouched"""
    if not name:
        return name
    return name[0].upper() + name[1:]


def contains_pattern_metacharacters(term: str) -> bool:
    return PATTERN_METACHARACTERS.search(term) is not None
