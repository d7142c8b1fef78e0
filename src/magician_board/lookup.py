"""Find a single member by handle or name."""

from typing import Sequence, TypeVar

from .models import ActivityRecord

R = TypeVar("R", bound=ActivityRecord)


class MemberNotFoundError(LookupError):
    """No member matches the identifier."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Member not found: {identifier!r}")


def normalize_handle(text: str) -> str:
    """Trim whitespace and a leading '@'."""
    text = text.strip()
    return text[1:] if text.startswith("@") else text


def matches_identifier(record: ActivityRecord, identifier: str) -> bool:
    """Case-insensitive match on handle, community handle or display name."""
    needle = normalize_handle(identifier).lower()
    if not needle:
        return False
    if record.username.lower() == needle:
        return True
    if record.discord_username and record.discord_username.lower() == needle:
        return True
    return needle in (record.display_name or "").lower()


def find_member(records: Sequence[R], identifier: str) -> R:
    """
    Return the first record matching the identifier.

    Args:
        records: Records to search, in priority order
        identifier: Handle (with or without '@'), community handle or part of a display name

    Returns:
        The matching record

    Raises:
        MemberNotFoundError: If nothing matches
    """
    for record in records:
        if matches_identifier(record, identifier):
            return record
    raise MemberNotFoundError(identifier)
