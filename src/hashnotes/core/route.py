"""URL fragment encoding of the selected note."""

from urllib.parse import quote, unquote

from .model import NoteId

EMPTY_ROUTE = "#"
NOTE_PREFIX = "/note/"

# Characters encodeURIComponent leaves alone
_SAFE = "-_.!~*'()"


def format_route(note_id: NoteId | None) -> str:
    """
    Encode a selection as a fragment.

    Examples:
        >>> format_route("n1")
        '#/note/n1'
        >>> format_route("a b/c")
        '#/note/a%20b%2Fc'
        >>> format_route(None)
        '#'
    """
    if not note_id:
        return EMPTY_ROUTE
    return f"#{NOTE_PREFIX}{quote(str(note_id), safe=_SAFE)}"


def parse_route(fragment: str | None) -> NoteId | None:
    """
    Decode a fragment into a note id, or None for anything that is not
    exactly `#/note/<segment>`.
    """
    raw = (fragment or "").strip()
    if raw.startswith("#"):
        raw = raw[1:]
    if not raw.startswith(NOTE_PREFIX):
        return None

    segment = raw[len(NOTE_PREFIX):]
    if not segment or "/" in segment:
        return None

    try:
        note_id = unquote(segment, errors="strict")
    except UnicodeDecodeError:
        return None
    return note_id or None
