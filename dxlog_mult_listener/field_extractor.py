"""
Tag value extraction for DXLog contact datagrams.

DXLog payloads are only loosely structured, with irregular tag casing,
so fields are located by plain case-insensitive substring search
rather than by an XML parser:

    <Mult1> 10 </Mult1>  ->  "10"

No entity decoding, no nesting, no attributes.
"""

import logging
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)


_WHITESPACE = b" \t\r\n"


class FieldStatus:
    """Outcome of a tag search."""
    FOUND = 'found'
    NO_OPEN_TAG = 'no_open_tag'
    NO_CLOSE_TAG = 'no_close_tag'


class FieldMatch(NamedTuple):
    """Result of extracting one tag from a document."""
    status: str
    value: str = ""
    
    @property
    def found(self) -> bool:
        return self.status == FieldStatus.FOUND


def contains_tag(data: bytes, tag: str) -> bool:
    """
    Check whether raw bytes contain <tag>, ignoring ASCII case.
    
    Unlike extract_field(), the whole buffer is scanned, including
    anything after an embedded NUL.
    """
    needle = f"<{tag}>".lower().encode("ascii")
    return needle in data.lower()


def extract_field(
    document: bytes,
    tag: str,
    buffer_size: Optional[int] = None,
) -> FieldMatch:
    """
    Extract the text between <tag> and the next </tag>.
    
    Args:
        document: Raw datagram payload
        tag: Tag name (matched case-insensitively)
        buffer_size: Destination capacity including the terminator;
            longer values are silently cut to buffer_size - 1 bytes
            before whitespace trimming
    
    Returns:
        FieldMatch with status FOUND and the trimmed value, or
        NO_OPEN_TAG / NO_CLOSE_TAG with an empty value
    """
    # Value search stops at the first NUL byte
    nul = document.find(b"\0")
    if nul >= 0:
        document = document[:nul]
    
    # bytes.lower() only folds ASCII, so offsets stay aligned
    folded = document.lower()
    open_tag = f"<{tag}>".lower().encode("ascii")
    close_tag = f"</{tag}>".lower().encode("ascii")
    
    start = folded.find(open_tag)
    if start < 0:
        return FieldMatch(FieldStatus.NO_OPEN_TAG)
    start += len(open_tag)
    
    end = folded.find(close_tag, start)
    if end < 0:
        return FieldMatch(FieldStatus.NO_CLOSE_TAG)
    
    raw = document[start:end]
    if buffer_size is not None and len(raw) >= buffer_size:
        raw = raw[:max(buffer_size - 1, 0)]
    
    raw = raw.strip(_WHITESPACE)
    return FieldMatch(FieldStatus.FOUND, raw.decode("utf-8", errors="replace"))


def get_field(document: bytes, tag: str, buffer_size: Optional[int] = None) -> str:
    """Extract a tag value, returning "" when the tag is absent or unterminated."""
    match = extract_field(document, tag, buffer_size)
    if match.status == FieldStatus.NO_CLOSE_TAG:
        logger.debug(f"Unterminated <{tag}> in datagram")
    return match.value
