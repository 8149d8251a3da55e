"""Best-effort plain-text recovery from raw PDF bytes.

This is not a PDF parser.  The document is treated as flat Latin-1 text and
searched for the two text-showing operator shapes that appear literally in
uncompressed content streams::

    (Hello) Tj
    [(W) 120 (orld)] TJ

No stream filter (Flate, LZW, ...) is decoded and no font encoding is
applied, so compressed or CID-keyed documents usually fall through to the
whole-document fallback scan or to the diagnostic placeholder.  Whatever
happens, :func:`extract_text` returns a non-empty string and does not raise.
"""

import logging
import re
from collections import deque
from typing import Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 50_000
MIN_TEXT_LENGTH = 50

_STREAM_OPEN = "stream"
_STREAM_CLOSE = "endstream"

# Characters that matter to the whole-document fallback scan: parentheses,
# escapes (with the escaped character) and anything outside printable ASCII.
_FALLBACK_TOKEN_RE = re.compile(r"\\[\s\S]?|[()]|[^\x20-\x7E]")
_FALLBACK_MIN_LENGTH = 4
# Deeper nesting only loses the outermost runs.
_FALLBACK_MAX_NESTING = 256
_LETTER_RE = re.compile(r"[a-zA-Z]")
_EOL_RE = re.compile(r"[\r\n]")

_WHITESPACE_RE = re.compile(r"\s+")
# Printable ASCII, Latin Extended-A and Cyrillic survive; everything else is blanked.
_DISALLOWED_RE = re.compile(r"[^\x20-\x7E\u0100-\u017F\u0400-\u04FF]")

_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\", "(": "(", ")": ")"}

_PDF_WHITESPACE = frozenset(" \t\r\n\f\x00")
_PDF_DELIMITERS = frozenset("()<>[]{}/%")

_PLACEHOLDER = '[PDF tekst nije mogao biti u potpunosti ekstrahovan. PDF fajl "{name}": {text}]'
_UNKNOWN_CONTENT = "nepoznat sadržaj"


def decode_pdf_string(raw: str) -> str:
    """Resolve the backslash escapes of a PDF literal string body.

    Only ``\\n \\r \\t \\\\ \\( \\)`` are translated; any other backslash
    sequence is kept as written.
    """
    if "\\" not in raw:
        return raw
    out: List[str] = []
    i = 0
    n = len(raw)
    while i < n:
        ch = raw[i]
        if ch == "\\" and i + 1 < n and raw[i + 1] in _ESCAPES:
            out.append(_ESCAPES[raw[i + 1]])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _read_literal(content: str, start: int) -> Tuple[Optional[str], int]:
    """Read the literal string opening at ``content[start] == "("``.

    Returns the raw (still escaped) body and the index after the closing
    parenthesis.  Balanced unescaped parentheses nest, as PDF allows.  An
    unterminated string yields ``(None, len(content))``.
    """
    depth = 1
    i = start + 1
    n = len(content)
    while i < n:
        ch = content[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return content[start + 1 : i], i + 1
        i += 1
    return None, n


def _read_array(content: str, start: int) -> Tuple[Optional[List[str]], int]:
    """Collect the literal strings of the array opening at ``content[start] == "["``.

    Numbers (kerning adjustments) and anything else between the strings are
    ignored.
    """
    strings: List[str] = []
    i = start + 1
    n = len(content)
    while i < n:
        ch = content[i]
        if ch == "(":
            raw, i = _read_literal(content, i)
            if raw is None:
                break
            strings.append(raw)
            continue
        if ch == "]":
            return strings, i + 1
        i += 1
    return None, n


def iter_stream_fragments(content: str) -> Iterator[str]:
    """Yield the text shown by ``Tj`` and ``TJ`` operators in one content stream.

    Fragments come out in order of appearance.  The operand that precedes an
    operator is remembered only until the next token, so ``(x) 0 Tj`` or a
    string followed by ``Td`` emits nothing.
    """
    operand: Optional[Tuple[str, List[str]]] = None
    i = 0
    n = len(content)
    while i < n:
        ch = content[i]
        if ch in _PDF_WHITESPACE:
            i += 1
            continue
        if ch == "(":
            raw, i = _read_literal(content, i)
            operand = ("Tj", [raw]) if raw is not None else None
            continue
        if ch == "[":
            items, i = _read_array(content, i)
            operand = ("TJ", items) if items is not None else None
            continue
        if ch == "%":
            # Comments run to the end of the line and count as whitespace.
            eol = _EOL_RE.search(content, i)
            i = eol.start() if eol else n
            continue
        if ch in _PDF_DELIMITERS:
            operand = None
            i += 1
            continue

        end = i
        while end < n and content[end] not in _PDF_WHITESPACE and content[end] not in _PDF_DELIMITERS:
            end += 1
        token = content[i:end]
        i = end
        if operand is not None and token == operand[0]:
            for raw in operand[1]:
                yield decode_pdf_string(raw)
        operand = None


def iter_stream_bodies(document: str) -> Iterator[str]:
    """Yield the content between each ``stream`` keyword and the next ``endstream``.

    The search stops at the first ``stream`` without a closing ``endstream``,
    so the scan stays linear in the document size.
    """
    pos = 0
    while True:
        start = document.find(_STREAM_OPEN, pos)
        if start < 0:
            return
        body_start = start + len(_STREAM_OPEN)
        end = document.find(_STREAM_CLOSE, body_start)
        if end < 0:
            return
        yield document[body_start:end]
        pos = end + len(_STREAM_CLOSE)


def iter_operator_fragments(document: str) -> Iterator[str]:
    """Yield ``Tj``/``TJ`` text from every ``stream ... endstream`` span, in document order."""
    for body in iter_stream_bodies(document):
        yield from iter_stream_fragments(body)


def _printable_literal_spans(document: str) -> List[Tuple[int, int]]:
    """Return ``(open, close)`` positions of balanced parentheses enclosing only printable ASCII.

    One pass over the document.  A non-printable character invalidates every
    parenthesis still open, so those are dropped from the stack.
    """
    spans: List[Tuple[int, int]] = []
    stack: deque = deque(maxlen=_FALLBACK_MAX_NESTING)
    for match in _FALLBACK_TOKEN_RE.finditer(document):
        token = match.group(0)
        if token == "(":
            stack.append(match.start())
        elif token == ")":
            if stack:
                spans.append((stack.pop(), match.start()))
        elif token[0] == "\\":
            if len(token) == 2 and not " " <= token[1] <= "~":
                stack.clear()
        else:
            stack.clear()
    return spans


def iter_fallback_fragments(document: str) -> Iterator[str]:
    """Yield parenthesised printable runs from the whole document that look like words.

    Nested balanced parentheses stay part of the enclosing run; only the
    outermost printable run of a nest is considered.
    """
    covered_until = -1
    for start, end in sorted(_printable_literal_spans(document)):
        if end < covered_until:
            continue
        covered_until = end
        inner = document[start + 1 : end]
        if len(inner) >= _FALLBACK_MIN_LENGTH and _LETTER_RE.search(inner):
            yield decode_pdf_string(inner)


def clean_text(text: str) -> str:
    text = _WHITESPACE_RE.sub(" ", text)
    text = _DISALLOWED_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def placeholder(file_name: str, recovered: str) -> str:
    """Diagnostic text returned when too little text could be recovered."""
    return _PLACEHOLDER.format(name=file_name, text=recovered or _UNKNOWN_CONTENT)


def extract_text(pdf_bytes: bytes, file_name: str = "") -> str:
    """Return the text recoverable from *pdf_bytes*, at most ``MAX_TEXT_LENGTH`` characters.

    When fewer than ``MIN_TEXT_LENGTH`` characters are recovered a bracketed
    placeholder mentioning *file_name* is returned instead, so callers always
    get something to show.
    """
    # Latin-1 maps every byte to one code point, so decoding cannot fail.
    document = bytes(pdf_bytes).decode("latin-1")

    fragments = list(iter_operator_fragments(document))
    if not fragments:
        fragments = list(iter_fallback_fragments(document))
        logger.debug("No text operators found; fallback scan recovered %d fragments", len(fragments))

    text = clean_text(" ".join(fragments))
    if len(text) < MIN_TEXT_LENGTH:
        logger.info("Only %d characters recovered from %r; returning placeholder", len(text), file_name)
        text = placeholder(file_name, text)

    return text[:MAX_TEXT_LENGTH]
