"""Chord token grammar.

Everything that decides whether a piece of text is a note or a chord lives
here, so the parser, normalizer and transposer agree on the vocabulary:

  1. parse_note()            — ``C``, ``f#``, ``Bb``, ``Ebb``, ``Fx``
  2. parse_chord_symbol()    — root + quality + optional ``/bass``
  3. is_chord_token()        — non-raising form of (2)
  4. format_chord_display()  — strip "major" / shorten "minor" for display
  5. section_label()         — ``[Verse 1]`` style marker lines

The quality suffix is opaque to the rest of the engine.  It is only checked
against a known vocabulary so that words like ``[Chorus]`` or ``[xyz123]``
are not mistaken for chords.
"""

import re

from .exceptions import ChordParseError
from .models import ChordSymbol, Note

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

_ACCIDENTAL_PAT = r"(bb|##|b|#|x)?"

NOTE_RE = re.compile(r"^([A-Ga-g])" + _ACCIDENTAL_PAT + r"$")

# Root is always an upper-case letter so lyric words are never roots.
CHORD_ROOT_RE = re.compile(r"^([A-G])" + _ACCIDENTAL_PAT + r"(.*)$")

# Quality suffix vocabulary:
#   Triads:      m, min, minor, maj, major, M, dim, aug, +, -, o, °
#   Extensions:  7, 9, 11, 13, add9, sus2, sus4, maj7, Δ7, ø7
#   Alterations: b5, #9, #11, b13, alt, (no3), 6/9
# Digits match one per repetition; "\d+" here backtracks exponentially on
# long digit runs that fail to match.
_QUALITY_TOKEN_PAT = (
    r"(?:major|Major|minor|Minor|maj|min|dim|aug|sus|add|alt|no"
    r"|m|M|6/9|[#b]?\d|[+\-°øoΔ(),])"
)
QUALITY_RE = re.compile(rf"^{_QUALITY_TOKEN_PAT}*$")

# Any [token] group on a single line, regardless of content.  "Line" means
# what str.splitlines() splits on, so whole-text and per-line parsing agree.
_LINE_BREAKS = r"\n\r\v\f\x1c-\x1e\x85\u2028\u2029"
BRACKET_RE = re.compile(rf"\[([^\]{_LINE_BREAKS}]+)\]")

# Chord-like substrings on a plain chord line: C, Am7, F#m, Gsus4, D/F#.
# Bounded on both sides so "C#" is taken whole and "Amazing" is not a chord.
# Digits match one per repetition, as in the quality vocabulary.
CHORD_LINE_TOKEN_RE = re.compile(
    r"(?<![\w#/])"
    r"[A-G][#b]?(?:maj|min|m|sus|add|dim|aug|\d)*(?:/[A-G][#b]?)?"
    r"(?![\w#])"
)

# Known section-header keywords (case-insensitive)
SECTION_KEYWORDS_RE = re.compile(
    r"^(?:Verse|Chorus|Bridge|Intro|Outro|Solo|Interlude|Instrumental|"
    r"Pre-?Chorus|Tag|Coda|Refrain|Hook)(?:\s+\d+)?:?$",
    re.IGNORECASE,
)

_MAJOR_RE = re.compile(r"major", re.IGNORECASE)

_ACCIDENTAL_VALUES = {None: 0, "": 0, "b": -1, "bb": -2, "#": 1, "##": 2, "x": 2}


# ---------------------------------------------------------------------------
# Notes and chords
# ---------------------------------------------------------------------------


def parse_note(text: str) -> Note:
    """Return the :class:`~chordsheet.models.Note` spelled by *text*.

    Raises :class:`~chordsheet.exceptions.ChordParseError` if *text* is not a
    single note name.
    """
    m = NOTE_RE.match(text.strip())
    if not m:
        raise ChordParseError(text, "not a note name")
    return Note(m.group(1).upper(), _ACCIDENTAL_VALUES[m.group(2)])


def _parse_root_and_quality(text: str) -> tuple[Note, str]:
    m = CHORD_ROOT_RE.match(text)
    if not m:
        raise ChordParseError(text, "no root note")
    quality = m.group(3)
    if not QUALITY_RE.match(quality):
        raise ChordParseError(text, f"unknown chord quality {quality!r}")
    return Note(m.group(1), _ACCIDENTAL_VALUES[m.group(2)]), quality


def parse_chord_symbol(text: str) -> ChordSymbol:
    """Parse a chord name such as ``Am7``, ``F#m7b5``, ``C/G`` or ``C6/9``.

    The text after the last ``/`` is taken as a bass note when it is one;
    otherwise the slash belongs to the quality (``6/9``).

    Raises :class:`~chordsheet.exceptions.ChordParseError` for anything else.
    """
    text = text.strip()
    if not text:
        raise ChordParseError(text, "empty chord")

    head, slash, tail = text.rpartition("/")
    if slash and head:
        try:
            bass = parse_note(tail)
        except ChordParseError:
            bass = None
        if bass is not None:
            root, quality = _parse_root_and_quality(head)
            return ChordSymbol(root, quality, bass)

    root, quality = _parse_root_and_quality(text)
    return ChordSymbol(root, quality)


def is_chord_token(text: str) -> bool:
    """Return True if *text* parses as a chord symbol."""
    try:
        parse_chord_symbol(text)
    except ChordParseError:
        return False
    return True


def format_chord_display(chord: str) -> str:
    """Apply display cleanup: drop ``major`` and write ``minor`` as ``m``."""
    formatted = _MAJOR_RE.sub("", chord)
    return formatted.replace("Minor", "m").replace("minor", "m")


# ---------------------------------------------------------------------------
# Section markers
# ---------------------------------------------------------------------------


def section_label(line: str) -> str | None:
    """Return the label if *line* is nothing but a section marker.

    ``"[Verse 1]"`` → ``"Verse 1"``; ``"[G]"`` and ``"[G]la la"`` → ``None``.
    """
    m = re.match(r"^\[([^\]]+)\]$", line.strip())
    if not m:
        return None
    label = m.group(1).strip()
    if is_chord_token(label) or not SECTION_KEYWORDS_RE.match(label):
        return None
    return label.rstrip(":")
