"""Chord transposition.

All functions degrade gracefully: text that cannot be read as a chord or
note comes back unchanged (after display cleanup) and a warning is logged.
They only raise for calls that break their preconditions, such as passing
``None`` where text is required.
"""

import logging
import re

from .exceptions import ChordParseError
from .grammar import BRACKET_RE, format_chord_display, parse_note
from .models import ChordPosition, ParsedLine
from .theory import (
    DEFAULT_THEORY,
    MusicTheory,
    interval_from_semitones,
    simplify,
    transpose_by_interval,
)

logger = logging.getLogger(__name__)

_KEY_NAME_RE = re.compile(r"^([A-G][#b]?)(.*)$", re.DOTALL)

# Triad quality on each degree of the major scale: I ii iii IV V vi vii°
_MAJOR_SCALE_QUALITIES = ("", "m", "m", "", "", "m", "dim")


def transpose_note(
    note: str, semitones: int, use_flats: bool = False, theory: MusicTheory = DEFAULT_THEORY
) -> str:
    """Transpose a single note name, e.g. ``transpose_note("B", 1)`` → ``"C"``."""
    if not isinstance(note, str):
        raise TypeError(f"note must be str, not {type(note).__name__}")
    if not note or semitones == 0:
        return note
    try:
        moved = theory.transpose_note(parse_note(note), semitones)
    except ChordParseError as exc:
        logger.warning("Failed to transpose note %r: %s", note, exc.reason)
        return note
    return str(theory.enharmonic(moved, use_flats))


def transpose_chord(
    chord: str, semitones: int, use_flats: bool = False, theory: MusicTheory = DEFAULT_THEORY
) -> str:
    """Transpose a chord symbol by *semitones*.

    Root and slash bass move by the same amount and are respelled
    independently; the quality suffix is kept verbatim.  A zero shift only
    applies display cleanup (``"Aminor"`` → ``"Am"``).
    """
    if not isinstance(chord, str):
        raise TypeError(f"chord must be str, not {type(chord).__name__}")
    if not chord or semitones == 0:
        return format_chord_display(chord)

    try:
        symbol = theory.parse_chord(chord)
    except ChordParseError as exc:
        # Lower-case bare notes ("d", "f#") are not chords but still transpose.
        try:
            note = parse_note(chord)
        except ChordParseError:
            logger.warning("Failed to transpose chord %r: %s", chord, exc.reason)
            return format_chord_display(chord)
        return str(theory.enharmonic(theory.transpose_note(note, semitones), use_flats))

    root = theory.enharmonic(theory.transpose_note(symbol.root, semitones), use_flats)
    result = f"{root}{symbol.quality}"
    if symbol.bass is not None:
        bass = theory.enharmonic(theory.transpose_note(symbol.bass, semitones), use_flats)
        result += f"/{bass}"
    return format_chord_display(result)


def transpose_parsed_line(
    line: ParsedLine, semitones: int, use_flats: bool = False, theory: MusicTheory = DEFAULT_THEORY
) -> ParsedLine:
    """Return a copy of *line* with every chord transposed; positions are unchanged."""
    return ParsedLine(
        lyrics=line.lyrics,
        chords=tuple(
            ChordPosition(
                chord=transpose_chord(cp.chord, semitones, use_flats, theory),
                position=cp.position,
            )
            for cp in line.chords
        ),
    )


def transpose_lyrics(
    lyrics: str, semitones: int, use_flats: bool = False, theory: MusicTheory = DEFAULT_THEORY
) -> str:
    """Transpose every ``[chord]`` marker in a full inline-annotated text.

    Gives the same chords as parsing each line and calling
    :func:`transpose_parsed_line`, including display cleanup at zero shift.
    """
    if not isinstance(lyrics, str):
        raise TypeError(f"lyrics must be str, not {type(lyrics).__name__}")
    return BRACKET_RE.sub(
        lambda m: f"[{transpose_chord(m.group(1), semitones, use_flats, theory)}]", lyrics
    )


def get_transposed_key_name(original_key: str, semitones: int) -> str:
    """Transpose a key label such as ``"Am"`` or ``"F# major"``, keeping its mode text.

    The root keeps the spelling implied by the interval (``C`` up one is
    ``Db``, ``A`` up one is ``Bb``) instead of following a sharp/flat
    preference.
    """
    if not original_key or semitones == 0:
        return original_key
    m = _KEY_NAME_RE.match(original_key)
    if not m:
        logger.warning("Failed to transpose key %r: no root note", original_key)
        return original_key
    root, mode = m.groups()
    moved = simplify(transpose_by_interval(parse_note(root), interval_from_semitones(semitones)))
    return f"{moved}{mode}"


def get_major_scale_chords(key: str, theory: MusicTheory = DEFAULT_THEORY) -> list[str]:
    """Return the seven diatonic triads of *key* major, e.g. ``C Dm Em F G Am Bdim``."""
    try:
        notes = theory.scale_notes(parse_note(key))
    except ChordParseError as exc:
        logger.warning("Failed to get major scale chords for key %r: %s", key, exc.reason)
        return []
    return [f"{note}{quality}" for note, quality in zip(notes, _MAJOR_SCALE_QUALITIES)]


def get_common_progressions(key: str, theory: MusicTheory = DEFAULT_THEORY) -> dict[str, list[str]]:
    """Return a few common progressions in *key* major, keyed by Roman numerals."""
    chords = get_major_scale_chords(key, theory)
    if not chords:
        return {}
    return {
        "I-IV-V": [chords[0], chords[3], chords[4]],
        "I-V-vi-IV": [chords[0], chords[4], chords[5], chords[3]],
        "ii-V-I": [chords[1], chords[4], chords[0]],
        "I-vi-IV-V": [chords[0], chords[5], chords[3], chords[4]],
    }
