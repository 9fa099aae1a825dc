"""Pitch arithmetic over the seven-letter note space.

Notes are moved by an :class:`~chordsheet.models.Interval` (letter steps and
semitones together) rather than by a bare semitone count, so the spelling of
the result follows from the interval: C up a minor second is Db, C up an
augmented unison is C#.

The engine reaches this module through the :class:`MusicTheory` interface.
:class:`DiatonicTheory` is the built-in implementation and
:data:`DEFAULT_THEORY` the instance every public function defaults to.
"""

from abc import ABC, abstractmethod

from .exceptions import ChordParseError
from .grammar import parse_chord_symbol
from .models import STEP_VALUES, STEPS, ChordSymbol, Interval, Note

# Interval used for each semitone distance within an octave, as
# (letter steps, semitones): 1P, 2m, 2M, 3m, 3M, 4P, 5d, 5P, 6m, 6M, 7m, 7M.
_SEMITONE_INTERVALS = (
    (0, 0), (1, 1), (1, 2), (2, 3), (2, 4), (3, 5),
    (4, 6), (4, 7), (5, 8), (5, 9), (6, 10), (6, 11),
)

# Spelling of each pitch class with one accidental at most.
_SHARP_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
_FLAT_NAMES = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")

# Major scale as semitone offsets from the tonic, one per letter step.
_MAJOR_SCALE = (0, 2, 4, 5, 7, 9, 11)


# ---------------------------------------------------------------------------
# Interval arithmetic
# ---------------------------------------------------------------------------


def interval_from_semitones(semitones: int) -> Interval:
    """Return the conventional interval spanning *semitones* (may be negative)."""
    octaves, remainder = divmod(semitones, 12)
    diatonic, chromatic = _SEMITONE_INTERVALS[remainder]
    return Interval(diatonic + 7 * octaves, chromatic + 12 * octaves)


def transpose_by_interval(note: Note, interval: Interval) -> Note:
    """Move *note* by *interval*, wrapping around the seven letters."""
    index = STEPS.index(note.step)
    value = STEP_VALUES[index] + note.alteration + interval.chromatic
    octaves, new_index = divmod(index + interval.diatonic, 7)
    alteration = value - 12 * octaves - STEP_VALUES[new_index]
    return Note(STEPS[new_index], alteration)


def simplify(note: Note) -> Note:
    """Respell double accidentals and E#/B#/Fb/Cb with one accidental or none.

    Single-accidental spellings on black keys are left as they are.
    """
    if abs(note.alteration) < 2 and str(note) not in ("E#", "B#", "Fb", "Cb"):
        return note
    names = _FLAT_NAMES if note.alteration < 0 else _SHARP_NAMES
    return name_to_note(names[note.pitch_class])


def name_to_note(name: str) -> Note:
    alteration = {"#": 1, "b": -1}.get(name[1:], 0)
    return Note(name[0], alteration)


# ---------------------------------------------------------------------------
# MusicTheory capability
# ---------------------------------------------------------------------------


class MusicTheory(ABC):
    """Pitch arithmetic needed by the transposer and key detector.

    Implementations must be stateless: every method is a pure function of
    its arguments.
    """

    @abstractmethod
    def transpose_note(self, note: Note, semitones: int) -> Note:
        """Return *note* moved by *semitones*, in the implementation's default spelling."""

    @abstractmethod
    def parse_chord(self, text: str) -> ChordSymbol:
        """Parse *text* as a chord symbol.

        Raises ChordParseError if *text* is not a recognised chord or note.
        """

    @abstractmethod
    def scale_notes(self, tonic: Note) -> list[Note]:
        """Return the seven notes of the major scale on *tonic*."""

    @abstractmethod
    def enharmonic(self, note: Note, use_flats: bool) -> Note:
        """Respell *note* preferring flats (or sharps) on black keys."""


class DiatonicTheory(MusicTheory):
    """Built-in :class:`MusicTheory` based on interval arithmetic."""

    def transpose_note(self, note: Note, semitones: int) -> Note:
        return simplify(transpose_by_interval(note, interval_from_semitones(semitones)))

    def parse_chord(self, text: str) -> ChordSymbol:
        return parse_chord_symbol(text)

    def scale_notes(self, tonic: Note) -> list[Note]:
        if abs(tonic.alteration) > 1:
            raise ChordParseError(str(tonic), "no major scale on a double accidental")
        notes = []
        for degree, offset in enumerate(_MAJOR_SCALE):
            notes.append(transpose_by_interval(tonic, Interval(degree, offset)))
        return notes

    def enharmonic(self, note: Note, use_flats: bool) -> Note:
        names = _FLAT_NAMES if use_flats else _SHARP_NAMES
        return name_to_note(names[note.pitch_class])


DEFAULT_THEORY = DiatonicTheory()
