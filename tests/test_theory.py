import pytest

from chordsheet.exceptions import ChordParseError
from chordsheet.models import Interval, Note
from chordsheet.theory import (
    DEFAULT_THEORY,
    DiatonicTheory,
    interval_from_semitones,
    simplify,
    transpose_by_interval,
)

# ---------------------------------------------------------------------------
# interval_from_semitones
# ---------------------------------------------------------------------------


def test_interval_from_semitones_within_octave():
    assert interval_from_semitones(0) == Interval(0, 0)
    assert interval_from_semitones(1) == Interval(1, 1)  # minor second
    assert interval_from_semitones(5) == Interval(3, 5)  # perfect fourth
    assert interval_from_semitones(7) == Interval(4, 7)  # perfect fifth


def test_interval_from_semitones_negative():
    assert interval_from_semitones(-1) == Interval(-1, -1)
    assert interval_from_semitones(-2) == Interval(-1, -2)


def test_interval_from_semitones_octaves():
    assert interval_from_semitones(12) == Interval(7, 12)
    assert interval_from_semitones(-12) == Interval(-7, -12)
    assert interval_from_semitones(13) == Interval(8, 13)


# ---------------------------------------------------------------------------
# transpose_by_interval
# ---------------------------------------------------------------------------


def test_transpose_wraps_past_b():
    assert transpose_by_interval(Note("B"), Interval(1, 1)) == Note("C")


def test_transpose_wraps_below_c():
    assert transpose_by_interval(Note("C"), Interval(-1, -1)) == Note("B")


def test_transpose_spelling_follows_interval():
    # Same pitch, different spelling: minor second vs augmented unison.
    assert transpose_by_interval(Note("C"), Interval(1, 1)) == Note("D", -1)
    assert transpose_by_interval(Note("C"), Interval(0, 1)) == Note("C", 1)


def test_transpose_fourth_versus_augmented_third():
    assert transpose_by_interval(Note("C"), Interval(3, 5)) == Note("F")
    assert transpose_by_interval(Note("C"), Interval(2, 5)) == Note("E", 1)


# ---------------------------------------------------------------------------
# simplify
# ---------------------------------------------------------------------------


def test_simplify_white_key_accidentals():
    assert simplify(Note("E", 1)) == Note("F")
    assert simplify(Note("C", -1)) == Note("B")


def test_simplify_double_accidentals():
    assert simplify(Note("F", 2)) == Note("G")
    assert simplify(Note("B", -2)) == Note("A")
    assert simplify(Note("C", 2)) == Note("D")


def test_simplify_keeps_single_accidental_black_keys():
    assert simplify(Note("D", -1)) == Note("D", -1)
    assert simplify(Note("C", 1)) == Note("C", 1)


# ---------------------------------------------------------------------------
# DiatonicTheory
# ---------------------------------------------------------------------------


def test_default_theory_is_diatonic():
    assert isinstance(DEFAULT_THEORY, DiatonicTheory)


def test_theory_transpose_note_simplifies():
    # Eb up a minor second is Fb, reported as E.
    assert DEFAULT_THEORY.transpose_note(Note("E", -1), 1) == Note("E")


def test_scale_notes_g_major():
    notes = DEFAULT_THEORY.scale_notes(Note("G"))
    assert [str(n) for n in notes] == ["G", "A", "B", "C", "D", "E", "F#"]


def test_scale_notes_f_major_uses_b_flat():
    notes = DEFAULT_THEORY.scale_notes(Note("F"))
    assert [str(n) for n in notes] == ["F", "G", "A", "Bb", "C", "D", "E"]


def test_scale_notes_rejects_double_accidental_tonic():
    with pytest.raises(ChordParseError):
        DEFAULT_THEORY.scale_notes(Note("C", 2))


def test_enharmonic_prefers_requested_accidental():
    assert DEFAULT_THEORY.enharmonic(Note("D", -1), use_flats=False) == Note("C", 1)
    assert DEFAULT_THEORY.enharmonic(Note("C", 1), use_flats=True) == Note("D", -1)


def test_enharmonic_keeps_naturals():
    assert DEFAULT_THEORY.enharmonic(Note("E", 1), use_flats=True) == Note("F")
    assert DEFAULT_THEORY.enharmonic(Note("G"), use_flats=False) == Note("G")


def test_parse_chord_delegates_to_grammar():
    assert DEFAULT_THEORY.parse_chord("Am7/G").bass == Note("G")
