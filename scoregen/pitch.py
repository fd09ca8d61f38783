"""Octave-point-pitch-class helpers ("8.00" = middle C)."""

from __future__ import annotations

SEMITONES_PER_OCTAVE = 12
MIDDLE_C_OCTAVE = 8   # 8.00 in octave.pitch-class notation
MIDDLE_C_MIDI = 60    # C4 in Scientific Pitch Notation


def pch_string(octave: int, semitone: int) -> str:
    """
    Encode an octave and a semitone offset as an octave.pitch-class string.

    The semitone is always two digits, so 8 and 5 become ``"8.05"``.
    Offsets above 11 are written as-is (``"8.15"``); the engine folds them
    into the next octave when converting to a frequency.
    """
    if not 0 <= semitone <= 99:
        raise ValueError(f"Semitone offset must be within 0-99, got {semitone}.")
    return f"{octave}.{semitone:02d}"


def _split_pch(pitch: int | float | str) -> tuple[int, int]:
    text = pitch if isinstance(pitch, str) else f"{float(pitch):.2f}"
    octave_text, _, semitone_text = text.strip().partition(".")
    try:
        octave = int(octave_text)
        semitone = int(semitone_text.ljust(2, "0")[:2]) if semitone_text else 0
    except ValueError:
        raise ValueError(f"Not an octave.pitch-class value: {pitch!r}") from None
    return octave, semitone


def pch_to_midi(pitch: int | float | str) -> int:
    """
    Convert an octave.pitch-class value to an absolute MIDI note number.

    Mirrors ``cps2pch(p, 12)``: the two digits after the point count
    semitones above C of the octave, carrying past 11 into the next one.

        "8.00" -> 60,  "8.09" -> 69,  "8.15" -> 75,  7.05 -> 53

    Raises:
        ValueError: If the value cannot be read as octave.pitch-class.
    """
    octave, semitone = _split_pch(pitch)
    return MIDDLE_C_MIDI + (octave - MIDDLE_C_OCTAVE) * SEMITONES_PER_OCTAVE + semitone
