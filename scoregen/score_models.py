"""Data models for note events and scores."""

from __future__ import annotations

from dataclasses import dataclass

PField = int | float | str

#: Statement character for a note (instrument) event.
NOTE_STATEMENT = "i"


@dataclass(frozen=True)
class NoteEvent:
    """
    One score statement: a tag character plus its positional p-fields.

    For note events the p-fields follow the engine's convention:

        p1 instrument, p2 start (s), p3 duration (s), p4 amplitude, p5 pitch

    Values are positional; their meaning comes from the instrument that p1
    refers to, not from this class.
    """

    pfields: tuple[PField, ...]
    statement: str = NOTE_STATEMENT

    @classmethod
    def note(
        cls,
        instrument: int,
        start: float,
        duration: float,
        amplitude: float,
        pitch: PField,
    ) -> "NoteEvent":
        return cls(pfields=(instrument, start, duration, amplitude, pitch))

    @property
    def arity(self) -> int:
        return len(self.pfields)

    @property
    def start(self) -> float:
        return float(self.pfields[1])

    @property
    def duration(self) -> float:
        return float(self.pfields[2])

    @property
    def amplitude(self) -> float:
        return float(self.pfields[3])

    @property
    def pitch(self) -> PField:
        return self.pfields[4]


#: Ordered note events; order is kept as-is in the serialized text.
Score = list[NoteEvent]
