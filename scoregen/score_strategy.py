"""ScoreStrategy: Strategy pattern for the three ways of producing score text."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Final

import numpy as np

from scoregen.pitch import pch_string
from scoregen.score_models import NoteEvent, Score
from scoregen.score_text import format_field, serialize_score

# ── Shared note constants ───────────────────────────────────────────────────
INSTRUMENT = 1
NOTE_DURATION = 0.25
NOTE_AMPLITUDE = 0.5
BASE_OCTAVE = 8  # 8.00 = middle C

#: The 16 pitches the structured builder draws from: "8.00" .. "8.15".
PITCH_CHOICES: Final[tuple[str, ...]] = tuple(pch_string(BASE_OCTAVE, st) for st in range(16))

# Process-wide random source used when no generator is injected.
_SHARED_RNG = np.random.default_rng()


# ── Abstract base ────────────────────────────────────────────────────────────

class ScoreStrategy(ABC):
    """
    Abstract Strategy for producing the score text handed to the engine.

    Concrete subclasses show different levels of structure, from a literal
    string up to an intermediate list of events.
    """

    #: CLI name of the strategy.
    name: str = ""

    @abstractmethod
    def generate(self) -> str:
        """Return the complete score text."""


# ── Concrete strategies ──────────────────────────────────────────────────────

class StaticScore(ScoreStrategy):
    """A score written out by hand: a single middle C lasting one second."""

    name = "static"
    SCORE: Final[str] = "i1 0 1 0.5 8.00"

    def generate(self) -> str:
        return self.SCORE


class TemplatedScore(ScoreStrategy):
    """
    Build the score string directly with a format template.

    Each of *count* lines starts ``index * increment`` seconds in and rises
    one semitone from middle C, giving an ascending chromatic line:

        i1 0 0.25 0.5 8.00
        i1 0.25 0.25 0.5 8.01
        ...
        i1 3 0.25 0.5 8.12
    """

    name = "templated"
    DEFAULT_COUNT = 13
    DEFAULT_INCREMENT = 0.25
    LINE_TEMPLATE: Final[str] = "i{instrument} {start} {duration} {amplitude} {octave}.{index:02d}\n"

    def __init__(self, count: int = DEFAULT_COUNT, increment: float = DEFAULT_INCREMENT) -> None:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}.")
        self.count = count
        self.increment = increment

    def generate(self) -> str:
        lines = []
        for index in range(self.count):
            lines.append(
                self.LINE_TEMPLATE.format(
                    instrument=INSTRUMENT,
                    start=format_field(index * self.increment),
                    duration=format_field(NOTE_DURATION),
                    amplitude=format_field(NOTE_AMPLITUDE),
                    octave=BASE_OCTAVE,
                    index=index,
                )
            )
        return "".join(lines)


class StructuredScore(ScoreStrategy):
    """
    Build a list of NoteEvents first, then serialize it.

    The events exist as data before they become text, so callers can
    inspect or rework them first via ``build_events()``. Pitches are drawn at
    random from ``PITCH_CHOICES``, so every call may produce a new melody
    unless a seeded generator is injected.
    """

    name = "structured"
    DEFAULT_COUNT = 13
    DEFAULT_INCREMENT = 0.25

    def __init__(
        self,
        count: int = DEFAULT_COUNT,
        rng: np.random.Generator | None = None,
        increment: float = DEFAULT_INCREMENT,
    ) -> None:
        """
        Args:
            count:     Number of note events to build.
            rng:       Random source for pitch selection. Defaults to a
                       generator shared by the whole process.
            increment: Seconds between consecutive note starts.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}.")
        self.count = count
        self.rng = rng if rng is not None else _SHARED_RNG
        self.increment = increment

    def _choose_pitch(self) -> str:
        return PITCH_CHOICES[int(self.rng.integers(len(PITCH_CHOICES)))]

    def build_events(self) -> Score:
        """Return *count* note events with random pitches, in start order."""
        return [
            NoteEvent.note(
                instrument=INSTRUMENT,
                start=index * self.increment,
                duration=NOTE_DURATION,
                amplitude=NOTE_AMPLITUDE,
                pitch=self._choose_pitch(),
            )
            for index in range(self.count)
        ]

    def generate(self) -> str:
        return serialize_score(self.build_events())


STRATEGIES: Final[dict[str, type[ScoreStrategy]]] = {
    cls.name: cls for cls in (StaticScore, TemplatedScore, StructuredScore)
}


def get_strategy(name: str, count: int | None = None, seed: int | None = None) -> ScoreStrategy:
    """
    Return the ScoreStrategy registered under *name*.

    *count* applies to the templated and structured builders, *seed* to the
    structured one; both are ignored where they have no meaning.

    Raises:
        ValueError: If *name* is not a known strategy.
    """
    normalized = name.strip().lower()
    if normalized not in STRATEGIES:
        supported = ", ".join(STRATEGIES)
        raise ValueError(f"Unknown score strategy '{name}'. Use one of: {supported}.")

    if normalized == StaticScore.name:
        return StaticScore()
    if normalized == TemplatedScore.name:
        return TemplatedScore() if count is None else TemplatedScore(count=count)

    rng = np.random.default_rng(seed) if seed is not None else None
    if count is None:
        return StructuredScore(rng=rng)
    return StructuredScore(count=count, rng=rng)
