"""Orchestra: the instrument definition compiled by the engine before the score."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

#: Instrument 1: enveloped sawtooth through a Moog ladder filter.
#: p4 = amplitude, p5 = pitch in octave.pitch-class notation.
DEFAULT_INSTRUMENT = """instr 1
ipch = cps2pch(p5, 12)
kenv linsegr 0, .05, 1, .05, .7, .4, 0
aout vco2 p4 * kenv, ipch
aout moogladder aout, 2000, 0.25
outs aout, aout
endin
"""


@dataclass(frozen=True)
class Orchestra:
    """
    Orchestra header settings plus the instrument body.

    Attributes:
        sample_rate: Audio sample rate in Hz (``sr``).
        ksmps:       Samples per control block; one ``performKsmps`` step.
        nchnls:      Number of output channels.
        zero_dbfs:   Amplitude that maps to full scale (``0dbfs``).
        instruments: Instrument definitions appended after the header.
    """

    sample_rate: int = 44100
    ksmps: int = 32
    nchnls: int = 2
    zero_dbfs: float = 1.0
    instruments: str = DEFAULT_INSTRUMENT

    def render(self) -> str:
        """Return the orchestra text handed to the engine's compiler."""
        header = (
            f"sr={self.sample_rate}\n"
            f"ksmps={self.ksmps}\n"
            f"nchnls={self.nchnls}\n"
            f"0dbfs={self.zero_dbfs:g}\n"
        )
        return f"{header}\n{self.instruments}"


def load_orchestra(path: str | Path) -> str:
    """
    Read a complete orchestra from disk, used as-is instead of ``Orchestra``.

    Raises:
        OSError: If the file cannot be read.
    """
    return Path(path).read_text(encoding="utf-8")
