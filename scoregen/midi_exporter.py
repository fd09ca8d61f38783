"""MidiExporter: writes a Score to a Standard MIDI File for quick previewing."""

from midiutil import MIDIFile

from scoregen.pitch import pch_to_midi
from scoregen.score_models import Score

# In Format 1 files midiutil keeps tempo events on its own conductor track,
# so the caller only numbers the note track.
TRACK_NOTES = 0

CHANNEL_NOTES = 0
MAX_VELOCITY = 127


class MidiExporter:
    """
    Renders note events into a Format 1 MIDI file.

    This is a preview path that does not need Csound: each event becomes one
    MIDI note, with p5 read as octave.pitch-class and p4 (0..1) scaled to a
    velocity. Score times are in seconds and are converted to beats with
    ``beats = seconds × (tempo / 60)``, so the default 60 BPM keeps them 1:1.
    """

    DEFAULT_TEMPO = 60
    DEFAULT_PROGRAM = 81  # GM "Lead 2 (sawtooth)", closest to the vco2 voice

    def __init__(self, tempo: int = DEFAULT_TEMPO, program: int = DEFAULT_PROGRAM) -> None:
        """
        Args:
            tempo:   Tempo written to the conductor track, in BPM.
            program: General MIDI program (0-127) for the note track.
        """
        self.tempo = tempo
        self.program = program

    def _seconds_to_beats(self, seconds: float) -> float:
        return seconds * (self.tempo / 60.0)

    def _amplitude_to_velocity(self, amplitude: float) -> int:
        return max(1, min(MAX_VELOCITY, round(amplitude * MAX_VELOCITY)))

    def export(self, score: Score, output_path: str) -> None:
        """
        Write the events of *score* to *output_path*.

        Raises:
            ValueError: If an event has fewer than five p-fields or an
                        unreadable pitch.
            OSError: If the output file cannot be opened for writing.
        """
        midi = MIDIFile(numTracks=1, removeDuplicates=False, deinterleave=False)
        midi.addTempo(TRACK_NOTES, 0, self.tempo)
        midi.addTrackName(TRACK_NOTES, 0, "Instrument 1")
        midi.addProgramChange(TRACK_NOTES, CHANNEL_NOTES, 0, self.program)

        for event in score:
            if event.arity < 5:
                raise ValueError(f"Note event needs 5 p-fields to export, got {event.arity}.")
            midi.addNote(
                track=TRACK_NOTES,
                channel=CHANNEL_NOTES,
                pitch=pch_to_midi(event.pitch),
                time=self._seconds_to_beats(event.start),
                duration=self._seconds_to_beats(event.duration),
                volume=self._amplitude_to_velocity(event.amplitude),
            )

        with open(output_path, "wb") as f:
            midi.writeFile(f)
