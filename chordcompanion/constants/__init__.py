"""Constants for ChordCompanion.

This package contains two sets of constants:

- ``chordcompanion.constants`` - Timing, range and channel constants used by the engine
- ``chordcompanion.constants.velocity`` - MIDI velocity constants

Channels follow ``mido`` numbering, which is zero-based: ``GENERATOR_CHANNEL = 1``
is "MIDI channel 2" on a hardware display.
"""

# Export resolution for standard MIDI files.
TICKS_PER_QUARTER_NOTE = 960

DEFAULT_SAMPLE_RATE = 44100.0
DEFAULT_BLOCK_SIZE = 512
DEFAULT_EXPORT_BPM = 120.0

# Pleasant playing range that built chords are shifted into.
CHORD_RANGE_LOW = 48
CHORD_RANGE_HIGH = 84
CHORD_RANGE_MAX_SHIFTS = 8

OCTAVE = 12
DEGREES_PER_OCTAVE = 7

# Queue-scheduled progression notes are kept apart from live triggered notes.
GENERATOR_CHANNEL = 1
TRIGGER_CHANNEL = 0
EXPORT_CHANNEL = 0

DEFAULT_PROGRESSION = (1, 5, 6, 4)
