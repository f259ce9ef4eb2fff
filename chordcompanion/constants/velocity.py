"""MIDI velocity constants.

Velocity is the MIDI attack strength (0-127). Generated note-ons are always
clamped to the audible range ``MIN_NOTE_ON_VELOCITY`` to ``MAX_VELOCITY`` so
that humanization can never turn a note-on into an implicit note-off.
"""

DEFAULT_VELOCITY = 96

MIN_NOTE_ON_VELOCITY = 1
MAX_VELOCITY = 127

# Ceiling for the random velocity spread applied by humanization.
MAX_HUMANIZE_VELOCITY = 15
