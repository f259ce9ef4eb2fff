"""
ChordCompanion - diatonic chord progressions as block-scheduled MIDI.

Pick a key, a scale, a progression and a chord colour; ChordCompanion builds
the chords and delivers them as sample-accurate note events inside the
fixed-size processing blocks of an audio callback. It generates pure MIDI
(no audio engine).

What it does:

- **Diatonic harmony.** Chords are stacked in thirds on any degree of a
  major, natural minor, harmonic minor, dorian or mixolydian scale, from
  triads up to thirteenths, with independent add7/add9/add11/add13 toggles,
  inversions and automatic fitting into a comfortable range.
- **Progressions.** Four common presets (I-V-vi-IV, ii-V-I, I-vi-IV-V,
  vi-IV-I-V) or a free-form degree string such as ``"1-6-4-5"``.
- **Block-accurate scheduling.** A built progression is dispatched across
  successive blocks of any size without dropping, repeating or reordering
  events.
- **Live triggering.** Incoming note-ons are replaced by the chord of the
  current degree, which steps forward every chord length.
- **Humanize.** Timing and velocity spread from a seedable random source.
- **Export.** Deterministic rendering to a standard MIDI file.

Minimal example:

    ```python
    import chordcompanion

    companion = chordcompanion.ChordCompanion(
        settings=chordcompanion.Settings(key=9, scale="natural_minor", quality="seventh"),
        seed=42
    )
    companion.prepare(sample_rate=44100, block_size=512)
    companion.trigger_generate()

    output = companion.process_block([], 512)

    companion.export_midi("progression.mid")
    ```

Package-level exports: ``ChordCompanion``, ``ProgressionEngine``, ``Settings``,
``build_chord``, ``export_sequence``.
"""

import chordcompanion.chords
import chordcompanion.engine
import chordcompanion.export
import chordcompanion.processor
import chordcompanion.settings


ChordCompanion = chordcompanion.processor.ChordCompanion
ProgressionEngine = chordcompanion.engine.ProgressionEngine
Settings = chordcompanion.settings.Settings
build_chord = chordcompanion.chords.build_chord
export_sequence = chordcompanion.export.export_sequence
