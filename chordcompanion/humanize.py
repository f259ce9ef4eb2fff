"""Sample-time conversion and humanization.

All randomness comes from a ``random.Random`` passed in by the caller, so a
seeded generator gives the same jitter on every run.

Example:
	```python
	rng = random.Random(42)
	ms_to_samples(44100, 600)              # 26460
	timing_jitter(44100, 10, rng)          # somewhere in -441..441
	humanize_velocity(96, 8, rng)          # somewhere in 88..104
	```
"""

import random
import typing

import chordcompanion.constants.velocity


def ms_to_samples (sample_rate: float, ms: float) -> int:

	"""
	Convert milliseconds to a whole number of samples (rounded to nearest).
	"""

	return int(round(sample_rate * ms / 1000.0))


def timing_jitter (sample_rate: float, max_ms: float, rng: random.Random) -> int:

	"""Return a random offset in samples within ``±max_ms``.

	Both ends of the range are inclusive. Returns 0 without touching the
	generator when ``max_ms`` is zero or negative.
	"""

	if max_ms <= 0:
		return 0

	spread = ms_to_samples(sample_rate, max_ms)

	return rng.randint(-spread, spread)


def humanize_velocity (base: int, max_delta: int, rng: typing.Optional[random.Random] = None) -> int:

	"""Return ``base`` shifted by a random amount within ``±max_delta``.

	The result is always clamped to 1–127. Without a spread (or without a
	generator) the base velocity is only clamped.
	"""

	low = chordcompanion.constants.velocity.MIN_NOTE_ON_VELOCITY
	high = chordcompanion.constants.velocity.MAX_VELOCITY

	if max_delta <= 0 or rng is None:
		return max(low, min(high, base))

	return max(low, min(high, base + rng.randint(-max_delta, max_delta)))
