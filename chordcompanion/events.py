import bisect
import dataclasses
import itertools
import typing

import mido


NOTE_ON = "note_on"
NOTE_OFF = "note_off"


@dataclasses.dataclass
class TimedEvent:

	"""
	A note event scheduled at a sample offset from the start of a queue.
	"""

	offset: int
	kind: str
	pitch: int
	velocity: int = 0
	channel: int = 0


	def sort_key (self) -> typing.Tuple[int, int, int]:

		"""
		Order by offset, then note-offs before note-ons, then pitch.

		Releasing before striking at the same instant keeps a repeated pitch
		from being cut off by its own previous note-off.
		"""

		return (self.offset, 0 if self.kind == NOTE_OFF else 1, self.pitch)


	def to_message (self) -> mido.Message:

		"""
		Convert to a ``mido`` message (note-offs always carry velocity 0).
		"""

		velocity = self.velocity if self.kind == NOTE_ON else 0

		return mido.Message(self.kind, channel=self.channel, note=self.pitch, velocity=velocity)


class EventBuffer:

	"""
	Messages for one processing block, keyed by sample position.

	Iteration yields ``(position, message)`` pairs in position order; events
	added at the same position keep the order they were added in.
	"""

	def __init__ (self) -> None:

		"""
		Create an empty buffer.
		"""

		self._events: typing.List[typing.Tuple[int, int, mido.Message]] = []
		self._counter = itertools.count()


	def add (self, message: mido.Message, position: int) -> None:

		"""
		Insert a message at a sample position within the block.
		"""

		bisect.insort(self._events, (position, next(self._counter), message))


	def extend (self, other: typing.Iterable[typing.Tuple[int, mido.Message]]) -> None:

		"""
		Add every ``(position, message)`` pair from another buffer or iterable.
		"""

		for position, message in other:
			self.add(message, position)


	def messages (self) -> typing.List[mido.Message]:

		"""
		Return the messages alone, in position order.
		"""

		return [message for _, _, message in self._events]


	def __iter__ (self) -> typing.Iterator[typing.Tuple[int, mido.Message]]:

		return ((position, message) for position, _, message in self._events)


	def __len__ (self) -> int:

		return len(self._events)
