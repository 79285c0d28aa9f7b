"""
Fan-out of document snapshots to connected viewers, and the periodic
poller that feeds it.
"""

# Standard Library
import json
import queue
import threading
import typing

# local repo modules
import figma_live_viewer as flv
import figma_live_viewer.config


POLL_INTERVAL = flv.config.POLL_INTERVAL
SUBSCRIBER_QUEUE_SIZE = flv.config.SUBSCRIBER_QUEUE_SIZE


class BroadcastHub:
	"""
	Thread-safe hub holding the latest snapshot and one queue per viewer.
	"""

	def __init__(self, queue_size: int = SUBSCRIBER_QUEUE_SIZE) -> None:
		self._lock = threading.Lock()
		self._subscribers: list[queue.Queue] = []
		self._latest: str | None = None
		self._queue_size = queue_size

	#============================================
	def subscribe(self) -> queue.Queue:
		"""
		Register a viewer.

		Returns:
			Queue receiving every snapshot published after this call.
		"""
		subscriber: queue.Queue = queue.Queue(maxsize=self._queue_size)
		with self._lock:
			self._subscribers.append(subscriber)
		return subscriber

	#============================================
	def unsubscribe(self, subscriber: queue.Queue) -> None:
		with self._lock:
			if subscriber in self._subscribers:
				self._subscribers.remove(subscriber)

	#============================================
	def subscriber_count(self) -> int:
		with self._lock:
			return len(self._subscribers)

	#============================================
	def latest(self) -> str | None:
		with self._lock:
			return self._latest

	#============================================
	def publish(self, payload: dict) -> int:
		"""
		Serialize a snapshot once and push it to every viewer.

		A viewer whose queue is full loses its oldest pending snapshot.

		Args:
			payload: Full document payload.

		Returns:
			Number of viewers the snapshot was delivered to.
		"""
		message = json.dumps(payload)
		with self._lock:
			self._latest = message
			subscribers = list(self._subscribers)
		for subscriber in subscribers:
			while True:
				try:
					subscriber.put_nowait(message)
					break
				except queue.Full:
					try:
						subscriber.get_nowait()
					except queue.Empty:
						pass
		return len(subscribers)


class DocumentPoller:
	"""
	Fetch the document on an interval and publish each snapshot.

	Failed fetches leave the last published snapshot in place.
	"""

	def __init__(
		self,
		fetch: typing.Callable[[], dict],
		hub: BroadcastHub,
		interval: float = POLL_INTERVAL,
		verbose: bool = False,
	) -> None:
		self.fetch = fetch
		self.hub = hub
		self.interval = interval
		self.verbose = verbose
		self.last_error: str | None = None
		self._stop_event = threading.Event()
		self._thread: threading.Thread | None = None

	#============================================
	def poll_once(self) -> bool:
		"""
		Fetch and publish one snapshot.

		Returns:
			True when a snapshot was published.
		"""
		try:
			payload = self.fetch()
		except Exception as error:
			self.last_error = str(error)
			print(f"Poller: fetch failed, keeping last snapshot: {error}")
			return False
		self.last_error = None
		delivered = self.hub.publish(payload)
		if self.verbose:
			print(f"Poller: snapshot published to {delivered} viewer(s)")
		return True

	#============================================
	def run(self) -> None:
		while not self._stop_event.is_set():
			self.poll_once()
			self._stop_event.wait(self.interval)

	#============================================
	def start(self) -> None:
		if self._thread is not None and self._thread.is_alive():
			return
		self._stop_event.clear()
		self._thread = threading.Thread(target=self.run, name="document-poller", daemon=True)
		self._thread.start()

	#============================================
	def stop(self, timeout: float | None = None) -> None:
		self._stop_event.set()
		if self._thread is not None:
			self._thread.join(timeout)
			self._thread = None
