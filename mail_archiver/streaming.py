"""
Producer/consumer helper for streaming IMAP results.

A background thread drains a result iterator into a bounded queue while the
calling thread collects the items into a list. The producer's exception, if
any, is re-raised once consumption has finished.
"""

import queue
import threading
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")

DEFAULT_QUEUE_SIZE = 10

_DONE = object()


def collect(produce: Callable[[], Iterable[T]], maxsize: int = DEFAULT_QUEUE_SIZE) -> List[T]:
    """Run ``produce`` on a background thread and collect its results in order.

    Args:
        produce: Callable returning the iterable to stream
        maxsize: Capacity of the queue between producer and consumer

    Returns:
        All produced items, in production order

    Raises:
        Exception: Whatever the producer raised, after all items produced
            before the failure were consumed
    """
    results_queue: "queue.Queue" = queue.Queue(maxsize=maxsize)
    error: List[Optional[BaseException]] = [None]

    def producer():
        try:
            for item in produce():
                results_queue.put(item)
        except BaseException as e:
            error[0] = e
        finally:
            results_queue.put(_DONE)

    thread = threading.Thread(target=producer, daemon=True)
    thread.start()

    items: List[T] = []
    while True:
        item = results_queue.get()
        if item is _DONE:
            break
        items.append(item)

    thread.join()

    if error[0] is not None:
        raise error[0]

    return items
