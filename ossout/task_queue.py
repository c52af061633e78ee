# -*- coding: utf-8 -*-

"""
ossout.task_queue
~~~~~~~~~~~~~~~~~

A bounded hand-off queue between the caller's thread and one consumer thread.
"""

import sys
import queue
import threading
import traceback

from . import defaults
from .exceptions import ClientError, UploadInterrupted
from .defaults import get_logger


class TaskQueue(object):
    """The calling thread puts items, a dedicated consumer thread gets them.

    `consumer` is called with the queue as its only argument. It should `get()` items until it gets `None`,
    the end marker, and return. Its return value is handed to whoever calls :func:`join`.

    Exceptions raised by the consumer are kept and re-raised by :func:`put` and :func:`join`, so the
    producer never blocks forever on a queue nobody drains.

    :param consumer: callable run by the consumer thread
    :param int maxsize: number of items the queue holds before `put()` blocks
    :param str name: name of the consumer thread
    """
    def __init__(self, consumer, maxsize=1, name=None):
        if maxsize < 1:
            raise ClientError('queue size must be at least 1, got {0}'.format(maxsize))

        self.__consumer = consumer
        self.__queue = queue.Queue(maxsize)
        self.__thread = threading.Thread(target=self.__consumer_func, name=name)
        self.__thread.daemon = True

        # protect below fields
        self.__lock = threading.Lock()
        self.__exc_info = None
        self.__exc_stack = ''
        self.__result = None
        self.__ended = False
        self.__cancelled = False

    def start(self):
        self.__thread.start()

    def put(self, data):
        """Hand `data` to the consumer, blocking while the queue is full."""
        if data is None:
            raise ClientError('None is the end marker, use put_end()')
        self.__put(data)

    def put_end(self):
        """Put the end marker. It is put once, after every other item."""
        with self.__lock:
            if self.__ended:
                return
            self.__ended = True

        self.__put(None)

    def cancel(self):
        """Drop the items not taken yet and put the end marker.

        The consumer stops after the item it is working on. Call :func:`join` to wait for it.
        """
        with self.__lock:
            self.__ended = True
            self.__cancelled = True

        while True:
            try:
                self.__queue.get_nowait()
            except queue.Empty:
                break

        # only the producer puts, so the drained queue has room
        self.__queue.put_nowait(None)

    def cancelled(self):
        with self.__lock:
            return self.__cancelled

    def get(self):
        return self.__queue.get()

    def ok(self):
        with self.__lock:
            return self.__exc_info is None

    def is_alive(self):
        return self.__thread.is_alive()

    def join(self):
        """Wait for the consumer to finish and return its result.

        :raises: whatever the consumer raised
        """
        # give KeyboardInterrupt chances to happen by joining with timeouts.
        while self.__thread.is_alive():
            self.__thread.join(defaults.queue_poll_interval)

        self.__raise_if_failed()
        return self.__result

    def __put(self, data):
        while True:
            self.__raise_if_failed()

            try:
                self.__queue.put(data, timeout=defaults.queue_poll_interval)
                return
            except queue.Full:
                if not self.__thread.is_alive():
                    self.__raise_if_failed()
                    raise UploadInterrupted('consumer thread {0} exited with items left'.format(self.__thread.name))

    def __raise_if_failed(self):
        with self.__lock:
            exc_info = self.__exc_info
            exc_stack = self.__exc_stack

        if exc_info is None:
            return

        get_logger().error('An exception was thrown by consumer, backtrace: {0}'.format(exc_stack))
        exc = exc_info[1]
        if isinstance(exc, Exception):
            raise exc
        raise UploadInterrupted('consumer thread was interrupted: {0!r}'.format(exc), exc)

    def __consumer_func(self):
        try:
            result = self.__consumer(self)
        except BaseException:
            self.__on_exception(sys.exc_info())
        else:
            with self.__lock:
                self.__result = result

    def __on_exception(self, exc_info):
        with self.__lock:
            if self.__exc_info is None:
                self.__exc_info = exc_info
                self.__exc_stack = traceback.format_exc()
