# -*- coding: utf-8 -*-

import threading
import time

from ossout.task_queue import TaskQueue
from ossout.exceptions import ClientError, UploadInterrupted

from common import *


def summing_consumer(q):
    total = 0
    while True:
        value = q.get()
        if value is None:
            return total

        total += value


class TestTaskQueue(OssTestCase):
    def setUp(self):
        super(TestTaskQueue, self).setUp()
        ossout.defaults.queue_poll_interval = 0.05

    def test_basic(self):
        n = 50

        q = TaskQueue(summing_consumer, maxsize=1)
        q.start()
        for i in range(n):
            q.put(1)
        q.put_end()

        self.assertEqual(q.join(), n)
        self.assertTrue(q.ok())
        self.assertFalse(q.is_alive())

    def test_put_end_once(self):
        q = TaskQueue(summing_consumer, maxsize=2)
        q.start()
        q.put(3)
        q.put_end()
        q.put_end()

        self.assertEqual(q.join(), 3)

    def test_invalid_maxsize(self):
        self.assertRaises(ClientError, TaskQueue, summing_consumer, 0)

    def test_put_blocks_when_full(self):
        gate = threading.Event()

        def consumer(q):
            gate.wait()
            return summing_consumer(q)

        q = TaskQueue(consumer, maxsize=1)
        q.start()
        q.put(1)

        done = NonlocalObject(False)

        def producer():
            q.put(2)
            done.var = True

        t = threading.Thread(target=producer)
        t.start()
        time.sleep(0.3)
        self.assertFalse(done.var)

        gate.set()
        t.join(5)
        self.assertTrue(done.var)

        q.put_end()
        self.assertEqual(q.join(), 3)

    def test_consumer_exception(self):
        def consumer(q):
            q.get()
            raise RuntimeError("some error")

        q = TaskQueue(consumer, maxsize=1)
        q.start()
        q.put(1)

        def put_many():
            for i in range(10):
                q.put(1)

        self.assertRaises(RuntimeError, put_many)
        self.assertFalse(q.ok())
        self.assertRaises(RuntimeError, q.join)

    def test_consumer_interrupted(self):
        def consumer(q):
            q.get()
            raise KeyboardInterrupt()

        q = TaskQueue(consumer, maxsize=1)
        q.start()
        q.put(1)

        self.assertRaises(UploadInterrupted, q.join)

    def test_put_none(self):
        q = TaskQueue(summing_consumer, maxsize=1)
        q.start()

        self.assertRaises(ClientError, q.put, None)

        q.put_end()
        self.assertEqual(q.join(), 0)

    def test_cancel(self):
        gate = threading.Event()
        started = threading.Event()

        def consumer(q):
            total = 0
            while True:
                value = q.get()
                if value is None or q.cancelled():
                    return total

                started.set()
                gate.wait()
                total += value

        q = TaskQueue(consumer, maxsize=3)
        q.start()
        q.put(1)
        self.assertTrue(started.wait(5))
        q.put(10)
        q.put(100)

        q.cancel()
        self.assertTrue(q.cancelled())

        # items still queued are dropped, the one taken is finished
        gate.set()
        self.assertEqual(q.join(), 1)
        self.assertFalse(q.is_alive())

        # the end marker is already in
        q.put_end()

    def test_cancel_after_consumer_failed(self):
        def consumer(q):
            q.get()
            raise RuntimeError('boom')

        q = TaskQueue(consumer, maxsize=1)
        q.start()
        q.put(1)

        q.cancel()
        self.assertRaises(RuntimeError, q.join)
        self.assertFalse(q.is_alive())

    def test_consumer_exits_early(self):
        def consumer(q):
            q.get()
            return 'gone'

        q = TaskQueue(consumer, maxsize=1)
        q.start()

        def put_many():
            for i in range(10):
                q.put(1)

        self.assertRaises(UploadInterrupted, put_many)
        self.assertEqual(q.join(), 'gone')


if __name__ == '__main__':
    unittest.main()
