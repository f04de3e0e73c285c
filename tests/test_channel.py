import threading
import time

import pytest

from flowline.channel import Channel, ChannelClosed


def test_buffered_preserves_order():
    channel = Channel(3)

    for item in (1, 2, 3):
        channel.send(item)

    channel.close()

    assert list(channel) == [1, 2, 3]


def test_capacity_is_reported():
    assert Channel(5).capacity == 5
    assert Channel().capacity == 0


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        Channel(-1)


def test_receive_from_closed_empty_channel():
    channel = Channel(1)
    channel.close()

    with pytest.raises(ChannelClosed):
        channel.receive()


def test_closed_channel_drains_before_stopping():
    channel = Channel(2)
    channel.send("a")
    channel.close()

    assert channel.receive() == "a"

    with pytest.raises(ChannelClosed):
        channel.receive()


def test_send_after_close_raises():
    channel = Channel(1)
    channel.close()

    with pytest.raises(ChannelClosed):
        channel.send(1)


def test_double_close_raises():
    channel = Channel()
    channel.close()

    with pytest.raises(ChannelClosed):
        channel.close()


def test_receive_timeout():
    channel = Channel(1)

    with pytest.raises(TimeoutError):
        channel.receive(timeout=0.05)


def test_unbuffered_send_waits_for_receiver():
    channel = Channel()
    done = threading.Event()

    def sender():
        channel.send(42)
        done.set()

    thread = threading.Thread(target=sender)
    thread.start()

    time.sleep(0.1)
    assert not done.is_set()

    assert channel.receive(timeout=1) == 42
    assert done.wait(1)

    thread.join()


def test_full_buffer_blocks_sender():
    channel = Channel(1)
    channel.send(1)
    done = threading.Event()

    def sender():
        channel.send(2)
        done.set()

    thread = threading.Thread(target=sender)
    thread.start()

    time.sleep(0.1)
    assert not done.is_set()

    assert channel.receive(timeout=1) == 1
    assert done.wait(1)
    assert channel.receive(timeout=1) == 2

    thread.join()


def test_concurrent_round_trip():
    channel = Channel(10)
    data = list(range(1000))

    def producer():
        for item in data:
            channel.send(item)
        channel.close()

    thread = threading.Thread(target=producer)
    thread.start()

    assert list(channel) == data

    thread.join()