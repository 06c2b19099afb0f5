import asyncio

import pytest

from client.connection import ConnectionManager, ConnectionState
from fake_server import FakeServer, RecordingObserver, wait_until
from protocol.commands import Break, Identify
from utils.exceptions import (
    ConnectFailure,
    ConnectionStateError,
    NotConnectedError,
    SendFailure,
    SendInProgressError,
)


def test_connect_send_close():
    observer = RecordingObserver()
    connected = []

    async def scenario():
        async with FakeServer() as server:
            conn = ConnectionManager('127.0.0.1', server.port, observer=observer)
            assert conn.state is ConnectionState.DISCONNECTED

            await conn.connect(lambda: connected.append(conn.state))
            assert conn.state is ConnectionState.CONNECTED

            await conn.send(Identify('Agent1'))
            await wait_until(lambda: server.lines == ['IDN Agent1\n'])

            await conn.close()
            assert conn.state is ConnectionState.CLOSED
            await wait_until(lambda: server.client_eof)

    asyncio.run(scenario())
    assert connected == [ConnectionState.CONNECTED]
    assert observer.connected and observer.connected[0][0] == '127.0.0.1'
    assert observer.closed == 1


def test_connect_failure_closes():
    observer = RecordingObserver()
    called = []

    async def scenario():
        server = FakeServer()
        await server.start()
        port = server.port
        await server.stop()

        conn = ConnectionManager('127.0.0.1', port, observer=observer)
        with pytest.raises(ConnectFailure):
            await conn.connect(lambda: called.append(True))
        assert conn.state is ConnectionState.CLOSED

        with pytest.raises(NotConnectedError):
            await conn.send(Break())

    asyncio.run(scenario())
    assert called == []
    assert len(observer.errors) == 1
    assert observer.closed == 1


def test_connect_twice_is_rejected():
    async def scenario():
        async with FakeServer() as server:
            conn = ConnectionManager('127.0.0.1', server.port, observer=RecordingObserver())
            await conn.connect()
            with pytest.raises(ConnectionStateError):
                await conn.connect()
            await conn.close()

    asyncio.run(scenario())


def test_send_before_connect():
    async def scenario():
        conn = ConnectionManager('127.0.0.1', 4989, observer=RecordingObserver())
        with pytest.raises(NotConnectedError):
            await conn.send(Identify('Agent1'))

    asyncio.run(scenario())


def test_close_is_idempotent():
    observer = RecordingObserver()

    async def scenario():
        async with FakeServer() as server:
            conn = ConnectionManager('127.0.0.1', server.port, observer=observer)
            await conn.connect()
            await conn.close()
            await conn.close()
            await conn.close()
            assert conn.closed

    asyncio.run(scenario())
    assert observer.closed == 1


def test_close_before_connect():
    observer = RecordingObserver()

    async def scenario():
        conn = ConnectionManager('127.0.0.1', 4989, observer=observer)
        await conn.close()
        assert conn.state is ConnectionState.CLOSED
        with pytest.raises(ConnectionStateError):
            await conn.connect()

    asyncio.run(scenario())
    assert observer.closed == 1


def test_peer_close_closes_connection():
    observer = RecordingObserver()

    async def scenario():
        async with FakeServer() as server:
            conn = ConnectionManager('127.0.0.1', server.port, observer=observer)
            await conn.connect()
            await server.hang_up()
            await wait_until(lambda: conn.closed)
            with pytest.raises(NotConnectedError):
                await conn.send(Break())

    asyncio.run(scenario())
    assert observer.closed == 1


def test_inbound_lines_are_reassembled_in_order():
    received = []

    async def scenario():
        async with FakeServer() as server:
            conn = ConnectionManager('127.0.0.1', server.port, observer=RecordingObserver())
            conn.on_line(received.append)
            await conn.connect()

            await server.send(b'IDNH Ser')
            await asyncio.sleep(0.05)
            await server.send(b'verX\nFOO\nID')
            await asyncio.sleep(0.05)
            await server.send(b'NH\n')

            await wait_until(lambda: len(received) == 3)
            await conn.close()

    asyncio.run(scenario())
    assert received == ['IDNH ServerX', 'FOO', 'IDNH']


def test_async_line_handler_and_handler_errors():
    received = []

    async def handler(line):
        if line == 'BAD':
            raise RuntimeError('boom')
        received.append(line)

    async def scenario():
        async with FakeServer() as server:
            conn = ConnectionManager('127.0.0.1', server.port, observer=RecordingObserver())
            conn.on_line(handler)
            await conn.connect()
            await server.send(b'BAD\nGOOD\n')
            await wait_until(lambda: received == ['GOOD'])
            assert conn.state is ConnectionState.CONNECTED
            await conn.close()

    asyncio.run(scenario())


def test_overlapping_send_is_rejected():
    async def scenario():
        async with FakeServer() as server:
            conn = ConnectionManager('127.0.0.1', server.port, observer=RecordingObserver())
            await conn.connect()

            gate = asyncio.Event()

            async def slow_drain():
                await gate.wait()

            conn._writer.drain = slow_drain

            first = asyncio.create_task(conn.send(Identify('Agent1')))
            await asyncio.sleep(0.01)
            with pytest.raises(SendInProgressError):
                await conn.send(Break())

            gate.set()
            await first
            await conn.send(Break())
            await wait_until(lambda: server.lines == ['IDN Agent1\n', 'BRK\n'])
            await conn.close()

    asyncio.run(scenario())


def test_send_with_ack_runs_after_write():
    order = []

    async def scenario():
        async with FakeServer() as server:
            conn = ConnectionManager('127.0.0.1', server.port, observer=RecordingObserver())
            await conn.connect()

            async def flushed():
                order.append('flushed')
                await conn.close()

            await conn.send_with_ack(Break(), flushed)
            await wait_until(lambda: server.client_eof)
            assert server.lines == ['BRK\n']

    asyncio.run(scenario())
    assert order == ['flushed']


def test_malformed_host_fails_cleanly():
    observer = RecordingObserver()

    async def scenario():
        conn = ConnectionManager('bad..host', 4989, observer=observer)
        with pytest.raises(ConnectFailure):
            await conn.connect()
        assert conn.state is ConnectionState.CLOSED

    asyncio.run(scenario())
    assert len(observer.errors) == 1
    assert observer.closed == 1


async def _never_connects(*args, **kwargs):
    await asyncio.Event().wait()


def test_connect_timeout(monkeypatch):
    monkeypatch.setattr(asyncio, 'open_connection', _never_connects)
    observer = RecordingObserver()

    async def scenario():
        conn = ConnectionManager('127.0.0.1', 4989, observer=observer, connect_timeout=0.2)
        with pytest.raises(ConnectFailure):
            await conn.connect()
        assert conn.state is ConnectionState.CLOSED

    asyncio.run(scenario())
    assert len(observer.errors) == 1
    assert observer.closed == 1


def test_cancelled_connect_closes(monkeypatch):
    monkeypatch.setattr(asyncio, 'open_connection', _never_connects)
    observer = RecordingObserver()

    async def scenario():
        conn = ConnectionManager('127.0.0.1', 4989, observer=observer)
        task = asyncio.create_task(conn.connect())
        await asyncio.sleep(0.05)
        assert conn.state is ConnectionState.CONNECTING
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert conn.state is ConnectionState.CLOSED

    asyncio.run(scenario())
    assert observer.errors == []
    assert observer.closed == 1


def test_write_error_raises_send_failure():
    observer = RecordingObserver()

    async def scenario():
        async with FakeServer() as server:
            conn = ConnectionManager('127.0.0.1', server.port, observer=observer)
            await conn.connect()

            async def broken_drain():
                raise ConnectionResetError('reset by peer')

            conn._writer.drain = broken_drain

            with pytest.raises(SendFailure):
                await conn.send(Identify('Agent1'))
            assert conn.state is ConnectionState.CLOSED
            with pytest.raises(NotConnectedError):
                await conn.send(Break())

    asyncio.run(scenario())
    assert len(observer.errors) == 1
    assert observer.closed == 1
