"""
OBS WebSocket Control Client

Real control client speaking the OBS WebSocket JSON protocol over a
persistent connection (websockets sync client).

A background thread receives every message. Responses are matched to
the waiting caller through a request-id map, so concurrent callers each
get their own answer.
"""

import json
import logging
import threading
from typing import Callable, Dict, Optional

from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI
from websockets.sync.client import connect as ws_connect

from config.settings import (
    CONTROL_CONNECT_TIMEOUT,
    CONTROL_IDENTIFY_TIMEOUT,
    CONTROL_REQUEST_TIMEOUT,
    OBS_RPC_VERSION,
    OBS_WEBSOCKET_URL,
)
from control.constants import (
    OP_EVENT,
    OP_HELLO,
    OP_IDENTIFIED,
    OP_REQUEST_RESPONSE,
    STATUS_SUCCESS,
    build_hotkey_request,
    build_identify_message,
)
from control.interfaces.control_client_interface import (
    ControlClientInterface,
    ControlConnectionError,
    ControlError,
    RemoteError,
)


class _PendingRequest:
    """Result slot for one outstanding request."""

    def __init__(self, request_id: str, action_id: str):
        self.request_id = request_id
        self.action_id = action_id
        self.done = threading.Event()
        self.error: Optional[ControlError] = None

    def resolve(self, error: Optional[ControlError] = None) -> None:
        self.error = error
        self.done.set()


class OBSWebSocketClient(ControlClientInterface):
    """
    Control client for OBS Studio's WebSocket server.

    Usage:
        client = OBSWebSocketClient("ws://localhost:4444")
        client.connect()
        client.trigger_action("OBS_KEY_F7")
        client.close()

    The client never reconnects by itself: after a drop every call raises
    ControlConnectionError until connect() is called again.
    """

    def __init__(
        self,
        url: str = OBS_WEBSOCKET_URL,
        rpc_version: int = OBS_RPC_VERSION,
        connect_timeout: float = CONTROL_CONNECT_TIMEOUT,
        identify_timeout: float = CONTROL_IDENTIFY_TIMEOUT,
        request_timeout: float = CONTROL_REQUEST_TIMEOUT,
        connection_factory: Optional[Callable[[str], object]] = None,
    ):
        """
        Initialize OBS control client.

        Args:
            url: WebSocket URL of the OBS server
            rpc_version: Protocol version announced in the identify message
            connect_timeout: Seconds allowed to open the socket
            identify_timeout: Seconds allowed for the identify handshake
            request_timeout: Seconds a request may wait for its response
            connection_factory: Callable url -> connection with send(),
                recv() and close(). Defaults to the websockets sync client.
        """
        self.logger = logging.getLogger(__name__)

        self.url = url
        self.rpc_version = rpc_version
        self.connect_timeout = connect_timeout
        self.identify_timeout = identify_timeout
        self.request_timeout = request_timeout
        self._connection_factory = connection_factory or self._open_websocket

        # Connection state
        self._connection = None
        self._receive_thread: Optional[threading.Thread] = None
        self._connected = False
        self._handshake_done = threading.Event()
        self._last_error: Optional[ControlConnectionError] = None

        # Request correlation
        self._lock = threading.Lock()
        self._send_lock = threading.Lock()
        self._next_request_id = 0
        self._pending: Dict[str, _PendingRequest] = {}

        self.logger.info(f"OBS WebSocket client initialized (url: {url})")

    # =========================================================================
    # CONNECTION
    # =========================================================================

    def _open_websocket(self, url: str):
        return ws_connect(url, open_timeout=self.connect_timeout)

    def connect(self) -> None:
        if self._connected:
            self.logger.debug("Already connected")
            return

        # Drop the remains of a previous, broken connection
        if self._connection is not None:
            self._close_connection()

        self.logger.info(f"Connecting to OBS WebSocket at {self.url}")

        try:
            connection = self._connection_factory(self.url)
        except (OSError, TimeoutError, InvalidURI, InvalidHandshake) as e:
            raise ControlConnectionError(
                f"Failed to connect to OBS WebSocket at {self.url}: {e}",
            ) from e

        self._connection = connection
        self._handshake_done.clear()
        self._last_error = None

        self._receive_thread = threading.Thread(
            target=self._receive_loop,
            args=(connection,),
            daemon=True,
            name="OBSReceiver",
        )
        self._receive_thread.start()

        try:
            self._send(build_identify_message(self.rpc_version))
        except ControlConnectionError:
            self._close_connection()
            raise

        if not self._handshake_done.wait(self.identify_timeout):
            self._close_connection()
            raise ControlConnectionError(
                f"OBS did not acknowledge identify within {self.identify_timeout}s",
            )

        if not self._connected:
            error = self._last_error or ControlConnectionError("Handshake failed")
            self._close_connection()
            raise error

        self.logger.info("Connected and identified with OBS")

    def is_connected(self) -> bool:
        return self._connected

    def close(self) -> None:
        if self._connection is None:
            return
        self.logger.info("Closing OBS WebSocket connection")
        self._close_connection()
        self._fail_all(ControlConnectionError("Connection closed by client"))

    def _close_connection(self) -> None:
        connection, self._connection = self._connection, None
        self._connected = False
        if connection is None:
            return
        try:
            connection.close()
        except Exception as e:
            self.logger.warning(f"Error closing OBS connection: {e}")

        thread = self._receive_thread
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=2.0)
        self._receive_thread = None

    # =========================================================================
    # REQUESTS
    # =========================================================================

    def trigger_action(self, action_id: str) -> None:
        with self._lock:
            if not self._connected:
                detail = f": {self._last_error}" if self._last_error else ""
                raise ControlConnectionError(f"Not connected to OBS{detail}")
            self._next_request_id += 1
            pending = _PendingRequest(str(self._next_request_id), action_id)
            self._pending[pending.request_id] = pending

        self.logger.debug(
            f"Triggering {action_id} (request {pending.request_id})",
        )

        try:
            self._send(build_hotkey_request(pending.request_id, action_id))
        except ControlConnectionError:
            self._discard(pending.request_id)
            raise

        if not pending.done.wait(self.request_timeout):
            self._discard(pending.request_id)
            raise ControlConnectionError(
                f"No response to {action_id} within {self.request_timeout}s",
            )

        if isinstance(pending.error, ControlConnectionError):
            # One error instance is shared by every request failed together
            raise ControlConnectionError(
                f"{action_id} failed: {pending.error}",
            ) from pending.error
        if pending.error is not None:
            raise pending.error

        self.logger.debug(f"{action_id} acknowledged")

    def _send(self, message: dict) -> None:
        connection = self._connection
        if connection is None:
            raise ControlConnectionError("Not connected to OBS")
        payload = json.dumps(message, separators=(",", ":"))
        try:
            with self._send_lock:
                connection.send(payload)
        except (ConnectionClosed, OSError) as e:
            error = ControlConnectionError(f"Send failed: {e}")
            self._fail_all(error)
            raise error from e

    def _discard(self, request_id: str) -> None:
        with self._lock:
            self._pending.pop(request_id, None)

    # =========================================================================
    # RECEIVE LOOP
    # =========================================================================

    def _receive_loop(self, connection) -> None:
        self.logger.debug("Receive loop started")
        error = ControlConnectionError("Receive loop stopped")
        try:
            while True:
                try:
                    raw = connection.recv()
                except ConnectionClosed as e:
                    error = ControlConnectionError(f"Connection closed: {e}")
                    break
                except Exception as e:
                    error = ControlConnectionError(f"Read error: {e}")
                    break

                try:
                    message = json.loads(raw)
                except (TypeError, ValueError) as e:
                    self.logger.warning(f"Ignoring malformed message from OBS: {e}")
                    continue

                if not isinstance(message, dict):
                    self.logger.warning(
                        f"Ignoring malformed message from OBS: {type(message).__name__} payload",
                    )
                    continue

                try:
                    self._handle_message(message)
                except Exception as e:
                    self.logger.error(f"Error handling OBS message: {e}", exc_info=True)
        finally:
            # Callers must never wait on a dead receiver
            self._fail_all(error)
            self.logger.debug("Receive loop stopped")

    def _handle_message(self, message: dict) -> None:
        op = message.get("op")

        if op == OP_HELLO:
            self.logger.debug("Received hello from OBS")

        elif op == OP_IDENTIFIED:
            self._connected = True
            self._handshake_done.set()

        elif op == OP_REQUEST_RESPONSE:
            data = message.get("d")
            if not isinstance(data, dict):
                data = {}
            status = data.get("requestStatus")
            if not isinstance(status, dict):
                status = {}
            pending = self._take_pending(data.get("requestId"))
            if pending is None:
                self.logger.warning(
                    f"Response for unknown request: {data.get('requestId')}",
                )
                return

            code = status.get("code", -1)
            comment = status.get("comment") or ""
            if isinstance(code, bool) or not isinstance(code, int):
                pending.resolve(RemoteError(-1, f"invalid status code {code!r}"))
            elif code == STATUS_SUCCESS:
                pending.resolve()
            else:
                pending.resolve(RemoteError(code, comment))

        elif op == OP_EVENT:
            data = message.get("d")
            event_type = data.get("eventType") if isinstance(data, dict) else None
            self.logger.debug(f"OBS event: {event_type}")

        else:
            self.logger.debug(f"Ignoring message with op {op}")

    def _take_pending(self, request_id) -> Optional[_PendingRequest]:
        """Pop the slot for request_id, or the oldest slot if no id was sent."""
        with self._lock:
            if request_id is not None:
                return self._pending.pop(str(request_id), None)
            if self._pending:
                oldest = next(iter(self._pending))
                return self._pending.pop(oldest)
            return None

    def _fail_all(self, error: ControlConnectionError) -> None:
        with self._lock:
            was_connected = self._connected
            self._connected = False
            self._last_error = error
            pending = list(self._pending.values())
            self._pending.clear()

        if was_connected:
            self.logger.error(f"OBS control channel lost: {error}")

        for request in pending:
            request.resolve(error)

        self._handshake_done.set()
