import queue
import threading
from typing import Optional

from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import ClientConnection, connect

from arena.net import protocol as P
from arena.net.transport import TransportError, decode_msg, encode_msg

CONNECT_TIMEOUT = 10.0


class NetClient:
    """One WebSocket to the server.

    A daemon thread reads frames and puts decoded messages on ``inbox``; the
    main loop drains it between ticks. When the channel goes away a
    ``_disconnect`` message is queued and further sends are refused.
    """

    def __init__(self):
        self.ws: Optional[ClientConnection] = None
        self.inbox: "queue.Queue[dict]" = queue.Queue()

    @property
    def connected(self) -> bool:
        return self.ws is not None

    def connect(self, url: str, name: str) -> bool:
        try:
            ws = connect(url, open_timeout=CONNECT_TIMEOUT)
        except (OSError, WebSocketException) as e:
            print(f"[net] connect to {url} failed: {e}")
            self.inbox.put({"type": P.DISCONNECT, "error": str(e), "failed": True})
            return False

        self.ws = ws
        print(f"[net] connected to {url}")
        threading.Thread(target=self._recv_loop, args=(ws,), daemon=True).start()
        self.send(P.join(name))
        return True

    def _recv_loop(self, ws: ClientConnection):
        error = "connection closed"
        try:
            for frame in ws:
                try:
                    msg = decode_msg(frame)
                except TransportError as e:
                    print(f"[net] dropped frame: {e}")
                    continue
                self.inbox.put(msg)
        except (ConnectionClosed, OSError) as e:
            error = str(e)
        self.inbox.put({"type": P.DISCONNECT, "error": error})

    def send(self, msg: dict) -> bool:
        ws = self.ws
        if ws is None:
            return False
        try:
            ws.send(encode_msg(msg))
        except TransportError as e:
            print(f"[net] refused to send {msg.get('type')}: {e}")
            return False
        except (ConnectionClosed, OSError) as e:
            print(f"[net] send failed: {e}")
            self.ws = None
            return False
        return True

    def close(self):
        ws = self.ws
        if ws is None:
            return
        self.ws = None
        ws.close()
