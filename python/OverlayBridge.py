import json
import socket


# ==========================================
# UI OVERLAY EXPORTS
# ==========================================
class OverlayBridge:
    """
    Pushes newline-terminated JSON events (health, player count, winner) to
    an external overlay. Never blocks the game loop waiting for a client.

    transport "tcp": single client, non-blocking accept (re-accepts after a drop)
    transport "zmq": PUB socket, any number of subscribers
    """

    def __init__(self, transport="tcp", host="127.0.0.1", port=5555):
        self.transport = transport
        self.addr = (host, port)
        self.sock = None
        self.conn = None
        self.context = None

        if transport == "zmq":
            self._setup_zmq()
        elif transport == "tcp":
            self._setup_server()
        else:
            raise ValueError(f"Unknown overlay transport: {transport!r}")

    def _setup_server(self):
        try:
            self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self.sock.bind(self.addr)
            self.sock.listen(1)
            self.sock.setblocking(False)  # Non-blocking accept
            print(f"[NET] Overlay listening on {self.addr}...")
        except OSError as e:
            print(f"[NET] Init Error: {e}")
            self.sock = None

    def _setup_zmq(self):
        import zmq

        endpoint = f"tcp://{self.addr[0]}:{self.addr[1]}"
        self.context = zmq.Context()
        try:
            self.sock = self.context.socket(zmq.PUB)
            self.sock.bind(endpoint)
            print(f"[NET] Overlay publishing on {endpoint}")
        except zmq.ZMQError as e:
            print(f"[NET] Init Error: {e}")
            if self.sock is not None:
                self.sock.close(linger=0)
                self.sock = None

    def update(self):
        """Check for new connections non-blockingly"""
        if self.transport != "tcp" or self.sock is None or self.conn is not None:
            return
        try:
            self.conn, addr = self.sock.accept()
            self.conn.setblocking(True)  # Blocking sends
            print(f"[NET] Overlay connected: {addr}")
        except BlockingIOError:
            pass

    def send_event(self, event, payload):
        msg = json.dumps({"event": event, **payload}) + "\n"
        if self.transport == "zmq":
            if self.sock is not None:
                self.sock.send_string(msg)
            return
        if not self.conn:
            return
        try:
            self.conn.sendall(msg.encode("utf-8"))
        except (BrokenPipeError, ConnectionResetError):
            print("[NET] Overlay client disconnected")
            self.conn.close()
            self.conn = None

    def send_stats(self, stats):
        self.send_event("stats", stats)

    def send_winner(self, winner):
        self.send_event("winner", {"winner": winner})

    def close(self):
        if self.conn is not None:
            self.conn.close()
            self.conn = None
        if self.sock is not None:
            self.sock.close()
            self.sock = None
        if self.context is not None:
            self.context.term()
            self.context = None
