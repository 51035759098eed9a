class SocketIOTransport:
    """Delivery, broadcast groups and background tasks on top of Flask-SocketIO.

    A connection is the Socket.IO ``sid``; a broadcast group is a Socket.IO
    room named after the game room id. Everything here works outside a
    request context, so background timers can use it too.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def send(self, sid: str, event: str, payload) -> None:
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)

    def broadcast(self, room: str, event: str, payload) -> None:
        self.socketio.emit(event, payload, to=room, namespace=self.namespace)

    def attach(self, sid: str, room: str) -> None:
        self.socketio.server.enter_room(sid, room, namespace=self.namespace)

    def detach(self, sid: str, room: str) -> None:
        self.socketio.server.leave_room(sid, room, namespace=self.namespace)

    def close_group(self, room: str) -> None:
        self.socketio.close_room(room, namespace=self.namespace)

    def start_background_task(self, target, *args):
        return self.socketio.start_background_task(target, *args)

    def sleep(self, seconds: float) -> None:
        self.socketio.sleep(seconds)
