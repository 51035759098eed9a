import time
from typing import Optional


def schedule_room_cleanup(app, registry, transport, room_id: str, delay_sec: float, reason: str) -> Optional[float]:
    """Remove ``room_id`` from the registry after ``delay_sec`` seconds.

    - Stores a deadline token on the session; scheduling again replaces it
    - The timer only fires if the registry still holds the same session
      object with the same token, so a room that was removed or recreated
      in the meantime is left alone
    - Connections still attached get a ``roomClosed`` notice
    """
    with registry.lock:
        session = registry.get(room_id)
        if session is None:
            return None
        deadline = time.time() + delay_sec
        session.cleanup_deadline = deadline

    app.logger.info(f"[cleanup-set] room={room_id} reason={reason} delay={delay_sec}s")

    def _runner(code: str, expected_session, expected_deadline: float):
        sleep_for = max(0.0, expected_deadline - time.time())
        if sleep_for:
            transport.sleep(sleep_for)
        with app.app_context():
            with registry.lock:
                current = registry.get(code)
                if current is not expected_session or current.cleanup_deadline != expected_deadline:
                    app.logger.info(f"[cleanup-abort] room={code} reason={reason} superseded")
                    return
                registry.remove(code)
                transport.broadcast(code, 'roomClosed', {'roomId': code})
                transport.close_group(code)
            app.logger.info(f"[cleanup-fire] room={code} reason={reason}")

    transport.start_background_task(_runner, room_id, session, deadline)
    return deadline