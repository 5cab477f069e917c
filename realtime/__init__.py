"""
Realtime package: websocket consumer, per-user rooms and the hub that pushes
task and notification events to connected clients.
"""
