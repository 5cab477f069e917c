"""
WebSocket consumer for real-time task events
Each socket joins its user's room explicitly with a joinUserRoom message
"""
import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer

from .hub import RoomJoinRefused

logger = logging.getLogger("realtime")

JOIN_ROOM_EVENT = "joinUserRoom"
ROOM_JOINED_EVENT = "userRoomJoined"
ERROR_EVENT = "error"


class RealtimeConsumer(AsyncWebsocketConsumer):
    """
    One instance per websocket connection.

    Server to client frames look like {"event": <name>, "data": <payload>}.
    Client to server frames use the same shape; {"type": "ping"} is answered
    with a pong for keepalive.
    """

    hub = None

    def __init__(self, *args, hub=None, **kwargs):
        super().__init__(*args, **kwargs)
        if hub is not None:
            self.hub = hub

    async def connect(self):
        """
        Accept every connection. Authentication is optional here; an
        anonymous socket still receives global broadcasts.
        """
        if self.hub is None:
            logger.error("❌ RealtimeConsumer started without a hub, rejecting")
            await self.close()
            return

        self.user = self.scope.get("user")
        self.room_id = None

        await self.accept()
        await self.hub.connect(self.channel_name)

        await self.send(text_data=json.dumps({
            'type': 'connection_established',
            'message': 'WebSocket connected successfully',
            'user_id': self._identity(),
        }))

    async def disconnect(self, close_code):
        logger.info(f"WebSocket disconnecting {self.channel_name} - Close Code: {close_code}")
        if self.hub is not None:
            await self.hub.disconnect(self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "")
        except json.JSONDecodeError:
            logger.error(f"Invalid JSON received: {text_data}")
            return

        if not isinstance(data, dict):
            logger.error(f"Unexpected frame received: {text_data}")
            return

        # Handle ping/pong for connection keepalive
        if data.get('type') == 'ping':
            await self.send(text_data=json.dumps({
                'type': 'pong',
                'timestamp': data.get('timestamp')
            }))
            return

        event_name = data.get('event')
        if event_name == JOIN_ROOM_EVENT:
            await self._join_room(data.get('data'))
        else:
            logger.debug(f"Ignoring unknown client event: {event_name}")

    async def _join_room(self, user_id):
        try:
            self.room_id = await self.hub.join_room(
                self.channel_name, user_id, identity=self._identity()
            )
        except RoomJoinRefused as e:
            await self._send_event(ERROR_EVENT, {'message': str(e)})
            return
        await self._send_event(ROOM_JOINED_EVENT, {'room': self.room_id})

    def _identity(self):
        user = self.user
        if user is None or not getattr(user, 'is_authenticated', False):
            return None
        return str(user.pk)

    async def _send_event(self, event_name, payload):
        await self.send(text_data=json.dumps(
            {'event': event_name, 'data': payload}, default=str
        ))

    # Channel-layer handler for everything the hub sends

    async def realtime_event(self, event):
        try:
            await self._send_event(event['event'], event.get('data'))
        except Exception as e:
            logger.error(f"❌ Error delivering {event.get('event')}: {e}", exc_info=True)
