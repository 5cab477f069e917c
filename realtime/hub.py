"""
Realtime hub: per-user rooms over websocket connections.

The hub owns the room membership table. Consumers mutate it through
connect / join_room / disconnect; everything else only reads it through
emit_to_room. Delivery is fire-and-forget: a push to a room with nobody in it
is a no-op, and channel-layer failures are logged instead of raised.
"""
import logging
import re
import threading

from asgiref.sync import async_to_sync
from channels.layers import DEFAULT_CHANNEL_LAYER, get_channel_layer

logger = logging.getLogger("realtime")

BROADCAST_GROUP = "broadcast"
EVENT_MESSAGE_TYPE = "realtime.event"

# Channel-layer group names allow ASCII alphanumerics, hyphens, underscores
# and periods only.
ROOM_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


class RoomJoinRefused(Exception):
    """Raised by join_room when a socket may not enter the requested room."""


def room_group_name(user_id):
    return f"notifications_{user_id}"


def normalize_room_id(user_id):
    room_id = str(user_id).strip() if user_id is not None else ""
    if not ROOM_ID_PATTERN.match(room_id):
        raise RoomJoinRefused(f"Invalid room id: {user_id!r}")
    return room_id


class RealtimeHub:
    """
    Build one instance per process and hand it to whatever needs to push.

    Args:
        channel_layer: explicit layer, mostly for tests. Defaults to the
            configured layer for ``channel_layer_alias``.
        enforce_room_ownership: refuse joins where the socket's
            authenticated identity differs from the requested room.
    """

    def __init__(self, channel_layer=None, channel_layer_alias=DEFAULT_CHANNEL_LAYER,
                 enforce_room_ownership=False):
        self._channel_layer = channel_layer
        self.channel_layer_alias = channel_layer_alias
        self.enforce_room_ownership = enforce_room_ownership
        self._lock = threading.Lock()
        self._rooms = {}  # room id -> set of channel names
        self._connections = {}  # channel name -> room id or None

    @property
    def channel_layer(self):
        if self._channel_layer is None:
            self._channel_layer = get_channel_layer(self.channel_layer_alias)
        return self._channel_layer

    # ------------------------------------------------------------------
    # Membership (called from the websocket consumer)
    # ------------------------------------------------------------------

    async def connect(self, channel_name):
        """
        Register a fresh connection. It starts in no room.

        Returns False when the broadcast group could not be joined; the
        connection stays registered and can still join its room.
        """
        with self._lock:
            self._connections[channel_name] = None
        try:
            await self.channel_layer.group_add(BROADCAST_GROUP, channel_name)
        except Exception as e:
            logger.error(f"❌ {channel_name} could not join the broadcast group: {e}", exc_info=True)
            return False
        logger.info(f"🟢 Connection registered: {channel_name}")
        return True

    async def join_room(self, channel_name, user_id, identity=None):
        """
        Put a connection in the room of ``user_id``.

        A connection lives in at most one room, so joining moves it out of
        any previous room. The membership table only changes once the
        channel layer accepted the new group.

        Returns:
            str: the normalized room id

        Raises:
            RoomJoinRefused: malformed room id, unknown connection, an
                identity mismatch while ownership is enforced, or a channel
                layer failure (membership is left as it was)
        """
        room_id = normalize_room_id(user_id)

        if identity is None or str(identity) != room_id:
            if self.enforce_room_ownership:
                logger.warning(
                    f"⛔ Join refused: {channel_name} (identity={identity}) asked for room {room_id}"
                )
                raise RoomJoinRefused("You can only join your own notification room")
            # TODO: decide the trust model for room joins; until then any socket may join any room.
            logger.warning(
                f"⚠️ Unverified room join: {channel_name} (identity={identity}) joining room {room_id}"
            )

        with self._lock:
            if channel_name not in self._connections:
                raise RoomJoinRefused("Connection is not registered")

        group = room_group_name(room_id)
        try:
            await self.channel_layer.group_add(group, channel_name)
        except Exception as e:
            logger.error(f"❌ {channel_name} could not join room {room_id}: {e}", exc_info=True)
            raise RoomJoinRefused("Could not join room, try again") from e

        with self._lock:
            registered = channel_name in self._connections
            previous_room = self._connections.get(channel_name)
            if registered:
                if previous_room is not None:
                    self._discard_member(previous_room, channel_name)
                self._connections[channel_name] = room_id
                self._rooms.setdefault(room_id, set()).add(channel_name)

        if not registered:
            # disconnected while the layer call was in flight
            await self._discard_group(group, channel_name)
            raise RoomJoinRefused("Connection is not registered")

        if previous_room is not None and previous_room != room_id:
            await self._discard_group(room_group_name(previous_room), channel_name)
        logger.info(f"✅ {channel_name} joined room {room_id}")
        return room_id

    async def _discard_group(self, group, channel_name):
        try:
            await self.channel_layer.group_discard(group, channel_name)
        except Exception as e:
            logger.error(f"❌ Failed to remove {channel_name} from {group}: {e}", exc_info=True)

    async def disconnect(self, channel_name):
        """Forget a connection and every membership it had. Safe to call twice."""
        with self._lock:
            room_id = self._connections.pop(channel_name, None)
            if room_id is not None:
                self._discard_member(room_id, channel_name)

        if room_id is not None:
            await self._discard_group(room_group_name(room_id), channel_name)
        await self._discard_group(BROADCAST_GROUP, channel_name)
        logger.info(f"🔴 Connection removed: {channel_name} (room={room_id})")

    def _discard_member(self, room_id, channel_name):
        members = self._rooms.get(room_id)
        if members is None:
            return
        members.discard(channel_name)
        if not members:
            del self._rooms[room_id]

    def has_members(self, user_id):
        with self._lock:
            return bool(self._rooms.get(str(user_id)))

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    @staticmethod
    def _message(event_name, payload):
        return {
            "type": EVENT_MESSAGE_TYPE,
            "event": event_name,
            "data": payload,
        }

    async def abroadcast_global(self, event_name, payload):
        """Send to every connected socket. Returns False if the layer failed."""
        try:
            await self.channel_layer.group_send(
                BROADCAST_GROUP, self._message(event_name, payload)
            )
        except Exception as e:
            logger.error(f"❌ Failed to broadcast {event_name}: {e}", exc_info=True)
            return False
        logger.debug(f"📨 Broadcast {event_name}")
        return True

    async def aemit_to_room(self, user_id, event_name, payload):
        """
        Send to the sockets currently in the room of ``user_id``.

        Returns:
            bool: True when handed to the channel layer, False for an empty
            room or a layer failure
        """
        room_id = str(user_id)
        if not self.has_members(room_id):
            logger.debug(f"No active connection in room {room_id}, dropping {event_name}")
            return False

        try:
            await self.channel_layer.group_send(
                room_group_name(room_id), self._message(event_name, payload)
            )
        except Exception as e:
            logger.error(f"❌ Failed to emit {event_name} to room {room_id}: {e}", exc_info=True)
            return False
        logger.debug(f"📨 Sent {event_name} to room {room_id}")
        return True

    def broadcast_global(self, event_name, payload):
        """Sync wrapper for request handlers."""
        return async_to_sync(self.abroadcast_global)(event_name, payload)

    def emit_to_room(self, user_id, event_name, payload):
        """Sync wrapper for request handlers."""
        return async_to_sync(self.aemit_to_room)(user_id, event_name, payload)
