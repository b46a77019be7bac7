"""
Speech Channel

Text-to-speech runs in the player's browser. The game only asks for a word
to be spoken or for current playback to stop; these channels carry that
request.
"""


class NullSpeechChannel:
    """Speech channel that does nothing. Used headless and in tests."""

    def speak(self, text: str) -> None:
        pass

    def cancel(self) -> None:
        pass


class SocketSpeechChannel:
    """Sends speech requests to the game's Socket.IO room."""

    def __init__(self, socketio, room: str):
        self.socketio = socketio
        self.room = room

    def speak(self, text: str) -> None:
        self.socketio.emit('speak', {'text': text}, room=self.room)

    def cancel(self) -> None:
        self.socketio.emit('cancel_speech', {}, room=self.room)
