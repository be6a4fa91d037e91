# Core module
from .selector import MusicSelector
from .loader import AudioFormat, AudioStream, LoopStream, MusicLoader
from .state import PlayerState, PlaybackClock
from .player import MusicPlayer, Track

__all__ = [
    "MusicSelector",
    "AudioFormat",
    "AudioStream",
    "LoopStream",
    "MusicLoader",
    "PlayerState",
    "PlaybackClock",
    "MusicPlayer",
    "Track",
]
