# Backend module
# device.py 需要 PortAudio，不在此匯入
from .base import AudioBackend, Player

__all__ = ["AudioBackend", "Player"]
