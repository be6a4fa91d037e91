"""
音訊串流載入

依副檔名判斷格式後交給解碼器（libsndfile，經由 soundfile），
回傳可讀取、可定位、知道總長度的串流。
"""

import os
from enum import Enum
from typing import BinaryIO, FrozenSet, Optional

import numpy as np
import soundfile as sf
from loguru import logger

from ..utils.decorators import handle_errors
from ..utils.errors import DecodeError, TrackLoadError, UnsupportedFormatError


class AudioFormat(Enum):
    """支援的音訊格式（值為副檔名）"""

    WAV = ".wav"
    OGG = ".ogg"
    MP3 = ".mp3"

    @classmethod
    def from_path(cls, path: str) -> Optional["AudioFormat"]:
        """由副檔名判斷格式（不分大小寫），不支援時返回 None"""
        ext = os.path.splitext(str(path))[1].lower()
        for fmt in cls:
            if fmt.value == ext:
                return fmt
        return None

    @property
    def containers(self) -> FrozenSet[str]:
        """解碼後 libsndfile 回報的容器名稱"""
        match self:
            case AudioFormat.WAV:
                return frozenset({"WAV", "WAVEX", "RF64"})
            case AudioFormat.OGG:
                return frozenset({"OGG"})
            case AudioFormat.MP3:
                return frozenset({"MP3", "MPEG"})


# 支援的副檔名（不分大小寫）
SUPPORTED_EXTENSIONS = tuple(fmt.value for fmt in AudioFormat)


class AudioStream:
    """
    已解碼的音訊串流

    長度與位置皆以取樣幀（frame）為單位。串流擁有底層檔案，
    關閉串流時一併關閉檔案。

    使用方式：
        with loader.load_stream("musics/a.wav") as stream:
            block = stream.read(1024)   # shape (frames, channels), float32
            stream.seek(0)
            stream.length()
    """

    def __init__(self, sound_file: sf.SoundFile, source: BinaryIO, fmt: AudioFormat, path: str):
        self._file = sound_file
        self._source = source
        self.format = fmt
        self.path = path

    @property
    def sample_rate(self) -> int:
        return self._file.samplerate

    @property
    def channels(self) -> int:
        return self._file.channels

    @property
    def closed(self) -> bool:
        return self._file.closed

    def length(self) -> int:
        """總長度（幀）"""
        return self._file.frames

    def read(self, frames: int) -> np.ndarray:
        """讀取最多 frames 幀，到結尾時可能較少"""
        return self._file.read(frames, dtype="float32", always_2d=True)

    def seek(self, frame: int, whence: int = os.SEEK_SET) -> int:
        return self._file.seek(frame, whence)

    def tell(self) -> int:
        return self._file.tell()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
        self._source.close()

    def __enter__(self) -> "AudioStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"AudioStream(path={self.path!r}, format={self.format.name}, frames={self.length()})"


class LoopStream:
    """
    無限循環串流

    重複播放來源的 [0, length) 幀。read() 一定回傳剛好 n 幀，
    length 為 0 時回傳靜音。
    """

    def __init__(self, stream, length: int):
        self.stream = stream
        self.length = max(0, int(length))
        self._pos = 0

    @property
    def sample_rate(self) -> int:
        return self.stream.sample_rate

    @property
    def channels(self) -> int:
        return self.stream.channels

    def read(self, frames: int) -> np.ndarray:
        if self.length == 0 or frames <= 0:
            return np.zeros((max(0, frames), self.channels), dtype="float32")

        chunks = []
        remaining = frames
        stalled = False
        while remaining > 0:
            want = min(remaining, self.length - self._pos)
            block = self.stream.read(want)
            got = len(block)
            if got:
                chunks.append(block)
                remaining -= got
                self._pos += got
                stalled = False
            elif stalled:
                # 回到開頭仍讀不到資料，剩餘部分補靜音
                chunks.append(np.zeros((remaining, self.channels), dtype="float32"))
                break
            else:
                stalled = True
            # 到達迴圈終點，或來源提早結束
            if self._pos >= self.length or got < want:
                self.stream.seek(0)
                self._pos = 0

        return np.concatenate(chunks, axis=0) if len(chunks) > 1 else chunks[0]

    def seek(self, frame: int) -> int:
        if self.length == 0:
            return 0
        self._pos = frame % self.length
        self.stream.seek(self._pos)
        return self._pos

    def tell(self) -> int:
        return self._pos


class MusicLoader:
    """
    依路徑開啟並解碼音訊檔案

    使用方式：
        loader = MusicLoader()
        stream = loader.load_stream("musics/a.mp3")
        ...
        stream.close()  # 由呼叫者負責
    """

    @handle_errors
    def load_stream(self, path: str) -> AudioStream:
        """
        開啟並解碼音訊檔案

        Args:
            path: 檔案路徑

        Returns:
            AudioStream（擁有檔案，呼叫者負責關閉）

        Raises:
            UnsupportedFormatError: 副檔名不支援
            DecodeError: 解碼器拒絕檔案內容
            TrackLoadError: 無法開啟檔案
        """
        try:
            source = open(path, "rb")
        except OSError as e:
            raise TrackLoadError(f"loader: failed to open audio file {path}: {e}", path=path)

        fmt = AudioFormat.from_path(path)
        if fmt is None:
            source.close()
            raise UnsupportedFormatError(path)

        try:
            sound_file = sf.SoundFile(source)
        except (sf.SoundFileError, RuntimeError) as e:
            source.close()
            raise DecodeError(path, str(e))

        if sound_file.format not in fmt.containers:
            sound_file.close()
            source.close()
            raise DecodeError(
                path,
                f"expected {fmt.name} content, decoder reported {sound_file.format}"
            )

        stream = AudioStream(sound_file, source, fmt, path)
        logger.debug(
            f"已載入串流: {path} ({fmt.name}, {stream.sample_rate} Hz, "
            f"{stream.channels} ch, {stream.length()} frames)"
        )
        return stream
