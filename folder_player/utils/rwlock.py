"""
讀寫鎖

多個讀者可同時持有；寫者獨佔，且等待中的寫者優先於新進的讀者，
避免監看執行緒的更新被持續的讀取餓死。
"""

import threading
from contextlib import contextmanager


class ReadWriteLock:
    """
    寫者優先的讀寫鎖
    
    使用方式：
        lock = ReadWriteLock()
        
        with lock.read_lock():
            ...  # 可與其他讀者並行
        
        with lock.write_lock():
            ...  # 獨佔
    """
    
    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0
    
    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
    
    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()
    
    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
    
    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()
    
    @contextmanager
    def read_lock(self):
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()
    
    @contextmanager
    def write_lock(self):
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
