"""
Frame sinks - where rendered PNG frames go during video generation.

The producer writes one frame at a time and every write blocks until the
sink has accepted it, so at most one frame is ever buffered ahead of the
encoder.
"""

import io
import logging
import subprocess
import threading
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional, Sequence

import imageio
import numpy as np
from PIL import Image

from growth.errors import EncoderError

logger = logging.getLogger(__name__)

STDERR_TAIL_LINES = 20
READ_CHUNK = 64 * 1024

StreamCallback = Callable[[subprocess.Popen, BinaryIO], None]


@dataclass
class SinkResult:
    path: Optional[str] = None
    buffer: Optional[bytes] = None
    frames_written: int = 0


class FrameSink(ABC):
    """Accepts PNG-encoded frames in order. Use as a context manager."""

    def __init__(self):
        self.frames_written = 0
        self.closed = False

    @abstractmethod
    def write(self, frame: bytes):
        pass

    @abstractmethod
    def close(self) -> SinkResult:
        pass

    def abort(self):
        """Release resources after a failure; no result is produced."""
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.abort()
        elif not self.closed:
            self.close()
        return False


class MemorySink(FrameSink):
    """Keeps every frame in memory (previews, tests)."""

    def __init__(self):
        super().__init__()
        self.frames: List[bytes] = []

    def write(self, frame: bytes):
        if self.closed:
            raise EncoderError("Cannot write to a closed sink")
        self.frames.append(bytes(frame))
        self.frames_written += 1

    def close(self) -> SinkResult:
        self.closed = True
        return SinkResult(frames_written=self.frames_written)


class ImageioSink(FrameSink):
    """Decodes each PNG frame and appends it to an imageio writer (mp4/webm/gif)."""

    def __init__(self, output_path: str, fps: int, **writer_kwargs):
        super().__init__()
        self.output_path = str(output_path)
        Path(self.output_path).parent.mkdir(parents=True, exist_ok=True)
        self._writer = imageio.get_writer(self.output_path, fps=fps, **writer_kwargs)

    def write(self, frame: bytes):
        if self.closed:
            raise EncoderError("Cannot write to a closed sink")
        with Image.open(io.BytesIO(frame)) as image:
            self._writer.append_data(np.asarray(image.convert('RGBA')))
        self.frames_written += 1

    def close(self) -> SinkResult:
        self.closed = True
        self._writer.close()
        logger.info("Saved %d frames to %s", self.frames_written, self.output_path)
        return SinkResult(path=self.output_path, frames_written=self.frames_written)

    def abort(self):
        super().abort()
        self._writer.close()


class FFmpegSink(FrameSink):
    """
    Streams PNG frames into an external ffmpeg process over stdin.

    With an output path ffmpeg writes the file itself. Without one it streams
    the container to stdout: the pipe is handed to ``on_stream`` if given,
    otherwise it is drained in the background and returned as the result
    buffer. stderr is always drained; its tail is attached to any failure.
    """

    def __init__(self, args: Sequence[str], binary: str = 'ffmpeg', output_path: Optional[str] = None,
                 on_stream: Optional[StreamCallback] = None, popen=subprocess.Popen):
        super().__init__()
        self.command = [binary, *args]
        self.output_path = str(output_path) if output_path else None
        self._stderr_tail = deque(maxlen=STDERR_TAIL_LINES)
        self._chunks: Optional[List[bytes]] = None
        self._threads: List[threading.Thread] = []

        if self.output_path:
            Path(self.output_path).parent.mkdir(parents=True, exist_ok=True)

        logger.info("Spawning encoder: %s", ' '.join(self.command))
        try:
            self._process = popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE if self.output_path is None else subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise EncoderError(f"Cannot start encoder '{binary}': {e}") from e

        self._start_reader(self._drain_stderr, self._process.stderr)
        if self.output_path is None:
            if on_stream is not None:
                on_stream(self._process, self._process.stdout)
            else:
                self._chunks = []
                self._start_reader(self._drain_stdout, self._process.stdout)

    def _start_reader(self, target, stream):
        thread = threading.Thread(target=target, args=(stream,), daemon=True)
        thread.start()
        self._threads.append(thread)

    def _drain_stderr(self, stream: BinaryIO):
        for line in stream:
            self._stderr_tail.append(line.decode('utf-8', errors='replace').rstrip())

    def _drain_stdout(self, stream: BinaryIO):
        for chunk in iter(lambda: stream.read(READ_CHUNK), b''):
            self._chunks.append(chunk)

    @property
    def stderr_tail(self) -> str:
        return '\n'.join(self._stderr_tail)

    def write(self, frame: bytes):
        if self.closed:
            raise EncoderError("Cannot write to a closed encoder")
        try:
            self._process.stdin.write(frame)
            # blocks while the encoder is behind
            self._process.stdin.flush()
        except (BrokenPipeError, OSError, ValueError) as e:
            self.abort()
            raise EncoderError(
                f"Encoder input closed after {self.frames_written} frames",
                returncode=self._process.returncode,
                stderr_tail=self.stderr_tail,
            ) from e
        self.frames_written += 1

    def _close_stdin(self):
        try:
            self._process.stdin.close()
        except (BrokenPipeError, OSError):
            logger.debug("Encoder stdin already closed")

    def _join_readers(self):
        for thread in self._threads:
            thread.join()

    def close(self) -> SinkResult:
        if self.closed:
            raise EncoderError("Encoder already closed")
        self.closed = True
        self._close_stdin()
        returncode = self._process.wait()
        self._join_readers()

        if returncode != 0:
            raise EncoderError(f"Encoder exited with status {returncode}",
                               returncode=returncode, stderr_tail=self.stderr_tail)

        buffer = b''.join(self._chunks) if self._chunks is not None else None
        logger.info("Encoder finished: %d frames", self.frames_written)
        return SinkResult(path=self.output_path, buffer=buffer, frames_written=self.frames_written)

    def abort(self):
        if self.closed and self._process.poll() is not None:
            return
        self.closed = True
        self._close_stdin()
        if self._process.poll() is None:
            self._process.kill()
        self._process.wait()
        self._join_readers()
