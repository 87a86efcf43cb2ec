"""Speech input/output capabilities.

Speech is an optional aid. Capabilities are probed once when a session
starts; every call site treats a missing capability as a no-op, never as an
error that could fail a processing run.

Speech output uses pyttsx3 (the platform TTS engine). Speech input has no
portable engine, so a recognizer backend is injected; the recognizer is owned
by a ``SpeechRecognitionSession`` whose lifetime is tied to the study session.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Protocol

import pyttsx3

logger = logging.getLogger(__name__)

ResultCallback = Callable[[str, bool], None]
ErrorCallback = Callable[[str], None]


class SpeechOutput(Protocol):
    """Text to audible speech."""

    def speak(self, text: str, lang: str = "en-US") -> None:
        ...

    def cancel(self) -> None:
        ...


class SpeechRecognizer(Protocol):
    """Audible speech to text.

    Implementations call ``on_result(text, is_final)`` for every (interim or
    final) transcript and ``on_error(message)`` when recognition fails.
    """

    def start(self, lang: str, on_result: ResultCallback, on_error: ErrorCallback) -> None:
        ...

    def stop(self) -> None:
        ...


class Pyttsx3SpeechOutput:
    """Speech output through pyttsx3."""

    def __init__(self, engine, rate: Optional[int] = None):
        self.engine = engine
        self.is_speaking = False
        if rate is not None:
            self.engine.setProperty("rate", int(rate))

    @classmethod
    def create(cls, rate: Optional[int] = None) -> "Pyttsx3SpeechOutput":
        """Initialize the platform TTS driver."""
        return cls(pyttsx3.init(), rate=rate)

    def _select_voice(self, lang: str) -> None:
        prefix = lang.lower().replace("-", "_").split("_")[0]
        for voice in self.engine.getProperty("voices") or []:
            languages = [
                (lg.decode("utf-8", "ignore") if isinstance(lg, bytes) else str(lg)).lower()
                for lg in (getattr(voice, "languages", None) or [])
            ]
            if any(prefix in lg for lg in languages):
                self.engine.setProperty("voice", voice.id)
                return

    def speak(self, text: str, lang: str = "en-US") -> None:
        if not text.strip():
            return
        self._select_voice(lang)
        self.is_speaking = True
        try:
            self.engine.say(text)
            self.engine.runAndWait()
        finally:
            self.is_speaking = False

    def cancel(self) -> None:
        self.engine.stop()
        self.is_speaking = False

    def save_to_file(self, text: str, wav_path: Path) -> Path:
        """Render speech to a WAV file instead of the speakers."""
        wav_path = Path(wav_path)
        wav_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine.save_to_file(text, str(wav_path))
        self.engine.runAndWait()
        if not wav_path.exists() or wav_path.stat().st_size == 0:
            raise RuntimeError("TTS failed to produce output audio.")
        return wav_path


class SpeechRecognitionSession:
    """Lifecycle wrapper around one recognizer instance.

    The transcript holds the latest final result, or the latest interim
    result while nothing is final yet. Errors are recorded, not raised.
    """

    def __init__(self, recognizer: Optional[SpeechRecognizer]):
        self._recognizer = recognizer
        self.is_open = False
        self.is_listening = False
        self.transcript = ""
        self.error: Optional[str] = None

    @property
    def is_supported(self) -> bool:
        return self._recognizer is not None

    def open(self) -> "SpeechRecognitionSession":
        self.is_open = True
        if not self.is_supported:
            self.error = "Speech recognition is not supported on this system."
        return self

    def close(self) -> None:
        """Stop listening and release the recognizer."""
        if self.is_listening and self._recognizer is not None:
            self._recognizer.stop()
        self.is_listening = False
        self.is_open = False
        self._recognizer = None

    def __enter__(self) -> "SpeechRecognitionSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def start(self, lang: str = "en-US") -> None:
        if not self.is_open or not self.is_supported or self.is_listening:
            return
        self.transcript = ""
        self.error = None
        try:
            self._recognizer.start(lang, self._on_result, self._on_error)
        except Exception as e:
            logger.warning("Speech recognition failed to start: %s", e)
            self.error = str(e) or "Failed to start recognition"
            self.is_listening = False
            return
        self.is_listening = True

    def stop(self) -> None:
        if not self.is_supported or not self.is_listening:
            return
        self._recognizer.stop()
        self.is_listening = False

    def clear_transcript(self) -> None:
        self.transcript = ""

    def _on_result(self, text: str, is_final: bool) -> None:
        self.transcript = text

    def _on_error(self, message: str) -> None:
        logger.warning("Speech recognition error: %s", message)
        self.error = message
        self.is_listening = False


class SpeechCapabilities:
    """Speech features available in this environment, probed once."""

    def __init__(
        self,
        output: Optional[SpeechOutput] = None,
        recognizer: Optional[SpeechRecognizer] = None,
    ):
        self.output = output
        self.recognizer = recognizer

    @classmethod
    def detect(cls, recognizer: Optional[SpeechRecognizer] = None) -> "SpeechCapabilities":
        """Probe the TTS engine; a driver that fails to start means no output."""
        try:
            output: Optional[SpeechOutput] = Pyttsx3SpeechOutput.create()
        except Exception as e:
            logger.info("Speech output unavailable: %s", e)
            output = None
        return cls(output=output, recognizer=recognizer)

    @property
    def output_supported(self) -> bool:
        return self.output is not None

    @property
    def input_supported(self) -> bool:
        return self.recognizer is not None

    def speak(self, text: str, lang: str = "en-US") -> bool:
        """Speak ``text`` if output is available. Returns whether it was spoken."""
        if self.output is None:
            return False
        try:
            self.output.speak(text, lang)
        except Exception as e:
            logger.warning("Speech output failed: %s", e)
            return False
        return True

    def cancel(self) -> None:
        if self.output is not None:
            self.output.cancel()

    def recognition_session(self) -> SpeechRecognitionSession:
        return SpeechRecognitionSession(self.recognizer)
