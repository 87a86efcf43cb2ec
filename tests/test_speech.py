"""Tests for speech capabilities."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from notewise.pipeline import StudySession
from notewise.speech import (
    Pyttsx3SpeechOutput,
    SpeechCapabilities,
    SpeechRecognitionSession,
)


class FakeRecognizer:
    """Recognizer that records calls and lets tests push results."""

    def __init__(self, fail_on_start=False):
        self.fail_on_start = fail_on_start
        self.started_with = None
        self.stopped = 0
        self.on_result = None
        self.on_error = None

    def start(self, lang, on_result, on_error):
        if self.fail_on_start:
            raise RuntimeError("microphone busy")
        self.started_with = lang
        self.on_result = on_result
        self.on_error = on_error

    def stop(self):
        self.stopped += 1


class TestPyttsx3SpeechOutput:
    """Tests for pyttsx3 speech output."""

    def test_speak(self):
        engine = MagicMock()
        engine.getProperty.return_value = [
            SimpleNamespace(id="fr", languages=[b"\x05fr_FR"]),
            SimpleNamespace(id="en", languages=["en_US"]),
        ]
        output = Pyttsx3SpeechOutput(engine)

        output.speak("Hello", "en-US")

        engine.setProperty.assert_called_with("voice", "en")
        engine.say.assert_called_once_with("Hello")
        engine.runAndWait.assert_called_once()
        assert not output.is_speaking

    def test_blank_text_is_skipped(self):
        engine = MagicMock()
        Pyttsx3SpeechOutput(engine).speak("   ")
        engine.say.assert_not_called()

    def test_cancel(self):
        engine = MagicMock()
        Pyttsx3SpeechOutput(engine).cancel()
        engine.stop.assert_called_once()


class TestSpeechCapabilities:
    """Tests for capability probing."""

    @patch("notewise.speech.pyttsx3")
    def test_detect_with_engine(self, mock_pyttsx3):
        mock_pyttsx3.init.return_value = MagicMock()
        speech = SpeechCapabilities.detect()
        assert speech.output_supported
        assert not speech.input_supported
        assert speech.speak("Hello") is True

    @patch("notewise.speech.pyttsx3")
    def test_detect_without_engine(self, mock_pyttsx3):
        """A missing TTS driver disables output instead of failing."""
        mock_pyttsx3.init.side_effect = RuntimeError("no driver")
        speech = SpeechCapabilities.detect()
        assert not speech.output_supported
        assert speech.speak("Hello") is False

    def test_speak_failure_is_logged_not_raised(self):
        output = MagicMock()
        output.speak.side_effect = RuntimeError("audio device lost")
        assert SpeechCapabilities(output=output).speak("Hello") is False

    def test_session_reads_aloud(self, fake_client, store):
        output = MagicMock()
        session = StudySession(fake_client, store=store, speech=SpeechCapabilities(output=output))
        assert session.read_aloud("Cells divide.", "en-GB") is True
        output.speak.assert_called_once_with("Cells divide.", "en-GB")


class TestSpeechRecognitionSession:
    """Tests for the recognizer lifecycle."""

    def test_unsupported(self):
        recognition = SpeechRecognitionSession(None).open()
        assert recognition.error == "Speech recognition is not supported on this system."
        recognition.start()
        assert not recognition.is_listening

    def test_transcript_follows_results(self):
        recognizer = FakeRecognizer()
        with SpeechRecognitionSession(recognizer) as recognition:
            recognition.start("en-US")
            assert recognition.is_listening
            assert recognizer.started_with == "en-US"

            recognizer.on_result("what is", False)
            recognizer.on_result("what is a cell", True)
            assert recognition.transcript == "what is a cell"

            recognition.stop()
            assert not recognition.is_listening
        assert recognizer.stopped == 1

    def test_close_stops_listening(self):
        recognizer = FakeRecognizer()
        recognition = SpeechRecognitionSession(recognizer).open()
        recognition.start()
        recognition.close()
        assert recognizer.stopped == 1
        assert not recognition.is_supported

    def test_errors_are_recorded(self):
        recognizer = FakeRecognizer()
        recognition = SpeechRecognitionSession(recognizer).open()
        recognition.start()
        recognizer.on_error("no-speech")
        assert recognition.error == "no-speech"
        assert not recognition.is_listening

    def test_start_failure_is_recorded(self):
        recognition = SpeechRecognitionSession(FakeRecognizer(fail_on_start=True)).open()
        recognition.start()
        assert recognition.error == "microphone busy"
        assert not recognition.is_listening

    def test_session_lifecycle(self, fake_client, store):
        recognizer = FakeRecognizer()
        speech = SpeechCapabilities(recognizer=recognizer)
        with StudySession(fake_client, store=store, speech=speech) as session:
            assert session.recognition.is_open
            session.recognition.start()
        assert recognizer.stopped == 1
        assert not session.recognition.is_open
