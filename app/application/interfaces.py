from abc import ABC, abstractmethod


class TranscriptionClientInterface(ABC):
    """Speech-to-text contract used by input normalization"""

    @abstractmethod
    async def transcribe(self, audio_bytes: bytes, *, language_code: str) -> str:
        ...


class GenerationClientInterface(ABC):
    """Text-generation contract used by the analysis engine"""

    @abstractmethod
    async def generate(self, prompt: str, *, temperature: float) -> str:
        ...


class NotificationDispatcherInterface(ABC):
    """Mail-transport contract used to deliver rendered notifications"""

    @abstractmethod
    async def send(self, *, recipient: str, subject: str, body: str) -> None:
        ...
