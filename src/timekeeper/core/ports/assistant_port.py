from abc import ABC, abstractmethod


class Assistant(ABC):

    @abstractmethod
    def respond(self, prompt: str) -> str:
        """Answer a free-text prompt. Must not raise; failures become a reply text."""
        pass
