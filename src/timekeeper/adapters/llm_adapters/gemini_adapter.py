from typing import Optional

from langchain_google_genai import ChatGoogleGenerativeAI

from timekeeper.core.ports.assistant_port import Assistant
from timekeeper.utils.logging_handler import setup_logger

logger = setup_logger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a helpful time and clock assistant. Keep responses brief and relevant "
    "to time, dates, alarms, or world clocks."
)
FALLBACK_REPLY = "Sorry, I couldn't get a response right now."


class GeminiAssistant(Assistant):
    """Single request/response call to Gemini. No retries, no streaming."""

    def __init__(self, model: str = "gemini-flash-lite-latest", api_key: Optional[str] = None, llm=None):
        self.model = model
        self._api_key = api_key
        self._llm = llm

    @property
    def llm(self):
        # Built on first use so a missing API key only affects the assistant.
        if self._llm is None:
            kwargs = {"model": self.model, "temperature": 0}
            if self._api_key:
                kwargs["google_api_key"] = self._api_key
            self._llm = ChatGoogleGenerativeAI(**kwargs)
        return self._llm

    def respond(self, prompt: str) -> str:
        if not prompt or not prompt.strip():
            return ""
        try:
            result = self.llm.invoke([("system", SYSTEM_INSTRUCTION), ("human", prompt)])
        except Exception as e:
            logger.error(f"Error fetching AI response: {e}")
            return f"Sorry, I encountered an error: {e}"
        content = getattr(result, "content", result)
        if isinstance(content, list):
            content = "".join(part if isinstance(part, str) else part.get("text", "") for part in content)
        return content or FALLBACK_REPLY
