# bengal_portal/services/assistant_service.py
import logging

from openai import OpenAI

from bengal_portal.errors import AssistantUnavailableError, ValidationError
from bengal_portal.models import ChatTurn
from bengal_portal.models.chat import USER, ASSISTANT
from bengal_portal.services.validation import clean_text

logger = logging.getLogger(__name__)

SYSTEM_DIRECTIVE = (
    "You are the Bengal Welding Assistant. Help customers with commercial kitchen "
    "equipment inquiries, maintenance schedules, and fabrication terminology. Keep "
    "answers concise and professional. The products we offer are Cookers, Extraction "
    "Hoods, Grease Cleaning Plans, Hot Cupboards, Stockpots, and Table/Gantry units."
)

FALLBACK_MESSAGE = "Error connecting to AI service. Please try again later."


class OpenAIAssistant:
    """Chat completions client for the service assistant."""

    def __init__(self, api_key=None, model='gpt-4o-mini', timeout=60.0, client=None):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise AssistantUnavailableError("OPENAI_API_KEY is not configured")
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def reply(self, turns):
        """
        Args:
            turns (list of ChatTurn): the conversation so far, oldest first

        Returns:
            str: the assistant's answer

        Raises:
            AssistantUnavailableError: when the call fails or returns no text
        """
        messages = [{"role": "system", "content": SYSTEM_DIRECTIVE}]
        messages.extend(turn.to_dict() for turn in turns)

        try:
            logger.info(f"Sending {len(turns)} chat turns to OpenAI ({self.model})")
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=0.3,
            )
            content = response.choices[0].message.content if response.choices else None
        except AssistantUnavailableError:
            raise
        except Exception as e:
            logger.error(f"OpenAI chat request failed: {str(e)}")
            raise AssistantUnavailableError(f"Assistant request failed: {e}")

        if not content or not content.strip():
            raise AssistantUnavailableError("Assistant returned an empty answer")
        return content.strip()


class AssistantChatSession:
    """The persisted conversation with the assistant."""

    def __init__(self, history_repository, assistant):
        self.history_repository = history_repository
        self.assistant = assistant

    def history(self):
        return self.history_repository.load()

    def send(self, text):
        text = clean_text(text, 'Message')
        if not text:
            raise ValidationError("Message cannot be empty")

        turns = self.history_repository.load() + [ChatTurn(USER, text)]
        try:
            answer = self.assistant.reply(turns)
        except AssistantUnavailableError as e:
            logger.warning(f"Assistant unavailable, answering with fallback: {e.message}")
            answer = FALLBACK_MESSAGE

        reply = ChatTurn(ASSISTANT, answer)
        self.history_repository.save(turns + [reply])
        return reply

    def clear(self):
        self.history_repository.save([])
        logger.info("Chat history cleared")
