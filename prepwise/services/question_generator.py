from openai import OpenAI, OpenAIError
from loguru import logger

from prepwise.core.config import get_settings
from prepwise.core.exceptions import GenerationProviderError

SYSTEM_PROMPT = (
    "You are an experienced technical interviewer who writes clear, conversational "
    "interview questions and follows output format instructions exactly."
)

class QuestionGenerator:
    """Wraps a single text-generation call: prompt in, raw text out. No retries."""

    def __init__(self, client: OpenAI = None, model: str = None):
        settings = get_settings()
        self.client = client or OpenAI(api_key=settings.OPENAI_API_KEY)
        self.model = model or settings.GENERATION_MODEL
        self.temperature = settings.GENERATION_TEMPERATURE
        self.max_tokens = settings.GENERATION_MAX_TOKENS

    def generate(self, prompt: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt}
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens
            )
        except OpenAIError as e:
            logger.error(f"Text generation failed on {self.model}: {e}")
            raise GenerationProviderError(f"Text generation failed: {str(e)}") from e

        return (response.choices[0].message.content or "").strip()

_question_generator: QuestionGenerator = None

def get_question_generator() -> QuestionGenerator:
    """FastAPI dependency: shared generator (singleton pattern)"""
    global _question_generator
    if _question_generator is None:
        _question_generator = QuestionGenerator()
    return _question_generator
