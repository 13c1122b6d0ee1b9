"""
Генератор материалов.

Запрашивает у LLM JSON с заголовком, текстом и 5 вопросами,
проверяет его и превращает в GeneratedContent.
При ошибке провайдера или невалидном ответе — один повтор
с более высокой температурой, затем GenerationError.
"""

from typing import Optional

from config import (
    get_logger,
    GENERATION_TEMPERATURE,
    RETRY_TEMPERATURE,
    QUESTIONS_PER_CONTENT,
)
from core.errors import GenerationError, ProviderError, ValidationError
from core.types import ContentType, GeneratedContent, Level, Question
from .prompts import SYSTEM_PROMPT, build_content_prompt, build_questions_prompt

logger = get_logger(__name__)


def parse_questions(data: dict) -> list[Question]:
    """Проверяет и конвертирует вопросы из ответа LLM

    Raises:
        ValidationError: нет вопросов, их не 5, неверные варианты или буква ответа
    """
    raw = data.get("questions")
    if not isinstance(raw, list) or not raw:
        raise ValidationError("В ответе нет вопросов")
    if len(raw) != QUESTIONS_PER_CONTENT:
        raise ValidationError(f"Ожидалось {QUESTIONS_PER_CONTENT} вопросов, получено {len(raw)}")
    return [Question.from_llm(item) for item in raw]


def parse_content_response(data: dict, default_image_url: str = "",
                           content_type: ContentType = ContentType.PODCAST) -> GeneratedContent:
    """Проверяет JSON-ответ LLM и собирает GeneratedContent

    Raises:
        ValidationError: нет заголовка, текста или корректных вопросов
    """
    title = data.get("podcastTitle")
    body = data.get("podcastContent")
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("В ответе нет заголовка (podcastTitle)")
    if not isinstance(body, str) or not body.strip():
        raise ValidationError("В ответе нет текста (podcastContent)")

    questions = parse_questions(data)

    image_url = data.get("imageUrl") or ""
    if not isinstance(image_url, str):
        image_url = ""
    if not image_url and content_type is ContentType.PODCAST:
        image_url = default_image_url or ""

    topic = data.get("topic") if isinstance(data.get("topic"), str) else None

    return GeneratedContent(
        title=title.strip(),
        body=body.strip(),
        questions=questions,
        topic=topic,
        image_url=image_url,
    )


class ContentGenerator:
    """Генерация текста и вопросов через LLM"""

    def __init__(self, llm, default_image_url: str = ""):
        """
        Args:
            llm: клиент с методом generate_json(system, user, temperature)
            default_image_url: картинка для подкаста, если LLM её не вернул
        """
        self.llm = llm
        self.default_image_url = default_image_url

    async def _request_with_retry(self, prompt: str, parse, what: str):
        """Запрос с одним повтором на повышенной температуре"""
        last_error = None
        for attempt, temperature in enumerate((GENERATION_TEMPERATURE, RETRY_TEMPERATURE), start=1):
            try:
                data = await self.llm.generate_json(SYSTEM_PROMPT, prompt, temperature=temperature)
                return parse(data)
            except (ProviderError, ValidationError) as e:
                last_error = e
                if attempt == 1:
                    logger.warning(f"⚠️ {what}: первая попытка не удалась ({e}), повтор...")
                else:
                    logger.error(f"❌ {what}: обе попытки не удались ({e})")

        raise GenerationError(f"{what}: генерация не удалась после повтора: {last_error}") from last_error

    async def generate(self, content_type: ContentType, level: Level,
                       topic: Optional[str] = None) -> GeneratedContent:
        """Сгенерировать материал

        Args:
            content_type: podcast / listening / reading
            level: уровень CEFR
            topic: тема (если не задана — LLM выбирает сам)

        Returns:
            GeneratedContent

        Raises:
            GenerationError: обе попытки не удались
        """
        logger.info(f"🤖 Генерация: {content_type.value} {level.value}, тема: {topic or 'случайная'}")
        prompt = build_content_prompt(content_type, level, topic)

        def parse(data):
            return parse_content_response(data, self.default_image_url, content_type)

        content = await self._request_with_retry(prompt, parse, "Генерация материала")
        if topic:
            content.topic = topic
        logger.info(f"✅ Материал сгенерирован: {content.title} ({len(content.questions)} вопросов)")
        return content

    async def generate_questions_from_text(self, text: str, level: Level) -> list[Question]:
        """Сгенерировать 5 вопросов по готовому тексту

        Raises:
            ValidationError: пустой текст
            GenerationError: обе попытки не удались
        """
        if not text or not text.strip():
            raise ValidationError("Пустой текст для вопросов")

        prompt = build_questions_prompt(text.strip(), level)
        questions = await self._request_with_retry(prompt, parse_questions, "Вопросы по тексту")
        logger.info(f"✅ Вопросы по тексту сгенерированы: {len(questions)}")
        return questions
