"""
Публичная страница превью материала: GET /demo/{slug}

Арабская RTL-страница: статус, даты, картинка, текст, аудиоплеер,
вопросы с выделенным правильным ответом. Весь пользовательский текст экранируется.
"""

import traceback
from html import escape

from aiohttp import web

from config import get_logger
from core.types import ContentStatus
from locales import t

logger = get_logger(__name__)

STYLE = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: 'Arial', 'Helvetica', sans-serif; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); padding: 20px; line-height: 1.8; }
    .container { max-width: 900px; margin: 0 auto; background: white; padding: 40px; border-radius: 16px; box-shadow: 0 10px 40px rgba(0,0,0,0.2); }
    .header { text-align: center; margin-bottom: 40px; padding-bottom: 20px; border-bottom: 3px solid #667eea; }
    .status-badge { display: inline-block; padding: 6px 16px; border-radius: 20px; font-size: 14px; font-weight: bold; margin-bottom: 15px; }
    .status-draft { background: #ffeaa7; color: #2d3436; }
    .status-approved { background: #55efc4; color: #00b894; }
    .status-rejected { background: #fab1a0; color: #d63031; }
    .status-posted { background: #74b9ff; color: #0984e3; }
    h1 { color: #2d3436; font-size: 32px; margin-bottom: 15px; }
    .meta { color: #636e72; font-size: 14px; margin-bottom: 10px; }
    .image-container { margin: 30px 0; border-radius: 12px; overflow: hidden; }
    .image-container img { width: 100%; height: auto; display: block; }
    .content { background: #f8f9fa; padding: 30px; border-radius: 12px; margin: 30px 0; white-space: pre-wrap; font-size: 18px; line-height: 2; }
    .audio-player { margin: 30px 0; padding: 25px; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); border-radius: 12px; text-align: center; }
    .audio-player h3 { color: white; margin-bottom: 15px; font-size: 20px; }
    audio { width: 100%; max-width: 500px; }
    .questions h2 { color: #2d3436; font-size: 28px; margin-bottom: 25px; }
    .question { background: #f8f9fa; padding: 25px; margin-bottom: 20px; border-radius: 12px; border-right: 4px solid #667eea; }
    .option { padding: 12px 18px; margin: 8px 0; background: white; border-radius: 8px; border: 2px solid #dfe6e9; }
    .option.correct { background: #d5f4e6; border-color: #00b894; font-weight: bold; }
    .option.correct::before { content: "✓ "; color: #00b894; }
    .explanation { margin-top: 15px; padding: 15px; background: #fff3cd; border-radius: 8px; border-right: 3px solid #ffc107; font-style: italic; }
    .footer { margin-top: 50px; padding-top: 30px; border-top: 2px solid #dfe6e9; text-align: center; color: #636e72; font-size: 14px; }
    .message { text-align: center; }
    .message h1 { color: #e74c3c; }
"""

DATE_FORMAT = "%Y-%m-%d %H:%M"


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="ar" dir="rtl">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(title)}</title>
  <style>{STYLE}</style>
</head>
<body>
  <div class="container">
{body}
  </div>
</body>
</html>
"""


def render_message_page(title: str, text: str) -> str:
    """Страница с одним сообщением (404 / 500)"""
    body = f"""    <div class="message">
      <h1>{escape(title)}</h1>
      <p>{escape(text)}</p>
    </div>"""
    return _page(title, body)


def _render_questions(questions) -> str:
    if not questions:
        return ""
    blocks = []
    for i, q in enumerate(questions, start=1):
        options = "\n".join(
            f'          <div class="option{" correct" if idx == q.correct_answer else ""}">'
            f'{"ABCD"[idx]}) {escape(option)}</div>'
            for idx, option in enumerate(q.options)
        )
        explanation = f'        <div class="explanation">💡 {escape(q.explanation)}</div>' if q.explanation else ""
        blocks.append(f"""      <div class="question">
        <h3>{escape(t('demo.question', n=i, text=q.text))}</h3>
        <div class="options">
{options}
        </div>
{explanation}
      </div>""")
    return f"""    <div class="questions">
      <h2>{escape(t('demo.quizzes'))}</h2>
{chr(10).join(blocks)}
    </div>"""


def render_demo_page(item) -> str:
    """HTML-страница материала"""
    status = ContentStatus(item.status).value
    parts = [f"""    <div class="header">
      <span class="status-badge status-{status}">{escape(t(f'statuses.{status}'))}</span>
      <h1>🎙️ {escape(item.title)}</h1>"""]

    if item.created_at:
        parts.append(f'      <div class="meta">{escape(t("demo.created", date=item.created_at.strftime(DATE_FORMAT)))}</div>')
    if item.updated_at and item.created_at and item.updated_at != item.created_at:
        parts.append(f'      <div class="meta">{escape(t("demo.updated", date=item.updated_at.strftime(DATE_FORMAT)))}</div>')
    parts.append("    </div>")

    if item.image_url:
        parts.append(f"""    <div class="image-container">
      <img src="{escape(item.image_url)}" alt="{escape(item.title)}">
    </div>""")

    parts.append(f'    <div class="content">{escape(item.body)}</div>')

    if item.audio_url:
        parts.append(f"""    <div class="audio-player">
      <h3>{escape(t('demo.listen'))}</h3>
      <audio controls>
        <source src="{escape(item.audio_url)}" type="audio/mpeg">
        {escape(t('demo.no_audio_support'))}
      </audio>
    </div>""")

    questions = _render_questions(item.questions)
    if questions:
        parts.append(questions)

    parts.append(f'    <div class="footer"><p>{escape(t("demo.footer"))}</p></div>')
    return _page(t('demo.page_title', title=item.title), "\n".join(parts))


async def demo_page(request: web.Request) -> web.Response:
    """GET /demo/{slug}"""
    from .app import CTX_KEY

    slug = request.match_info["slug"]
    ctx = request.app[CTX_KEY]
    logger.info(f"🌐 Страница превью: {slug}")

    try:
        item = await ctx.repo.get_by_slug(slug)
        if item is None:
            logger.warning(f"⚠️ Материал не найден: {slug}")
            return web.Response(
                text=render_message_page(t('demo.not_found_title'), t('demo.not_found_text')),
                status=404, content_type="text/html", charset="utf-8",
            )
        return web.Response(text=render_demo_page(item), content_type="text/html", charset="utf-8")
    except Exception as e:
        logger.error(f"❌ Ошибка страницы превью {slug}: {e}\n{traceback.format_exc()}")
        return web.Response(
            text=render_message_page(t('demo.error_title'), t('demo.error_text')),
            status=500, content_type="text/html", charset="utf-8",
        )
