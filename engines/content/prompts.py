"""
Промпты для генерации материалов на арабском.

Все тексты промптов — на арабском с полным ташкилем,
служебная часть (формат JSON) — на английском.
"""

from typing import Optional

from config import CONTENT_TYPES, QUESTIONS_PER_CONTENT
from core.types import ContentType, Level

SYSTEM_PROMPT = (
    "أَنْتَ مُعَلِّمٌ خَبِيرٌ فِي تَعْلِيمِ اللُّغَةِ العَرَبِيَّةِ لِلنَّاطِقِينَ بِغَيْرِهَا. "
    "تَكْتُبُ مُحْتَوًى تَعْلِيمِيًّا بِالتَّشْكِيلِ الكَامِلِ وَتُجِيبُ بِصِيغَةِ JSON فَقَطْ."
)

CONTENT_TYPE_ARABIC = {
    ContentType.LISTENING: "تِنْجْلَاش (مُحْتَوَى صَوْتِيّ)",
    ContentType.READING: "أُوقِيش (مُحْتَوَى قِرَائِيّ)",
    ContentType.PODCAST: "بُودْكَاسْت",
}

QUESTION_FOCUS = {
    ContentType.LISTENING: (
        "**مُهِمٌّ جِدًّا:** الأسئلة يَجِبُ أَنْ تَكُونَ عَنْ مَا سَمِعَهُ الْمُتَعَلِّمُ فِي الصَّوْتِ "
        "(مَثَلاً: مَا الَّذِي سَمِعْتَهُ عَنْ...؟ / مَاذَا ذُكِرَ فِي الصَّوْتِ عَنْ...؟)"
    ),
    ContentType.READING: (
        "**مُهِمٌّ جِدًّا:** الأسئلة يَجِبُ أَنْ تَكُونَ عَنْ مَا قَرَأَهُ الْمُتَعَلِّمُ فِي النَّصِّ "
        "(مَثَلاً: مَا الَّذِي قَرَأْتَهُ عَنْ...؟ / مَاذَا ذُكِرَ فِي النَّصِّ عَنْ...؟)"
    ),
    ContentType.PODCAST: "الأسئلة عَنْ مَحْتَوَى الْبُودْكَاسْتِ",
}

LEVEL_DIFFICULTY = {
    Level.A1: "الأسئلة يَجِبُ أَنْ تَكُونَ سَهْلَةً - مَعْلُومَاتٌ أَسَاسِيَّةٌ مِنَ النَّصِّ",
    Level.A2: "الأسئلة يَجِبُ أَنْ تَكُونَ سَهْلَةً إِلَى مُتَوَسِّطَةٍ - مَعْلُومَاتٌ وَاضِحَةٌ مَعَ قَلِيلٍ مِنَ الاسْتِنْتَاجِ",
    Level.B1: "الأسئلة يَجِبُ أَنْ تَكُونَ مُتَوَسِّطَةَ الصُّعُوبَةِ - تَحْتَاجُ فَهْمًا عَمِيقًا وَرَبْطَ الأَفْكَارِ",
    Level.B2: "الأسئلة يَجِبُ أَنْ تَكُونَ صَعْبَةً - تَحْتَاجُ تَحْلِيلًا نَقْدِيًّا وَفَهْمًا شَامِلًا",
}

TOPIC_AREAS = "العلوم، التكنولوجيا، الصحة، الثقافة، التاريخ، البيئة، التعليم، الأعمال"


def content_instruction(content_type: ContentType, level: Level) -> str:
    """Инструкция по объёму и виду текста"""
    words = CONTENT_TYPES[content_type.value]["min_words"]
    if content_type is ContentType.LISTENING:
        return (f"أنشئ نص صَوْتِيّ (audio script) بمستوى {level.value} عن هذا الموضوع - "
                f"يَجِبُ أَنْ يَحْتَوِيَ عَلَى {words} كَلِمَةً عَلَى الأَقَلِّ")
    if content_type is ContentType.READING:
        return (f"أنشئ نص قِرَائِيّ (reading text) بمستوى {level.value} عن هذا الموضوع - "
                f"يَجِبُ أَنْ يَحْتَوِيَ عَلَى {words} كَلِمَةٍ عَلَى الأَقَلِّ. "
                "**مُهِمٌّ:** هَذَا النَّصُّ مُخْتَلِفٌ عَنِ النَّصِّ الصَّوْتِيِّ - اكْتُبْ مُحْتَوًى جَدِيدًا تَمَامًا لِلْقِرَاءَةِ")
    return (f"أنشئ نص podcast بمستوى {level.value} عن هذا الموضوع - "
            f"يَجِبُ أَنْ يَحْتَوِيَ عَلَى {words} كَلِمَةً عَلَى الأَقَلِّ")


def topic_instruction(topic: Optional[str]) -> str:
    if topic:
        return f'1. أنشئ محتوى حول الموضوع التالي: "{topic}"'
    return ("1. اختر موضوعاً مثيراً من أحد المجالات التالية (تَجَنَّبْ المَوَاضِيعَ الدِّينِيَّةَ):\n"
            f"   - {TOPIC_AREAS}")


def build_content_prompt(content_type: ContentType, level: Level, topic: Optional[str] = None) -> str:
    """Промпт генерации материала (текст + 5 вопросов) в формате JSON"""
    words = CONTENT_TYPES[content_type.value]["min_words"]
    return f"""
الرجاء القيام بالمهام التالية باللغة العربية مع الحركات (التشكيل الكامل):

نوع المحتوى: {CONTENT_TYPE_ARABIC[content_type]}
المستوى: {level.value}

{topic_instruction(topic)}
2. **مُهِمٌّ جِدًّا:** {content_instruction(content_type, level)} مع التشكيل الكامل
3. أنشئ **{QUESTIONS_PER_CONTENT} أسئلة اختيار من متعدد بالضبط** حول المحتوى مع التشكيل
4. {QUESTION_FOCUS[content_type]}
5. **مُهِمٌّ:** {LEVEL_DIFFICULTY[level]}

يَجِبُ أَنْ يَكُونَ جَمِيعُ النَّصِّ بِالتَّشْكِيلِ الكَامِلِ (الحركات على كل حرف).

**CRITICAL: You MUST respond with ONLY valid JSON in this exact format (no markdown, no extra text):**

{{
  "topic": "موضوع المحتوى",
  "podcastTitle": "عنوان المحتوى مع التشكيل",
  "podcastContent": "النص الكامل مع التشكيل ({words}+ كلمة)",
  "questions": [
    {{
      "question": "السؤال مع التشكيل؟",
      "options": ["الخيار A", "الخيار B", "الخيار C", "الخيار D"],
      "correctAnswer": "A",
      "explanation": "شرح الإجابة الصحيحة"
    }}
  ],
  "imageUrl": ""
}}

Return ONLY the JSON object above, nothing else.
"""


def build_questions_prompt(text: str, level: Level) -> str:
    """Промпт генерации вопросов по готовому тексту (с правдоподобными неверными вариантами)"""
    return f"""
أَنْشِئْ {QUESTIONS_PER_CONTENT} أَسْئِلَةِ اخْتِيَارٍ مِنْ مُتَعَدِّدٍ مِنَ النَّصِّ التَّالِي:

النَّصُّ:
{text}

المُسْتَوَى: {level.value}
{LEVEL_DIFFICULTY[level]}

**قَوَاعِدُ مُهِمَّةٌ لِلأَسْئِلَةِ:**

1. **الْخِيَارَاتُ المُضَلِّلَةُ:**
   - كُلُّ خِيَارٍ خَطَأٍ يَجِبُ أَنْ يَبْدُوَ صَحِيحًا وَمَنْطِقِيًّا
   - اسْتَخْدِمْ مَعْلُومَاتٍ قَرِيبَةً مِنَ النَّصِّ وَلَكِنْ لَيْسَتْ دَقِيقَةً

2. **تَنْوِيعُ مَوْضِعِ الإِجَابَةِ الصَّحِيحَةِ:**
   - لَا تَضَعِ الإِجَابَةَ الصَّحِيحَةَ فِي المَوْضِعِ نَفْسِهِ فِي سُؤَالَيْنِ مُتَتَالِيَيْنِ

3. **نَوْعُ الأَسْئِلَةِ:**
   - أَسْئِلَةٌ عَنِ الْمَعْلُومَاتِ الرَّئِيسِيَّةِ فِي النَّصِّ
   - أَسْئِلَةٌ عَنِ الْعَلاقَاتِ وَالأَسْبَابِ وَالنَّتَائِجِ

لِكُلِّ سُؤَالٍ: نَصُّ السُّؤَالِ، 4 خِيَارَاتٍ، حَرْفُ الإِجَابَةِ الصَّحِيحَةِ (A أَوْ B أَوْ C أَوْ D)، شَرْحٌ مُخْتَصَرٌ.

**CRITICAL: Respond with ONLY valid JSON:**

{{
  "questions": [
    {{
      "question": "...",
      "options": ["...", "...", "...", "..."],
      "correctAnswer": "C",
      "explanation": "..."
    }}
  ]
}}

ضَعِ الحَرَكَاتِ (التَّشْكِيلَ) عَلَى جَمِيعِ الكَلِمَاتِ.
"""
