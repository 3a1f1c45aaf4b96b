"""Player-facing text for every supported language.

Usage:
    from dungeon_chat.i18n import t
    t("error.try_later", "en")             # -> "Oops, the Game Master ..."
    t("status.level_up", "ru", level=3)    # -> "🆙 Новый уровень: 3!"

Missing keys fall back to English, then to ``[key]`` so a gap in a table
shows up in chat instead of raising mid-turn.
"""

from __future__ import annotations

DEFAULT_LANG = "ru"
FALLBACK_LANG = "en"
UI_LANGUAGES = ("ru", "en")


_STRINGS: dict[str, dict[str, str]] = {
    "ru": {
        # Turn engine
        "error.try_later": "Ой, Гейм-мастер призадумался... Попробуй еще раз чуть позже.",
        "turn.busy": "Мастер ещё дописывает предыдущую сцену. Подожди немного.",
        "dice.header": "🎲 Бросок судьбы",
        "status.empty": "…",
        "status.hp_gain": "❤️ +{amount} HP ({hp}/100)",
        "status.hp_loss": "💔 {amount} HP ({hp}/100)",
        "status.xp_gain": "✨ +{amount} XP",
        "status.xp_loss": "🌑 {amount} XP",
        "status.level_up": "🆙 Новый уровень: {level}!",
        "status.spell": "📜 Новая способность: {spell}",
        "status.item": "🎒 Получено: {item}",
        "button.reset": "🗑 Стереть весь прогресс",
        # Bot glue
        "bot.not_registered": "Похоже, ты еще не зарегистрирован. Напиши /start",
        "bot.choice_prefix": "Игрок выбрал: {label}",
        "bot.reset_done": "Весь прогресс стерт. Напиши /start, чтобы создать нового героя.",
        # Registration wizard
        "reg.choose_language": "Выбери язык / Choose your language",
        "reg.ask_name": "Приветствую, путник! Как величать твоего героя?",
        "reg.name_text": "Пожалуйста, введи имя текстом.",
        "reg.ask_age": "Приятно познакомиться, {name}. А сколько зим твоему герою?",
        "reg.age_invalid": "Возраст должен быть числом. Попробуй еще раз.",
        "reg.ask_gender": "Кто твой герой?",
        "reg.gender_buttons": "Выбери вариант кнопкой ниже.",
        "reg.ask_background": "Расскажи в паре фраз, откуда твой герой и чем он жил до приключений.",
        "reg.done": "Персонаж {name} ({age} лет) готов к приключениям! Начинаем историю...",
        "reg.opening_prompt": "Начни историю моего приключения в темном фэнтези мире.",
        "gender.male": "♂ Мужчина",
        "gender.female": "♀ Женщина",
        # Prompt builder
        "prompt.gender_male": "мужчина",
        "prompt.gender_female": "женщина",
        "prompt.none_yet": "пока нет",
        "prompt.notes_empty": "пока пусто",
    },
    "en": {
        # Turn engine
        "error.try_later": "Oops, the Game Master got lost in thought... Please try again a bit later.",
        "turn.busy": "The Game Master is still finishing the previous scene. Hold on a moment.",
        "dice.header": "🎲 Roll of fate",
        "status.empty": "…",
        "status.hp_gain": "❤️ +{amount} HP ({hp}/100)",
        "status.hp_loss": "💔 {amount} HP ({hp}/100)",
        "status.xp_gain": "✨ +{amount} XP",
        "status.xp_loss": "🌑 {amount} XP",
        "status.level_up": "🆙 Level up! You are now level {level}!",
        "status.spell": "📜 New ability: {spell}",
        "status.item": "🎒 Acquired: {item}",
        "button.reset": "🗑 Erase all progress",
        # Bot glue
        "bot.not_registered": "Looks like you are not registered yet. Send /start",
        "bot.choice_prefix": "Player chose: {label}",
        "bot.reset_done": "All progress erased. Send /start to create a new hero.",
        # Registration wizard
        "reg.choose_language": "Выбери язык / Choose your language",
        "reg.ask_name": "Greetings, traveller! What is your hero called?",
        "reg.name_text": "Please type the name as text.",
        "reg.ask_age": "Nice to meet you, {name}. How many winters has your hero seen?",
        "reg.age_invalid": "Age must be a number. Try again.",
        "reg.ask_gender": "Who is your hero?",
        "reg.gender_buttons": "Pick one of the buttons below.",
        "reg.ask_background": "In a sentence or two: where does your hero come from, and how did they live before the adventure?",
        "reg.done": "{name} ({age} years old) is ready for adventure! The story begins...",
        "reg.opening_prompt": "Begin the story of my adventure in a dark fantasy world.",
        "gender.male": "♂ Male",
        "gender.female": "♀ Female",
        # Prompt builder
        "prompt.gender_male": "male",
        "prompt.gender_female": "female",
        "prompt.none_yet": "none yet",
        "prompt.notes_empty": "empty for now",
    },
}


def t(key: str, lang: str = DEFAULT_LANG, **kwargs: object) -> str:
    """Look up a translated string. Falls back to English if the key is missing."""
    text = _STRINGS.get(lang, {}).get(key)
    if text is None:
        text = _STRINGS.get(FALLBACK_LANG, {}).get(key, f"[{key}]")
    if kwargs:
        try:
            text = text.format(**kwargs)
        except (KeyError, IndexError):
            pass
    return text


__all__ = [
    "DEFAULT_LANG",
    "FALLBACK_LANG",
    "UI_LANGUAGES",
    "t",
]
