"""Character registration wizard.

Walks a new (or re-registering) player through language, name, age,
gender and background. Progress lives in the session store, keyed by
(user id, chat id), so the wizard survives restarts between messages.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from dungeon_chat.core.constants import (
    GENDER_CALLBACK_PREFIX,
    LANGUAGE_CALLBACK_PREFIX,
    MAX_AGE,
)
from dungeon_chat.core.logging import get_logger
from dungeon_chat.engine.transport import Button, ChatTransport
from dungeon_chat.i18n import t
from dungeon_chat.models import Gender, Language
from dungeon_chat.storage.base import SessionStore


logger = get_logger(__name__)

MAX_NAME_LENGTH = 64
MAX_BACKGROUND_LENGTH = 2000


class RegistrationStep(StrEnum):
    """Wizard step awaiting input."""

    LANGUAGE = "language"
    NAME = "name"
    AGE = "age"
    GENDER = "gender"
    BACKGROUND = "background"


class RegistrationState(BaseModel):
    """Wizard progress as stored in the session blob."""

    step: RegistrationStep = RegistrationStep.LANGUAGE
    language: Language = Language.RU
    name: str | None = None
    age: int | None = Field(default=None, ge=1, le=MAX_AGE)
    gender: Gender | None = None


class CharacterSheet(BaseModel):
    """Everything the wizard collected, ready for ``create_player``."""

    name: str
    age: int
    gender: Gender
    background: str
    language: Language


class RegistrationWizard:
    """Step-by-step character creation over a chat transport."""

    def __init__(
        self,
        sessions: SessionStore,
        transport: ChatTransport,
        *,
        default_language: Language = Language.RU,
    ) -> None:
        self.sessions = sessions
        self.transport = transport
        self.default_language = default_language

    # =========================================================================
    # Session blob
    # =========================================================================

    def _load(self, chat_id: int, user_id: int) -> RegistrationState | None:
        blob = self.sessions.get_session(user_id, chat_id)
        if not blob or "registration" not in blob:
            return None
        return RegistrationState.model_validate(blob["registration"])

    def _save(self, chat_id: int, user_id: int, state: RegistrationState) -> None:
        self.sessions.save_session(user_id, chat_id, {"registration": state.model_dump(mode="json")})

    def is_active(self, chat_id: int, user_id: int) -> bool:
        """True while the user is in the middle of registration."""
        return self._load(chat_id, user_id) is not None

    def cancel(self, chat_id: int, user_id: int) -> None:
        """Drop any wizard progress."""
        self.sessions.delete_session(user_id, chat_id)

    # =========================================================================
    # Prompts
    # =========================================================================

    def _ask_language(self, chat_id: int) -> None:
        buttons = [
            Button(id=f"{LANGUAGE_CALLBACK_PREFIX}{language.value}", label=language.display_name)
            for language in Language
        ]
        self.transport.send_text(chat_id, t("reg.choose_language", self.default_language), buttons)

    def _ask_gender(self, chat_id: int, lang: str, key: str = "reg.ask_gender") -> None:
        buttons = [
            Button(id=f"{GENDER_CALLBACK_PREFIX}{gender.value}", label=t(f"gender.{gender.value}", lang))
            for gender in Gender
        ]
        self.transport.send_text(chat_id, t(key, lang), buttons)

    # =========================================================================
    # Steps
    # =========================================================================

    def start(self, chat_id: int, user_id: int) -> None:
        """Begin (or restart) registration."""
        self._save(chat_id, user_id, RegistrationState(language=self.default_language))
        self._ask_language(chat_id)
        logger.info("Registration started", chat_id=chat_id)

    def handle_text(self, chat_id: int, user_id: int, text: str) -> CharacterSheet | None:
        """Feed typed input to the current step.

        Returns:
            The finished sheet after the last step, None otherwise.
        """
        state = self._load(chat_id, user_id)
        if state is None:
            return None

        lang = state.language.value
        text = (text or "").strip()

        if state.step == RegistrationStep.LANGUAGE:
            self._ask_language(chat_id)
            return None

        if state.step == RegistrationStep.NAME:
            if not text or len(text) > MAX_NAME_LENGTH:
                self.transport.send_text(chat_id, t("reg.name_text", lang))
                return None
            state.name = text
            state.step = RegistrationStep.AGE
            self._save(chat_id, user_id, state)
            self.transport.send_text(chat_id, t("reg.ask_age", lang, name=text))
            return None

        if state.step == RegistrationStep.AGE:
            try:
                age = int(text)
            except ValueError:
                age = 0
            if not 1 <= age <= MAX_AGE:
                self.transport.send_text(chat_id, t("reg.age_invalid", lang))
                return None
            state.age = age
            state.step = RegistrationStep.GENDER
            self._save(chat_id, user_id, state)
            self._ask_gender(chat_id, lang)
            return None

        if state.step == RegistrationStep.GENDER:
            self._ask_gender(chat_id, lang, key="reg.gender_buttons")
            return None

        # BACKGROUND is the last step
        sheet = CharacterSheet(
            name=state.name or "",
            age=state.age or 1,
            gender=state.gender or Gender.MALE,
            background=text[:MAX_BACKGROUND_LENGTH],
            language=state.language,
        )
        self.cancel(chat_id, user_id)
        logger.info("Registration finished", chat_id=chat_id, name=sheet.name)
        return sheet

    def handle_choice(self, chat_id: int, user_id: int, data: str) -> None:
        """Feed a wizard button press (language or gender) to the current step."""
        state = self._load(chat_id, user_id)
        if state is None:
            return

        if state.step == RegistrationStep.LANGUAGE and data.startswith(LANGUAGE_CALLBACK_PREFIX):
            code = data.removeprefix(LANGUAGE_CALLBACK_PREFIX)
            if code not in {language.value for language in Language}:
                self._ask_language(chat_id)
                return
            state.language = Language(code)
            state.step = RegistrationStep.NAME
            self._save(chat_id, user_id, state)
            self.transport.send_text(chat_id, t("reg.ask_name", code))
            return

        if state.step == RegistrationStep.GENDER and data.startswith(GENDER_CALLBACK_PREFIX):
            code = data.removeprefix(GENDER_CALLBACK_PREFIX)
            if code not in {gender.value for gender in Gender}:
                self._ask_gender(chat_id, state.language.value)
                return
            state.gender = Gender(code)
            state.step = RegistrationStep.BACKGROUND
            self._save(chat_id, user_id, state)
            self.transport.send_text(chat_id, t("reg.ask_background", state.language.value))
            return

        logger.debug("Ignoring stale wizard button", chat_id=chat_id, data=data, step=state.step)


__all__ = [
    "RegistrationStep",
    "RegistrationState",
    "CharacterSheet",
    "RegistrationWizard",
]
