"""Inbound event routing.

``GameBot`` turns raw chat events (typed text, button presses) into
registration steps, game turns and resets. It is platform-neutral: a
concrete bot adapter calls ``handle_text`` and ``handle_callback`` from
its own update handlers and supplies a ``ChatTransport`` for replies.
"""

from __future__ import annotations

from dungeon_chat.bot.registration import CharacterSheet, RegistrationWizard
from dungeon_chat.core.config import Settings, get_settings
from dungeon_chat.core.constants import (
    CHOICE_CALLBACK_PREFIX,
    GENDER_CALLBACK_PREFIX,
    LANGUAGE_CALLBACK_PREFIX,
    RESET_CALLBACK_ID,
    START_COMMAND,
)
from dungeon_chat.core.exceptions import StorageError
from dungeon_chat.core.logging import bind_context, clear_context, get_logger
from dungeon_chat.dm.narrator import Narrator
from dungeon_chat.engine.locks import PlayerLocks
from dungeon_chat.engine.transport import (
    ChatTransport,
    clear_buttons_quietly,
    delete_quietly,
)
from dungeon_chat.engine.turn_engine import TurnEngine, TurnOutcome
from dungeon_chat.i18n import t
from dungeon_chat.models import Language, create_player
from dungeon_chat.storage.base import PlayerStore, SessionStore


logger = get_logger(__name__)


class GameBot:
    """Routes chat events to the wizard, the turn engine or a reset."""

    def __init__(
        self,
        store: PlayerStore,
        sessions: SessionStore,
        narrator: Narrator,
        transport: ChatTransport,
        *,
        settings: Settings | None = None,
        engine: TurnEngine | None = None,
        locks: PlayerLocks | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store
        self.transport = transport
        self.default_language = Language(self.settings.game.default_language)
        self.engine = engine or TurnEngine(store, narrator, transport, settings=self.settings.game)
        self.locks = locks or PlayerLocks()
        self.wizard = RegistrationWizard(
            sessions,
            transport,
            default_language=self.default_language,
        )

    # =========================================================================
    # Entry points
    # =========================================================================

    def handle_text(
        self,
        chat_id: int,
        user_id: int,
        text: str,
        *,
        message_id: int | None = None,
    ) -> TurnOutcome | None:
        """Handle a typed message.

        ``/start`` (re)starts registration. While the wizard is active the
        text feeds it; otherwise a registered player's text plays a turn.

        Returns:
            The turn outcome when a turn ran, None otherwise.
        """
        bind_context(chat_id=chat_id)
        try:
            if text.strip().split(maxsplit=1)[:1] == [START_COMMAND]:
                self.wizard.start(chat_id, user_id)
                return None

            if self.wizard.is_active(chat_id, user_id):
                sheet = self.wizard.handle_text(chat_id, user_id, text)
                if sheet is not None:
                    return self._complete_registration(chat_id, sheet)
                return None

            return self._play(chat_id, text=text, message_id=message_id)
        except StorageError as exc:
            logger.error("Store unavailable", error=str(exc))
            self._notify(chat_id, t("error.try_later", self.default_language))
            return None
        finally:
            clear_context()

    def handle_callback(
        self,
        chat_id: int,
        user_id: int,
        data: str,
        *,
        message_id: int | None = None,
        label: str | None = None,
    ) -> TurnOutcome | None:
        """Handle a button press.

        Args:
            chat_id: Chat the button lives in.
            user_id: Who pressed it.
            data: Button callback id.
            message_id: Message carrying the button.
            label: Visible text of the pressed button.
        """
        bind_context(chat_id=chat_id)
        try:
            if data.startswith((LANGUAGE_CALLBACK_PREFIX, GENDER_CALLBACK_PREFIX)):
                if message_id is not None:
                    clear_buttons_quietly(self.transport, chat_id, message_id)
                self.wizard.handle_choice(chat_id, user_id, data)
                return None

            if data == RESET_CALLBACK_ID:
                self.reset(chat_id, user_id, message_id=message_id)
                return None

            if data.startswith(CHOICE_CALLBACK_PREFIX):
                if not label:
                    logger.warning("Choice pressed without a label", data=data)
                    return None
                if message_id is not None:
                    clear_buttons_quietly(self.transport, chat_id, message_id)
                return self._play(chat_id, choice_label=label)

            logger.debug("Unknown callback ignored", data=data)
            return None
        except StorageError as exc:
            logger.error("Store unavailable", error=str(exc))
            self._notify(chat_id, t("error.try_later", self.default_language))
            return None
        finally:
            clear_context()

    def reset(self, chat_id: int, user_id: int, *, message_id: int | None = None) -> bool:
        """Erase the player's record and everything the bot left in the chat.

        Returns:
            True if a record existed.
        """
        with self.locks.hold(chat_id):
            profile = self.store.find_player(chat_id)
            self.wizard.cancel(chat_id, user_id)
            if profile is None:
                lang = self.default_language.value
                existed = False
            else:
                lang = profile.language.value
                stale = list(profile.pending_message_ids)
                if message_id is not None and message_id not in stale:
                    stale.append(message_id)
                delete_quietly(self.transport, chat_id, stale)
                existed = self.store.remove_player(chat_id)

        self._notify(chat_id, t("bot.reset_done", lang))
        logger.info("Player reset", existed=existed)
        return existed

    # =========================================================================
    # Helpers
    # =========================================================================

    def _play(
        self,
        chat_id: int,
        *,
        text: str | None = None,
        choice_label: str | None = None,
        message_id: int | None = None,
    ) -> TurnOutcome | None:
        with self.locks.hold(chat_id, blocking=False) as acquired:
            if not acquired:
                lang = self.default_language.value
                profile = self.store.find_player(chat_id)
                if profile is not None:
                    lang = profile.language.value
                logger.info("Input dropped while a turn is running")
                self._notify(chat_id, t("turn.busy", lang))
                return None

            profile = self.store.find_player(chat_id)
            if profile is None:
                self._notify(chat_id, t("bot.not_registered", self.default_language))
                return None

            if choice_label is not None:
                user_text = t("bot.choice_prefix", profile.language.value, label=choice_label)
            else:
                user_text = text or ""
            return self.engine.play_turn(profile, user_text, user_message_id=message_id)

    def _complete_registration(self, chat_id: int, sheet: CharacterSheet) -> TurnOutcome | None:
        with self.locks.hold(chat_id):
            profile = create_player(
                chat_id,
                sheet.name,
                sheet.age,
                gender=sheet.gender,
                background=sheet.background,
                language=sheet.language,
            )
            existing = self.store.find_player(chat_id)
            if existing is None:
                self.store.insert_player(profile)
            else:
                delete_quietly(self.transport, chat_id, existing.pending_message_ids)
                self.store.update_player(chat_id, profile)
                logger.info("Player re-registered")

            lang = sheet.language.value
            self._notify(chat_id, t("reg.done", lang, name=sheet.name, age=sheet.age))
            return self.engine.play_turn(profile, t("reg.opening_prompt", lang))

    def _notify(self, chat_id: int, text: str) -> None:
        try:
            self.transport.send_text(chat_id, text)
        except Exception as exc:
            logger.error("Could not deliver message", error=str(exc))


__all__ = ["GameBot"]
