"""Tests for the character registration wizard."""

from __future__ import annotations

import pytest

from dungeon_chat.bot.registration import RegistrationStep, RegistrationWizard
from dungeon_chat.i18n import t
from dungeon_chat.models import Gender, Language
from dungeon_chat.storage.database import Database


CHAT_ID = 77
USER_ID = 501


@pytest.fixture
def wizard(database: Database, transport) -> RegistrationWizard:
    return RegistrationWizard(database, transport, default_language=Language.RU)


def _step(database: Database) -> str:
    return database.get_session(USER_ID, CHAT_ID)["registration"]["step"]


class TestWizardFlow:
    """Tests for the happy path."""

    def test_full_flow(self, wizard: RegistrationWizard, database: Database, transport) -> None:
        """Test the wizard walks every step and returns a character sheet."""
        wizard.start(CHAT_ID, USER_ID)
        assert [button.id for button in transport.sent[-1].buttons] == ["lang:ru", "lang:en"]
        assert _step(database) == RegistrationStep.LANGUAGE

        wizard.handle_choice(CHAT_ID, USER_ID, "lang:en")
        assert transport.texts[-1] == t("reg.ask_name", "en")

        assert wizard.handle_text(CHAT_ID, USER_ID, "  Mira ") is None
        assert transport.texts[-1] == t("reg.ask_age", "en", name="Mira")

        assert wizard.handle_text(CHAT_ID, USER_ID, "27") is None
        assert transport.texts[-1] == t("reg.ask_gender", "en")
        assert [button.id for button in transport.sent[-1].buttons] == ["gender:male", "gender:female"]

        wizard.handle_choice(CHAT_ID, USER_ID, "gender:female")
        assert transport.texts[-1] == t("reg.ask_background", "en")

        sheet = wizard.handle_text(CHAT_ID, USER_ID, "Raised by wolves.")

        assert sheet is not None
        assert sheet.name == "Mira"
        assert sheet.age == 27
        assert sheet.gender == Gender.FEMALE
        assert sheet.background == "Raised by wolves."
        assert sheet.language == Language.EN
        assert not wizard.is_active(CHAT_ID, USER_ID)

    def test_restart_resets_progress(self, wizard: RegistrationWizard, database: Database) -> None:
        """Test starting again discards earlier answers."""
        wizard.start(CHAT_ID, USER_ID)
        wizard.handle_choice(CHAT_ID, USER_ID, "lang:en")

        wizard.start(CHAT_ID, USER_ID)

        assert _step(database) == RegistrationStep.LANGUAGE


class TestWizardValidation:
    """Tests for rejected input."""

    @pytest.fixture
    def at_name(self, wizard: RegistrationWizard) -> RegistrationWizard:
        wizard.start(CHAT_ID, USER_ID)
        wizard.handle_choice(CHAT_ID, USER_ID, "lang:en")
        return wizard

    def test_empty_name(self, at_name: RegistrationWizard, database: Database, transport) -> None:
        """Test an empty name is asked for again."""
        at_name.handle_text(CHAT_ID, USER_ID, "   ")

        assert transport.texts[-1] == t("reg.name_text", "en")
        assert _step(database) == RegistrationStep.NAME

    def test_name_too_long(self, at_name: RegistrationWizard, transport) -> None:
        """Test an overlong name is rejected."""
        at_name.handle_text(CHAT_ID, USER_ID, "x" * 65)

        assert transport.texts[-1] == t("reg.name_text", "en")

    @pytest.mark.parametrize("age", ["old", "0", "-4", "1001", "12.5"])
    def test_bad_age(self, at_name: RegistrationWizard, database: Database, transport, age: str) -> None:
        """Test a non-numeric or out-of-range age is rejected."""
        at_name.handle_text(CHAT_ID, USER_ID, "Mira")

        at_name.handle_text(CHAT_ID, USER_ID, age)

        assert transport.texts[-1] == t("reg.age_invalid", "en")
        assert _step(database) == RegistrationStep.AGE

    def test_text_during_gender_step(self, at_name: RegistrationWizard, database: Database, transport) -> None:
        """Test typed text at the gender step points to the buttons."""
        at_name.handle_text(CHAT_ID, USER_ID, "Mira")
        at_name.handle_text(CHAT_ID, USER_ID, "27")

        at_name.handle_text(CHAT_ID, USER_ID, "female")

        assert transport.texts[-1] == t("reg.gender_buttons", "en")
        assert _step(database) == RegistrationStep.GENDER

    def test_text_during_language_step(self, wizard: RegistrationWizard, transport) -> None:
        """Test typed text at the language step repeats the question."""
        wizard.start(CHAT_ID, USER_ID)

        wizard.handle_text(CHAT_ID, USER_ID, "english please")

        assert len(transport.sent) == 2
        assert transport.texts[-1] == t("reg.choose_language", "ru")

    def test_stale_button_ignored(self, wizard: RegistrationWizard, database: Database, transport) -> None:
        """Test a button from an earlier step is ignored."""
        wizard.start(CHAT_ID, USER_ID)

        wizard.handle_choice(CHAT_ID, USER_ID, "gender:male")

        assert len(transport.sent) == 1
        assert _step(database) == RegistrationStep.LANGUAGE

    def test_unknown_language_code(self, wizard: RegistrationWizard, database: Database) -> None:
        """Test an unknown language code repeats the question."""
        wizard.start(CHAT_ID, USER_ID)

        wizard.handle_choice(CHAT_ID, USER_ID, "lang:xx")

        assert _step(database) == RegistrationStep.LANGUAGE

    def test_inactive_wizard(self, wizard: RegistrationWizard, transport) -> None:
        """Test input is not consumed when no registration is running."""
        assert wizard.handle_text(CHAT_ID, USER_ID, "hello") is None
        wizard.handle_choice(CHAT_ID, USER_ID, "lang:en")

        assert transport.sent == []
