import pytest

from translator import Translator
from storage_paths import StoragePaths
from main import AppContext


class FakePresenter:
    """Scripted presenter: replays menu choices and confirmation answers."""

    def __init__(self, choices, confirms=()):
        self.choices = list(choices)
        self.confirms = list(confirms)
        self.messages = []
        self.errors = []
        self.confirm_prompts = []

    def show_message(self, title, text, kind="info"):
        self.messages.append((title, text, kind))

    def show_error(self, text):
        self.errors.append(text)

    def confirm(self, text):
        self.confirm_prompts.append(text)
        return self.confirms.pop(0)

    def select_option(self, title, options):
        choice = self.choices.pop(0)
        if isinstance(choice, BaseException) or (isinstance(choice, type) and issubclass(choice, BaseException)):
            raise choice
        return choice


@pytest.fixture
def translator():
    t = Translator(None)
    t.set_language('en')
    return t


@pytest.fixture
def storage_dir(tmp_path):
    return tmp_path / "Cursor" / "User" / "globalStorage"


@pytest.fixture
def ctx(storage_dir, translator):
    paths = StoragePaths(
        config_path=str(storage_dir / "storage.json"),
        backup_dir=str(storage_dir / "backups"),
    )
    return AppContext(paths=paths, translator=translator, app_name="Cursor", config_file=None)


@pytest.fixture
def make_presenter():
    return FakePresenter
