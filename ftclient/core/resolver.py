import os
import re
import enum
import logging
from typing import Callable, Optional

from .input_source import InputSource

logger = logging.getLogger(__name__)

_HAS_WORD_CHAR = re.compile(r"\w")

COLLISION_MENU = (
    "What would you like to do?\n"
    "1) Overwrite the existing file.\n"
    "2) Change the name of the received file.\n"
    "3) Cancel saving the received file.\n"
)


class SaveAction(enum.Enum):
    OVERWRITE = "overwrite"
    RENAME = "rename"
    CANCEL = "cancel"


class SaveDecision:
    def __init__(self, action: SaveAction, name: Optional[str] = None):
        self.action = action
        self.name = name

    @classmethod
    def overwrite(cls, name: str) -> "SaveDecision":
        return cls(SaveAction.OVERWRITE, name)

    @classmethod
    def rename(cls, name: str) -> "SaveDecision":
        return cls(SaveAction.RENAME, name)

    @classmethod
    def cancel(cls) -> "SaveDecision":
        return cls(SaveAction.CANCEL)

    @property
    def is_cancel(self) -> bool:
        return self.action is SaveAction.CANCEL

    def __eq__(self, other):
        if not isinstance(other, SaveDecision):
            return NotImplemented
        return self.action is other.action and self.name == other.name

    def __repr__(self):
        return f"SaveDecision({self.action.value}, {self.name!r})"


class CollisionResolver:
    """
    Decides where a received file is saved. Only prompts when a file with the
    same name already exists in `directory`.
    """

    def __init__(self, input_source: InputSource, directory: str = ".",
                 echo: Callable[[str], None] = print):
        self.input_source = input_source
        self.directory = directory
        self.echo = echo

    def resolve(self, requested_filename: str) -> SaveDecision:
        name = os.path.basename(requested_filename.replace("\\", "/"))
        if not os.path.exists(os.path.join(self.directory, name)):
            return SaveDecision.overwrite(name)

        logger.info(f"Local file {name!r} already exists, asking how to proceed")
        self.echo(f'The file "{name}" already exists in the directory.\n')
        self.echo(COLLISION_MENU)

        choice = self._read_choice()
        if choice == 1:
            return SaveDecision.overwrite(name)
        if choice == 3:
            return SaveDecision.cancel()
        return SaveDecision.rename(self._read_new_name())

    def _read_choice(self) -> int:
        message = "Enter a number [1 - 3]: "
        while True:
            raw = self.input_source.prompt(message)
            try:
                choice = int(raw.strip())
            except ValueError:
                choice = -1
            if 1 <= choice <= 3:
                return choice
            message = "Please select a valid option [1 - 3]: "

    def _read_new_name(self) -> str:
        while True:
            raw = self.input_source.prompt("Please enter a valid file name: ")
            if _HAS_WORD_CHAR.search(raw):
                return raw
