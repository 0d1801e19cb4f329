from typing import Callable, Iterable, List, Optional


class InputSource:
    """Produces one line of user input per call."""

    def prompt(self, message: str) -> str:
        raise NotImplementedError


class StdinInputSource(InputSource):
    def __init__(self, reader: Callable[[str], str] = input):
        self.reader = reader

    def prompt(self, message: str) -> str:
        return self.reader(message)


class ScriptedInputSource(InputSource):
    """Replays a fixed list of answers; raises EOFError once they run out."""

    def __init__(self, answers: Iterable[str]):
        self.answers: List[str] = list(answers)
        self.prompts: List[str] = []

    def prompt(self, message: str) -> str:
        self.prompts.append(message)
        if not self.answers:
            raise EOFError(f"No scripted answer left for prompt: {message!r}")
        return self.answers.pop(0)

    @property
    def remaining(self) -> int:
        return len(self.answers)
