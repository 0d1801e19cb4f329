from ftclient.core.input_source import ScriptedInputSource, StdinInputSource
from ftclient.core.resolver import CollisionResolver, SaveAction, SaveDecision


def make_resolver(tmp_path, answers, echoed):
    source = ScriptedInputSource(answers)
    return CollisionResolver(source, str(tmp_path), echoed.append), source


def test_no_collision_overwrites_without_prompting(tmp_path, echoed):
    resolver, source = make_resolver(tmp_path, ["3"], echoed)
    assert resolver.resolve("report.txt") == SaveDecision.overwrite("report.txt")
    assert source.prompts == []
    assert source.remaining == 1


def test_directory_prefix_is_stripped(tmp_path, echoed):
    resolver, _ = make_resolver(tmp_path, [], echoed)
    decision = resolver.resolve("some/remote/dir/report.txt")
    assert decision.action is SaveAction.OVERWRITE
    assert decision.name == "report.txt"


def test_rename_reprompts_until_name_has_a_word_character(tmp_path, echoed):
    (tmp_path / "report.txt").write_text("old\n")
    resolver, source = make_resolver(tmp_path, ["2", "", "report2.txt"], echoed)

    assert resolver.resolve("report.txt") == SaveDecision.rename("report2.txt")
    assert len(source.prompts) == 3
    assert any("already exists" in line for line in echoed)


def test_rename_rejects_punctuation_only_names(tmp_path, echoed):
    (tmp_path / "report.txt").write_text("old\n")
    resolver, source = make_resolver(tmp_path, ["2", "...", "  ", "new.txt"], echoed)
    assert resolver.resolve("report.txt") == SaveDecision.rename("new.txt")
    assert source.remaining == 0


def test_cancel_choice(tmp_path, echoed):
    (tmp_path / "report.txt").write_text("old\n")
    resolver, _ = make_resolver(tmp_path, ["3"], echoed)
    decision = resolver.resolve("report.txt")
    assert decision.is_cancel
    assert decision == SaveDecision.cancel()


def test_invalid_choices_are_reprompted(tmp_path, echoed):
    (tmp_path / "report.txt").write_text("old\n")
    resolver, source = make_resolver(tmp_path, ["abc", "0", "4", " 1 "], echoed)

    assert resolver.resolve("report.txt") == SaveDecision.overwrite("report.txt")
    assert source.prompts[0] == "Enter a number [1 - 3]: "
    assert source.prompts[1:] == ["Please select a valid option [1 - 3]: "] * 3


def test_stdin_source_uses_reader():
    asked = []

    def reader(message):
        asked.append(message)
        return "2"

    assert StdinInputSource(reader).prompt("pick: ") == "2"
    assert asked == ["pick: "]
