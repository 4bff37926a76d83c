from prompts import OperatorPrompt


def test_confirm_accepts_yes_and_no_in_any_case(make_prompter) -> None:
    prompter = make_prompter(["YES", "No", "y", "N"])

    assert [prompter.confirm("OK?") for _ in range(4)] == [True, False, True, False]


def test_confirm_asks_again_after_other_answers(make_prompter) -> None:
    prompter = make_prompter(["sure", "", "yes"])

    assert prompter.confirm("OK?") is True


def test_choose_only_returns_listed_choices(make_prompter) -> None:
    prompter = make_prompter(["video", "Software", "software"])

    assert prompter.choose("TYPE", ["software", "physical"]) == "software"


def test_identifier_is_validated_and_lowercased(make_prompter) -> None:
    prompter = make_prompter(["abc", "0123456789ABCDEF01234567"])

    assert prompter.ask_identifier("ITEM ID") == "0123456789abcdef01234567"


def test_collect_list_keeps_asking_while_confirmed(make_prompter) -> None:
    prompter = make_prompter(["first", "y", "second", "n"])

    assert prompter.collect_list("TAG", "ENTER ANOTHER TAG?") == ["first", "second"]


def test_questions_with_brackets_are_printed_literally(make_prompter) -> None:
    prompter: OperatorPrompt = make_prompter(["answer"])

    prompter.ask("NAME [optional]")

    assert "NAME [optional]" in prompter.console.file.getvalue()
