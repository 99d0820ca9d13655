from relnotes.core.parser import parse, parse_all


def test_parse_header_with_scope():
    c = parse("feat(web): add dark mode")
    assert c.type == "feat"
    assert c.scope == "web"
    assert c.subject == "add dark mode"
    assert c.body is None
    assert c.footer is None


def test_parse_header_without_scope():
    c = parse("fix: handle empty cart\n\nThe cart could be None.")
    assert c.type == "fix"
    assert c.scope is None
    assert c.subject == "handle empty cart"
    assert c.body == "The cart could be None."


def test_parse_non_conventional_header():
    c = parse("Merge branch 'main' into feature")
    assert c.type is None
    assert c.scope is None
    assert c.subject is None
    assert c.header == "Merge branch 'main' into feature"


def test_parse_empty_message():
    c = parse("")
    assert c.header is None
    assert c.type is None


def test_breaking_change_note_starts_footer():
    message = "\n\nBody line\n\nBREAKING CHANGE: v1 endpoints removed\nuse v2"
    c = parse("feat(api): drop v1" + message)
    assert c.body == "Body line"
    assert c.footer.startswith("BREAKING CHANGE: v1 endpoints removed")
    assert len(c.notes) == 1
    assert c.notes[0].title == "BREAKING CHANGE"
    assert c.notes[0].text == "v1 endpoints removed\nuse v2"
    # "!" is not part of the default header grammar
    assert parse("feat(api)!: drop v1" + message).type is None


def test_internal_commit_note_is_case_insensitive():
    c = parse("feat(web): tweak\n\nInternal-commit: true")
    assert c.footer == "Internal-commit: true"
    assert c.notes[0].title == "Internal-commit"
    assert c.notes[0].text == "true"


def test_reference_line_starts_footer():
    c = parse("fix(web): crash on load\n\nSome detail\nCloses #12\ntrailing")
    assert c.body == "Some detail"
    assert c.footer == "Closes #12\ntrailing"


def test_parse_all_keeps_order():
    parsed = parse_all(["feat: a", "fix: b", "chore: c"])
    assert [p.type for p in parsed] == ["feat", "fix", "chore"]
