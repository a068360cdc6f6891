import pytest

from scripts.group_values import group_pairs, main, parse_arguments, split_pair


def test_split_pair():
    assert split_pair("colour=red") == ("colour", "red")
    assert split_pair("expr=a=b") == ("expr", "a=b")
    assert split_pair("empty=") == ("empty", "")
    with pytest.raises(ValueError, match="Expected key=value"):
        split_pair("novalue")
    with pytest.raises(ValueError):
        split_pair("=red")


def test_bad_pair_is_a_usage_error():
    with pytest.raises(SystemExit) as exc:
        parse_arguments(["colour=red", "oops"])
    assert exc.value.code == 2


def test_group_pairs_keeps_everything():
    grouped = group_pairs([("colour", "red"), ("size", "L"), ("colour", "red")])

    assert grouped == {"colour": ["red", "red"], "size": ["L"]}


def test_group_pairs_unique():
    grouped = group_pairs([("colour", "red"), ("colour", "Red"), ("colour", "red")], unique=True)

    assert grouped["colour"] == ["red", "Red"]


def test_group_pairs_ignore_case():
    grouped = group_pairs([("colour", "red"), ("colour", "Red"), ("colour", "blue")], ignore_case=True)

    assert grouped["colour"] == ["red", "blue"]


def test_main_writes_csv(capsys):
    assert main(["colour=red", "size=L", "colour=blue", "colour=red", "-u"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["Key,Value(s)", "colour,red; blue", "size,L"]
