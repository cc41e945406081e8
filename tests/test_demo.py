import facet_demo
from facet.facet_core import Number


def test_classes_scenario(capsys):
    assert facet_demo.main(["classes"]) == 0
    out = capsys.readouterr().out
    assert "== classes" in out
    assert "Sam W" in out


def test_comparable_scenario(capsys):
    assert facet_demo.main(["comparable"]) == 0
    assert "Sam (20) < Sally (22) = true" in capsys.readouterr().out


def test_hijack_scenario_restores_number(capsys):
    assert not Number.has_own(":")
    assert facet_demo.main(["hijack"]) == 0
    assert "3px" in capsys.readouterr().out
    assert not Number.has_own(":")


def test_all_scenarios_by_default(capsys):
    assert facet_demo.main([]) == 0
    out = capsys.readouterr().out
    for name in facet_demo.SCENARIOS:
        assert f"== {name}" in out


def test_unknown_scenario(capsys):
    assert facet_demo.main(["nope"]) == 1
    assert "unknown scenario: nope" in capsys.readouterr().err
