import sys

from sockbook.byteorder import byteorder, main


def test_matches_interpreter_byteorder():
    expected = {"little": "little endian", "big": "big endian"}[sys.byteorder]
    assert byteorder() == expected


def test_main_prints_byteorder(capsys):
    assert main([]) == 0
    assert capsys.readouterr().out == byteorder() + "\n"