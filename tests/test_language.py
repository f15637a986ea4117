import pytest

from salesdash.language import ARABIC, ENGLISH, FRANCO, detect


@pytest.mark.parametrize("text", ["أعلى فرع", "مرحبا", "kam el sales فرع", "a3la فرع"])
def test_arabic_script_wins(text):
    flags = detect(text)
    assert flags.has_arabic_script
    assert flags.language == ARABIC


@pytest.mark.parametrize("text", [
    "3amel kam order fel tagmo",
    "a3la branch",
    "me7tag eh",
    "meen a7san",
    "eh el sales",
])
def test_franco(text):
    flags = detect(text)
    assert not flags.has_arabic_script
    assert flags.is_franco
    assert flags.language == FRANCO


@pytest.mark.parametrize("text", ["highest", "xyz123", "sales for dark store yom 5", "hello", "12345", "top 3 branches"])
def test_english(text):
    assert detect(text).language == ENGLISH


def test_empty_string():
    flags = detect("")
    assert not flags.has_arabic_script and not flags.is_franco
