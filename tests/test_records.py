"""Tests for the record adapter: configuration, full-name picking, birthdate/age and name tokens."""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add the parent directory to path to import kana_names
sys.path.insert(0, str(Path(__file__).parent.parent))

from kana_names.records import (
    DEFAULT_NAME_KEYS,
    KanaNamesConfig,
    age_in_years,
    build_name_tokens,
    display_format_of,
    name_display_for,
    parse_birthdate,
    pick_full_name,
)
from kana_names.romanizer import LongVowelPreferences


@pytest.fixture(scope="session")
def config():
    return KanaNamesConfig.create_default()


class TestConfig:
    def test_default(self, config):
        assert config.name_keys == DEFAULT_NAME_KEYS
        assert config.long_vowel == LongVowelPreferences()
        assert config.unset_placeholder == "未設定"

    def test_from_env(self):
        env = {"ROMAJI_LONG_O": "macron", "ROMAJI_LONG_U": "ou", "NAME_KEYS": " nickname, ,display_name "}
        config = KanaNamesConfig.from_env(env)
        assert config.long_vowel == LongVowelPreferences(o="macron", u="ou")
        assert config.name_keys == ("nickname", "display_name")

    def test_from_empty_env_equals_default(self, config):
        assert KanaNamesConfig.from_env({}) == config

    def test_with_methods_do_not_mutate(self, config):
        updated = config.with_name_keys(("alias",))
        assert updated.name_keys == ("alias",)
        assert config.name_keys == DEFAULT_NAME_KEYS


PICK_CASES = [
    ({"display_name": " 山田 太郎 "}, None, "山田 太郎"),
    ({"name": "", "full_name": "Hanako Sato"}, None, "Hanako Sato"),
    ({}, "Hanako", "Hanako"),
    ({}, "123456", ""),
    ({"id_code": "A1"}, "A1", ""),
    ({"last_name_kanji": "山田", "first_name_kanji": "太郎"}, "123456", "山田 太郎"),
    ({"last_nameKanji": "山田"}, None, "山田"),
    ({"last_name_hira": "やまだ", "first_name_hira": "たろう"}, None, "やまだ たろう"),
    ({"last_name_kana": "ヤマダ", "first_name_kana": "タロウ"}, None, "ヤマダ タロウ"),
    ({"last_name_en": "Yamada", "first_name_en": "Taro"}, None, "Yamada Taro"),
    ({"first_name": "Taro"}, None, "Taro"),
    ({"first_name": 7}, None, "7"),
    ({}, None, ""),
]


def test_pick_full_name(config):
    failed = []
    for record, title, expected in PICK_CASES:
        result = pick_full_name(record, config, title)
        if result != expected:
            failed.append(f"{record!r} / {title!r}: expected '{expected}', got '{result}'")

    assert not failed, "\n".join(failed)


def test_pick_full_name_respects_configured_keys():
    config = KanaNamesConfig.from_env({"NAME_KEYS": "nickname"})
    assert pick_full_name({"nickname": "Taro-chan", "display_name": "山田 太郎"}, config) == "Taro-chan"


class TestBirthdate:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2000-05-10", date(2000, 5, 10)),
            ("2000/05/10", date(2000, 5, 10)),
            ("2000.05.10", date(2000, 5, 10)),
            ("20000510", date(2000, 5, 10)),
            ("2001-02-30", None),
            ("May 10, 2000", None),
        ],
    )
    def test_single_field(self, raw, expected):
        assert parse_birthdate({"birthdate": raw}) == expected

    def test_alternate_single_field_keys(self):
        assert parse_birthdate({"dob": "1999-12-31"}) == date(1999, 12, 31)

    def test_parts(self):
        record = {"birth_year": "1990", "birth_month": "5", "birth_day": "7"}
        assert parse_birthdate(record) == date(1990, 5, 7)
        assert parse_birthdate({"birthYear": 1990, "birthMonth": 2, "birthDay": 30}) is None
        assert parse_birthdate({"birth_year": "1990"}) is None

    def test_age_in_years(self):
        born = date(2000, 5, 10)
        assert age_in_years(born, date(2024, 5, 9)) == 23
        assert age_in_years(born, date(2024, 5, 10)) == 24
        assert age_in_years(born, date(1999, 1, 1)) is None
        assert age_in_years(None, date(2024, 1, 1)) is None


def test_display_format_of():
    assert display_format_of({}) == "full"
    assert display_format_of({"name_display_format": "Masked"}) == "masked"
    assert display_format_of({"display_name_format": "romaji"}) == "romaji"


def test_build_name_tokens(config):
    record = {
        "last_name_kanji": "山田",
        "first_name_kanji": "太郎",
        "last_name_hira": "やまだ",
        "first_name_hira": "たろう",
        "birthdate": "2000-05-10",
        "name_display_format": "romaji",
    }
    assert build_name_tokens(record, config, today=date(2024, 5, 10)) == {
        "name": "山田 太郎",
        "name_display": "Yamada Taro",
        "name_romaji": "Yamada Taro",
        "name_initials_en": "T.Y.",
        "name_surname_initial_en": "山田 T.",
        "name_initials_romaji": "Y.T.",
        "name_surname_initial_romaji": "Yamada T.",
        "name_masked": "山＊ 太＊",
        "age": "24 歳",
        "age_years": "24",
    }


def test_build_name_tokens_for_empty_record(config):
    tokens = build_name_tokens({}, config, today=date(2024, 1, 1))
    assert tokens["name"] == "未設定"
    assert tokens["name_display"] == "未設定"
    assert tokens["name_masked"] == "未設定"
    assert tokens["name_romaji"] == ""
    assert tokens["age"] == "未設定"
    assert tokens["age_years"] == ""


def test_record_policy_overrides_process_policy(config):
    process = config.with_long_vowel(LongVowelPreferences(o="macron"))
    record = {"last_name_kana": "さとう", "first_name_kana": "こうじ"}

    assert build_name_tokens(record, process)["name_romaji"] == "Satō Kōji"
    assert build_name_tokens({**record, "romaji_long_o": "oh"}, process)["name_romaji"] == "Satoh Kohji"
    assert build_name_tokens({**record, "romaji_long_o": "nonsense"}, process)["name_romaji"] == "Satō Kōji"


def test_name_display_for_masked(config):
    full_name, display = name_display_for({"display_name": "Taro Yamada", "name_display_format": "masked"}, config)
    assert full_name == "Taro Yamada"
    assert display.display == "T＊＊ Y＊＊"
