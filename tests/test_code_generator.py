import re

import pytest

from shortener.services.code_generator import BASE62_CHARS, ShortCodeGenerator


def test_generated_codes_use_base62_and_fixed_length():
    generator = ShortCodeGenerator(length=7)
    for _ in range(200):
        code = generator.generate()
        assert len(code) == 7
        assert all(ch in BASE62_CHARS for ch in code)
        assert re.fullmatch(r"[A-Za-z0-9_-]+", code)


def test_generated_codes_are_not_repeating():
    generator = ShortCodeGenerator(length=8)
    codes = {generator.generate() for _ in range(500)}
    assert len(codes) == 500


def test_code_space():
    assert ShortCodeGenerator(length=6).code_space == 62 ** 6


@pytest.mark.parametrize("kwargs", [{"length": 0}, {"alphabet": ""}, {"alphabet": "ab/"}])
def test_rejects_bad_configuration(kwargs):
    with pytest.raises(ValueError):
        ShortCodeGenerator(**kwargs)
