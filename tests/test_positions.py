"""
Byte to character position mapping tests.
"""

import pytest

from wjp._positions import BytePositionMapper


def test_ascii_positions_are_identical() -> None:
    """
    Validates the ASCII fast path.
    """
    mapper = BytePositionMapper('{"a": 1}')
    assert mapper.byte_to_char(5) == 5
    assert mapper.byte_to_char(100) == 8


@pytest.mark.parametrize("interval", [1, 2, 3, 256])
def test_multibyte_positions(interval: int) -> None:
    """
    Validates mapping across one, two, three and four byte characters at
    every checkpoint spacing.
    """
    text = "aé€😀b" * 5
    mapper = BytePositionMapper(text, checkpoint_interval=interval)

    byte_pos = 0
    for char_pos, char in enumerate(text):
        assert mapper.byte_to_char(byte_pos) == char_pos
        byte_pos += len(char.encode("utf-8"))

    assert mapper.byte_to_char(byte_pos) == len(text)


def test_offset_inside_character_rounds_up() -> None:
    """
    Validates offsets that fall inside a multi-byte character.
    """
    mapper = BytePositionMapper("€x")
    assert mapper.byte_to_char(1) == 1
    assert mapper.byte_to_char(3) == 1


def test_invalid_interval() -> None:
    """
    Validates the checkpoint interval must be positive.
    """
    with pytest.raises(ValueError):
        BytePositionMapper("x", checkpoint_interval=0)
