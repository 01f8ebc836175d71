"""
Preview derivation and prefixed id generation.
"""
import pytest

from utils.id_generator import (
    ALPHABET,
    RANDOM_LENGTH,
    generate_character_id,
    generate_location_id,
    generate_moment_id,
)
from utils.preview import PREVIEW_LENGTH, derive_preview


@pytest.mark.parametrize("content", [
    "",
    "short",
    "x" * 299,
    "x" * 300,
    "y" * 301,
    "é" * 1000,
    "line one\nline two " * 40,
])
def test_preview_is_bounded_prefix(content):
    preview = derive_preview(content)

    assert len(preview) == min(PREVIEW_LENGTH, len(content))
    assert content.startswith(preview)


def test_preview_of_missing_content():
    assert derive_preview(None) == ""


def test_generated_ids_are_prefixed_base36():
    for generate, prefix in [
        (generate_moment_id, "mo_"),
        (generate_character_id, "ch_"),
        (generate_location_id, "lo_"),
    ]:
        new_id = generate()
        assert new_id.startswith(prefix)
        assert len(new_id) == len(prefix) + RANDOM_LENGTH
        assert all(ch in ALPHABET for ch in new_id[len(prefix):])


def test_generated_ids_do_not_collide():
    ids = {generate_moment_id() for _ in range(2000)}
    assert len(ids) == 2000
