"""Answer helpers and FormState answer capture."""

import pytest

from applyform.answers import FileRef, digits_of, format_phone, is_empty, split_answers

from helpers.forms import form_state, q


@pytest.mark.parametrize("raw, expected", [
    ("", ""),
    ("555", "555"),
    ("5551", "(555) 1"),
    ("555123", "(555) 123"),
    ("5551234", "(555) 123-4"),
    ("(555) 123-4567", "(555) 123-4567"),
    ("1-555-123-4567 ext 9", "(155) 512-3456"),
])
def test_format_phone_progressively(raw, expected):
    assert format_phone(raw) == expected


def test_digits_of():
    assert digits_of("(555) 123-4567") == "5551234567"


def test_is_empty():
    assert is_empty(None)
    assert is_empty("  ")
    assert not is_empty("0")
    assert not is_empty(FileRef("a.txt", b""))


def test_split_answers():
    ref = FileRef("resume.pdf", b"%PDF")
    scalars, files = split_answers({"name": "Jane", "resume": ref})
    assert scalars == {"name": "Jane"}
    assert files == {"resume": ref}


def test_file_ref_from_path(tmp_path):
    path = tmp_path / "license.png"
    path.write_bytes(b"\x89PNG")
    ref = FileRef.from_path(path)
    assert ref.filename == "license.png"
    assert ref.content == b"\x89PNG"
    assert ref.content_type == "image/png"
    assert "4 bytes" in repr(ref)


class TestCapture:

    def test_stores_raw_value_unconditionally(self):
        state = form_state(q("email", "email"))
        state.set_answer("email", "  not validated yet ")
        assert state.answers["email"] == "  not validated yet "

    def test_none_clears(self):
        state = form_state(q("name"), answers={"name": "Jane"})
        state.set_answer("name", None)
        assert "name" not in state.answers

    def test_unknown_id_rejected(self):
        state = form_state(q("name"))
        with pytest.raises(KeyError):
            state.set_answer("nope", "x")

    def test_state_rejects_answers_for_unknown_ids(self):
        with pytest.raises(KeyError):
            form_state(q("name"), answers={"other": "x"})

    def test_state_rejects_out_of_range_index(self):
        with pytest.raises(ValueError):
            form_state(q("name"), segment_index=5)
