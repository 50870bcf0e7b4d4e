"""Integration tests for complete form scenarios.

Tests cover end-to-end behaviour combining:
- Configuration loading from authoring mappings
- Per-field and whole-form constraints
- Per-field and whole-form messages with precedence
- Bindings, snapshots and notifications

The reference form has two text fields, ``name`` and ``lastname``, each with
its own clean-up constraint and message, a whole-form constraint that
uppercases ``lastname`` and a whole-form message asking for an uppercase
letter somewhere in the form.
"""

import re

import pytest

from formstate import EditEvent, FormEngine
from formstate.types import EngineState, EventType

UPPERCASE_MESSAGE = "At least one field must have an uppercase letter"


def reference_config():
    return {
        "fields": {
            "name": {
                "initialValue": "text",
                "messages": {
                    "test": lambda value: re.search("a", value) is not None,
                    "message": "Must not contain the letter 'a'",
                },
                "constraints": lambda value: value.replace("i", "", 1),
                "props": {"label": "Name", "disabled": False},
            },
            "lastname": {
                "initialValue": "text2",
                "constraints": lambda value: value.replace("h", "", 1),
                "messages": [
                    {
                        "test": lambda value: re.search("e", value) is not None,
                        "message": "Must contain 'e'",
                    },
                ],
            },
        },
        "globalConstraints": [
            lambda values: {"name": values["name"], "lastname": values["lastname"].upper()},
        ],
        "globalMessages": {
            "test": lambda values: not (
                re.search("[A-Z]", values["name"]) or re.search("[A-Z]", values["lastname"])
            ),
            "message": {"name": UPPERCASE_MESSAGE, "lastname": UPPERCASE_MESSAGE},
        },
    }


@pytest.fixture
def engine():
    return FormEngine(reference_config())


class TestReferenceForm:
    """Test the reference two-field form."""

    def test_initial_state(self, engine):
        """Should start from the initial values with no messages."""
        assert dict(engine.values) == {"name": "text", "lastname": "text2"}
        assert dict(engine.errors) == {"name": "", "lastname": ""}
        assert engine.state == EngineState.INITIALIZED

    def test_edit_name(self, engine):
        """Editing name with 'Maria' should settle to 'Mara' with its message."""
        engine.apply_edit("name", "Maria")

        assert engine.values["name"] == "Mara"
        assert engine.values["lastname"] == "TEXT2"
        assert engine.messages["name"] == "Must not contain the letter 'a'"
        assert engine.global_messages["name"] == ""
        assert engine.bind("name")["error"] == "Must not contain the letter 'a'"
        assert engine.bind("lastname")["error"] == ""

    def test_edit_lastname(self, engine):
        """Editing lastname with 'yes' should settle to 'YES' with no messages."""
        engine.apply_edit("name", "Maria")
        engine.apply_edit("lastname", "yes")

        assert engine.values["lastname"] == "YES"
        assert engine.values["name"] == "Mara"
        # the per-field rule sees the uppercased value, so lowercase 'e' is gone
        assert engine.messages["lastname"] == ""
        assert engine.global_messages["lastname"] == ""
        assert engine.bind("lastname")["error"] == ""

    def test_constraint_removes_only_first_match(self, engine):
        engine.apply_edit("lastname", "hohoho")
        assert engine.values["lastname"] == "OHOHO"

    def test_global_message_fires_when_no_uppercase(self, engine):
        """Should annotate both fields when neither has an uppercase letter."""
        engine.apply_edit("lastname", "123")

        assert dict(engine.values) == {"name": "text", "lastname": "123"}
        assert engine.bind("name")["error"] == UPPERCASE_MESSAGE
        assert engine.bind("lastname")["error"] == UPPERCASE_MESSAGE
        assert engine.is_valid is False

    def test_field_message_takes_precedence_over_global(self, engine):
        engine.apply_edit("lastname", "123")
        engine.apply_edit("name", "abc")

        assert engine.global_messages["name"] == UPPERCASE_MESSAGE
        assert engine.bind("name")["error"] == "Must not contain the letter 'a'"
        assert engine.bind("lastname")["error"] == UPPERCASE_MESSAGE

    def test_global_message_clears(self, engine):
        engine.apply_edit("lastname", "123")
        engine.apply_edit("name", "Tom")

        assert engine.bind("name")["error"] == ""
        assert engine.bind("lastname")["error"] == ""
        assert engine.is_valid is True

    def test_whole_form_constraint_rewrites_non_edited_field(self, engine):
        """Editing name should still uppercase lastname."""
        engine.apply_edit("name", "x")
        assert engine.values["lastname"] == "TEXT2"

    def test_bind_props(self, engine):
        bound = engine.bind("name")
        assert bound["label"] == "Name"
        assert bound["disabled"] is False
        assert bound["id"] == "name"
        assert bound["value"] == "text"

    def test_rendering_loop(self, engine):
        """Simulate an input surface typing through bound handlers."""
        rendered = []
        engine.subscribe(
            lambda event: rendered.append({fid: engine.bind(fid)["error"] for fid in engine.values}),
            EventType.FIELD_SETTLED,
        )

        for text in ["M", "Ma", "Mar", "Mari", "Maria"]:
            bound = engine.bind("name")
            bound["on_change"](EditEvent(field_id=bound["id"], value=text))

        assert engine.values["name"] == "Mara"
        assert len(rendered) == 5
        assert rendered[0] == {"name": "", "lastname": ""}
        assert rendered[-1]["name"] == "Must not contain the letter 'a'"
        assert engine.edit_count == 5

    def test_key_set_never_changes(self, engine):
        for field_id, raw in [("name", "a"), ("lastname", ""), ("missing", "x"), ("name", "")]:
            engine.apply_edit(field_id, raw)
            assert set(engine.values) == {"name", "lastname"}
            assert set(engine.messages) == {"name", "lastname"}
            assert set(engine.global_messages) == {"name", "lastname"}


class TestSeparateEngines:
    """Test that engines built from the same configuration are independent."""

    def test_engines_do_not_share_state(self):
        config = reference_config()
        first = FormEngine(config)
        second = FormEngine(config)

        first.apply_edit("name", "Maria")

        assert first.values["name"] == "Mara"
        assert second.values["name"] == "text"
