"""Tests for PromptAugmenter: instruction text and system-message injection."""

import json

from app.services.prompt_augmenter import augment, build_json_instruction


class TestBuildJsonInstruction:
    """build_json_instruction embeds the schema as pretty-printed JSON."""

    def test_contains_pretty_schema(self, intro_schema):
        instruction = build_json_instruction(intro_schema)
        assert json.dumps(intro_schema, indent=2) in instruction

    def test_forbids_markdown(self, intro_schema):
        instruction = build_json_instruction(intro_schema)
        assert "markdown" in instruction
        assert "valid JSON" in instruction


class TestAugment:
    """augment() appends to system messages or prepends a new one."""

    def test_prepends_system_message_when_absent(self, intro_schema):
        messages = [{"role": "user", "content": "Introduce yourself"}]
        result = augment(messages, intro_schema)
        assert len(result) == 2
        assert result[0]["role"] == "system"
        assert result[0]["content"] == build_json_instruction(intro_schema)
        assert result[1] == messages[0]

    def test_appends_to_every_system_message(self, intro_schema):
        messages = [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Hi"},
            {"role": "system", "content": "Be kind."},
        ]
        result = augment(messages, intro_schema)
        instruction = build_json_instruction(intro_schema)
        assert len(result) == 3
        assert result[0]["content"] == f"Be brief.\n\n{instruction}"
        assert result[2]["content"] == f"Be kind.\n\n{instruction}"
        assert result[1] == {"role": "user", "content": "Hi"}

    def test_preserves_order(self, intro_schema):
        messages = [
            {"role": "user", "content": "1"},
            {"role": "assistant", "content": "2"},
            {"role": "user", "content": "3"},
        ]
        result = augment(messages, intro_schema)
        assert [m["content"] for m in result[1:]] == ["1", "2", "3"]

    def test_original_messages_untouched(self, intro_schema):
        messages = [{"role": "system", "content": "Be brief."}, {"role": "user", "content": "Hi"}]
        snapshot = [dict(m) for m in messages]
        result = augment(messages, intro_schema)
        assert messages == snapshot
        assert result is not messages
        assert result[0] is not messages[0]

    def test_extra_message_keys_kept(self, intro_schema):
        messages = [{"role": "system", "content": "x", "images": ["abc"]}]
        result = augment(messages, intro_schema)
        assert result[0]["images"] == ["abc"]

    def test_double_augmentation_keeps_schema_parseable(self, intro_schema):
        """Augmenting twice grows the prompt but the schema block stays valid JSON."""
        messages = [{"role": "system", "content": "Base."}]
        twice = augment(augment(messages, intro_schema), intro_schema)
        content = twice[0]["content"]
        schema_text = json.dumps(intro_schema, indent=2)
        assert content.count(schema_text) == 2
        assert content.startswith("Base.\n\n")

        start = content.index("{")
        block = content[start:start + len(schema_text)]
        assert json.loads(block) == intro_schema
