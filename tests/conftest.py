"""Shared fixtures and response builders."""

import json

import pytest

from stringsync.translator.models import TranslationSource


def chat_completion(content, refusal=None, choices=True) -> dict:
    """Build an OpenAI chat completion body around a message content string."""
    body = {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1735000000,
        "model": "gpt-4o-2024-08-06",
        "choices": [],
    }
    if choices:
        body["choices"].append({
            "index": 0,
            "message": {"role": "assistant", "content": content, "refusal": refusal},
            "logprobs": None,
            "finish_reason": "stop",
        })
    return body


def translations_content(*texts: str, fenced: bool = False) -> str:
    content = json.dumps({"translations": [{"text": text} for text in texts]}, ensure_ascii=False)
    if fenced:
        return f"```json\n{content}\n```"
    return content


@pytest.fixture
def sources():
    return [
        TranslationSource(key="noKey", text="How old are you?"),
        TranslationSource(key="key.button", text="Love"),
        TranslationSource(key="key.button", text="Completed"),
    ]
