"""
OpenAI chat completion decoding.

A chat completion carries the model's answer in ``choices[].message.content``
as a plain string. The translator asks the model to answer with JSON, so the
translations are recovered in separate stages:

1. decode_chat_completion: outer envelope, content kept as a string
2. strip_code_fence: drop a surrounding markdown fence (```json ... ```)
3. decode_translations_content: parse {"translations": [{"text": ...}]}

parse_openai_translations() chains the stages and checks the result against
the number of texts that were sent.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from stringsync.logger import get_logger
from stringsync.translator.exceptions import (
    TranslationError,
    DECODE_FAILED,
    UNEXPECTED_RESPONSE,
    REFUSAL,
    ALIGNMENT_MISMATCH,
)

logger = get_logger(__name__)

# Opening fence with an optional language tag, e.g. ``` or ```json
_OPENING_FENCE = re.compile(r'^```[ \t]*[A-Za-z0-9_+-]*\s*')
_CLOSING_FENCE = re.compile(r'\s*```\s*$')


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: Optional[str]
    refusal: Optional[str] = None


@dataclass(frozen=True)
class ChatChoice:
    index: int
    message: ChatMessage
    finish_reason: Optional[str] = None


@dataclass(frozen=True)
class ChatCompletion:
    id: str
    model: str
    choices: List[ChatChoice]
    object: str = 'chat.completion'
    created: int = 0


def _decode_failed(type_name: str, error: Any) -> TranslationError:
    return TranslationError(
        f"Failed to convert response data to type '{type_name}'. Error: {error}",
        code=DECODE_FAILED,
        details={'provider': 'OpenAI', 'type': type_name},
    )


def decode_chat_completion(content: bytes) -> ChatCompletion:
    """
    Decode the outer chat completion envelope.

    Args:
        content: Raw response body

    Returns:
        ChatCompletion with each message content left as a string

    Raises:
        TranslationError: If the body is not a chat completion
    """
    try:
        data = json.loads(content)
    except ValueError as e:
        raise _decode_failed('ChatCompletion', e) from e

    if not isinstance(data, dict):
        raise _decode_failed('ChatCompletion', f"expected an object, got {type(data).__name__}")

    try:
        choices = []
        for raw_choice in data['choices']:
            raw_message = raw_choice['message']
            message_content = raw_message.get('content')
            refusal = raw_message.get('refusal')
            if message_content is not None and not isinstance(message_content, str):
                raise TypeError(f"message content must be a string, got {type(message_content).__name__}")
            if message_content is None and refusal is None:
                raise KeyError('content')
            choices.append(ChatChoice(
                index=raw_choice.get('index', len(choices)),
                message=ChatMessage(
                    role=raw_message['role'],
                    content=message_content,
                    refusal=refusal,
                ),
                finish_reason=raw_choice.get('finish_reason'),
            ))

        return ChatCompletion(
            id=data['id'],
            model=data['model'],
            choices=choices,
            object=data.get('object', 'chat.completion'),
            created=data.get('created', 0),
        )
    except KeyError as e:
        raise _decode_failed('ChatCompletion', f"missing field {e}") from e
    except (TypeError, AttributeError) as e:
        raise _decode_failed('ChatCompletion', e) from e


def strip_code_fence(text: str) -> str:
    """
    Remove a surrounding markdown code fence and whitespace.

    Examples:
        >>> strip_code_fence('```json\\n{"a": 1}\\n```')
        '{"a": 1}'
        >>> strip_code_fence('  {"a": 1}  ')
        '{"a": 1}'
    """
    cleaned = text.strip()
    if cleaned.startswith('```'):
        cleaned = _OPENING_FENCE.sub('', cleaned, count=1)
        cleaned = _CLOSING_FENCE.sub('', cleaned, count=1)
    elif cleaned.endswith('```'):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def decode_translations_content(text: str) -> List[str]:
    """
    Decode the JSON the model was asked to answer with.

    Args:
        text: Message content, fenced or not

    Returns:
        Translated texts in the order the model returned them

    Raises:
        TranslationError: If the content is not {"translations": [{"text": ...}]}
    """
    cleaned = strip_code_fence(text)
    try:
        data = json.loads(cleaned)
    except ValueError as e:
        logger.debug(f"  Unparseable model content:\n{text}")
        raise _decode_failed('TranslationsContent', e) from e

    translations = data.get('translations') if isinstance(data, dict) else None
    if not isinstance(translations, list):
        raise _decode_failed('TranslationsContent', "missing 'translations' array")

    texts = []
    for i, item in enumerate(translations):
        if not isinstance(item, dict) or not isinstance(item.get('text'), str):
            raise _decode_failed('TranslationsContent', f"translations[{i}] has no 'text' string")
        texts.append(item['text'])
    return texts


def parse_openai_translations(content: bytes, expected_count: int) -> List[str]:
    """
    Decode a chat completion into translated texts aligned with the sources.

    Only the first choice is used.

    Raises:
        TranslationError: decode_failed, unexpected_response (no choices),
            refusal (the model declined), alignment_mismatch (wrong count)
    """
    completion = decode_chat_completion(content)
    if not completion.choices:
        raise TranslationError(
            f"Unexpected response type: chat completion '{completion.id}' has no choices.",
            code=UNEXPECTED_RESPONSE,
            details={'provider': 'OpenAI'},
        )

    message = completion.choices[0].message
    if message.refusal is not None:
        logger.warning(f"OpenAI refused the translation request: {message.refusal}")
        raise TranslationError(
            f"OpenAI refused to translate: {message.refusal}",
            code=REFUSAL,
            details={'provider': 'OpenAI', 'detail': message.refusal},
        )

    texts = decode_translations_content(message.content)
    if len(texts) != expected_count:
        raise TranslationError(
            f"OpenAI returned {len(texts)} translations for {expected_count} texts",
            code=ALIGNMENT_MISMATCH,
            details={'provider': 'OpenAI', 'expected': expected_count, 'received': len(texts)},
        )
    return texts
