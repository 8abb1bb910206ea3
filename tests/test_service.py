"""Tests for the translator orchestrating provider requests."""

import json

import httpx
import pytest

from stringsync.language_codes import Language
from stringsync.translator.exceptions import (
    TranslationError,
    CLIENT_ERROR,
    SERVER_ERROR,
    NO_RESPONSE,
    EMPTY_MOCKED_RESPONSE,
    REFUSAL,
    UNSUPPORTED_LANGUAGE,
    CONFIG_MISSING,
)
from stringsync.translator.models import Translation, TranslationSource
from stringsync.translator.providers import MicrosoftProvider, DeepLProvider, OpenAIProvider
from stringsync.translator.service import TranslationService, Translator
from stringsync.translator.transport import HttpTransport, ReplayTransport

from conftest import chat_completion, translations_content


def _openai_translator(transport, context="You have to use informal tone!"):
    return Translator(TranslationService.openai("sk-test", context=context), transport=transport)


class TestTranslationService:

    def test_creates_matching_provider(self):
        assert isinstance(TranslationService.microsoft("k").create_provider(), MicrosoftProvider)
        assert isinstance(TranslationService.deepl("k").create_provider(), DeepLProvider)
        assert isinstance(TranslationService.openai("k", "ctx").create_provider(), OpenAIProvider)

    def test_unknown_service(self):
        with pytest.raises(ValueError):
            TranslationService(name="babelfish", api_key="k").create_provider()

    def test_repr_hides_key(self):
        assert "secret" not in repr(TranslationService.deepl("secret"))

    def test_deepl_endpoint_chosen_at_construction(self):
        translator = Translator(TranslationService.deepl("abc:fx"), transport=ReplayTransport())
        assert translator.provider.base_url == "https://api-free.deepl.com"


class TestOpenAITranslation:

    def test_end_to_end(self, sources):
        transport = ReplayTransport().add(
            200, chat_completion(translations_content("Wie alt bist du?", "Liebe", "Abgeschlossen", fenced=True))
        )

        translations = _openai_translator(transport).translate(sources, Language.ENGLISH, [Language.GERMAN])

        assert translations == [
            Translation(language=Language.GERMAN, translated_text="Wie alt bist du?", key="noKey"),
            Translation(language=Language.GERMAN, translated_text="Liebe", key="key.button"),
            Translation(language=Language.GERMAN, translated_text="Abgeschlossen", key="key.button"),
        ]
        request, base_url = transport.requests[0]
        assert base_url == "https://api.openai.com"
        assert request.path == "/v1/chat/completions"

    def test_one_request_per_target_language(self):
        sources = [TranslationSource(key="k1", text="Love")]
        transport = (
            ReplayTransport()
            .add(200, chat_completion(translations_content("Liebe")))
            .add(200, chat_completion(translations_content("Amour")))
        )

        translations = _openai_translator(transport).translate(
            sources, Language.ENGLISH, [Language.GERMAN, Language.FRENCH]
        )

        assert translations == [
            Translation(language=Language.GERMAN, translated_text="Liebe", key="k1"),
            Translation(language=Language.FRENCH, translated_text="Amour", key="k1"),
        ]
        assert len(transport.requests) == 2

    def test_batches_large_input(self):
        sources = [TranslationSource(key=f"k{i}", text=str(i % 10)) for i in range(30)]
        transport = (
            ReplayTransport()
            .add(200, chat_completion(translations_content(*[f"t{i}" for i in range(25)])))
            .add(200, chat_completion(translations_content(*[f"t{i}" for i in range(25, 30)])))
        )

        translations = _openai_translator(transport).translate(sources, Language.ENGLISH, [Language.GERMAN])

        assert len(transport.requests) == 2
        assert [t.key for t in translations] == [f"k{i}" for i in range(30)]
        assert [t.translated_text for t in translations] == [f"t{i}" for i in range(30)]
        second_user_message = json.loads(transport.requests[1][0].body)["messages"][1]["content"]
        assert len(second_user_message.splitlines()) == 5

    def test_refusal_fails(self, sources):
        transport = ReplayTransport().add(200, chat_completion(None, refusal="I can't help with that."))
        with pytest.raises(TranslationError) as exc_info:
            _openai_translator(transport).translate(sources, Language.ENGLISH, [Language.GERMAN])
        assert exc_info.value.code == REFUSAL

    def test_idempotent_against_deterministic_provider(self, sources):
        body = chat_completion(translations_content("Wie alt bist du?", "Liebe", "Abgeschlossen"))
        transport = ReplayTransport().add(200, body).add(200, body)
        translator = _openai_translator(transport)

        first = translator.translate(sources, Language.ENGLISH, [Language.GERMAN])
        second = translator.translate(sources, Language.ENGLISH, [Language.GERMAN])

        assert first == second
        assert transport.requests[0][0] == transport.requests[1][0]


class TestFailures:

    def test_client_error_with_structured_body(self, sources):
        body = {"error": {"message": "Incorrect API key provided: sk-test.", "type": "invalid_request_error",
                          "code": "invalid_api_key"}}
        transport = ReplayTransport().add(401, body)

        with pytest.raises(TranslationError) as exc_info:
            _openai_translator(transport).translate(sources, Language.ENGLISH, [Language.GERMAN])

        error = exc_info.value
        assert error.code == CLIENT_ERROR
        assert error.status_code == 401
        assert error.details["detail"] == "Incorrect API key provided: sk-test."
        assert error.details["provider"] == "OpenAI"

    def test_client_error_with_plain_text_body(self, sources):
        # DeepL answers a wrong key with a bare "Forbidden" body
        transport = ReplayTransport().add(403, "Forbidden")
        translator = Translator(TranslationService.deepl("abc:fx"), transport=transport)

        with pytest.raises(TranslationError) as exc_info:
            translator.translate(sources, Language.ENGLISH, [Language.GERMAN])

        error = exc_info.value
        assert error.code == CLIENT_ERROR
        assert error.status_code == 403
        assert "detail" not in error.details
        assert error.details["provider"] == "DeepL"

    def test_failure_discards_earlier_targets(self):
        sources = [TranslationSource(key="k1", text="Love")]
        transport = (
            ReplayTransport()
            .add(200, {"translations": [{"detected_source_language": "EN", "text": "Liebe"}]})
            .add(500, "Internal error")
            .add(200, {"translations": [{"detected_source_language": "EN", "text": "Amore"}]})
        )
        translator = Translator(TranslationService.deepl("abc"), transport=transport)

        with pytest.raises(TranslationError) as exc_info:
            translator.translate(sources, Language.ENGLISH, [Language.GERMAN, Language.FRENCH, Language.ITALIAN])

        assert exc_info.value.code == SERVER_ERROR
        # No request is made after the first failure
        assert len(transport.requests) == 2

    def test_empty_mocked_response(self, sources):
        with pytest.raises(TranslationError) as exc_info:
            _openai_translator(ReplayTransport()).translate(sources, Language.ENGLISH, [Language.GERMAN])
        assert exc_info.value.code == EMPTY_MOCKED_RESPONSE
        assert exc_info.value.details["provider"] == "OpenAI"

    def test_unsupported_language_fails_before_sending(self, sources):
        transport = ReplayTransport()
        translator = Translator(TranslationService.deepl("abc"), transport=transport)

        with pytest.raises(TranslationError) as exc_info:
            translator.translate(sources, Language.ENGLISH, [Language.HINDI])
        assert exc_info.value.code == UNSUPPORTED_LANGUAGE
        assert transport.requests == []

    def test_unreachable_host(self, sources):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Name or service not known", request=request)

        transport = HttpTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))
        with pytest.raises(TranslationError) as exc_info:
            _openai_translator(transport).translate(sources, Language.ENGLISH, [Language.GERMAN])
        assert exc_info.value.code == NO_RESPONSE


class TestDeepLTranslation:

    def test_translates_each_target_language(self, sources):
        transport = (
            ReplayTransport()
            .add(200, {"translations": [{"detected_source_language": "EN", "text": t}
                                        for t in ("Wie alt bist du?", "Liebe", "Abgeschlossen")]})
            .add(200, {"translations": [{"detected_source_language": "EN", "text": t}
                                        for t in ("Quel âge as-tu ?", "Amour", "Terminé")]})
        )
        translator = Translator(TranslationService.deepl("abc:fx"), transport=transport)

        translations = translator.translate(sources, Language.ENGLISH, [Language.GERMAN, Language.FRENCH])

        assert [(t.language, t.key) for t in translations] == [
            (Language.GERMAN, "noKey"),
            (Language.GERMAN, "key.button"),
            (Language.GERMAN, "key.button"),
            (Language.FRENCH, "noKey"),
            (Language.FRENCH, "key.button"),
            (Language.FRENCH, "key.button"),
        ]
        assert translations[4].translated_text == "Amour"
        assert [json.loads(request.body)["target_lang"] for request, _ in transport.requests] == ["DE", "FR"]
        assert all(url == "https://api-free.deepl.com" for _, url in transport.requests)


class TestMicrosoftTranslation:

    def test_single_request_for_all_targets(self):
        sources = [TranslationSource(key="k1", text="Love"), TranslationSource(key="k2", text="Completed")]
        transport = ReplayTransport().add(200, [
            {"translations": [{"text": "Liebe", "to": "de"}, {"text": "Amour", "to": "fr"}]},
            {"translations": [{"text": "Abgeschlossen", "to": "de"}, {"text": "Terminé", "to": "fr"}]},
        ])
        translator = Translator(TranslationService.microsoft("ms-secret"), transport=transport)

        translations = translator.translate(sources, Language.ENGLISH, [Language.GERMAN, Language.FRENCH])

        assert len(transport.requests) == 1
        assert translations == [
            Translation(language=Language.GERMAN, translated_text="Liebe", key="k1"),
            Translation(language=Language.FRENCH, translated_text="Amour", key="k1"),
            Translation(language=Language.GERMAN, translated_text="Abgeschlossen", key="k2"),
            Translation(language=Language.FRENCH, translated_text="Terminé", key="k2"),
        ]

    def test_over_http(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Ocp-Apim-Subscription-Key"] == "ms-secret"
            assert request.url.params.get_list("to") == ["de"]
            texts = [item["Text"] for item in json.loads(request.content)]
            return httpx.Response(200, json=[
                {"translations": [{"text": text.upper(), "to": "de"}]} for text in texts
            ])

        transport = HttpTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))
        translator = Translator(TranslationService.microsoft("ms-secret"), transport=transport)

        translations = translator.translate(
            [TranslationSource(key="k1", text="Love")], Language.ENGLISH, [Language.GERMAN]
        )
        assert translations == [Translation(language=Language.GERMAN, translated_text="LOVE", key="k1")]


@pytest.mark.parametrize("sources,targets", [
    ([], [Language.GERMAN]),
    ([TranslationSource(key="k", text="Love")], []),
])
def test_nothing_to_translate_makes_no_request(sources, targets):
    transport = ReplayTransport()
    translator = _openai_translator(transport)
    assert translator.translate(sources, Language.ENGLISH, targets) == []
    assert transport.requests == []


class TestFromConfig:

    def test_builds_configured_service(self):
        config = {
            "translation_service": "openai",
            "openai": {"api_key": "sk-test", "context": "Informal tone"},
        }
        translator = Translator.from_config(config, transport=ReplayTransport())
        assert translator.service == TranslationService.openai("sk-test", context="Informal tone")

    def test_missing_key(self):
        config = {"translation_service": "deepl", "deepl": {"api_key": "YOUR_API_KEY_HERE"}}
        with pytest.raises(TranslationError) as exc_info:
            Translator.from_config(config, transport=ReplayTransport())
        assert exc_info.value.code == CONFIG_MISSING


class TestClose:

    def test_closes_transport_it_created(self):
        translator = Translator(TranslationService.deepl("abc:fx"))
        client = translator.transport._client

        with translator:
            assert not client.is_closed
        assert client.is_closed

    def test_from_config_transport_is_closed(self):
        config = {"translation_service": "deepl", "deepl": {"api_key": "abc:fx"}, "timeout": 30}
        translator = Translator.from_config(config)
        client = translator.transport._client
        assert client.timeout.read == 30.0

        translator.close()
        assert client.is_closed

    def test_leaves_caller_transport_open(self, sources):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"translations": [{"detected_source_language": "EN", "text": "Liebe"}]})

        transport = HttpTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))
        with Translator(TranslationService.deepl("abc:fx"), transport=transport):
            pass
        assert not transport._client.is_closed

        # Still usable by a second translator
        translator = Translator(TranslationService.deepl("abc:fx"), transport=transport)
        translations = translator.translate(sources[1:2], Language.ENGLISH, [Language.GERMAN])
        assert translations[0].translated_text == "Liebe"
        transport._client.close()
