import json
from unittest.mock import AsyncMock, patch

import pytest

from startup_idea.config import Settings
from startup_idea.core import pipeline
from startup_idea.core.payments.errors import SignerError

_SETTINGS = Settings(
    biznews_server_url="http://news.example/mcp",
    openai_api_key="sk-test",
    evm_private_key="0x" + "4c" * 32,
    svm_private_key="svm-secret",
)

_REPORT = {
    "opportunity": "X",
    "tam": {"estimate": "$1B/year", "methodology": "Buyers times price."},
    "whyNow": "Regulation changed.",
    "gettingStarted": ["a", "b", "c"],
    "source": {"title": "A", "url": "http://x"},
}


def _patch_fetch(**kwargs):
    return patch.object(pipeline.biznews, "fetch_business_news", AsyncMock(**kwargs))


def _patch_analyze(**kwargs):
    return patch.object(pipeline.analyst, "analyze", AsyncMock(**kwargs))


@pytest.mark.asyncio
async def test_missing_openai_key_makes_no_calls() -> None:
    settings = Settings(evm_private_key="k", svm_private_key="k")
    with _patch_fetch() as fetch, _patch_analyze() as analyze:
        result = await pipeline.run_idea_of_the_day(settings)

    assert result == {"error": "Missing OPENAI_API_KEY"}
    fetch.assert_not_awaited()
    analyze.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("evm, svm", [(None, "k"), ("k", None), (None, None)])
async def test_missing_signing_key_makes_no_calls(evm, svm) -> None:
    settings = Settings(openai_api_key="sk-test", evm_private_key=evm, svm_private_key=svm)
    with _patch_fetch() as fetch:
        result = await pipeline.run_idea_of_the_day(settings)

    assert result == {"error": "Missing EVM_PRIVATE_KEY or SVM_PRIVATE_KEY"}
    fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_payload_skips_model() -> None:
    with _patch_fetch(return_value={}), _patch_analyze() as analyze:
        result = await pipeline.run_idea_of_the_day(_SETTINGS)

    assert result == {"error": "No articles returned from news source"}
    analyze.assert_not_awaited()


@pytest.mark.asyncio
async def test_only_empty_titles_skips_model() -> None:
    with _patch_fetch(return_value={"data": [{"title": ""}]}), _patch_analyze() as analyze:
        result = await pipeline.run_idea_of_the_day(_SETTINGS)

    assert result == {"error": "No articles returned from news source"}
    analyze.assert_not_awaited()


@pytest.mark.asyncio
async def test_fenced_model_output_is_returned() -> None:
    news = {"data": [{"title": "A", "link": "http://x", "description": "d" * 1000}]}
    output = "```json\n" + json.dumps(_REPORT) + "\n```"

    with _patch_fetch(return_value=news), _patch_analyze(return_value=output) as analyze:
        result = await pipeline.run_idea_of_the_day(_SETTINGS)

    assert result == _REPORT
    prompt = analyze.await_args.args[0]
    assert '"url": "http://x"' in prompt
    assert "d" * 800 in prompt and "d" * 801 not in prompt
    assert analyze.await_args.kwargs == {"api_key": "sk-test", "model": "o4-mini"}


@pytest.mark.asyncio
async def test_articles_are_capped() -> None:
    news = [{"title": f"headline {i}"} for i in range(10)]

    with _patch_fetch(return_value=news), _patch_analyze(return_value=json.dumps(_REPORT)) as analyze:
        await pipeline.run_idea_of_the_day(_SETTINGS)

    prompt = analyze.await_args.args[0]
    assert "headline 5" in prompt
    assert "headline 6" not in prompt


@pytest.mark.asyncio
async def test_unparseable_output_returns_raw() -> None:
    with _patch_fetch(return_value=[{"title": "A"}]), _patch_analyze(return_value="I could not decide."):
        result = await pipeline.run_idea_of_the_day(_SETTINGS)

    assert result == {"error": "Failed to parse model output", "raw": "I could not decide."}


@pytest.mark.asyncio
async def test_empty_output_returns_raw() -> None:
    with _patch_fetch(return_value=[{"title": "A"}]), _patch_analyze(return_value=""):
        result = await pipeline.run_idea_of_the_day(_SETTINGS)

    assert result == {"error": "Failed to parse model output", "raw": ""}


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["[" * 100000, '{"opportunity": "X", "tam": NaN}'])
async def test_unrepresentable_output_returns_raw(raw) -> None:
    with _patch_fetch(return_value=[{"title": "A"}]), _patch_analyze(return_value=raw):
        result = await pipeline.run_idea_of_the_day(_SETTINGS)

    assert result == {"error": "Failed to parse model output", "raw": raw}


@pytest.mark.asyncio
async def test_fetch_errors_propagate() -> None:
    with _patch_fetch(side_effect=SignerError("bad key")), _patch_analyze() as analyze:
        with pytest.raises(SignerError):
            await pipeline.run_idea_of_the_day(_SETTINGS)
    analyze.assert_not_awaited()


@pytest.mark.asyncio
async def test_fetch_receives_credentials() -> None:
    with _patch_fetch(return_value={}) as fetch:
        await pipeline.run_idea_of_the_day(_SETTINGS)

    fetch.assert_awaited_once_with(
        "http://news.example/mcp",
        evm_private_key=_SETTINGS.evm_private_key,
        svm_private_key="svm-secret",
        solana_rpc_url=None,
    )


@pytest.mark.asyncio
async def test_off_schema_output_is_still_returned() -> None:
    with _patch_fetch(return_value=[{"title": "A"}]), _patch_analyze(return_value='Result: {"idea": "Y"}'):
        result = await pipeline.run_idea_of_the_day(_SETTINGS)

    assert result == {"idea": "Y"}
