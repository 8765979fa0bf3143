from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from flightfinder.errors import ModelInvocationError
from flightfinder.llm.client import OpenAIModel
from flightfinder.llm.interpret import build_flight_plan_prompt, interpret_request


def test_prompt_lists_keys_today_and_message(today):
    prompt = build_flight_plan_prompt("London to Madrid next Friday, 2 people", None, today)
    assert "User message: London to Madrid next Friday, 2 people" in prompt
    assert "Today's date for reference: 2026-03-10" in prompt
    for key in ("originLocationCode", "destinationLocationCode", "departureDate", "returnDate",
                "adults", "travelClass", "return_flight_departure_time_before"):
        assert f'"{key}"' in prompt
    assert "Recent conversation" not in prompt


def test_prompt_includes_recent_conversation(today):
    context = {"recent_messages": [
        {"role": "user", "text": "I want to go to Lisbon"},
        {"role": "assistant", "text": "From where?"},
        "",
    ]}
    prompt = build_flight_plan_prompt("from Boston", context, today)
    assert "user: I want to go to Lisbon\nassistant: From where?" in prompt


async def test_raw_reply_is_returned_untouched(scripted_model, today):
    model = scripted_model("```json\n{}\n```  ")
    raw = await interpret_request(model, "hi", {}, today, max_tokens=50, temperature=0.0)
    assert raw == "```json\n{}\n```  "
    assert (model.calls[0]["max_tokens"], model.calls[0]["temperature"]) == (50, 0.0)


def _chat(reply=None, error=None):
    bound = MagicMock()
    bound.ainvoke = AsyncMock(return_value=reply, side_effect=error)
    chat = MagicMock()
    chat.bind.return_value = bound
    return chat


async def test_openai_model_binds_call_settings():
    chat = _chat(SimpleNamespace(content="hello"))
    text = await OpenAIModel(model="gpt-test", chat=chat).invoke("prompt", max_tokens=42, temperature=0.3)
    assert text == "hello"
    chat.bind.assert_called_once_with(max_tokens=42, temperature=0.3)
    chat.bind.return_value.ainvoke.assert_awaited_once_with("prompt")


async def test_openai_model_joins_content_blocks():
    chat = _chat(SimpleNamespace(content=[{"type": "text", "text": "a"}, {"type": "text", "text": "b"}]))
    assert await OpenAIModel(chat=chat).invoke("p", 10, 0.5) == "ab"


async def test_openai_model_wraps_errors():
    chat = _chat(error=RuntimeError("rate limited"))
    with pytest.raises(ModelInvocationError) as exc:
        await OpenAIModel(model="gpt-test", chat=chat).invoke("p", 10, 0.5)
    assert exc.value.model == "gpt-test"
    assert "rate limited" in str(exc.value)
