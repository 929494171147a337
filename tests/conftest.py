from types import SimpleNamespace

import pytest

from ostrich_canvas.session import DemoSession
from ostrich_canvas.state import initial_state


def text_response(text, stop_reason="end_turn"):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        stop_reason=stop_reason,
        usage=SimpleNamespace(input_tokens=10, output_tokens=5),
    )


def tool_use_response(name, tool_input, tool_id="toolu_1"):
    return SimpleNamespace(
        content=[SimpleNamespace(type="tool_use", id=tool_id, name=name, input=tool_input)],
        stop_reason="tool_use",
        usage=SimpleNamespace(input_tokens=10, output_tokens=5),
    )


class FakeMessages:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def create(self, **kwargs):
        # snapshot the message list; the tool loop keeps appending to its own copy
        self.calls.append({**kwargs, "messages": list(kwargs["messages"])})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeClient:
    """Stands in for anthropic.Anthropic: returns queued responses in order."""

    def __init__(self, *responses):
        self.messages = FakeMessages(responses)


@pytest.fixture()
def fake_client():
    return FakeClient


@pytest.fixture()
def state():
    return initial_state()


@pytest.fixture()
def session():
    return DemoSession(analyze_delay=0, forecast_delay=0)
