"""Tests for GroqCompletionProvider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from groq import GroqError

from mimir.errors import ProviderError
from mimir.provider import CompletionProvider, GroqCompletionProvider, StreamChunk


def make_response(content: str | None = "Hello", tool_calls=None, response_id: str = "req_1"):
    """Build a chat completion response."""
    response = MagicMock()
    response.id = response_id
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.choices[0].message.tool_calls = tool_calls
    return response


def make_chunk(content: str | None, finish_reason: str | None = None):
    delta = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(delta=delta, finish_reason=finish_reason)])


class FakeStream:
    """Async iterable standing in for a Groq stream."""

    def __init__(self, chunks: list, error: Exception | None = None) -> None:
        self.chunks = chunks
        self.error = error

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error


@pytest.fixture
def mock_groq() -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_response())
    return client


@pytest.fixture
def provider(mock_groq: MagicMock) -> GroqCompletionProvider:
    return GroqCompletionProvider(mock_groq, default_model="test-model")


class TestGenerate:
    """Tests for generate."""

    def test_implements_protocol(self, provider: GroqCompletionProvider) -> None:
        """The provider satisfies the CompletionProvider protocol."""
        assert isinstance(provider, CompletionProvider)
        assert provider.default_model == "test-model"

    @pytest.mark.asyncio
    async def test_generate(self, provider: GroqCompletionProvider, mock_groq: MagicMock) -> None:
        """Generate sends system instructions and input, returns text and id."""
        completion = await provider.generate("Hi", "Be brief")

        assert completion.output == "Hello"
        assert completion.request_id == "req_1"
        mock_groq.chat.completions.create.assert_called_once_with(
            model="test-model",
            messages=[
                {"role": "system", "content": "Be brief"},
                {"role": "user", "content": "Hi"},
            ],
        )

    @pytest.mark.asyncio
    async def test_generate_with_context(
        self, provider: GroqCompletionProvider, mock_groq: MagicMock
    ) -> None:
        """Prior turns go between the instructions and the input."""
        context = [
            {"role": "user", "content": "My name is Ana"},
            {"role": "assistant", "content": "Hi Ana"},
        ]
        await provider.generate("What's my name?", "sys", model="other", context=context)

        kwargs = mock_groq.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "other"
        assert [m["role"] for m in kwargs["messages"]] == ["system", "user", "assistant", "user"]
        assert kwargs["messages"][-1]["content"] == "What's my name?"

    @pytest.mark.asyncio
    async def test_none_content(self, provider: GroqCompletionProvider, mock_groq: MagicMock) -> None:
        """None content becomes an empty string."""
        mock_groq.chat.completions.create.return_value = make_response(content=None)
        completion = await provider.generate("Hi", "sys")
        assert completion.output == ""

    @pytest.mark.asyncio
    async def test_error_wrapped(self, provider: GroqCompletionProvider, mock_groq: MagicMock) -> None:
        """Groq errors are re-raised as ProviderError."""
        mock_groq.chat.completions.create.side_effect = GroqError("rate limited")
        with pytest.raises(ProviderError, match="rate limited"):
            await provider.generate("Hi", "sys")


class TestStream:
    """Tests for stream."""

    @pytest.mark.asyncio
    async def test_stream_deltas_then_done(
        self, provider: GroqCompletionProvider, mock_groq: MagicMock
    ) -> None:
        """Deltas are forwarded and a terminal chunk closes the stream."""
        mock_groq.chat.completions.create.return_value = FakeStream([
            make_chunk("Hel"),
            make_chunk("lo"),
            make_chunk(None, finish_reason="stop"),
        ])

        chunks = [chunk async for chunk in provider.stream("Hi", "sys")]

        assert [c.delta for c in chunks if not c.done] == ["Hel", "lo"]
        assert chunks[-1] == StreamChunk(done=True, type="content.done")
        assert mock_groq.chat.completions.create.call_args.kwargs["stream"] is True

    @pytest.mark.asyncio
    async def test_stream_without_finish_reason(
        self, provider: GroqCompletionProvider, mock_groq: MagicMock
    ) -> None:
        """A stream that just ends still gets a terminal chunk."""
        mock_groq.chat.completions.create.return_value = FakeStream([make_chunk("Hi")])
        chunks = [chunk async for chunk in provider.stream("Hi", "sys")]
        assert chunks[-1].done is True
        assert sum(1 for c in chunks if c.done) == 1

    @pytest.mark.asyncio
    async def test_stream_error_midway(
        self, provider: GroqCompletionProvider, mock_groq: MagicMock
    ) -> None:
        """Errors while streaming are re-raised as ProviderError."""
        mock_groq.chat.completions.create.return_value = FakeStream(
            [make_chunk("Hel")], error=GroqError("connection reset")
        )
        with pytest.raises(ProviderError):
            async for _ in provider.stream("Hi", "sys"):
                pass


class TestFunctionCall:
    """Tests for function_call."""

    @pytest.mark.asyncio
    async def test_tool_calls_returned(
        self, provider: GroqCompletionProvider, mock_groq: MagicMock
    ) -> None:
        """Tool calls are converted and bare definitions wrapped."""
        tool_call = MagicMock()
        tool_call.id = "call_1"
        tool_call.function.name = "do_it"
        tool_call.function.arguments = '{"x": 1}'
        mock_groq.chat.completions.create.return_value = make_response(
            content=None, tool_calls=[tool_call]
        )

        result = await provider.function_call(
            "Go", [{"name": "do_it", "description": "Does it", "parameters": {"type": "object"}}], "sys"
        )

        assert result.request_id == "req_1"
        assert result.message_content is None
        assert len(result.tool_calls) == 1
        assert result.tool_calls[0].name == "do_it"
        assert result.tool_calls[0].arguments == '{"x": 1}'

        kwargs = mock_groq.chat.completions.create.call_args.kwargs
        assert kwargs["tool_choice"] == "auto"
        assert kwargs["tools"] == [
            {
                "type": "function",
                "function": {
                    "name": "do_it",
                    "description": "Does it",
                    "parameters": {"type": "object"},
                },
            }
        ]

    @pytest.mark.asyncio
    async def test_full_schemas_pass_through(
        self, provider: GroqCompletionProvider, mock_groq: MagicMock
    ) -> None:
        """Schemas already in function form are sent unchanged."""
        schema = {"type": "function", "function": {"name": "f", "parameters": {}}}
        await provider.function_call("Go", [schema], "sys")
        assert mock_groq.chat.completions.create.call_args.kwargs["tools"] == [schema]

    @pytest.mark.asyncio
    async def test_no_tool_calls(self, provider: GroqCompletionProvider) -> None:
        """A plain answer gives no tool calls and keeps the text."""
        result = await provider.function_call("Go", [{"name": "f"}], "sys")
        assert result.tool_calls == []
        assert result.message_content == "Hello"

    @pytest.mark.asyncio
    async def test_error_wrapped(self, provider: GroqCompletionProvider, mock_groq: MagicMock) -> None:
        """Groq errors are re-raised as ProviderError."""
        mock_groq.chat.completions.create.side_effect = GroqError("bad request")
        with pytest.raises(ProviderError):
            await provider.function_call("Go", [{"name": "f"}], "sys")
