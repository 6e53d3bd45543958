"""Tests for the LLM-backed kernel fallback and its providers."""

import json
import logging

import httpx
import pytest

from cloudsh import config as cloudsh_config
from cloudsh.ai import FallbackUnavailable, KernelFallback, create_provider
from cloudsh.ai.llm_providers import (
    GeminiProvider,
    LLMConfig,
    ModelCapability,
    OllamaProvider,
)
from cloudsh.ai.llm_providers.gemini import GEMINI_BASE_URL
from cloudsh.repl import ShellEngine

from .fakes import FakeProvider


def listing(vfs):
    return [entry.name for entry in vfs.list()]


class TestPromptBuilding:
    """Test the context block handed to the model."""

    def test_prompt_contains_session_context(self):
        kernel = KernelFallback(FakeProvider())

        prompt = kernel.build_prompt(
            "/root",
            ["welcome.msg", "payload.py"],
            "python3 payload.py",
            files={"payload.py": "print('pwned')"},
        )

        assert "Current User: root" in prompt
        assert "Current Directory: /root" in prompt
        assert "Directory Contents: welcome.msg, payload.py" in prompt
        assert "[FILE START: payload.py]\nprint('pwned')\n[FILE END: payload.py]" in prompt
        assert prompt.endswith("User Command: python3 payload.py")
        assert "Active Interactive Tool" not in prompt

    def test_prompt_empty_directory_and_tool(self):
        kernel = KernelFallback(FakeProvider())

        prompt = kernel.build_prompt("/tmp", [], "show options", active_tool="msfconsole")

        assert "Directory Contents: (empty)" in prompt
        assert "Active Interactive Tool: msfconsole" in prompt


class TestKernelFallback:
    """Test interpret() error mapping."""

    @pytest.mark.asyncio
    async def test_interpret_returns_reply(self):
        provider = FakeProvider(reply="Starting Nmap 7.94")
        kernel = KernelFallback(provider)

        text = await kernel.interpret("/root", [], "nmap 10.0.0.1")

        assert text == "Starting Nmap 7.94"
        assert provider.system_prompts == [kernel.system_prompt]

    @pytest.mark.asyncio
    async def test_system_prompt_inlined_when_unsupported(self):
        """
        Given: A provider without system prompt support
        When: Interpreting a command
        Then: The system prompt is prepended to the user prompt instead
        """
        provider = FakeProvider(reply="ok", system_prompts=False)
        kernel = KernelFallback(provider, system_prompt="Act as bash.")

        await kernel.interpret("/root", [], "id")

        assert provider.system_prompts == [None]
        assert provider.prompts[0].startswith("Act as bash.\nCurrent User: root")

    @pytest.mark.asyncio
    async def test_http_error_becomes_fallback_unavailable(self):
        kernel = KernelFallback(FakeProvider(error=httpx.ConnectError("refused")))

        with pytest.raises(FallbackUnavailable):
            await kernel.interpret("/root", [], "nmap")

    @pytest.mark.asyncio
    async def test_any_error_becomes_fallback_unavailable(self):
        kernel = KernelFallback(FakeProvider(error=ValueError("no API key")))

        with pytest.raises(FallbackUnavailable) as exc_info:
            await kernel.interpret("/root", [], "nmap")

        assert "no API key" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_close_cleans_up_provider(self):
        provider = FakeProvider()

        await KernelFallback(provider).close()

        assert provider.cleaned_up


class TestEngineFallbackPath:
    """Test how the engine uses the fallback for unknown commands."""

    @pytest.mark.asyncio
    async def test_reply_lines_are_streamed(self, engine_with_kernel, provider):
        provider.reply = "Starting Nmap 7.94\nHost is up.\n"

        lines = await engine_with_kernel.run_line("masscan -p80 10.0.0.0/24")

        assert lines == ["Starting Nmap 7.94", "Host is up."]
        prompt = provider.prompts[0]
        assert "Current Directory: /root" in prompt
        assert "Directory Contents: welcome.msg, todo.txt" in prompt
        assert "[FILE START: todo.txt]" in prompt
        assert prompt.endswith("User Command: masscan -p80 10.0.0.0/24")

    @pytest.mark.asyncio
    async def test_provider_failure_is_command_not_found(self, engine_with_kernel, provider, vfs):
        """
        Given: A fallback whose provider fails
        When: Running an unknown command
        Then: Exactly one "command not found" line and no changes
        """
        provider.error = httpx.ConnectError("Connection refused")
        before = listing(vfs)

        assert await engine_with_kernel.run_line("masscan 10.0.0.1") == ["bash: masscan: command not found"]
        assert listing(vfs) == before

    @pytest.mark.asyncio
    async def test_empty_reply_prints_nothing(self, engine_with_kernel):
        assert await engine_with_kernel.run_line("true") == []

    @pytest.mark.asyncio
    async def test_interactive_tool_session(self, engine_with_kernel, provider):
        provider.reply = "Python 3.11.6\n>>>"

        await engine_with_kernel.run_line("python3")

        assert engine_with_kernel.active_tool == "python3"
        assert engine_with_kernel.prompt() == "python3 > "

        provider.reply = "2"
        assert await engine_with_kernel.run_line("1 + 1") == ["2"]
        assert "Active Interactive Tool: python3" in provider.prompts[-1]

        await engine_with_kernel.run_line("exit")
        assert engine_with_kernel.active_tool is None
        assert not engine_with_kernel.closed

    @pytest.mark.asyncio
    async def test_failed_tool_launch_does_not_enter_tool(self, engine_with_kernel, provider):
        provider.error = RuntimeError("boom")

        await engine_with_kernel.run_line("mysql")

        assert engine_with_kernel.active_tool is None

    @pytest.mark.asyncio
    async def test_long_reply_is_complete(self, vfs):
        provider = FakeProvider(reply="\n".join(f"line {n}" for n in range(25)))
        engine = ShellEngine(vfs, fallback=KernelFallback(provider), pacing=0, long_output_threshold=10)

        lines = await engine.run_line("dpkg -l")

        assert len(lines) == 25
        assert lines[-1] == "line 24"

    @pytest.mark.asyncio
    async def test_engine_aclose_releases_provider(self, engine_with_kernel, provider):
        await engine_with_kernel.aclose()

        assert provider.cleaned_up


class TestOllamaProvider:
    """Test the Ollama provider against a mock transport."""

    @pytest.mark.asyncio
    async def test_complete(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={
                "model": "llama3.2",
                "response": "uid=0(root) gid=0(root)",
                "done_reason": "stop",
                "prompt_eval_count": 12,
                "eval_count": 5,
            })

        provider = OllamaProvider(
            LLMConfig(base_url="http://ollama.test", model="llama3.2", max_tokens=64),
            transport=httpx.MockTransport(handler),
        )

        response = await provider.complete("id", system_prompt="be a shell")
        await provider.cleanup()

        body = json.loads(requests[0].content)
        assert requests[0].url.path == "/api/generate"
        assert body["model"] == "llama3.2"
        assert body["stream"] is False
        assert body["system"] == "be a shell"
        assert body["options"]["num_predict"] == 64
        assert response.content == "uid=0(root) gid=0(root)"
        assert response.finish_reason == "stop"
        assert response.usage == {"prompt_tokens": 12, "completion_tokens": 5}

    @pytest.mark.asyncio
    async def test_client_is_reused_until_cleanup(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"response": "ok"})

        provider = OllamaProvider(LLMConfig(base_url="http://ollama.test"), transport=httpx.MockTransport(handler))

        await provider.complete("a")
        client = provider._client
        await provider.complete("b")

        assert provider._client is client
        assert len(calls) == 2

        await provider.cleanup()
        assert provider._client is None

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        provider = OllamaProvider(
            LLMConfig(base_url="http://ollama.test"),
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await provider.complete("hi")
        await provider.cleanup()

    def test_remote(self):
        provider = OllamaProvider.remote("10.0.0.5", model="mistral")

        assert provider.config.base_url == "http://10.0.0.5:11434"
        assert provider.supports_capability(ModelCapability.SYSTEM_PROMPT)


class TestGeminiProvider:
    """Test the Gemini provider against a mock transport."""

    @pytest.mark.asyncio
    async def test_complete(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={
                "candidates": [{
                    "content": {"parts": [{"text": "Linux "}, {"text": "kali"}]},
                    "finishReason": "STOP",
                }],
                "usageMetadata": {"promptTokenCount": 9, "candidatesTokenCount": 2},
            })

        provider = GeminiProvider(
            LLMConfig(
                base_url="https://generativelanguage.googleapis.com/v1beta",
                api_key="secret",
                model="gemini-2.0-flash",
            ),
            transport=httpx.MockTransport(handler),
        )

        response = await provider.complete("uname -n", system_prompt="be a shell")
        await provider.cleanup()

        request = requests[0]
        body = json.loads(request.content)
        assert request.url.path == "/v1beta/models/gemini-2.0-flash:generateContent"
        assert request.headers["x-goog-api-key"] == "secret"
        assert "key" not in request.url.params
        assert body["contents"][0]["parts"][0]["text"] == "uname -n"
        assert body["systemInstruction"]["parts"][0]["text"] == "be a shell"
        assert response.content == "Linux kali"
        assert response.finish_reason == "STOP"
        assert response.usage == {"prompt_tokens": 9, "completion_tokens": 2}

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        provider = GeminiProvider.from_api_key("")

        with pytest.raises(ValueError):
            await provider.complete("ls")

    @pytest.mark.asyncio
    async def test_api_key_stays_out_of_logs(self, vfs, caplog):
        """
        Given: A Gemini backend answering with a server error
        When: An unknown command falls back to it
        Then: The failure is logged without the API key anywhere in the log
        """
        provider = GeminiProvider(
            LLMConfig(base_url=GEMINI_BASE_URL, api_key="SECRET-KEY-123"),
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )
        engine = ShellEngine(vfs, fallback=KernelFallback(provider), pacing=0)

        with caplog.at_level(logging.DEBUG):
            lines = await engine.run_line("masscan 10.0.0.1")
        await engine.aclose()

        assert lines == ["bash: masscan: command not found"]
        assert "Kernel fallback unavailable" in caplog.text
        assert "SECRET-KEY-123" not in caplog.text

    def test_from_api_key(self):
        provider = GeminiProvider.from_api_key("secret", model="gemini-1.5-pro", temperature=0.2)

        assert provider.config.base_url == GEMINI_BASE_URL
        assert provider.config.model == "gemini-1.5-pro"
        assert provider.config.temperature == 0.2


class TestCreateProvider:
    """Test building providers from user configuration."""

    def test_ollama(self):
        provider = create_provider(cloudsh_config.LLMConfig(host="gpu.lan", port=9000, model="mistral"))

        assert isinstance(provider, OllamaProvider)
        assert provider.config.base_url == "http://gpu.lan:9000"
        assert provider.config.model == "mistral"

    def test_gemini_key_from_environment(self, monkeypatch):
        monkeypatch.setenv(cloudsh_config.API_KEY_ENV, "env-key")

        provider = create_provider(cloudsh_config.LLMConfig(provider="gemini", model="gemini-2.0-flash"))

        assert isinstance(provider, GeminiProvider)
        assert provider.config.api_key == "env-key"

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_provider(cloudsh_config.LLMConfig(provider="openai"))
