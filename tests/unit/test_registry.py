"""Unit tests for the provider registry."""

import pytest

from neurolink_demo.llm.registry import (
    ALL_PROVIDERS,
    PROVIDERS,
    MatchRule,
    configured_providers,
    get_model_for_provider,
    is_fallback_enabled,
    is_known_provider,
    is_provider_configured,
    model_override_key,
    stats_key,
)


class TestProviderDescriptors:
    """Static descriptor set."""

    def test_priority_order(self):
        assert ALL_PROVIDERS == (
            "google-ai", "anthropic", "openai", "mistral", "vertex",
            "azure", "huggingface", "bedrock", "ollama",
        )

    def test_every_provider_has_descriptor(self):
        assert set(PROVIDERS) == set(ALL_PROVIDERS)

    def test_only_vertex_uses_any_rule(self):
        any_rule = [name for name, d in PROVIDERS.items() if d.match_rule is MatchRule.ANY]
        assert any_rule == ["vertex"]

    def test_ollama_has_no_required_vars(self):
        assert PROVIDERS["ollama"].required_env_vars == ()

    def test_default_models(self):
        assert PROVIDERS["openai"].default_model == "gpt-4o"
        assert PROVIDERS["google-ai"].default_model == "gemini-2.5-pro"
        assert PROVIDERS["mistral"].default_model == "mistral-small"
        assert PROVIDERS["ollama"].default_model == "llama3.2:latest"
        assert "claude-3-7-sonnet" in PROVIDERS["bedrock"].default_model

    def test_is_known_provider(self):
        assert is_known_provider("openai")
        assert not is_known_provider("auto")
        assert not is_known_provider("nonexistent")

    def test_stats_key(self):
        assert stats_key("openai") == "openai"
        assert stats_key("junk-1") == "unknown"
        assert stats_key("junk-2") == "unknown"


class TestModelResolution:
    """Model override keys and lookups."""

    @pytest.mark.parametrize("name,key", [
        ("openai", "OPENAI_MODEL"),
        ("google-ai", "GOOGLE_AI_MODEL"),
        ("huggingface", "HUGGINGFACE_MODEL"),
        ("weird.name/x", "WEIRD_NAME_X_MODEL"),
        ("", "_MODEL"),
    ])
    def test_model_override_key(self, name, key):
        assert model_override_key(name) == key

    def test_default_model_when_no_override(self):
        assert get_model_for_provider("anthropic", {}) == "claude-3-5-sonnet-20241022"

    def test_override_wins(self):
        env = {"GOOGLE_AI_MODEL": "gemini-2.0-flash"}
        assert get_model_for_provider("google-ai", env) == "gemini-2.0-flash"

    def test_empty_override_ignored(self):
        assert get_model_for_provider("openai", {"OPENAI_MODEL": ""}) == "gpt-4o"

    def test_unknown_provider_falls_back_to_openai_default(self):
        assert get_model_for_provider("nonexistent", {}) == "gpt-4o"


class TestConfigurationCheck:
    """Fast, environment-only configuration check."""

    def test_single_key_provider(self):
        assert is_provider_configured("openai", {"OPENAI_API_KEY": "sk-x"})
        assert not is_provider_configured("openai", {})

    def test_empty_value_is_unset(self):
        assert not is_provider_configured("openai", {"OPENAI_API_KEY": ""})

    def test_all_rule_requires_every_var(self):
        assert not is_provider_configured("bedrock", {"AWS_ACCESS_KEY_ID": "AKIA123"})
        assert is_provider_configured(
            "bedrock", {"AWS_ACCESS_KEY_ID": "AKIA123", "AWS_SECRET_ACCESS_KEY": "secret"}
        )

    def test_azure_needs_key_and_endpoint(self):
        assert not is_provider_configured("azure", {"AZURE_OPENAI_API_KEY": "k"})

    @pytest.mark.parametrize("var", [
        "GOOGLE_VERTEX_PROJECT",
        "GOOGLE_APPLICATION_CREDENTIALS",
        "GOOGLE_AUTH_CLIENT_EMAIL",
    ])
    def test_vertex_any_single_var(self, var):
        assert is_provider_configured("vertex", {var: "value"})

    def test_vertex_nothing_set(self):
        assert not is_provider_configured("vertex", {})

    def test_ollama_always_configured(self):
        assert is_provider_configured("ollama", {})

    def test_unknown_provider_not_configured(self):
        assert not is_provider_configured("nonexistent", {"NONEXISTENT_API_KEY": "x"})

    def test_configured_providers_in_priority_order(self):
        env = {"OPENAI_API_KEY": "sk-x", "GOOGLE_AI_API_KEY": "g", "MISTRAL_API_KEY": "m"}
        assert configured_providers(env) == ["google-ai", "openai", "mistral", "ollama"]

    def test_configured_providers_custom_order(self):
        env = {"OPENAI_API_KEY": "sk-x", "GOOGLE_AI_API_KEY": "g"}
        order = ["openai", "mistral", "google-ai"]
        assert configured_providers(env, order=order) == ["openai", "google-ai"]


class TestFallbackToggle:
    """ENABLE_FALLBACK parsing."""

    def test_default_enabled(self):
        assert is_fallback_enabled({})

    @pytest.mark.parametrize("value", ["false", "FALSE", "0", "no", "off", " Off "])
    def test_disabled_values(self, value):
        assert not is_fallback_enabled({"ENABLE_FALLBACK": value})

    @pytest.mark.parametrize("value", ["true", "1", "yes", "anything"])
    def test_enabled_values(self, value):
        assert is_fallback_enabled({"ENABLE_FALLBACK": value})

    def test_reads_os_environ_each_call(self, monkeypatch):
        monkeypatch.setenv("ENABLE_FALLBACK", "false")
        assert not is_fallback_enabled()
        monkeypatch.setenv("ENABLE_FALLBACK", "true")
        assert is_fallback_enabled()
