import pytest
from dockeryzer.AI.provider import AIProvider
from dockeryzer.errors import AIProviderError


class FakeProvider(AIProvider):
    """
    Provider returning a canned answer and recording every call.
    """
    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.closed = False

    def generate_content(self, system_prompt, user_prompt, temperature):
        self.calls.append((system_prompt, user_prompt, temperature))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


@pytest.fixture
def fake_provider_factory():
    """
    Returns ``make(response="", error=None)`` building a provider factory.
    The created providers and the configs they were built from are kept
    on the factory as ``providers`` and ``configs``.
    """
    def make(response="", error=None):
        def factory(config):
            factory.configs.append(config)
            if not config.api_key:
                raise AIProviderError("API key is required")
            provider = FakeProvider(response, error)
            factory.providers.append(provider)
            return provider
        factory.configs = []
        factory.providers = []
        return factory
    return make
