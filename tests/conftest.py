import pytest

from gatedview.config import PolicyConfig


def make_config(**overrides) -> PolicyConfig:
    data = {
        "domain": "example.com",
        "startUrl": "https://example.com",
        "allowedDomains": ["example.com"],
        "blockMedia": True,
        "adBlocker": True,
        "ignoreSslErrors": False,
        "orientation": "AUTO",
    }
    data.update(overrides)
    return PolicyConfig.model_validate(data)


@pytest.fixture
def config() -> PolicyConfig:
    return make_config()
