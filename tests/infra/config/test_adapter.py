import pytest

from arc4kit.infra.config.adapter import ConfigAdapter
from arc4kit.schemas import KeyConfig, StreamConfig


@pytest.fixture
def sample_config() -> dict:
    return {
        "general": {"encoding": "latin-1", "salt_size": 16},
        "stream": {"leave_open": True, "chunk_size": 1024},
        "debug": {"log_level": "debug"},
    }


def test_get_config_returns_copy_of_mapping(sample_config):
    adapter = ConfigAdapter(sample_config)
    assert adapter.get_config() == sample_config
    assert adapter.get_config() is not sample_config


def test_key_config(sample_config):
    assert ConfigAdapter(sample_config).get_key_config() == KeyConfig(
        encoding="latin-1", salt_size=16
    )


def test_stream_config(sample_config):
    assert ConfigAdapter(sample_config).get_stream_config() == StreamConfig(
        leave_open=True, chunk_size=1024
    )


def test_log_level_is_upper_cased(sample_config):
    assert ConfigAdapter(sample_config).get_log_level() == "DEBUG"


def test_defaults_for_empty_config():
    adapter = ConfigAdapter({})
    assert adapter.get_key_config() == KeyConfig()
    assert adapter.get_stream_config() == StreamConfig()
    assert adapter.get_log_level() == "INFO"


def test_non_table_sections_are_ignored():
    adapter = ConfigAdapter({"general": "oops", "stream": [1, 2]})
    assert adapter.get_key_config() == KeyConfig()
    assert adapter.get_stream_config() == StreamConfig()


def test_rejects_small_salt_size():
    with pytest.raises(ValueError):
        ConfigAdapter({"general": {"salt_size": 3}}).get_key_config()


@pytest.mark.parametrize("size", [0, -1])
def test_rejects_non_positive_chunk_size(size):
    with pytest.raises(ValueError):
        ConfigAdapter({"stream": {"chunk_size": size}}).get_stream_config()


def test_rejects_unknown_log_level():
    with pytest.raises(ValueError):
        ConfigAdapter({"debug": {"log_level": "chatty"}}).get_log_level()
