import pytest

from zkit.config import DEFAULT_K, ZkitConfig, load_config
from zkit.errors import ConfigurationError


def test_defaults_from_empty_environment():
    cfg = load_config({})
    assert cfg == ZkitConfig()
    assert cfg.k == DEFAULT_K and cfg.rows == 16
    assert cfg.seed_bytes is None


def test_environment_overrides():
    cfg = load_config(
        {
            "ZKIT_K": "3",
            "ZKIT_MAX_DEGREE": "4",
            "ZKIT_SRS_SEED": "dev",
            "ZKIT_ENABLED_ROWS": "2",
            "ZKIT_LOG_LEVEL": "debug",
        }
    )
    assert (cfg.k, cfg.max_degree, cfg.enabled_rows) == (3, 4, 2)
    assert cfg.seed_bytes == b"dev"
    assert cfg.log_level == "debug"


def test_empty_seed_means_unseeded():
    assert load_config({"ZKIT_SRS_SEED": ""}).srs_seed is None


@pytest.mark.parametrize(
    "env",
    [
        {"ZKIT_K": "four"},
        {"ZKIT_K": "0"},
        {"ZKIT_K": "17"},
        {"ZKIT_MAX_DEGREE": "1"},
        {"ZKIT_K": "2", "ZKIT_ENABLED_ROWS": "5"},
        {"ZKIT_LOG_LEVEL": "chatty"},
    ],
)
def test_invalid_values(env):
    with pytest.raises(ConfigurationError):
        load_config(env)
