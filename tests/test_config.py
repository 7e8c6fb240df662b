import pytest

from hyprsession.config import Configuration, coerce_to_bool
from hyprsession.config_loader import load_config
from hyprsession.constants import DEFAULT_INTERVAL
from hyprsession.models import ConfigError
from hyprsession.schema import SESSION_CONFIG_SCHEMA
from hyprsession.validation import ConfigField, ConfigItems, ConfigValidator, format_config_error


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, False),
        ("", False),
        ("no", False),
        (" Off ", False),
        ("disabled", False),
        ("yes", True),
        ("anything", True),
        (0, False),
        (1, True),
        (True, True),
    ],
)
def test_coerce_to_bool(value, expected):
    assert coerce_to_bool(value) is expected


def test_coerce_to_bool_default():
    assert coerce_to_bool(None, default=True) is True


def test_configuration_getters(test_logger):
    conf = Configuration(
        {"interval": "30", "auto_save": "false", "ipc_timeout": 2, "bad_int": "x"},
        logger=test_logger,
        schema=SESSION_CONFIG_SCHEMA,
    )
    assert conf.get_int("interval") == 30
    assert conf.get_bool("auto_save", True) is False
    assert conf.get_float("ipc_timeout") == 2.0
    assert conf.get_float("shutdown_timeout") == 3.0
    assert conf.get_int("bad_int", 7) == 7
    assert conf.get_str("missing", "fallback") == "fallback"
    assert conf.get("silent") is False


def test_configuration_without_schema(test_logger):
    conf = Configuration(logger=test_logger)
    assert conf.get_int("interval", DEFAULT_INTERVAL) == DEFAULT_INTERVAL
    assert conf.get("interval") is None


def test_config_field_type_name():
    assert ConfigField("a", int).type_name == "int"
    assert ConfigField("a", (int, float)).type_name == "int or float"


def test_config_items_lookup():
    items = ConfigItems(ConfigField("a"), ConfigField("b", int))
    assert items.get("b").field_type is int
    assert items.get("c") is None


def test_format_config_error():
    assert format_config_error("s", "f", "bad") == "[s] Config error for 'f': bad"
    assert format_config_error("s", "f", "bad", "fix it") == "[s] Config error for 'f': bad -> fix it"


def test_validator(test_logger):
    config = {"interval": "soon", "auto_save": "maybe", "silent": "yes", "ipc_timeout": 0.5, "debug": 1}
    errors = ConfigValidator(config, "hyprsession", test_logger).validate(SESSION_CONFIG_SCHEMA)
    assert len(errors) == 3
    assert any("'interval'" in err for err in errors)
    assert any("'auto_save'" in err and "true/false" in err for err in errors)
    assert any("'debug'" in err for err in errors)


def test_validator_unknown_keys(test_logger):
    validator = ConfigValidator({"intervall": 3, "foobar": 1, "debug": True}, "hyprsession", test_logger)
    warnings = validator.warn_unknown_keys(SESSION_CONFIG_SCHEMA)
    assert len(warnings) == 2
    assert "did you mean 'interval'" in warnings[0]
    assert "will be ignored" in warnings[1]


def test_load_config_missing_file(tmp_path, test_logger):
    conf = load_config(test_logger, str(tmp_path / "nope.toml"))
    assert conf.get_int("interval") == DEFAULT_INTERVAL
    assert conf.get_bool("auto_save") is True


def test_load_config_file_and_overrides(tmp_path, test_logger):
    path = tmp_path / "config.toml"
    path.write_text('[hyprsession]\ninterval = 10\nsilent = true\nsession_file = "/tmp/s.json"\n')

    conf = load_config(test_logger, str(path), overrides={"interval": 5, "silent": None})

    assert conf.get_int("interval") == 5
    assert conf.get_bool("silent") is True
    assert conf.get_str("session_file") == "/tmp/s.json"


def test_load_config_syntax_error(tmp_path, test_logger):
    path = tmp_path / "config.toml"
    path.write_text("[hyprsession\ninterval = ")
    with pytest.raises(ConfigError):
        load_config(test_logger, str(path))


def test_load_config_bad_section(tmp_path, test_logger):
    path = tmp_path / "config.toml"
    path.write_text('hyprsession = "yes"\n')
    with pytest.raises(ConfigError):
        load_config(test_logger, str(path))


def test_load_config_bad_value(tmp_path, test_logger):
    path = tmp_path / "config.toml"
    path.write_text('[hyprsession]\ninterval = "often"\n')
    with pytest.raises(ConfigError):
        load_config(test_logger, str(path))
