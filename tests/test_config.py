"""Tests for configuration models and the YAML loader."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from formwizard.config import ConfigError, ConfigLoader
from formwizard.config.defaults import get_builtin_flow, get_default_settings, list_builtin_flows
from formwizard.config.models import FieldConfig, FlowConfig, LoggingConfig, WizardSettings, humanize


CUSTOM_FLOW = {
    "name": "partner",
    "steps": [
        {"label": "Contact", "fields": [
            {"name": "contactName", "rule": "required-string"},
            {"name": "contactEmail", "rule": "email"},
        ]},
        {"label": "Review"},
    ],
}


def test_humanize() -> None:
    assert humanize("interestedRegions") == "Interested Regions"
    assert humanize("years_experience") == "Years experience"


def test_field_defaults_and_messages() -> None:
    spec = FieldConfig(name="contactEmail", rule="email")
    assert spec.label == "Contact Email"
    assert spec.required_message == "Contact Email is required."
    assert spec.invalid_message == "Invalid contact email."
    assert spec.default == ""


def test_rule_must_fit_kind() -> None:
    with pytest.raises(ValidationError):
        FieldConfig(name="terms", kind="boolean", rule="email")


def test_file_fields_cannot_have_defaults() -> None:
    with pytest.raises(ValidationError):
        FieldConfig(name="license", kind="file", default="x.pdf")


def test_flow_rejects_duplicate_fields() -> None:
    with pytest.raises(ValidationError):
        FlowConfig(name="dup", steps=[
            {"label": "A", "fields": [{"name": "x"}]},
            {"label": "B", "fields": [{"name": "x"}]},
        ])


def test_flow_derived_names() -> None:
    flow = FlowConfig(**CUSTOM_FLOW)
    assert flow.storage_key == "partnerOnboardingForm"
    assert flow.title == "Partner Onboarding"


def test_builtin_flows() -> None:
    assert list_builtin_flows() == ["buyer", "seller"]
    buyer = get_builtin_flow("buyer")
    buyer["name"] = "changed"
    assert get_builtin_flow("buyer")["name"] == "buyer"
    with pytest.raises(KeyError):
        get_builtin_flow("nope")


def test_log_level_is_validated() -> None:
    assert LoggingConfig(level="debug").level == "DEBUG"
    with pytest.raises(ValidationError):
        LoggingConfig(level="chatty")


def test_loader_defaults_without_path() -> None:
    loader = ConfigLoader()
    assert loader.settings == WizardSettings()
    assert loader.flow_names() == ["buyer", "seller"]
    with pytest.raises(ConfigError):
        loader.load()


def test_loader_single_file(tmp_path: Path) -> None:
    settings_file = tmp_path / "settings.yaml"
    settings_file.write_text(yaml.dump({
        "autosave": {"delay_ms": 200},
        "flows": {"partner": CUSTOM_FLOW},
    }))

    loader = ConfigLoader(settings_file).load()
    assert loader.settings.autosave.delay_ms == 200
    assert loader.get_flow("partner").steps[0].label == "Contact"


def test_loader_directory_flow_files_override(tmp_path: Path) -> None:
    (tmp_path / "flows").mkdir()
    seller = get_builtin_flow("seller")
    seller["submit_latency"] = 0
    (tmp_path / "flows" / "seller.yaml").write_text(yaml.dump(seller))
    (tmp_path / "flows" / "notes.txt").write_text("ignored")

    loader = ConfigLoader(tmp_path).load()
    assert loader.settings == WizardSettings()
    assert loader.get_flow("seller").submit_latency == 0
    assert loader.flow_names() == ["buyer", "seller"]


def test_loader_errors(tmp_path: Path) -> None:
    bad_yaml = tmp_path / "bad.yaml"
    bad_yaml.write_text("autosave: [unclosed")
    with pytest.raises(ConfigError):
        ConfigLoader(bad_yaml).load()

    bad_value = tmp_path / "bad_value.yaml"
    bad_value.write_text(yaml.dump({"autosave": {"delay_ms": -1}}))
    with pytest.raises(ConfigError):
        ConfigLoader(bad_value).load()

    not_mapping = tmp_path / "list.yaml"
    not_mapping.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        ConfigLoader(not_mapping).load()

    with pytest.raises(ConfigError):
        ConfigLoader(tmp_path / "missing").load()

    with pytest.raises(ConfigError, match="Unknown flow"):
        ConfigLoader().get_flow("nope")


def test_save_round_trip(tmp_path: Path) -> None:
    loader = ConfigLoader.from_dict(settings=get_default_settings(), flows=[CUSTOM_FLOW])
    written = loader.save(tmp_path)

    assert written == tmp_path / "settings.yaml"
    reloaded = ConfigLoader(written).load()
    assert reloaded.settings == loader.settings
