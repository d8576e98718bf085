"""Unit tests for credential parsing."""

import pytest

from keygate.auth.credential import (
    CredentialDescriptor,
    CredentialFormatError,
    is_bypass_credential,
    parse_credential,
)
from keygate.models.api_key import KeyClass


def test_parse_production_key() -> None:
    """Test parsing a well-formed production key."""
    descriptor = parse_credential("proj_123_production_abcd", namespace="proj")

    assert descriptor == CredentialDescriptor(
        project_id="123", key_class=KeyClass.PRODUCTION
    )


@pytest.mark.parametrize("key_class", ["production", "development", "restricted"])
def test_parse_every_key_class(key_class: str) -> None:
    """Test that every known key class is accepted."""
    descriptor = parse_credential(f"proj_p1_{key_class}_s3cr3t", namespace="proj")

    assert descriptor.key_class.value == key_class


def test_parse_project_id_with_underscores() -> None:
    """Test that the project id may contain the delimiter."""
    descriptor = parse_credential("proj_acme_web_app_development_f00d", namespace="proj")

    assert descriptor.project_id == "acme_web_app"
    assert descriptor.key_class == KeyClass.DEVELOPMENT


def test_parse_uses_configured_namespace() -> None:
    """Test that the namespace defaults to the configured tag."""
    descriptor = parse_credential("proj_123_production_abcd")

    assert descriptor.project_id == "123"


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "proj",
        "proj_123_abcd",
        "proj_123_production",
        "other_123_production_abcd",
        "PROJ_123_production_abcd",
        "proj_123_admin_abcd",
        "proj_123_Production_abcd",
        "proj__production_abcd",
        "proj_123_production_",
        "proj_123__production_abcd",
    ],
)
def test_parse_rejects_malformed(raw: str) -> None:
    """Test that deviations from the format raise CredentialFormatError."""
    with pytest.raises(CredentialFormatError):
        parse_credential(raw, namespace="proj")


def test_descriptor_is_immutable() -> None:
    """Test that descriptors cannot be modified after parsing."""
    descriptor = parse_credential("proj_123_production_abcd", namespace="proj")

    with pytest.raises(ValueError):
        descriptor.project_id = "456"


def test_bypass_literals() -> None:
    """Test bypass literal matching."""
    literals = ["local-dev-key", "dev-key"]

    assert is_bypass_credential("local-dev-key", literals) is True
    assert is_bypass_credential("dev-key", literals) is True
    assert is_bypass_credential("dev-key ", literals) is False
    assert is_bypass_credential("proj_123_production_abcd", literals) is False
    assert is_bypass_credential("dev-key", []) is False
