"""
Credential string parsing.

Keys look like ``<namespace>_<project_id>_<class>_<suffix>``. The project
id may itself contain underscores, so it is everything between the
namespace tag and the last two segments. Nothing parsed here is trusted
for authorization; the descriptor only has to be cross-checked against
the stored record.
"""

from pydantic import BaseModel, ConfigDict

from keygate.config import settings
from keygate.models.api_key import KeyClass

DELIMITER = "_"
_KEY_CLASSES = {key_class.value for key_class in KeyClass}


class CredentialFormatError(ValueError):
    """Raised when a credential string does not match the key format."""


class CredentialDescriptor(BaseModel):
    """Fields recovered from a raw credential string."""

    model_config = ConfigDict(frozen=True)

    project_id: str
    key_class: KeyClass


def is_bypass_credential(raw: str, bypass_credentials: list[str] | None = None) -> bool:
    """
    Check whether a credential is one of the development bypass literals.

    Args:
        raw: Raw credential string
        bypass_credentials: Literals to match (defaults to settings)

    Returns:
        True if the credential is a bypass literal
    """
    if bypass_credentials is None:
        bypass_credentials = settings.bypass_credentials
    return raw in bypass_credentials


def parse_credential(raw: str, namespace: str | None = None) -> CredentialDescriptor:
    """
    Parse a raw credential string into a descriptor.

    Args:
        raw: Raw credential string
        namespace: Expected namespace tag (defaults to settings)

    Returns:
        CredentialDescriptor with project id and key class

    Raises:
        CredentialFormatError: If the string does not match the format
    """
    namespace = namespace or settings.credential_namespace
    if not isinstance(raw, str) or not raw:
        raise CredentialFormatError("Credential is empty")

    parts = raw.split(DELIMITER)
    if len(parts) < 4:
        raise CredentialFormatError("Wrong number of credential segments")

    if parts[0] != namespace:
        raise CredentialFormatError("Unknown credential namespace")

    project_id = DELIMITER.join(parts[1:-2])
    key_class = parts[-2]
    suffix = parts[-1]

    if not project_id or any(not segment for segment in parts[1:-2]):
        raise CredentialFormatError("Missing project id")
    if key_class not in _KEY_CLASSES:
        raise CredentialFormatError("Unknown key class")
    if not suffix:
        raise CredentialFormatError("Missing key suffix")

    return CredentialDescriptor(project_id=project_id, key_class=KeyClass(key_class))
