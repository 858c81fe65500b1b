"""Pydantic models for configuration."""

from pydantic import BaseModel, Field


class ValidationSettings(BaseModel):
    """Settings for the probe group validation pipeline.

    Args:
        normalize_one_based_contact_ids: Renumber contact ids to start at 0 when
            the ids of the whole group are exactly 1..N. When disabled, contact
            ids are kept as given and are not required to be numeric.
        strict_specification: Reject documents whose ``specification`` differs
            from the one a ProbeGroup subclass expects. When disabled, the
            mismatch is only logged.

    Examples:
        # Keep contact ids exactly as written in the file
        settings = ValidationSettings(normalize_one_based_contact_ids=False)
    """

    model_config = {"frozen": True}

    normalize_one_based_contact_ids: bool = True
    strict_specification: bool = True


class SerializationSettings(BaseModel):
    """Settings for writing probeinterface JSON documents.

    Args:
        indent: Indentation passed to ``json.dumps``; None writes a single line.
        sort_keys: Sort object keys in the output.
    """

    model_config = {"frozen": True}

    indent: int | None = Field(default=2, ge=0)
    sort_keys: bool = False


class Settings(BaseModel):
    """Complete settings for openprobe.

    Examples:
        # Defaults
        settings = Settings()

        # Compact output
        settings = Settings(serialization={"indent": None})
    """

    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    serialization: SerializationSettings = Field(default_factory=SerializationSettings)
