"""Configuration for signing requests with AWS Signature Version 4."""

from __future__ import annotations

from dataclasses import dataclass, field, fields

import yaml

_NULL_TAG = "tag:yaml.org,2002:null"
_CREDENTIALS_ERROR = (
    "must provide a AWS SigV4 Access key and Secret Key if credentials are "
    "specified in the SigV4 config"
)


@dataclass
class SigV4Config:
    """SigV4 signing settings; empty values fall back to the default credential chain."""

    region: str = ""
    access_key: str = ""
    secret_key: str = field(default="", repr=False)
    profile: str = ""
    role_arn: str = ""

    def validate(self) -> None:
        """Raise ValueError unless both or neither of the keys are given."""
        if (self.access_key == "") != (self.secret_key == ""):
            raise ValueError(_CREDENTIALS_ERROR)

    @classmethod
    def from_yaml(cls, text: str | bytes) -> "SigV4Config":
        """Read and validate a config, rejecting unknown and repeated fields."""
        config = cls(**_load_strict_fields(text, {f.name for f in fields(cls)}))
        config.validate()
        return config


def _load_strict_fields(text: str | bytes, known: set[str]) -> dict[str, str]:
    try:
        node = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML: {exc}") from exc
    if node is None or (isinstance(node, yaml.ScalarNode) and node.tag == _NULL_TAG):
        return {}
    if not isinstance(node, yaml.MappingNode):
        raise ValueError("sigv4 config must be a YAML mapping")
    values: dict[str, str] = {}
    for key_node, value_node in node.value:
        if not isinstance(key_node, yaml.ScalarNode):
            raise ValueError("sigv4 config keys must be strings")
        key = key_node.value
        if key in values:
            raise ValueError(f"mapping key {key!r} already defined")
        if key not in known:
            raise ValueError(f"field {key} not found in SigV4Config")
        if not isinstance(value_node, yaml.ScalarNode):
            raise ValueError(f"field {key} must be a string")
        values[key] = "" if value_node.tag == _NULL_TAG else value_node.value
    return values