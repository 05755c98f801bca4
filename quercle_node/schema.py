from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


class PropertyType:
    STRING = "string"
    OPTIONS = "options"

    _ALL = {STRING, OPTIONS}

    @classmethod
    def validate(cls, prop_type: str) -> str:
        if prop_type not in cls._ALL:
            raise ValueError(f"Invalid property type: {prop_type}. Must be one of {cls._ALL}")
        return prop_type


@dataclass
class PropertyOption:
    name: str
    value: str
    description: str | None = None
    action: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name, "value": self.value}
        if self.description is not None:
            d["description"] = self.description
        if self.action is not None:
            d["action"] = self.action
        return d


@dataclass
class NodeProperty:
    display_name: str
    name: str
    type: str
    default: Any = ""
    description: str | None = None
    required: bool = False
    options: list[PropertyOption] | None = None
    show: dict[str, list[str]] | None = None
    placeholder: str | None = None
    type_options: dict[str, Any] | None = None
    no_data_expression: bool = False

    @classmethod
    def string(
        cls,
        name: str,
        display_name: str,
        *,
        description: str | None = None,
        required: bool = False,
        default: str = "",
    ) -> NodeProperty:
        return cls(
            display_name=display_name,
            name=name,
            type=PropertyType.STRING,
            default=default,
            description=description,
            required=required,
        )

    @classmethod
    def select(
        cls,
        name: str,
        display_name: str,
        options: list[PropertyOption],
        *,
        default: str,
        description: str | None = None,
    ) -> NodeProperty:
        return cls(
            display_name=display_name,
            name=name,
            type=PropertyType.OPTIONS,
            default=default,
            description=description,
            options=options,
        )

    def shown_when(self, **conditions: list[str]) -> NodeProperty:
        self.show = {**(self.show or {}), **conditions}
        return self

    def with_placeholder(self, placeholder: str) -> NodeProperty:
        self.placeholder = placeholder
        return self

    def with_type_options(self, **options: Any) -> NodeProperty:
        self.type_options = {**(self.type_options or {}), **options}
        return self

    def without_expressions(self) -> NodeProperty:
        self.no_data_expression = True
        return self

    def is_visible(self, values: dict[str, Any]) -> bool:
        """Return whether the property is shown for the given parameter values."""
        if not self.show:
            return True
        return all(values.get(key) in allowed for key, allowed in self.show.items())

    def to_dict(self) -> dict[str, Any]:
        PropertyType.validate(self.type)
        d: dict[str, Any] = {
            "displayName": self.display_name,
            "name": self.name,
            "type": self.type,
            "default": self.default,
        }
        if self.required:
            d["required"] = True
        if self.no_data_expression:
            d["noDataExpression"] = True
        if self.description is not None:
            d["description"] = self.description
        if self.options is not None:
            d["options"] = [o.to_dict() for o in self.options]
        if self.show is not None:
            d["displayOptions"] = {"show": self.show}
        if self.placeholder is not None:
            d["placeholder"] = self.placeholder
        if self.type_options is not None:
            d["typeOptions"] = self.type_options
        return d


@dataclass
class CredentialRef:
    name: str
    required: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "required": self.required}


@dataclass
class NodeDescription:
    display_name: str
    name: str
    description: str
    icon: str | None = None
    group: list[str] = field(default_factory=lambda: ["transform"])
    version: int = 1
    subtitle: str | None = None
    defaults: dict[str, Any] = field(default_factory=dict)
    inputs: list[str] = field(default_factory=lambda: ["main"])
    outputs: list[str] = field(default_factory=lambda: ["main"])
    credentials: list[CredentialRef] = field(default_factory=list)
    properties: list[NodeProperty] = field(default_factory=list)

    def add_property(self, prop: NodeProperty) -> NodeDescription:
        self.properties.append(prop)
        return self

    def add_credential(self, credential: CredentialRef) -> NodeDescription:
        self.credentials.append(credential)
        return self

    def get_property(self, name: str) -> NodeProperty | None:
        return next((p for p in self.properties if p.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "displayName": self.display_name,
            "name": self.name,
            "group": self.group,
            "version": self.version,
            "description": self.description,
            "defaults": self.defaults,
            "inputs": self.inputs,
            "outputs": self.outputs,
            "credentials": [c.to_dict() for c in self.credentials],
            "properties": [p.to_dict() for p in self.properties],
        }
        if self.icon is not None:
            d["icon"] = self.icon
        if self.subtitle is not None:
            d["subtitle"] = self.subtitle
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


__all__ = [
    "PropertyType",
    "PropertyOption",
    "NodeProperty",
    "CredentialRef",
    "NodeDescription",
]
