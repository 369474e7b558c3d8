"""Field metadata registry.

Derives, once per result-model type, the lookups used while translating
requests:

- search parameter ↔ native field name
- facet constant ↔ native field name
- native field name → facet configuration
- native field name ↔ model attribute name

Every mapping is checked to be one-to-one while the registry is built, so a
malformed declaration fails at startup instead of producing wrong queries.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from FacetSearch.core.errors import ConfigurationError
from FacetSearch.core.params import SearchParameter
from FacetSearch.metadata.fields import FacetField, FieldDeclaration, FullTextSearchField, declaration_of
from FacetSearch.utils.log import log


@dataclass(frozen=True, slots=True)
class FieldMetadataRegistry:
    """Immutable lookup tables derived from a result model's declarations."""

    model: type
    parameter_enum: type[SearchParameter]
    parameter_fields: Mapping[SearchParameter, str]
    field_parameters: Mapping[str, SearchParameter]
    facet_fields: Mapping[SearchParameter, str]
    field_facets: Mapping[str, SearchParameter]
    facet_defs: Mapping[str, FacetField]
    full_text_fields: tuple[FullTextSearchField, ...]
    property_fields: Mapping[str, str]
    field_properties: Mapping[str, str]

    @classmethod
    def build(cls, model: type, parameter_enum: type[SearchParameter]) -> FieldMetadataRegistry:
        """Read the search declarations of ``model``.

        Args:
            model: Dataclass result model declared with ``search_field``.
            parameter_enum: Enumeration of search parameters and facets.

        Returns:
            The registry for ``model``.

        Raises:
            ConfigurationError: If a declaration references an unknown
                parameter/facet constant, or two declarations claim the same
                native field or constant for different roles.
        """
        if not dataclasses.is_dataclass(model):
            raise ConfigurationError(f"{getattr(model, '__name__', model)} is not a dataclass result model")
        if not (isinstance(parameter_enum, type) and issubclass(parameter_enum, SearchParameter)):
            raise ConfigurationError(f"{parameter_enum!r} is not a SearchParameter enumeration")

        builder = _RegistryBuilder(model.__name__, parameter_enum)
        for model_field in dataclasses.fields(model):
            try:
                declaration = declaration_of(model_field)
            except TypeError as error:
                raise ConfigurationError(str(error)) from error
            if declaration is None:
                continue
            builder.add(model_field.name, declaration)
        builder.check_cross_roles()

        log.debug(
            "Field metadata registry built for %s: parameters=%d facets=%d full_text=%d",
            model.__name__,
            len(builder.parameter_fields),
            len(builder.facet_fields),
            len(builder.full_text_fields),
        )
        return cls(
            model=model,
            parameter_enum=parameter_enum,
            parameter_fields=MappingProxyType(builder.parameter_fields),
            field_parameters=MappingProxyType(_inverse(builder.parameter_fields)),
            facet_fields=MappingProxyType(builder.facet_fields),
            field_facets=MappingProxyType(_inverse(builder.facet_fields)),
            facet_defs=MappingProxyType(builder.facet_defs),
            full_text_fields=tuple(builder.full_text_fields),
            property_fields=MappingProxyType(builder.property_fields),
            field_properties=MappingProxyType(_inverse(builder.property_fields)),
        )

    def field_for(self, parameter: SearchParameter) -> str | None:
        """Return the native field filtered by ``parameter``."""
        return self.parameter_fields.get(parameter)

    def parameter_for(self, native: str) -> SearchParameter | None:
        """Return the search parameter filtering ``native``."""
        return self.field_parameters.get(native)

    def facet_field_for(self, facet: SearchParameter) -> str | None:
        """Return the native field faceted by ``facet``."""
        return self.facet_fields.get(facet)

    def facet_for(self, native: str) -> SearchParameter | None:
        """Return the facet constant bound to ``native``."""
        return self.field_facets.get(native)

    def facet_def(self, native: str) -> FacetField | None:
        """Return the facet configuration of ``native``."""
        return self.facet_defs.get(native)

    def property_for(self, native: str) -> str | None:
        """Return the model attribute stored in ``native``."""
        return self.field_properties.get(native)

    def native_for(self, prop: str) -> str | None:
        """Return the native field storing model attribute ``prop``."""
        return self.property_fields.get(prop)


class _RegistryBuilder:
    def __init__(self, model_name: str, parameter_enum: type[SearchParameter]) -> None:
        self.model_name = model_name
        self.parameter_enum = parameter_enum
        self.parameter_fields: dict[SearchParameter, str] = {}
        self.facet_fields: dict[SearchParameter, str] = {}
        self.facet_defs: dict[str, FacetField] = {}
        self.full_text_fields: list[FullTextSearchField] = []
        self.property_fields: dict[str, str] = {}

    def add(self, prop: str, declaration: FieldDeclaration) -> None:
        native = (declaration.native or prop).strip()
        if not native:
            raise ConfigurationError(f"{self.model_name}.{prop}: native field name must not be empty")
        _put_unique(self.property_fields, prop, native, f"{self.model_name}.{prop}", "attribute")

        if declaration.full_text is not None:
            full_text = declaration.full_text
            if full_text.field is None:
                full_text = dataclasses.replace(full_text, field=native)
            self.full_text_fields.append(full_text)

        facet_constant = None
        if declaration.facet is not None:
            facet = declaration.facet
            if facet.field is None:
                facet = dataclasses.replace(facet, field=native)
            facet_constant = self._resolve(facet.facet, f"{self.model_name}.{prop}.facet")
            facet = dataclasses.replace(facet, facet=facet_constant)
            _put_unique(self.facet_fields, facet_constant, facet.field, f"{self.model_name}.{prop}", "facet")
            self.facet_defs[facet.field] = facet

        if declaration.parameter is not None:
            parameter = self._resolve(declaration.parameter, f"{self.model_name}.{prop}.parameter")
            target = self.facet_fields[facet_constant] if facet_constant is not None else native
            _put_unique(self.parameter_fields, parameter, target, f"{self.model_name}.{prop}", "parameter")
        elif facet_constant is not None:
            _put_unique(
                self.parameter_fields,
                facet_constant,
                self.facet_fields[facet_constant],
                f"{self.model_name}.{prop}",
                "parameter",
            )

    def check_cross_roles(self) -> None:
        """Reject a native field bound to different constants as parameter and facet."""
        parameters_by_field = _inverse(self.parameter_fields)
        for facet, native in self.facet_fields.items():
            parameter = parameters_by_field.get(native)
            if parameter is not None and parameter is not facet:
                raise ConfigurationError(
                    f"{self.model_name}: native field {native!r} is filtered by {parameter.name} "
                    f"but faceted as {facet.name}"
                )

    def _resolve(self, value: SearchParameter | str, config_key: str) -> SearchParameter:
        if isinstance(value, self.parameter_enum):
            return value
        if isinstance(value, str):
            member = self.parameter_enum.lookup(value)
            if member is not None:
                return member
        raise ConfigurationError(f"{config_key}: {value!r} is not a member of {self.parameter_enum.__name__}")


def _put_unique(mapping: dict, key, value: str, config_key: str, role: str) -> None:
    """Insert ``key → value`` keeping ``mapping`` one-to-one."""
    existing = mapping.get(key)
    if existing is not None and existing != value:
        raise ConfigurationError(
            f"{config_key}: {role} {_label(key)} is already mapped to native field {existing!r}"
        )
    for other_key, other_value in mapping.items():
        if other_value == value and other_key != key:
            raise ConfigurationError(
                f"{config_key}: native field {value!r} is already mapped to {role} {_label(other_key)}"
            )
    mapping[key] = value


def _label(key) -> str:
    return key.name if isinstance(key, SearchParameter) else repr(key)


def _inverse(mapping: Mapping) -> dict:
    return {value: key for key, value in mapping.items()}
