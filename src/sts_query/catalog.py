# STS Query Client
# File: catalog.py
# Version: v2

"""Immutable per-service, per-API-version operation catalog.

A catalog is filled with ``register`` while a client is being built and
then frozen. After ``freeze`` it is read-only, so a single instance can be
shared by any number of concurrent calls without locking.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping

from .errors import CatalogError, UnknownOperationError
from .models import OperationSpec, ParamSpec, ShapeSpec


class OperationCatalog:
    def __init__(self, service: str, api_version: str) -> None:
        self.service = service
        self.api_version = api_version
        self._operations: Dict[str, OperationSpec] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def operations(self) -> Mapping[str, OperationSpec]:
        return MappingProxyType(self._operations)

    def register(
        self,
        operation_name: str,
        required_params: Iterable[ParamSpec] = (),
        optional_params: Iterable[ParamSpec] = (),
        response_shape: ShapeSpec | None = None,
    ) -> OperationSpec:
        """Add one operation and return its spec."""
        if self._frozen:
            raise CatalogError(
                f"Catalog {self.service}/{self.api_version} is frozen; "
                f"cannot register {operation_name}."
            )
        if operation_name in self._operations:
            raise CatalogError(f"Operation {operation_name} is already registered.")
        if response_shape is None:
            raise CatalogError(f"Operation {operation_name} needs a response shape.")

        required = tuple(required_params)
        optional = tuple(optional_params)

        seen = set()
        for param in required + optional:
            if param.name in seen:
                raise CatalogError(
                    f"Parameter '{param.name}' declared twice for {operation_name}."
                )
            seen.add(param.name)
            if param.required != (param in required):
                raise CatalogError(
                    f"Parameter '{param.name}' of {operation_name} is listed "
                    "with the wrong required flag."
                )

        spec = OperationSpec(
            name=operation_name,
            required_params=required,
            optional_params=optional,
            response_shape=response_shape,
        )
        self._operations[operation_name] = spec
        return spec

    def freeze(self) -> "OperationCatalog":
        self._frozen = True
        return self

    def lookup(self, operation_name: str) -> OperationSpec:
        try:
            return self._operations[operation_name]
        except KeyError:
            raise UnknownOperationError(operation_name, self.api_version) from None

    def names(self) -> List[str]:
        return sorted(self._operations)

    def __contains__(self, operation_name: object) -> bool:
        return operation_name in self._operations

    def __len__(self) -> int:
        return len(self._operations)
