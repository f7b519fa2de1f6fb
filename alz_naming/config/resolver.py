"""
Configuration resolver: merges partial override documents onto defaults.

Each field of the default schema is classified before merging:

- scalar: the override value replaces the default
- list: the override list replaces the default list (no element-wise merge)
- object: a nested model with its own defaults; merged field by field
- keyed map: a map of named entries (schedules, subnets, ...); replaced whole

An explicit ``null`` for an object field, replace-marked or not, means "use
the default sub-tree".
The merged tree is then validated by the schema itself, whose scalar fields
are strict, so type mismatches are reported rather than coerced. All problems
are raised together before any result is returned.
"""

import logging
import sys
from enum import Enum
from typing import (
    Annotated,
    Any,
    Dict,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from ..exceptions import ConfigValidationError, wrap_validation_error
from ..naming.context import NamingModule
from .models import LandingZoneConfig, default_config

if sys.version_info >= (3, 10):
    from types import UnionType

    _UNION_TYPES: Tuple[Any, ...] = (Union, UnionType)
else:
    _UNION_TYPES = (Union,)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class FieldKind(str, Enum):
    """How a field of the default schema is merged."""

    SCALAR = "scalar"
    LIST = "list"
    OBJECT = "object"
    KEYED_MAP = "keyed_map"
    REPLACED_OBJECT = "replaced_object"


def _strip_optional(annotation: Any) -> Any:
    if get_origin(annotation) in _UNION_TYPES:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def classify_field(info: FieldInfo) -> Tuple[FieldKind, Optional[Type[BaseModel]]]:
    """
    Classify a schema field for merging.

    Args:
        info: pydantic field definition

    Returns:
        The field kind, plus the nested model class for object fields
    """
    annotation = _strip_optional(info.annotation)
    origin = get_origin(annotation)

    if origin in (dict, Mapping):
        return FieldKind.KEYED_MAP, None
    if origin in (list, tuple, set, frozenset):
        return FieldKind.LIST, None
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        extra = info.json_schema_extra
        if isinstance(extra, dict) and extra.get("merge") == "replace":
            return FieldKind.REPLACED_OBJECT, annotation
        return FieldKind.OBJECT, annotation
    return FieldKind.SCALAR, None


def field_type_at(model_cls: Type[BaseModel], path: List[str]) -> Optional[Any]:
    """
    Find the scalar type a dotted override path points at.

    Keyed map entries consume one path segment for the entry name.

    Returns:
        The leaf annotation without Optional/Annotated wrappers, or None when
        the path is unknown or does not end on a scalar field
    """
    current: Any = model_cls
    index = 0
    while index < len(path):
        if not (isinstance(current, type) and issubclass(current, BaseModel)):
            return None
        info = current.model_fields.get(path[index])
        if info is None:
            return None

        kind, nested_cls = classify_field(info)
        annotation = _strip_optional(info.annotation)
        if nested_cls is not None:
            current = nested_cls
        elif kind is FieldKind.KEYED_MAP:
            args = get_args(annotation)
            current = _strip_optional(args[1]) if len(args) == 2 else None
            index += 1
        elif kind is FieldKind.SCALAR:
            current = annotation
        else:
            return None
        index += 1

    if get_origin(current) is Annotated:
        current = get_args(current)[0]
    if isinstance(current, type) and issubclass(current, BaseModel):
        return None
    return current


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


class ConfigResolver:
    """Resolve override documents against a default configuration tree."""

    def __init__(self, section: Optional[str] = None) -> None:
        """
        Args:
            section: Name reported in errors, usually the module name
        """
        self.section = section

    def resolve(self, defaults: M, overrides: Optional[Mapping[str, Any]] = None) -> M:
        """
        Merge ``overrides`` onto ``defaults``.

        Args:
            defaults: Fully populated default tree
            overrides: Partial override document, or None

        Returns:
            A new, fully populated tree of the same type as ``defaults``

        Raises:
            ConfigValidationError: On unknown keys, type mismatches or values
                the schema rejects
        """
        if overrides is None:
            return defaults.model_copy(deep=True)

        model_cls = type(defaults)
        issues: List[Tuple[str, str]] = []
        merged = self._merge(model_cls, defaults.model_dump(), overrides, "", issues)

        result: Optional[M] = None
        try:
            result = model_cls.model_validate(merged)
        except ValidationError as e:
            issues.extend(wrap_validation_error(e).issues)

        if issues or result is None:
            logger.debug(
                f"Rejected overrides for {model_cls.__name__}: {len(issues)} issue(s)"
            )
            raise ConfigValidationError(
                f"Invalid configuration overrides for {model_cls.__name__}",
                issues=issues,
                config_section=self.section,
            )
        return result

    def _merge(
        self,
        model_cls: Type[BaseModel],
        base: Dict[str, Any],
        overrides: Any,
        path: str,
        issues: List[Tuple[str, str]],
    ) -> Dict[str, Any]:
        if not isinstance(overrides, Mapping):
            issues.append(
                (path or "<root>", f"expected an object, got {type(overrides).__name__}")
            )
            return base

        result = dict(base)
        fields = model_cls.model_fields
        for raw_key, value in overrides.items():
            key = str(raw_key)
            field_path = _join(path, key)
            info = fields.get(key)
            if info is None:
                issues.append((field_path, "unknown field"))
                continue

            kind, nested_cls = classify_field(info)
            if value is None and nested_cls is not None:
                # null on any nested object keeps the default sub-tree
                continue
            if kind is FieldKind.OBJECT and nested_cls is not None:
                nested_base = result.get(key)
                if nested_base is None:
                    nested_base = self._nested_defaults(nested_cls)
                result[key] = self._merge(nested_cls, nested_base, value, field_path, issues)
            else:
                # scalars, lists, keyed maps and replace-marked objects
                result[key] = value
        return result

    @staticmethod
    def _nested_defaults(model_cls: Type[BaseModel]) -> Dict[str, Any]:
        try:
            return model_cls().model_dump()
        except ValidationError:
            return {}


def resolve(defaults: M, overrides: Optional[Mapping[str, Any]] = None) -> M:
    """Merge ``overrides`` onto ``defaults``; see ``ConfigResolver.resolve``."""
    return ConfigResolver().resolve(defaults, overrides)


def resolve_module(
    module: Union[NamingModule, str], overrides: Optional[Mapping[str, Any]] = None
) -> LandingZoneConfig:
    """Resolve overrides against a module's built-in defaults."""
    module = NamingModule(module)
    return ConfigResolver(section=module.value).resolve(default_config(module), overrides)
