"""Resource name composition.

Names are composed by plain string interpolation of the naming tokens into the
module's template for a resource purpose. Length-limited purposes are cut from
the right, so the resource-type prefix always survives and the random suffix
is what gets shortened.
"""

import logging
from typing import Dict, Optional, Union

from ..exceptions import UnknownResourcePurposeError
from ..regions import RegionAbbreviator
from .context import NamingContext, NamingModule
from .templates import ModuleNaming, NameTemplate, ResourcePurpose, get_module_naming

logger = logging.getLogger(__name__)


def truncate(name: str, max_length: int) -> str:
    """Right-truncate ``name`` to at most ``max_length`` characters.

    Deterministic and idempotent: ``truncate(truncate(s, n), n) == truncate(s, n)``.

    Raises:
        ValueError: If ``max_length`` is negative
    """
    if max_length < 0:
        raise ValueError(f"max_length must be >= 0, got {max_length}")
    return name[:max_length]


def render(template: NameTemplate, tokens: Dict[str, str]) -> str:
    """Render a template with already-resolved tokens.

    A truncated name never ends in ``-``; Azure rejects key vault names that
    do, so a separator left at the cut point is dropped.
    """
    if template.fixed:
        return template.pattern

    name = template.pattern.format(**tokens)
    if template.max_length is not None and len(name) > template.max_length:
        truncated = truncate(name, template.max_length).rstrip("-")
        logger.debug(
            f"Truncated name '{name}' to {template.max_length} characters: '{truncated}'"
        )
        return truncated
    return name


class NameComposer:
    """Compose resource names from a module's naming table."""

    def __init__(
        self,
        module: Union[NamingModule, str],
        abbreviator: Optional[RegionAbbreviator] = None,
    ) -> None:
        """Initialize the composer.

        Args:
            module: Module whose naming table is used
            abbreviator: Region abbreviator, defaults to the built-in table
        """
        self.naming: ModuleNaming = get_module_naming(NamingModule(module))
        self.abbreviator = abbreviator or RegionAbbreviator()

    @property
    def module(self) -> NamingModule:
        return self.naming.module

    def template_for(self, purpose: Union[ResourcePurpose, str]) -> NameTemplate:
        """Return the template registered for ``purpose``.

        Raises:
            UnknownResourcePurposeError: If the module has no such template
        """
        try:
            key = ResourcePurpose(purpose)
            return self.naming.templates[key]
        except (ValueError, KeyError) as e:
            raise UnknownResourcePurposeError(
                f"No naming template registered for purpose '{getattr(purpose, 'value', purpose)}'",
                purpose=str(getattr(purpose, "value", purpose)),
                module=self.module.value,
                cause=e,
            ) from e

    def compose(self, purpose: Union[ResourcePurpose, str], ctx: NamingContext) -> str:
        """Compose the name for one resource purpose."""
        template = self.template_for(purpose)
        return render(template, ctx.tokens(self.abbreviator))

    def compose_all(self, ctx: NamingContext) -> Dict[ResourcePurpose, str]:
        """Compose every name in the module's naming table."""
        tokens = ctx.tokens(self.abbreviator)
        return {
            purpose: render(template, tokens)
            for purpose, template in self.naming.templates.items()
        }


def compose(
    purpose: Union[ResourcePurpose, str],
    ctx: NamingContext,
    module: Union[NamingModule, str],
) -> str:
    return NameComposer(module).compose(purpose, ctx)
