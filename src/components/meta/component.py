"""
Meta component - per-page SEO/social meta resolution.

Resolves the meta bag for a request: field profiles, additional and default
meta, overrides, autofill, image transforms, restrictions, encoding and
sitename decoration.

Invariants:
- I1: Keys without a value resolve to '' (never missing, never None)
- I2: Explicit overrides win over element and context values
- I3: Non-URL strings in the output are HTML-encoded
- I4: A cache hit is returned as stored
"""

from __future__ import annotations

from src.components.settings import MetaConfigError

from ._impl import MetaService
from .models import (
    MetaValidationError,
    ResolveMetaInput,
    ResolveMetaOutput,
)


def run(inp: ResolveMetaInput, *, service: MetaService) -> ResolveMetaOutput:
    """
    Resolve page meta.

    Args:
        inp: Input containing the context and optional overrides.
        service: Configured meta service.

    Returns:
        ResolveMetaOutput with the meta bag, or errors when the override
        config patch is invalid.
    """
    try:
        meta = service.resolve(inp.context, inp.overrides)
    except MetaConfigError as e:
        errors = [
            MetaValidationError(code=err.code, message=err.message, field=err.field)
            for err in e.errors
        ] or [MetaValidationError(code="invalid_config", message=str(e))]
        return ResolveMetaOutput(meta={}, errors=errors, success=False)

    return ResolveMetaOutput(meta=meta, errors=[], success=True)
