"""GD&T authoring kernel.

FCF rule validation, tolerance calculators and tolerance stack-up analysis.
"""

from __future__ import annotations

from importlib import import_module

_EXPORTS = {
    "validate_fcf": "gdt_kernel.core.gdt.rules",
    "validate_fcf_strict": "gdt_kernel.core.gdt.rules",
    "validate_by_category": "gdt_kernel.core.gdt.rules",
    "get_rules": "gdt_kernel.core.gdt.rules",
    "get_rules_by_category": "gdt_kernel.core.gdt.rules",
    "RuleRegistry": "gdt_kernel.core.gdt.rules",
    "calculate_size_limits": "gdt_kernel.core.gdt.calculators.size_limits",
    "calculate_position": "gdt_kernel.core.gdt.calculators.position",
    "calculate_flatness": "gdt_kernel.core.gdt.calculators.flatness",
    "calculate_perpendicularity": "gdt_kernel.core.gdt.calculators.perpendicularity",
    "calculate_profile": "gdt_kernel.core.gdt.calculators.profile",
    "calculate": "gdt_kernel.core.gdt.calculators",
    "calculate_stackup": "gdt_kernel.core.stackup.calculator",
    "compare_all_methods": "gdt_kernel.core.stackup.calculator",
    "analyze_stackup": "gdt_kernel.core.stackup.calculator",
    "validate_stackup_input": "gdt_kernel.core.stackup.validation",
}


def __getattr__(name: str):
    """Lazily resolve the public API and subpackages."""
    if name in _EXPORTS:
        value = getattr(import_module(_EXPORTS[name]), name)
        globals()[name] = value
        return value
    try:
        module = import_module(f"{__name__}.{name}")
    except ModuleNotFoundError as exc:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'") from exc
    globals()[name] = module
    return module


__all__ = sorted(_EXPORTS)
