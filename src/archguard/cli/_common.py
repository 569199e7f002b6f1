"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import DEFAULT_CONFIG_NAMES, ArchitectureConfig, discover_config

console = Console()


def resolve_config_path(project: Path, config: Optional[Path]) -> Path:
    """Explicit config paths are relative to the project unless absolute.

    Without one, the first default config file present in the project is
    used, falling back to the first default name.
    """
    if config is not None:
        return config if config.is_absolute() else project / config
    return discover_config(project) or project / DEFAULT_CONFIG_NAMES[0]


def print_config(config: ArchitectureConfig) -> None:
    console.print()
    console.print("[bold]Configuration:[/bold]")
    console.print("Layers:")
    for layer in config.layers:
        console.print(f"  - {layer.name} (pattern: {layer.pattern})", markup=False)

    console.print()
    console.print("Layer Dependency Rules:")
    for rule in config.rules:
        console.print(f"  - {rule.from_layer} -> {rule.to_layer}", markup=False)

    if config.interface_rules:
        console.print()
        console.print("Interface Implementation Rules:")
        for rule in config.interface_rules:
            console.print(
                f"  - Structs matching '{rule.struct_pattern}' must implement interfaces "
                f"matching '{rule.interface_pattern}'",
                markup=False,
            )

    if config.parameter_rules:
        console.print()
        console.print("Parameter Type Rules:")
        for rule in config.parameter_rules:
            kind = "interface" if rule.should_use_interface else "struct"
            console.print(
                f"  - Methods in '{rule.struct_pattern}' matching '{rule.method_pattern}' "
                f"should use {kind} parameters for '{rule.parameter_type_pattern}'",
                markup=False,
            )

    if config.layer_specific_rules:
        console.print()
        console.print("Layer-Specific Rules:")
        for i, rule in enumerate(config.layer_specific_rules, 1):
            console.print(
                f"  - [{i}] Layer '{rule.layer}' rule type '{rule.rule_type}'", markup=False
            )
            for key, value in rule.parameters.items():
                console.print(f"      {key}: {value}", markup=False)

    if config.direct_layer_dependency_rules:
        console.print()
        console.print("Direct Layer Dependency Rules:")
        for rule in config.direct_layer_dependency_rules:
            action = "may depend on" if rule.allowed else "must not depend on"
            console.print(
                f"  - Layer '{rule.source_layer}' {action} layer '{rule.target_layer}'",
                markup=False,
            )
