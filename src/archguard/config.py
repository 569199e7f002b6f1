"""Architecture rule configuration: loading, validation and building.

A configuration document declares layers and the rules between them:

    layers:
      - name: Domain
        pattern: "^domain$"
      - name: Application
        pattern: "^application$"
    rules:
      - from: Application
        to: Domain
    interfaceRules:
      - structPattern: ".*Repository$"
        interfacePattern: ".*RepositoryInterface$"
    parameterRules:
      - structPattern: ".*Service$"
        methodPattern: "New.*"
        parameterTypePattern: ".*Repository.*"
        shouldUseInterface: true
    layerSpecificRules:
      - layer: Domain
        ruleType: dependency
        parameters:
          targetPattern: "infrastructure"
    directLayerDependencyRules:
      - sourceLayer: Domain
        targetLayer: Application
        allowed: false

YAML (``.yml``/``.yaml``) and TOML (``.toml``) documents are accepted.
Validation runs before anything is built, so a bad pattern or a reference
to an undefined layer fails fast and names the offending rule.

Example:
    >>> config = load_config(Path(".archguard.yml"))
    >>> result = config.run_architecture_tests(Path("."))
    >>> result.passed
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .architecture import (
    Architecture,
    DependencyRule,
    InterfaceImplementationRule,
    Layer,
    LayeredArchitecture,
    ParameterRule,
    Pattern,
)
from .exceptions import (
    ConfigurationReferenceError,
    InvalidConfigError,
    InvalidPathError,
)
from .logging_config import get_logger

logger = get_logger(__name__)

# Config files looked up in the project root when none is given, in order
DEFAULT_CONFIG_NAMES = (".archguard.yml", ".archguard.yaml", "archguard.toml")

RULE_TYPES = ("dependency", "interface", "parameter")

REQUIRED_PARAMETERS: dict[str, tuple[str, ...]] = {
    "dependency": ("targetPattern",),
    "interface": ("structPattern", "interfacePattern"),
    "parameter": ("structPattern", "methodPattern", "parameterTypePattern", "shouldUseInterface"),
}

_TRUE = ("true", "yes", "1")
_FALSE = ("false", "no", "0")


def parse_bool(value: Any, key: str) -> bool:
    """Accept real booleans and the strings true/false/yes/no/1/0."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidConfigError(key, value, "expected true or false")


@dataclass(frozen=True)
class LayerConfig:
    name: str
    pattern: str


@dataclass(frozen=True)
class RuleConfig:
    """Layer ``from_layer`` may import layer ``to_layer``."""

    from_layer: str
    to_layer: str


@dataclass(frozen=True)
class InterfaceRuleConfig:
    struct_pattern: str
    interface_pattern: str


@dataclass(frozen=True)
class ParameterRuleConfig:
    struct_pattern: str
    method_pattern: str
    parameter_type_pattern: str
    should_use_interface: bool = False


@dataclass(frozen=True)
class LayerSpecificRuleConfig:
    layer: str
    rule_type: str
    parameters: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DirectLayerDependencyRuleConfig:
    source_layer: str
    target_layer: str
    allowed: bool = False


@dataclass
class BuildResult:
    """Everything built from a configuration, ready to check."""

    architecture: Architecture
    layered: LayeredArchitecture
    dependency_rules: list[DependencyRule] = field(default_factory=list)
    interface_rules: list[InterfaceImplementationRule] = field(default_factory=list)
    parameter_rules: list[ParameterRule] = field(default_factory=list)


@dataclass
class CheckResult:
    """Outcome of a full run: pass/fail flag and ordered violation messages."""

    passed: bool
    violations: list[str] = field(default_factory=list)
    build: Optional[BuildResult] = None


def _entries(data: dict, key: str) -> list[dict]:
    entries = data.get(key) or []
    if not isinstance(entries, list):
        raise InvalidConfigError(key, entries, "expected a list")
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise InvalidConfigError(f"{key}[{i}]", entry, "expected a mapping")
    return entries


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class ArchitectureConfig:
    """Parsed configuration document."""

    layers: list[LayerConfig] = field(default_factory=list)
    rules: list[RuleConfig] = field(default_factory=list)
    interface_rules: list[InterfaceRuleConfig] = field(default_factory=list)
    parameter_rules: list[ParameterRuleConfig] = field(default_factory=list)
    layer_specific_rules: list[LayerSpecificRuleConfig] = field(default_factory=list)
    direct_layer_dependency_rules: list[DirectLayerDependencyRuleConfig] = field(
        default_factory=list
    )

    @classmethod
    def from_dict(cls, data: Any) -> ArchitectureConfig:
        """Build from a parsed YAML/TOML document (camelCase keys)."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidConfigError("document", data, "expected a mapping at the top level")

        parameter_rules = []
        for i, e in enumerate(_entries(data, "parameterRules")):
            parameter_rules.append(
                ParameterRuleConfig(
                    struct_pattern=_text(e.get("structPattern")),
                    method_pattern=_text(e.get("methodPattern")),
                    parameter_type_pattern=_text(e.get("parameterTypePattern")),
                    should_use_interface=parse_bool(
                        e.get("shouldUseInterface", False),
                        f"parameterRules[{i}].shouldUseInterface",
                    ),
                )
            )

        layer_specific_rules = []
        for i, e in enumerate(_entries(data, "layerSpecificRules")):
            params = e.get("parameters") or {}
            if not isinstance(params, dict):
                raise InvalidConfigError(
                    f"layerSpecificRules[{i}].parameters", params, "expected a mapping"
                )
            layer_specific_rules.append(
                LayerSpecificRuleConfig(
                    layer=_text(e.get("layer")),
                    rule_type=_text(e.get("ruleType")),
                    parameters={str(k): _text(v) for k, v in params.items()},
                )
            )

        direct_rules = []
        for i, e in enumerate(_entries(data, "directLayerDependencyRules")):
            direct_rules.append(
                DirectLayerDependencyRuleConfig(
                    source_layer=_text(e.get("sourceLayer")),
                    target_layer=_text(e.get("targetLayer")),
                    allowed=parse_bool(
                        e.get("allowed", False), f"directLayerDependencyRules[{i}].allowed"
                    ),
                )
            )

        return cls(
            layers=[
                LayerConfig(name=_text(e.get("name")), pattern=_text(e.get("pattern")))
                for e in _entries(data, "layers")
            ],
            rules=[
                RuleConfig(from_layer=_text(e.get("from")), to_layer=_text(e.get("to")))
                for e in _entries(data, "rules")
            ],
            interface_rules=[
                InterfaceRuleConfig(
                    struct_pattern=_text(e.get("structPattern")),
                    interface_pattern=_text(e.get("interfacePattern")),
                )
                for e in _entries(data, "interfaceRules")
            ],
            parameter_rules=parameter_rules,
            layer_specific_rules=layer_specific_rules,
            direct_layer_dependency_rules=direct_rules,
        )

    def to_dict(self) -> dict[str, Any]:
        """Inverse of from_dict; optional sections are omitted when empty."""
        data: dict[str, Any] = {
            "layers": [{"name": l.name, "pattern": l.pattern} for l in self.layers],
            "rules": [{"from": r.from_layer, "to": r.to_layer} for r in self.rules],
        }
        if self.interface_rules:
            data["interfaceRules"] = [
                {"structPattern": r.struct_pattern, "interfacePattern": r.interface_pattern}
                for r in self.interface_rules
            ]
        if self.parameter_rules:
            data["parameterRules"] = [
                {
                    "structPattern": r.struct_pattern,
                    "methodPattern": r.method_pattern,
                    "parameterTypePattern": r.parameter_type_pattern,
                    "shouldUseInterface": r.should_use_interface,
                }
                for r in self.parameter_rules
            ]
        if self.layer_specific_rules:
            data["layerSpecificRules"] = [
                {"layer": r.layer, "ruleType": r.rule_type, "parameters": dict(r.parameters)}
                for r in self.layer_specific_rules
            ]
        if self.direct_layer_dependency_rules:
            data["directLayerDependencyRules"] = [
                {"sourceLayer": r.source_layer, "targetLayer": r.target_layer, "allowed": r.allowed}
                for r in self.direct_layer_dependency_rules
            ]
        return data

    def save(self, path: Path) -> None:
        """Write the configuration as YAML."""
        if Path(path).suffix == ".toml":
            raise InvalidConfigError("path", path, "configurations can only be saved as YAML")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)

    def build_architecture(self, base_path: Path, workers: Optional[int] = None) -> BuildResult:
        """Validate, extract every package under ``base_path`` and build all rules."""
        validate_config(self)

        architecture = Architecture(base_path)
        architecture.parse_packages(workers=workers)

        layers = [Layer(lc.name, lc.pattern) for lc in self.layers]
        layer_map = {layer.name: layer for layer in layers}
        layered = architecture.layered_architecture(*layers)
        result = BuildResult(architecture=architecture, layered=layered)

        for rule in self.rules:
            layer_map[rule.from_layer].depends_on_layer(layer_map[rule.to_layer])

        for rule in self.interface_rules:
            result.interface_rules.append(
                architecture.structs_implement_interfaces(
                    rule.struct_pattern, rule.interface_pattern
                )
            )

        for rule in self.parameter_rules:
            if rule.should_use_interface:
                result.parameter_rules.append(
                    architecture.methods_should_use_interface_parameters(
                        rule.struct_pattern, rule.method_pattern, rule.parameter_type_pattern
                    )
                )
            else:
                result.parameter_rules.append(
                    architecture.methods_should_use_struct_parameters(
                        rule.struct_pattern, rule.method_pattern, rule.parameter_type_pattern
                    )
                )

        for rule in self.layer_specific_rules:
            self._build_layer_specific(layer_map[rule.layer], rule, result)

        for rule in self.direct_layer_dependency_rules:
            source = layer_map[rule.source_layer]
            target = layer_map[rule.target_layer]
            if rule.allowed:
                source.depends_on_layer(target)
            else:
                result.dependency_rules.append(source.does_not_depend_on_layer(target))

        logger.debug(
            f"Built {len(layered.rules)} layer rules, {len(result.dependency_rules)} dependency "
            f"rules, {len(result.interface_rules)} interface rules, "
            f"{len(result.parameter_rules)} parameter rules"
        )
        return result

    @staticmethod
    def _build_layer_specific(
        layer: Layer, rule: LayerSpecificRuleConfig, result: BuildResult
    ) -> None:
        params = rule.parameters
        if rule.rule_type == "dependency":
            result.dependency_rules.append(layer.does_not_depend_on(params["targetPattern"]))
        elif rule.rule_type == "interface":
            result.interface_rules.append(
                layer.structs_implement_interfaces(
                    params["structPattern"], params["interfacePattern"]
                )
            )
        elif rule.rule_type == "parameter":
            should_use_interface = parse_bool(params["shouldUseInterface"], "shouldUseInterface")
            if should_use_interface:
                built = layer.methods_should_use_interface_parameters(
                    params["structPattern"], params["methodPattern"], params["parameterTypePattern"]
                )
            else:
                built = layer.methods_should_use_struct_parameters(
                    params["structPattern"], params["methodPattern"], params["parameterTypePattern"]
                )
            result.parameter_rules.append(built)

    def run_architecture_tests(self, base_path: Path, workers: Optional[int] = None) -> CheckResult:
        """Build everything and run every check.

        Violations are ordered: layered check, dependency rules, interface
        rules, parameter rules.
        """
        build = self.build_architecture(base_path, workers=workers)
        architecture = build.architecture

        violations = build.layered.check()
        if build.dependency_rules:
            violations.extend(architecture.check_dependencies(build.dependency_rules))
        if build.interface_rules:
            violations.extend(architecture.check_interface_implementations(build.interface_rules))
        if build.parameter_rules:
            violations.extend(architecture.check_method_parameters(build.parameter_rules))

        return CheckResult(passed=not violations, violations=violations, build=build)


def validate_config(config: ArchitectureConfig) -> None:
    """Check the configuration before anything is built.

    Raises:
        InvalidConfigError: Missing or malformed values
        PatternError: A pattern does not compile
        ConfigurationReferenceError: A rule names an undefined layer or
            lacks a required parameter
    """
    if not config.layers:
        raise InvalidConfigError("layers", [], "no layers defined in configuration")

    layer_names: set[str] = set()
    for i, layer in enumerate(config.layers):
        if not layer.name:
            raise InvalidConfigError(f"layers[{i}].name", layer.name, "layer name cannot be empty")
        if not layer.pattern:
            raise InvalidConfigError(
                f"layers[{i}].pattern",
                layer.pattern,
                f"pattern cannot be empty for layer {layer.name}",
            )
        if layer.name in layer_names:
            raise InvalidConfigError("layers", layer.name, "duplicate layer name")
        layer_names.add(layer.name)
        # Compiles both the raw pattern and its segment-suffix form
        Layer(layer.name, layer.pattern)

    def require_layer(kind: str, index: int, name: str, role: str = "") -> None:
        if not name:
            raise InvalidConfigError(f"{kind} {index}", name, f"{role or 'layer'} cannot be empty")
        if name not in layer_names:
            prefix = f"{role} " if role else ""
            raise ConfigurationReferenceError(
                kind, f"references undefined {prefix}layer: {name}", index
            )

    for i, rule in enumerate(config.rules):
        require_layer("rule", i, rule.from_layer, "from")
        require_layer("rule", i, rule.to_layer, "to")

    for i, rule in enumerate(config.interface_rules):
        _require_pattern("interface rule", i, "struct pattern", rule.struct_pattern)
        _require_pattern("interface rule", i, "interface pattern", rule.interface_pattern)

    for i, rule in enumerate(config.parameter_rules):
        _require_pattern("parameter rule", i, "struct pattern", rule.struct_pattern)
        _require_pattern("parameter rule", i, "method pattern", rule.method_pattern)
        _require_pattern("parameter rule", i, "parameter type pattern", rule.parameter_type_pattern)

    for i, rule in enumerate(config.layer_specific_rules):
        kind = "layer-specific rule"
        require_layer(kind, i, rule.layer)
        if rule.rule_type not in RULE_TYPES:
            raise InvalidConfigError(f"{kind} {i}", rule.rule_type, "invalid rule type")
        for key in REQUIRED_PARAMETERS[rule.rule_type]:
            if key not in rule.parameters:
                raise ConfigurationReferenceError(
                    kind, f"{rule.rule_type} rule requires '{key}' parameter", i
                )
        for key, value in rule.parameters.items():
            if key == "shouldUseInterface":
                parse_bool(value, f"{kind} {i} shouldUseInterface")
            elif key.endswith("Pattern"):
                _require_pattern(kind, i, key, value)

    for i, rule in enumerate(config.direct_layer_dependency_rules):
        kind = "direct layer dependency rule"
        require_layer(kind, i, rule.source_layer, "source")
        require_layer(kind, i, rule.target_layer, "target")


def _require_pattern(kind: str, index: int, role: str, pattern: str) -> None:
    if not pattern:
        raise InvalidConfigError(f"{kind} {index}", pattern, f"{role} cannot be empty")
    Pattern(pattern, role=f"{kind} {index} {role}")


def load_config(path: Path) -> ArchitectureConfig:
    """Load and validate a configuration file.

    Raises:
        InvalidPathError: File missing
        InvalidConfigError: File unreadable or not valid YAML/TOML
    """
    path = Path(path)
    if not path.is_file():
        raise InvalidPathError(path, "config file not found")

    try:
        if path.suffix == ".toml":
            data = _load_toml_file(path)
        else:
            data = _load_yaml_file(path)
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidConfigError("path", path, f"failed to read config file: {e}")

    config = ArchitectureConfig.from_dict(data)
    validate_config(config)
    logger.debug(f"Loaded {len(config.layers)} layers from {path}")
    return config


def discover_config(project_root: Path) -> Optional[Path]:
    """First of DEFAULT_CONFIG_NAMES present in ``project_root``."""
    for name in DEFAULT_CONFIG_NAMES:
        candidate = Path(project_root) / name
        if candidate.is_file():
            return candidate
    return None


def _load_yaml_file(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidConfigError("path", path, f"failed to parse config file: {e}")


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        InvalidConfigError: If tomllib/tomli not available or parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise InvalidConfigError(
                "path",
                path,
                "TOML support requires Python 3.11+ or 'tomli' package. Install with: pip install tomli",
            )

    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise InvalidConfigError("path", path, f"failed to parse config file: {e}")
