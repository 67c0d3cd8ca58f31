from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict, List, Optional, get_type_hints
import yaml

from sinprec.tools.helpers import _coerce_value


def _read_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _check_keys(cls, d: dict, where: str) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise ValueError(f"Unknown {where} keys: {', '.join(unknown)}")


@dataclass
class OutputsCfg:
    root: Optional[str] = None  # artifacts directory; None disables artifacts
    write_csv: bool = True


@dataclass
class RunConfig:
    run_id: str = "sinprec-v1"
    seed: int = 1111
    precision_bits: int = 512
    max_rounds: Optional[int] = None  # None runs until a stop request
    print_every_rounds: Optional[int] = None
    log_every_rounds: int = 100_000
    report_digits: int = 10
    outputs: OutputsCfg = field(default_factory=OutputsCfg)

    def __post_init__(self):
        if self.max_rounds is not None and self.max_rounds < 0:
            raise ValueError(f"max_rounds must be >= 0, got {self.max_rounds}")
        if self.report_digits < 1:
            raise ValueError(f"report_digits must be >= 1, got {self.report_digits}")
        if self.log_every_rounds < 0:
            raise ValueError(f"log_every_rounds must be >= 0, got {self.log_every_rounds}")
        if self.print_every_rounds is not None and self.print_every_rounds < 0:
            raise ValueError(f"print_every_rounds must be >= 0, got {self.print_every_rounds}")

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "RunConfig":
        d = dict(d)
        _check_keys(RunConfig, d, "config")
        outputs = d.pop("outputs", None) or {}
        _check_keys(OutputsCfg, outputs, "outputs")
        return RunConfig(outputs=OutputsCfg(**outputs), **d)

    @staticmethod
    def from_yaml(path: str) -> "RunConfig":
        return RunConfig.from_dict(_read_yaml(path))

    def apply_overrides(self, overrides: List[str]) -> "RunConfig":
        """
        Apply ``key=value`` strings in place, coercing each value to the field's type.

        Nested fields are addressed with a dot, e.g. ``outputs.root=/tmp/run``.
        Hyphens in keys are accepted as underscores.
        """
        for item in overrides:
            if "=" not in item:
                raise ValueError(f"Override must look like key=value, got {item!r}")
            key, raw = item.split("=", 1)
            key = key.strip().lstrip("-").replace("-", "_")
            target: Any = self
            *parents, name = key.split(".")
            for p in parents:
                if not hasattr(target, p):
                    raise ValueError(f"Unknown config key: {key}")
                target = getattr(target, p)
            hints = get_type_hints(type(target))
            if name not in hints or name not in {f.name for f in fields(target)}:
                raise ValueError(f"Unknown config key: {key}")
            setattr(target, name, _coerce_value(raw.strip(), hints[name]))
        self.__post_init__()
        return self

    def to_dict(self) -> dict:
        return asdict(self)
