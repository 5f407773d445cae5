"""
fastp option sets.

An option set maps a fastp flag to a tagged value:

    FLAG        the flag is passed on its own (e.g. --dedup)
    NUMERIC     the flag is passed followed by its value (e.g. --trim_poly_g 10)
    SUPPRESSED  the flag is recorded as explicitly off and never passed

The builder decides which flags a feature group contributes; the executor only
looks at the tag.
"""

import json
from enum import Enum
from types import MappingProxyType
from collections.abc import Mapping
from typing import Dict, Any, Iterator, List, Optional, Tuple, Union
from dataclasses import dataclass

from fastqflow.prompt.prompter import Prompter


class OptionKind(Enum):
    FLAG = "flag"
    SUPPRESSED = "suppressed"
    NUMERIC = "numeric"


@dataclass(frozen=True)
class OptionValue:
    kind: OptionKind
    value: Optional[int] = None

    @classmethod
    def flag(cls) -> 'OptionValue':
        return cls(OptionKind.FLAG)

    @classmethod
    def suppressed(cls) -> 'OptionValue':
        return cls(OptionKind.SUPPRESSED)

    @classmethod
    def numeric(cls, value: int) -> 'OptionValue':
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Numeric option value must be an integer, got {value!r}")
        return cls(OptionKind.NUMERIC, value)

    def tokens(self, flag: str) -> List[str]:
        """Command-line tokens this value contributes for `flag`."""
        if self.kind is OptionKind.FLAG:
            return [flag]
        if self.kind is OptionKind.NUMERIC:
            return [flag, str(self.value)]
        return []

    def to_json_value(self) -> Union[bool, int]:
        if self.kind is OptionKind.NUMERIC:
            return self.value
        return self.kind is OptionKind.FLAG

    def __str__(self) -> str:
        if self.kind is OptionKind.NUMERIC:
            return str(self.value)
        return "true" if self.kind is OptionKind.FLAG else "false"


class FastpOptions(Mapping):
    """Immutable flag -> OptionValue mapping, shared read-only by every sample."""

    def __init__(self, options: Optional[Mapping[str, OptionValue]] = None):
        self._options = MappingProxyType(dict(options or {}))

    def __getitem__(self, flag: str) -> OptionValue:
        return self._options[flag]

    def __iter__(self) -> Iterator[str]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __hash__(self) -> int:
        return hash(frozenset(self._options.items()))

    def __repr__(self) -> str:
        return f"FastpOptions({dict(self._options)!r})"

    def command_tokens(self) -> List[str]:
        tokens = []
        for flag, value in self._options.items():
            tokens.extend(value.tokens(flag))
        return tokens

    def describe(self) -> List[str]:
        return [f"{flag}: {value}" for flag, value in self._options.items()]

    def to_dict(self) -> Dict[str, Union[bool, int]]:
        return {flag: value.to_json_value() for flag, value in self._options.items()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FastpOptions':
        """Rebuild from the to_dict() form: true -> flag, false -> suppressed, int -> numeric."""
        options = {}
        for flag, raw in data.items():
            if not flag.startswith('--'):
                raise ValueError(f"Option '{flag}' must start with '--'")
            if raw is True:
                options[flag] = OptionValue.flag()
            elif raw is False:
                options[flag] = OptionValue.suppressed()
            elif isinstance(raw, int) and raw >= 0:
                options[flag] = OptionValue.numeric(raw)
            else:
                raise ValueError(f"Invalid value for {flag}: {raw!r}")
        return cls(options)

    @classmethod
    def load(cls, path: str) -> 'FastpOptions':
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a JSON object")
        return cls.from_dict(data)


# Asked in this order. parameters: (flag, settings key, prompt); disable: (flag, kind) or None
FEATURE_GROUPS: Tuple[Dict[str, Any], ...] = (
    {
        'question': "Enable Quality Filtering?",
        'enable_flag': None,
        'parameters': [
            ('--qualified_quality_phred', 'qualified_quality_phred', "Set Qualified Quality PHRED"),
            ('--unqualified_percent_limit', 'unqualified_percent_limit', "Set Unqualified Percent Limit"),
        ],
        'disable': ('--disable_quality_filtering', OptionKind.FLAG),
    },
    {
        'question': "Enable Length Filtering?",
        'enable_flag': None,
        'parameters': [
            ('--length_required', 'length_required', "Set Minimum Length Required"),
            ('--length_limit', 'length_limit', "Set Maximum Length Limit (0 = no limit)"),
        ],
        'disable': ('--disable_length_filtering', OptionKind.FLAG),
    },
    {
        'question': "Enable Low Complexity Filtering?",
        'enable_flag': '--low_complexity_filter',
        'parameters': [
            ('--complexity_threshold', 'complexity_threshold', "Set Complexity Threshold"),
        ],
        'disable': ('--low_complexity_filter', OptionKind.SUPPRESSED),
    },
    {
        # fastp trims adapters unless told otherwise
        'question': "Enable Adapter Trimming?",
        'enable_flag': None,
        'parameters': [],
        'disable': ('--disable_adapter_trimming', OptionKind.FLAG),
    },
    {
        'question': "Enable PolyG Tail Trimming?",
        'enable_flag': None,
        'parameters': [
            ('--trim_poly_g', 'trim_poly_g', "Set PolyG minimum length"),
        ],
        'disable': ('--disable_trim_poly_g', OptionKind.FLAG),
    },
    {
        # polyX trimming is off in fastp by default
        'question': "Enable PolyX Tail Trimming?",
        'enable_flag': None,
        'parameters': [
            ('--trim_poly_x', 'trim_poly_x', "Set PolyX minimum length"),
        ],
        'disable': None,
    },
    {
        'question': "Enable Deduplication?",
        'enable_flag': '--dedup',
        'parameters': [],
        'disable': None,
    },
)


def _range_hint(bounds: Dict[str, Any]) -> str:
    default = bounds['default']
    if bounds.get('max') is not None:
        return f"({bounds['min']}-{bounds['max']}, default={default})"
    return f"(default={default})"


class OptionSetBuilder:
    """Asks one question per feature group and assembles a FastpOptions."""

    def __init__(self, prompter: Prompter, settings: Dict[str, Dict[str, Any]]):
        """
        Args:
            prompter: Source of validated operator answers
            settings: The 'fastp' configuration section (default/min/max per parameter)
        """
        self.prompter = prompter
        self.settings = settings

    def _ask_parameter(self, key: str, prompt: str) -> int:
        bounds = self.settings[key]
        return self.prompter.ask_number(
            f"{prompt} {_range_hint(bounds)}:",
            bounds['default'],
            bounds['min'],
            bounds.get('max'),
        )

    def build(self) -> FastpOptions:
        options: Dict[str, OptionValue] = {}

        for group in FEATURE_GROUPS:
            if self.prompter.ask_yes_no(group['question']):
                if group['enable_flag']:
                    options[group['enable_flag']] = OptionValue.flag()
                for flag, key, prompt in group['parameters']:
                    options[flag] = OptionValue.numeric(self._ask_parameter(key, prompt))
            elif group['disable']:
                flag, kind = group['disable']
                options[flag] = OptionValue(kind)
            print("", file=self.prompter.stdout)

        return FastpOptions(options)
