"""
isdeep - cycle-safe deep copy and deep merge for nested containers.

Example:
    >>> import isdeep
    >>> isdeep.deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
    {'a': 1, 'b': 3, 'c': 4}
    >>> isdeep.deep_merge({"x": [1, 2]}, {"x": [2, 3]}, strategy=isdeep.UNION)
    {'x': [1, 2, 3]}
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("isdeep")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from isdeep._capability import (  # noqa: E402
    Mergeable,
    SupportsToMapping,
    SupportsToSequence,
)
from isdeep._clone import deep_copy  # noqa: E402
from isdeep._merge import deep_merge, deep_merge_inplace  # noqa: E402
from isdeep.config import (  # noqa: E402
    get_default_sequence_strategy,
    get_effective_sequence_strategy,
    reset_sequence_strategy,
    sequence_strategy,
    set_default_sequence_strategy,
)
from isdeep.errors import (  # noqa: E402
    DeepMergeError,
    StrategyNotCallableError,
    UnknownStrategyError,
    UnsupportedSourceTypeError,
    UnsupportedTargetTypeError,
)
from isdeep.strategies import (  # noqa: E402
    CONCAT,
    KEY_BASED,
    REPLACE,
    UNION,
    KeyBased,
    SequenceStrategy,
)

__all__ = [
    "__version__",
    "__version_info__",
    "CONCAT",
    "KEY_BASED",
    "REPLACE",
    "UNION",
    "DeepMergeError",
    "KeyBased",
    "Mergeable",
    "SequenceStrategy",
    "StrategyNotCallableError",
    "SupportsToMapping",
    "SupportsToSequence",
    "UnknownStrategyError",
    "UnsupportedSourceTypeError",
    "UnsupportedTargetTypeError",
    "deep_copy",
    "deep_merge",
    "deep_merge_inplace",
    "get_default_sequence_strategy",
    "get_effective_sequence_strategy",
    "reset_sequence_strategy",
    "sequence_strategy",
    "set_default_sequence_strategy",
]
