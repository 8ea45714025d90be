"""Base connector for push destinations.

A connector accumulates the configuration of one destination kind and
hands it over as a flat set of ``output_params.``-prefixed parameters.
Each concrete connector declares the parameters it cannot work without.
"""

import threading
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, TypeVar

from loguru import logger

from datasift_push.core.constants import OUTPUT_PARAMS_PREFIX, OutputType
from datasift_push.core.exceptions import InvalidDataError
from datasift_push.utils.params import to_param_value

C = TypeVar("C", bound="BaseConnector")


class PreparedParams:
    """Snapshot of a connector's parameters, ready for submission."""

    def __init__(self, output_type: OutputType, values: Mapping[str, str], required: Iterable[str]):
        self.output_type = output_type
        self._values = dict(values)
        self.required: FrozenSet[str] = frozenset(required)

    @property
    def values(self) -> Dict[str, str]:
        """Prefixed parameters, e.g. ``{"output_params.url": "..."}``."""
        return dict(self._values)

    def missing(self) -> FrozenSet[str]:
        """Required keys that have not been set."""
        return frozenset(key for key in self.required if key not in self._values)

    def is_valid(self) -> bool:
        return not self.missing()

    def validate(self) -> "PreparedParams":
        """Check every required parameter is present.

        Returns:
            self, so the call can be chained

        Raises:
            InvalidDataError: Listing every missing parameter
        """
        missing = self.missing()
        if missing:
            raise InvalidDataError(
                f"Missing required {self.output_type.value} parameters: "
                f"{', '.join(sorted(missing))}",
                field="output_params",
                details={"missing": sorted(missing)},
            )
        return self

    def unprefixed(self) -> Dict[str, str]:
        """Parameters without the ``output_params.`` namespace."""
        return {key[len(OUTPUT_PARAMS_PREFIX):]: value for key, value in self._values.items()}

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return (
            f"PreparedParams(output_type={self.output_type.value!r}, "
            f"keys={sorted(self._values)!r}, required={sorted(self.required)!r})"
        )


class BaseConnector:
    """Chainable builder of destination parameters.

    Subclasses set ``output_type`` and ``required_params``; every setter
    returns the connector itself so configuration reads as one chain::

        connector = S3Connector().bucket("data").directory("tweets")

    Parameters and the required set are guarded by a lock, one connector
    may be configured from several threads.
    """

    output_type: OutputType
    required_params: tuple = ()

    def __init__(self, *required: str):
        if getattr(self, "output_type", None) is None:
            raise InvalidDataError(f"{type(self).__name__} does not declare an output type")
        names = tuple(self.required_params) + required
        if any(name is None for name in names):
            raise InvalidDataError("Required parameter names cannot be None")

        self._lock = threading.Lock()
        self._required = {OUTPUT_PARAMS_PREFIX + name for name in names}
        self._params: Dict[str, str] = {}

    def set_param(self: C, name: str, value: Any) -> C:
        """Set one destination parameter.

        Args:
            name: Parameter name without prefix, e.g. ``auth.username``
            value: Parameter value, rendered as a string

        Returns:
            self

        Raises:
            InvalidDataError: If the name or the value is None
        """
        if name is None or value is None:
            raise InvalidDataError(
                f"{name} is null but no parameters are allowed to be",
                field=name,
            )
        with self._lock:
            self._params[OUTPUT_PARAMS_PREFIX + name] = to_param_value(value)
        return self

    def put_all(self: C, params: Optional[Mapping[str, Any]]) -> C:
        """Import every entry of ``params`` whose key and value are set.

        Entries with a None key or value are skipped; a None mapping
        changes nothing.
        """
        if params is None:
            return self
        for key, value in params.items():
            if key is None or value is None:
                logger.debug(f"Skipping unset {self.output_type.value} parameter: {key}")
                continue
            self.set_param(key, value)
        return self

    def require(self: C, *names: str) -> C:
        """Declare additional required parameters."""
        with self._lock:
            self._required.update(OUTPUT_PARAMS_PREFIX + name for name in names)
        return self

    def get_param(self, name: str) -> Optional[str]:
        with self._lock:
            return self._params.get(OUTPUT_PARAMS_PREFIX + name)

    def parameters(self) -> PreparedParams:
        """Snapshot of the accumulated parameters and the required set."""
        with self._lock:
            return PreparedParams(self.output_type, self._params, self._required)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._params)} params)"
