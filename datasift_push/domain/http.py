"""HTTP push subscriptions."""

from typing import Any, Optional
from urllib.parse import urlparse

from datasift_push.core.constants import OutputType
from datasift_push.core.exceptions import InvalidDataError
from datasift_push.domain.subscription import PushSubscription, register_subscription_type

_TRUE_VALUES = {"true", "1", "yes", "on"}
_INT_PARAMS = ("delivery_frequency", "max_size")


def _as_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _as_int(name: str, value: Any) -> Optional[int]:
    """Parse an integer output param, rejecting anything non-integral."""
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidDataError(
        f"{name} must be an integer", field=f"output_params.{name}", actual=value
    )


@register_subscription_type(OutputType.HTTP)
class HttpSubscription(PushSubscription):
    """Subscription delivering batches to an HTTP(S) endpoint.

    Output params used by this destination: ``url``, ``format``,
    ``delivery_frequency`` (seconds), ``max_size`` (bytes),
    ``verify_ssl``, ``use_gzip`` and ``auth.type`` / ``auth.username`` /
    ``auth.password``.
    """

    @property
    def url(self) -> Optional[str]:
        return self.get_output_param("url")

    @url.setter
    def url(self, url: str) -> None:
        self.set_output_param("url", url)

    @property
    def format(self) -> Optional[str]:
        return self.get_output_param("format")

    @format.setter
    def format(self, output_format: str) -> None:
        self.set_output_param("format", output_format)

    @property
    def delivery_frequency(self) -> Optional[int]:
        return _as_int("delivery_frequency", self.get_output_param("delivery_frequency"))

    @delivery_frequency.setter
    def delivery_frequency(self, seconds: int) -> None:
        self.set_output_param("delivery_frequency", seconds)

    @property
    def max_size(self) -> Optional[int]:
        return _as_int("max_size", self.get_output_param("max_size"))

    @max_size.setter
    def max_size(self, size: int) -> None:
        self.set_output_param("max_size", size)

    @property
    def verify_ssl(self) -> Optional[bool]:
        return _as_bool(self.get_output_param("verify_ssl"))

    @verify_ssl.setter
    def verify_ssl(self, enabled: bool) -> None:
        self.set_output_param("verify_ssl", enabled)

    @property
    def use_gzip(self) -> Optional[bool]:
        return _as_bool(self.get_output_param("use_gzip"))

    @use_gzip.setter
    def use_gzip(self, enabled: bool) -> None:
        self.set_output_param("use_gzip", enabled)

    @property
    def auth_type(self) -> Optional[str]:
        return self.get_output_param("auth.type")

    @auth_type.setter
    def auth_type(self, auth_type: str) -> None:
        self.set_output_param("auth.type", auth_type)

    @property
    def auth_username(self) -> Optional[str]:
        return self.get_output_param("auth.username")

    @auth_username.setter
    def auth_username(self, username: str) -> None:
        self.set_output_param("auth.username", username)

    @property
    def auth_password(self) -> Optional[str]:
        return self.get_output_param("auth.password")

    @auth_password.setter
    def auth_password(self, password: str) -> None:
        self.set_output_param("auth.password", password)

    def validate_output_params(self) -> None:
        """Reject a malformed URL or non-numeric sizes before saving."""
        url = self.url
        if url is not None:
            parsed = urlparse(str(url))
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise InvalidDataError(
                    f"Invalid delivery URL: {url}", field="output_params.url"
                )

        for name in _INT_PARAMS:
            value = self.get_output_param(name)
            number = _as_int(name, value)
            if number is not None and number < 1:
                raise InvalidDataError(
                    f"{name} must be a positive integer",
                    field=f"output_params.{name}",
                    actual=value,
                )
