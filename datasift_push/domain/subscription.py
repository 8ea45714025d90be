"""Push subscription entity.

A ``PushSubscription`` is a standing server-side rule streaming data from
a live stream or a historic query to a destination. Concrete variants are
discriminated by output type and registered with
``register_subscription_type``; ``PushSubscription.factory`` is the single
place where an output type name is turned into a class.

Typical use::

    sub = PushSubscription.build(session, "http", "stream", stream_hash, "My Sub")
    sub.apply_connector(connectors.http().url("https://example.com/push"))
    sub.save()

    for sub in PushSubscription.list(session, page=2):
        print(sub.id, sub.name, sub.status)
"""

from abc import ABC
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, Union

from loguru import logger

from datasift_push.connectors.base import BaseConnector
from datasift_push.core.config import get_config
from datasift_push.core.constants import (
    ENDPOINT_CREATE,
    ENDPOINT_DELETE,
    ENDPOINT_GET,
    ENDPOINT_UPDATE,
    INITIAL_STATUSES,
    HashType,
    OrderBy,
    OrderDirection,
    OutputType,
    SubscriptionStatus,
)
from datasift_push.core.exceptions import APIError, InvalidDataError
from datasift_push.core.protocols import APISession
from datasift_push.utils.params import (
    copy_output_params,
    encode_output_params,
    get_path,
    pop_path,
    sanitize_log_data,
    set_path,
    to_param_value,
)


SUBSCRIPTION_TYPES: Dict[OutputType, Type["PushSubscription"]] = {}


def register_subscription_type(output_type: OutputType) -> Callable:
    """Class decorator registering the variant handling ``output_type``."""

    def decorator(cls: Type["PushSubscription"]) -> Type["PushSubscription"]:
        if output_type in SUBSCRIPTION_TYPES:
            logger.warning(f"Subscription type '{output_type.value}' already registered, overwriting")
        SUBSCRIPTION_TYPES[output_type] = cls
        cls.output_type_id = output_type
        return cls

    return decorator


def _call(session: APISession, endpoint: str, params: Dict[str, str]) -> Mapping[str, Any]:
    logger.debug(f"Calling {endpoint}")
    logger.debug(f"Params: {sanitize_log_data(params)}")

    response = session.call_api(endpoint, params)
    if not isinstance(response, Mapping):
        raise APIError(
            f"Expected a JSON object from {endpoint}",
            details={"type": type(response).__name__},
        )
    return response


def _require(data: Mapping[str, Any], field: str) -> Any:
    if field not in data or data[field] is None:
        raise InvalidDataError(f"No {field} found", field=field)
    return data[field]


def _require_int(data: Mapping[str, Any], field: str) -> int:
    value = _require(data, field)
    if isinstance(value, bool):
        raise InvalidDataError(f"Invalid {field}", field=field, expected="int", actual=value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidDataError(f"Invalid {field}", field=field, expected="int", actual=value)


def _require_timestamp(data: Mapping[str, Any], field: str) -> datetime:
    seconds = _require_int(data, field)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        raise InvalidDataError(
            f"Invalid {field}", field=field, expected="epoch seconds", actual=seconds
        )


def _require_str(data: Mapping[str, Any], field: str) -> str:
    value = _require(data, field)
    if not isinstance(value, str):
        raise InvalidDataError(
            f"Invalid {field}", field=field, expected="str", actual=type(value).__name__
        )
    return value


def _require_object(data: Mapping[str, Any], field: str) -> Mapping[str, Any]:
    value = _require(data, field)
    if not isinstance(value, Mapping):
        raise InvalidDataError(
            f"Invalid {field}", field=field, expected="object", actual=type(value).__name__
        )
    return value


class PushSubscription(ABC):
    """Base class of push subscriptions.

    Attributes are read through properties. ``id`` is 0 until the
    subscription has been created remotely; once ``status`` is
    ``deleted`` the subscription can no longer be modified or saved.
    """

    output_type_id: OutputType

    def __init__(self, session: APISession, data: Optional[Mapping[str, Any]] = None):
        """Create an empty subscription, or rehydrate one from API data.

        Args:
            session: Session used for every API call of this subscription
            data: Subscription object as returned by the API

        Raises:
            InvalidDataError: If ``data`` misses a required field
        """
        self._session = session
        self._id = 0
        self._name = ""
        self._created_at: Optional[datetime] = None
        self._status = ""
        self._hash_type = ""
        self._hash = ""
        self._output_type = self.output_type_id.value
        self._output_params: Dict[str, Any] = {}

        if data is not None:
            self._init(data)

    def _init(self, data: Mapping[str, Any]) -> None:
        """Populate every field from API data, or none of them."""
        if not isinstance(data, Mapping):
            raise InvalidDataError(
                "Subscription data must be an object",
                expected="object",
                actual=type(data).__name__,
            )

        subscription_id = _require_int(data, "id")
        name = _require_str(data, "name")
        created_at = _require_timestamp(data, "created_at")
        status = _require_str(data, "status")
        hash_type = _require_str(data, "hash_type")
        stream_hash = _require_str(data, "hash")
        output_type = _require_str(data, "output_type")
        output_params = copy_output_params(_require_object(data, "output_params"))

        self._id = subscription_id
        self._name = name
        self._created_at = created_at
        self._status = status
        self._hash_type = hash_type
        self._hash = stream_hash
        self._output_type = output_type
        self._output_params = output_params

    # ------------------------------------------------------------------
    # Factory and lookups
    # ------------------------------------------------------------------

    @classmethod
    def factory(
        cls,
        session: APISession,
        output_type: Union[OutputType, str],
        data: Optional[Mapping[str, Any]] = None,
    ) -> "PushSubscription":
        """Create a subscription of the variant matching ``output_type``.

        Args:
            session: Session the subscription will use
            output_type: Output type name, matched case-insensitively
            data: Optional API data to rehydrate from

        Returns:
            An empty, unsaved subscription, or a rehydrated one if
            ``data`` was given

        Raises:
            InvalidDataError: If the output type is unknown or ``data`` is
                              malformed
        """
        kind = OutputType.parse(output_type)
        subscription_class = SUBSCRIPTION_TYPES.get(kind)
        if subscription_class is None:
            raise InvalidDataError(
                f'Unknown output type "{output_type}"',
                field="output_type",
                details={"available": sorted(t.value for t in SUBSCRIPTION_TYPES)},
            )
        return subscription_class(session, data)

    @classmethod
    def build(
        cls,
        session: APISession,
        output_type: Union[OutputType, str],
        hash_type: str,
        hash: str,
        name: str,
        initial_status: str = "",
    ) -> "PushSubscription":
        """Create a new, unsaved subscription for a stream or historic query.

        Args:
            session: Session the subscription will use
            output_type: Output type name, matched case-insensitively
            hash_type: ``stream`` or ``historic``
            hash: Stream hash or historic playback id
            name: Human label
            initial_status: Optional status to create the subscription in

        Raises:
            InvalidDataError: If the output type, hash type or initial
                              status is not supported
        """
        subscription = cls.factory(session, output_type)

        if hash_type not in {t.value for t in HashType}:
            raise InvalidDataError(
                f'Unknown hash type: "{hash_type}"',
                field="hash_type",
                expected=[t.value for t in HashType],
                actual=hash_type,
            )
        if initial_status and initial_status not in INITIAL_STATUSES:
            raise InvalidDataError(
                f'Unsupported initial status: "{initial_status}"',
                field="initial_status",
                expected=sorted(INITIAL_STATUSES),
                actual=initial_status,
            )

        subscription._hash_type = hash_type
        subscription._hash = hash
        subscription._name = name
        subscription._status = initial_status
        return subscription

    @classmethod
    def get(cls, session: APISession, subscription_id: int) -> "PushSubscription":
        """Fetch one subscription by id.

        Raises:
            APIError: If the response carries no ``output_type``
            InvalidDataError: If the response is otherwise malformed
            AccessDeniedError: Propagated from the session
        """
        response = _call(session, ENDPOINT_GET, {"id": str(subscription_id)})

        output_type = response.get("output_type")
        if not isinstance(output_type, str):
            raise APIError("No output_type in the response", details={"id": subscription_id})
        return cls.factory(session, output_type, response)

    @classmethod
    def list(
        cls,
        session: APISession,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
        order_by: str = OrderBy.CREATED_AT.value,
        order_dir: str = OrderDirection.ASC.value,
        include_finished: bool = False,
    ) -> List["PushSubscription"]:
        """Fetch one page of the account's subscriptions.

        Without a page the first ``list_all_page_size`` (100) subscriptions
        are returned; with a page and no ``per_page`` each page holds
        ``default_page_size`` (20) items.

        Args:
            session: Session to call the API with
            page: Page number, starting at 1
            per_page: Items per page
            order_by: ``id`` or ``created_at``
            order_dir: ``asc`` or ``desc``
            include_finished: Include subscriptions to finished historics

        Returns:
            Subscriptions in the requested order

        Raises:
            InvalidDataError: On invalid arguments, before calling the API,
                              or when an item cannot be turned into a
                              subscription
            APIError: If the response holds no readable ``subscriptions``
            AccessDeniedError: Propagated from the session
        """
        config = get_config()
        if page is None:
            page = 1
            if per_page is None:
                per_page = config.list_all_page_size
        elif per_page is None:
            per_page = config.default_page_size

        if page < 1:
            raise InvalidDataError("The specified page number is invalid", field="page", actual=page)
        if per_page < 1:
            raise InvalidDataError(
                "The specified per_page value is invalid", field="per_page", actual=per_page
            )
        if order_by not in {o.value for o in OrderBy}:
            raise InvalidDataError(
                "The specified order_by is not supported", field="order_by", actual=order_by
            )
        if order_dir not in {d.value for d in OrderDirection}:
            raise InvalidDataError(
                "The specified order_dir is not supported", field="order_dir", actual=order_dir
            )

        params = {
            "page": str(page),
            "per_page": str(per_page),
            "order_by": order_by,
            "order_dir": order_dir,
        }
        if include_finished:
            params["include_finished"] = "1"

        response = _call(session, ENDPOINT_GET, params)

        items = response.get("subscriptions")
        if not isinstance(items, (list, tuple)):
            raise APIError("Failed to read the subscriptions from the response")

        subscriptions = []
        for item in items:
            if not isinstance(item, Mapping) or not isinstance(item.get("output_type"), str):
                raise APIError("Failed to read the subscriptions from the response")
            subscriptions.append(cls.factory(session, item["output_type"], item))

        logger.debug(f"Fetched {len(subscriptions)} subscriptions (page {page})")
        return subscriptions

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._check_not_deleted()
        self._name = name

    @property
    def created_at(self) -> Optional[datetime]:
        """Creation time, known only once the API has returned it."""
        return self._created_at

    @property
    def status(self) -> str:
        return self._status

    @property
    def is_deleted(self) -> bool:
        return self._status == SubscriptionStatus.DELETED.value

    @property
    def hash_type(self) -> str:
        return self._hash_type

    @property
    def hash(self) -> str:
        return self._hash

    @property
    def output_type(self) -> str:
        return self._output_type

    @property
    def output_params(self) -> Mapping[str, Any]:
        """Read-only copy of the destination parameters, nested as the API stores them."""
        return MappingProxyType(copy_output_params(self._output_params))

    def get_output_param(self, name: str, default: Any = None) -> Any:
        """Read a parameter by key or dotted path, e.g. ``auth.username``."""
        return get_path(self._output_params, name, default)

    def set_output_param(self, name: str, value: Any) -> "PushSubscription":
        """Set one destination parameter, e.g. ``auth.username``.

        Raises:
            InvalidDataError: If the subscription is deleted, or the name
                              or value is None
        """
        self._check_not_deleted()
        if name is None or value is None:
            raise InvalidDataError("Output parameter names and values cannot be None", field=name)
        set_path(self._output_params, name, to_param_value(value))
        return self

    def remove_output_param(self, name: str) -> "PushSubscription":
        self._check_not_deleted()
        pop_path(self._output_params, name)
        return self

    def apply_connector(self, connector: BaseConnector) -> "PushSubscription":
        """Copy a connector's configuration into the output params.

        Raises:
            InvalidDataError: If the subscription is deleted, the connector
                              is for another output type, or a required
                              parameter is missing
        """
        self._check_not_deleted()
        prepared = connector.parameters()
        if prepared.output_type is not self.output_type_id:
            raise InvalidDataError(
                "Connector does not match the subscription's output type",
                field="output_type",
                expected=self.output_type_id.value,
                actual=prepared.output_type.value,
            )
        prepared.validate()
        for name, value in prepared.unprefixed().items():
            set_path(self._output_params, name, value)
        return self

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def validate_output_params(self) -> None:
        """Check the output params before they are sent.

        Variants override this to enforce their own rules; the base class
        accepts anything.
        """

    def save(self) -> None:
        """Create the subscription, or update it if it already exists.

        The API response is loaded back into this object, so the id and
        creation time are available once a create returns.

        Raises:
            InvalidDataError: If the subscription is deleted or holds
                              invalid data
            APIError: If the call fails
            AccessDeniedError: Propagated from the session
        """
        if self.is_deleted:
            raise InvalidDataError("Cannot save a deleted subscription", field="status")
        self.validate_output_params()

        params: Dict[str, str] = {}
        if self._id == 0:
            endpoint = ENDPOINT_CREATE

            if self._hash_type == HashType.STREAM.value:
                params["hash"] = self._hash
            elif self._hash_type == HashType.HISTORIC.value:
                params["playback_id"] = self._hash
            else:
                raise InvalidDataError(
                    f'Unknown hash_type: "{self._hash_type}"', field="hash_type"
                )

            params["output_type"] = self._output_type
            if self._status:
                params["initial_status"] = self._status
        else:
            endpoint = ENDPOINT_UPDATE
            params["id"] = str(self._id)

        params["name"] = self._name
        params["output_params"] = encode_output_params(self._output_params)

        response = _call(self._session, endpoint, params)
        self._init(response)

        action = "Created" if endpoint == ENDPOINT_CREATE else "Updated"
        logger.info(f"{action} push subscription {self._id} ({self._name})")

    def delete(self) -> None:
        """Delete the subscription.

        The remote delete is only issued for a saved subscription. The
        local status becomes ``deleted`` in every case, including when the
        API call raises.
        """
        try:
            if self._id != 0:
                _call(self._session, ENDPOINT_DELETE, {"id": str(self._id)})
                logger.info(f"Deleted push subscription {self._id}")
        finally:
            self._status = SubscriptionStatus.DELETED.value

    def _check_not_deleted(self) -> None:
        if self.is_deleted:
            raise InvalidDataError("Cannot modify a deleted subscription", field="status")

    def to_dict(self) -> Dict[str, Any]:
        """Subscription fields in the API's shape."""
        return {
            "id": self._id,
            "name": self._name,
            "created_at": int(self._created_at.timestamp()) if self._created_at else None,
            "status": self._status,
            "hash_type": self._hash_type,
            "hash": self._hash,
            "output_type": self._output_type,
            "output_params": copy_output_params(self._output_params),
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self._id}, name={self._name!r}, "
            f"status={self._status!r}, output_type={self._output_type!r})"
        )
