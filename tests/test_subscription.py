"""Tests for ``datasift_push.domain.subscription``: factory, rehydration and CRUD."""

import json
from datetime import datetime, timezone

import pytest

from datasift_push import (
    AccessDeniedError,
    APIError,
    HttpSubscription,
    InvalidDataError,
    PushSubscription,
)
from datasift_push.connectors import HttpConnector, S3Connector
from datasift_push.core.config import set_config


REQUIRED_FIELDS = [
    "id",
    "name",
    "created_at",
    "status",
    "hash_type",
    "hash",
    "output_type",
    "output_params",
]


class TestFactory:
    def test_unknown_output_type(self, session):
        with pytest.raises(InvalidDataError, match="Unknown output type"):
            PushSubscription.factory(session, "unknown-type")

    def test_known_but_unimplemented_output_type(self, session):
        with pytest.raises(InvalidDataError, match="Unknown output type"):
            PushSubscription.factory(session, "s3")

    @pytest.mark.parametrize("output_type", ["http", "HTTP", "Http"])
    def test_output_type_is_case_insensitive(self, session, output_type):
        sub = PushSubscription.factory(session, output_type)
        assert isinstance(sub, HttpSubscription)
        assert sub.output_type == "http"
        assert sub.id == 0
        assert sub.status == ""
        assert sub.created_at is None
        assert dict(sub.output_params) == {}

    def test_upper_and_lower_case_are_equivalent(self, session):
        upper = PushSubscription.factory(session, "HTTP")
        lower = PushSubscription.factory(session, "http")
        assert type(upper) is type(lower)
        assert upper.to_dict() == lower.to_dict()

    def test_factory_with_data(self, session, subscription_data):
        sub = PushSubscription.factory(session, "http", subscription_data)
        assert isinstance(sub, HttpSubscription)
        assert sub.id == 42

    def test_factory_with_data_unknown_type(self, session, subscription_data):
        with pytest.raises(InvalidDataError, match="Unknown output type"):
            PushSubscription.factory(session, "carrier-pigeon", subscription_data)


class TestBuild:
    def test_stream_subscription(self, session):
        sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")
        assert sub.hash_type == "stream"
        assert sub.hash == "abc123"
        assert sub.name == "My Sub"
        assert sub.status == ""
        assert sub.id == 0

    def test_initial_status(self, session):
        sub = PushSubscription.build(session, "http", "historic", "pb1", "Replay", "paused")
        assert sub.status == "paused"

    def test_invalid_hash_type(self, session):
        with pytest.raises(InvalidDataError, match="Unknown hash type"):
            PushSubscription.build(session, "http", "live", "abc123", "My Sub")

    def test_invalid_initial_status(self, session):
        with pytest.raises(InvalidDataError, match="Unsupported initial status"):
            PushSubscription.build(session, "http", "stream", "abc123", "My Sub", "finished")

    def test_unknown_output_type_checked_first(self, session):
        with pytest.raises(InvalidDataError, match="Unknown output type"):
            PushSubscription.build(session, "fax", "live", "abc123", "My Sub")


class TestRehydration:
    def test_accessors_return_supplied_values(self, session, subscription_data):
        sub = HttpSubscription(session, subscription_data)
        assert sub.id == 42
        assert sub.name == "My Sub"
        assert sub.created_at == datetime.fromtimestamp(1000, tz=timezone.utc)
        assert int(sub.created_at.timestamp() * 1000) == 1000 * 1000
        assert sub.status == "active"
        assert sub.hash_type == "stream"
        assert sub.hash == "abc123"
        assert sub.output_type == "http"

    @pytest.mark.parametrize("field", REQUIRED_FIELDS)
    def test_missing_field_rejected(self, session, make_data, field):
        data = make_data()
        del data[field]
        with pytest.raises(InvalidDataError, match=f"No {field} found") as exc_info:
            PushSubscription.factory(session, "http", data)
        assert exc_info.value.field == field

    def test_string_id_accepted(self, session, make_data):
        sub = HttpSubscription(session, make_data(id="17"))
        assert sub.id == 17

    def test_mistyped_field_rejected(self, session, make_data):
        with pytest.raises(InvalidDataError, match="Invalid output_params"):
            HttpSubscription(session, make_data(output_params="url=x"))

    def test_nested_output_params_kept_as_received(self, session, make_data):
        sub = HttpSubscription(
            session,
            make_data(output_params={
                "url": "https://example.com/push",
                "auth": {"type": "basic", "username": "alice"},
            }),
        )
        assert sub.output_params["auth"] == {"type": "basic", "username": "alice"}
        assert sub.get_output_param("auth.username") == "alice"
        assert sub.auth_type == "basic"
        assert sub.url == "https://example.com/push"

    def test_output_params_detached_from_input(self, session, make_data):
        received = {"auth": {"type": "basic"}}
        sub = HttpSubscription(session, make_data(output_params=received))
        received["auth"]["type"] = "none"
        sub.output_params["auth"]["type"] = "none"
        assert sub.auth_type == "basic"

    @pytest.mark.parametrize("created_at", [10**12, 10**20])
    def test_out_of_range_created_at_rejected(self, session, make_data, created_at):
        with pytest.raises(InvalidDataError, match="Invalid created_at") as exc_info:
            HttpSubscription(session, make_data(created_at=created_at))
        assert exc_info.value.field == "created_at"

    @pytest.mark.parametrize("value", ["10.5", "abc", [10]])
    def test_non_integer_delivery_frequency_rejected(self, session, make_data, value):
        sub = HttpSubscription(session, make_data(output_params={"delivery_frequency": value}))
        with pytest.raises(InvalidDataError, match="must be an integer") as exc_info:
            sub.delivery_frequency
        assert exc_info.value.field == "output_params.delivery_frequency"

    @pytest.mark.parametrize("value, expected", [("10", 10), (" 30 ", 30), (60.0, 60), (None, None)])
    def test_integer_delivery_frequency_parsed(self, session, make_data, value, expected):
        sub = HttpSubscription(session, make_data(output_params={"delivery_frequency": value}))
        assert sub.delivery_frequency == expected

    def test_output_params_are_read_only(self, session, subscription_data):
        sub = HttpSubscription(session, subscription_data)
        with pytest.raises(TypeError):
            sub.output_params["url"] = "https://example.com"


class TestGet:
    def test_get_dispatches_on_output_type(self, session, make_data):
        session.queue(make_data(id=7, output_type="HTTP"))
        sub = PushSubscription.get(session, 7)
        assert isinstance(sub, HttpSubscription)
        assert sub.id == 7
        assert session.calls == [("push/get", {"id": "7"})]

    def test_missing_output_type_is_api_error(self, session, make_data):
        data = make_data()
        del data["output_type"]
        session.queue(data)
        with pytest.raises(APIError, match="No output_type in the response"):
            PushSubscription.get(session, 42)

    def test_unknown_output_type_is_invalid_data(self, session, make_data):
        session.queue(make_data(output_type="telegraph"))
        with pytest.raises(InvalidDataError):
            PushSubscription.get(session, 42)

    def test_access_denied_propagates(self, session):
        session.queue(AccessDeniedError("Bad credentials"))
        with pytest.raises(AccessDeniedError):
            PushSubscription.get(session, 42)


class TestList:
    @pytest.mark.parametrize("page,per_page", [(0, 20), (-1, 20), (1, 0), (1, -5)])
    def test_invalid_paging_fails_before_calling(self, session, page, per_page):
        with pytest.raises(InvalidDataError):
            PushSubscription.list(session, page=page, per_page=per_page)
        assert session.calls == []

    @pytest.mark.parametrize(
        "order_by,order_dir",
        [("name", "asc"), ("created", "asc"), ("id", "up"), ("created_at", "DESC")],
    )
    def test_invalid_ordering_fails_before_calling(self, session, order_by, order_dir):
        with pytest.raises(InvalidDataError, match="is not supported"):
            PushSubscription.list(session, page=1, order_by=order_by, order_dir=order_dir)
        assert session.calls == []

    def test_default_lists_first_hundred(self, session):
        session.queue({"subscriptions": []})
        assert PushSubscription.list(session) == []
        assert session.last_call == (
            "push/get",
            {"page": "1", "per_page": "100", "order_by": "created_at", "order_dir": "asc"},
        )

    def test_page_defaults_to_twenty_items(self, session):
        session.queue({"subscriptions": []})
        PushSubscription.list(session, page=3)
        assert session.last_call[1]["page"] == "3"
        assert session.last_call[1]["per_page"] == "20"

    def test_page_size_follows_configuration(self, session):
        set_config(default_page_size=50)
        session.queue({"subscriptions": []})
        PushSubscription.list(session, page=2)
        assert session.last_call[1]["per_page"] == "50"

    def test_ordering_and_include_finished(self, session):
        session.queue({"subscriptions": []})
        PushSubscription.list(
            session, page=1, per_page=10, order_by="id", order_dir="desc", include_finished=True
        )
        assert session.last_call[1] == {
            "page": "1",
            "per_page": "10",
            "order_by": "id",
            "order_dir": "desc",
            "include_finished": "1",
        }

    def test_items_are_dispatched(self, session, make_data):
        session.queue({"subscriptions": [make_data(id=1), make_data(id=2, name="Other")]})
        subs = PushSubscription.list(session)
        assert [s.id for s in subs] == [1, 2]
        assert all(isinstance(s, HttpSubscription) for s in subs)
        assert subs[1].name == "Other"

    def test_missing_subscriptions_is_api_error(self, session):
        session.queue({"count": 0})
        with pytest.raises(APIError, match="Failed to read the subscriptions"):
            PushSubscription.list(session)

    def test_wrong_shape_is_api_error(self, session):
        session.queue({"subscriptions": {"id": 1}})
        with pytest.raises(APIError):
            PushSubscription.list(session)

    def test_item_without_output_type_is_api_error(self, session, make_data):
        item = make_data()
        del item["output_type"]
        session.queue({"subscriptions": [item]})
        with pytest.raises(APIError):
            PushSubscription.list(session)

    def test_first_bad_item_aborts_list(self, session, make_data):
        session.queue({"subscriptions": [make_data(id=1), make_data(id=2, output_type="fax")]})
        with pytest.raises(InvalidDataError, match="Unknown output type"):
            PushSubscription.list(session)

    def test_item_missing_field_is_invalid_data(self, session, make_data):
        item = make_data()
        del item["hash"]
        session.queue({"subscriptions": [item]})
        with pytest.raises(InvalidDataError, match="No hash found"):
            PushSubscription.list(session)


class TestSave:
    def test_create_stream_subscription(self, session, make_data):
        session.queue(make_data())
        sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")

        sub.save()

        assert sub.id == 42
        assert sub.status == "active"
        assert sub.created_at == datetime.fromtimestamp(1000, tz=timezone.utc)
        assert session.calls == [
            (
                "push/create",
                {
                    "hash": "abc123",
                    "output_type": "http",
                    "name": "My Sub",
                    "output_params": "{}",
                },
            )
        ]

    def test_create_historic_subscription_with_status(self, session, make_data):
        session.queue(make_data(hash_type="historic", hash="pb1", status="paused"))
        sub = PushSubscription.build(session, "http", "historic", "pb1", "Replay", "paused")

        sub.save()

        params = session.last_call[1]
        assert params["playback_id"] == "pb1"
        assert "hash" not in params
        assert params["initial_status"] == "paused"

    def test_update_existing_subscription(self, session, make_data):
        sub = HttpSubscription(session, make_data())
        sub.name = "Renamed"
        session.queue(make_data(name="Renamed"))

        sub.save()

        endpoint, params = session.last_call
        assert endpoint == "push/update"
        assert params["id"] == "42"
        assert params["name"] == "Renamed"
        assert "hash" not in params
        assert "output_type" not in params
        assert sub.name == "Renamed"

    def test_output_params_sent_as_nested_json(self, session, make_data):
        sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")
        sub.url = "https://example.com/push"
        sub.auth_type = "basic"
        sub.auth_username = "alice"
        sub.verify_ssl = False
        session.queue(make_data())

        sub.save()

        sent = json.loads(session.last_call[1]["output_params"])
        assert sent == {
            "url": "https://example.com/push",
            "verify_ssl": "false",
            "auth": {"type": "basic", "username": "alice"},
        }

    def test_loaded_output_params_sent_back_unchanged(self, session, make_data):
        received = {
            "url": "https://example.com/push",
            "auth": {},
            "headers": {"X.Trace": "1"},
        }
        sub = HttpSubscription(session, make_data(output_params=received))
        sub.name = "Renamed"
        session.queue(make_data(name="Renamed", output_params=received))

        sub.save()

        assert json.loads(session.last_call[1]["output_params"]) == received

    def test_dotted_edit_keeps_loaded_siblings(self, session, make_data):
        sub = HttpSubscription(
            session,
            make_data(output_params={
                "url": "https://example.com/push",
                "auth": {"type": "basic"},
                "headers": {"X.Trace": "1"},
            }),
        )
        sub.auth_username = "alice"
        session.queue(make_data())

        sub.save()

        sent = json.loads(session.last_call[1]["output_params"])
        assert sent == {
            "url": "https://example.com/push",
            "auth": {"type": "basic", "username": "alice"},
            "headers": {"X.Trace": "1"},
        }

    @pytest.mark.parametrize("value", ["10.5", "abc"])
    def test_non_integer_size_rejected_before_calling(self, session, value):
        sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")
        sub.url = "https://example.com/push"
        sub.set_output_param("max_size", value)
        with pytest.raises(InvalidDataError, match="max_size must be an integer"):
            sub.save()
        assert session.calls == []

    def test_invalid_url_rejected_before_calling(self, session):
        sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")
        sub.url = "ftp://example.com"
        with pytest.raises(InvalidDataError, match="Invalid delivery URL"):
            sub.save()
        assert session.calls == []

    def test_malformed_response_leaves_object_unchanged(self, session, make_data):
        response = make_data()
        del response["status"]
        session.queue(response)
        sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")

        with pytest.raises(InvalidDataError, match="No status found"):
            sub.save()
        assert sub.id == 0

    def test_save_deleted_subscription_rejected(self, session):
        sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")
        sub.delete()
        with pytest.raises(InvalidDataError, match="deleted"):
            sub.save()


class TestDelete:
    def test_unsaved_subscription_marked_deleted_without_call(self, session):
        sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")
        sub.delete()
        assert sub.status == "deleted"
        assert sub.is_deleted
        assert session.calls == []

    def test_saved_subscription_deleted_remotely(self, session, subscription_data):
        sub = HttpSubscription(session, subscription_data)
        session.queue({})
        sub.delete()
        assert session.calls == [("push/delete", {"id": "42"})]
        assert sub.status == "deleted"

    def test_negative_id_deleted_remotely(self, session, make_data):
        sub = HttpSubscription(session, make_data(id=-3))
        session.queue({})
        sub.delete()
        assert session.calls == [("push/delete", {"id": "-3"})]
        assert sub.is_deleted

    def test_marked_deleted_even_when_call_fails(self, session, subscription_data):
        sub = HttpSubscription(session, subscription_data)
        session.queue(APIError("Server unavailable", status_code=503))
        with pytest.raises(APIError):
            sub.delete()
        assert sub.is_deleted

    @pytest.mark.parametrize("persisted", [True, False])
    def test_deleted_subscription_rejects_changes(self, session, subscription_data, persisted):
        if persisted:
            sub = HttpSubscription(session, subscription_data)
            session.queue({})
        else:
            sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")
        sub.delete()

        with pytest.raises(InvalidDataError, match="Cannot modify a deleted subscription"):
            sub.name = "New name"
        with pytest.raises(InvalidDataError):
            sub.url = "https://example.com"
        with pytest.raises(InvalidDataError):
            sub.apply_connector(HttpConnector().url("https://example.com"))


class TestApplyConnector:
    def test_connector_params_copied(self, session):
        sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")
        connector = HttpConnector().url("https://example.com/push").max_size(1024).use_gzip(True)

        sub.apply_connector(connector)

        assert sub.url == "https://example.com/push"
        assert sub.max_size == 1024
        assert sub.use_gzip is True

    def test_missing_required_param(self, session):
        sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")
        with pytest.raises(InvalidDataError, match="output_params.url"):
            sub.apply_connector(HttpConnector().max_size(1024))

    def test_connector_for_other_output_type(self, session):
        sub = PushSubscription.build(session, "http", "stream", "abc123", "My Sub")
        with pytest.raises(InvalidDataError, match="does not match"):
            sub.apply_connector(S3Connector())
