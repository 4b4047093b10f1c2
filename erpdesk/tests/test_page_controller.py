import pytest

from erpdesk.core.api.result import ErrorKind, Result
from erpdesk.core.pages.controller import ListQuery, PageController
from erpdesk.core.pages.resources import Choice, Column, Resource
from erpdesk.core.pages.snapshots import StaleSnapshotStore

pytestmark = pytest.mark.unit

ITEMS = Resource(
    name="test_items",
    title="Item",
    endpoint="/api/items",
    collection_key="items",
    item_key="item",
    columns=(Column("code", "Code"), Column("name", "Name")),
    search_fields=("name", "code", "supplier.name"),
    filters=(
        Choice("category", "Category", ("RAW_MATERIAL", "COMPONENT")),
        Choice("status", "Status", ("ACTIVE", "INACTIVE"), remote=True),
    ),
    remote_filters=("warehouseId",),
    fixed_params={"type": "STOCKED"},
    deletable=True,
)


def _items(*names, category="RAW_MATERIAL"):
    return [{"_id": f"id-{n}", "code": n.upper(), "name": n, "category": category} for n in names]


def _page(records, total_count=None, total_pages=1, current_page=1):
    return {
        "status": "success",
        "data": {
            "items": records,
            "pagination": {"totalCount": total_count or len(records), "totalPages": total_pages, "currentPage": current_page},
        },
    }


@pytest.fixture()
def controller(auth_client, store):
    store.set("tok")
    return PageController(auth_client, ITEMS)


def test_three_rows_of_twenty_five_without_fetching_page_two(controller, api):
    api.add("GET", "/api/items", body=_page(_items("a", "b", "c"), total_count=25, total_pages=2))

    result = controller.load(ListQuery(page=1, limit=3))

    assert result.ok
    assert len(controller.records) == 3
    assert controller.total_count == 25
    assert controller.total_pages == 2
    assert len(api.calls("GET", "/api/items")) == 1
    assert controller.loading is False


def test_load_sends_remote_params_only(controller, api):
    api.add("GET", "/api/items", body=_page([]))
    query = ListQuery(
        page=2,
        limit=10,
        search="bolt",
        filters={"category": "COMPONENT", "status": "ACTIVE", "warehouseId": "w1"},
    )

    controller.load(query)

    _, _, kwargs = api.calls("GET", "/api/items")[0]
    assert kwargs["params"] == {
        "type": "STOCKED",
        "page": 2,
        "limit": 10,
        "search": "bolt",
        "status": "ACTIVE",
        "warehouseId": "w1",
    }


def test_query_from_args_drops_all_and_blank():
    query = ListQuery.from_args(
        {"page": "0", "search": "  nut ", "category": "ALL", "status": "", "warehouseId": "w2", "other": "x"},
        ITEMS,
        limit=50,
    )

    assert query.page == 1
    assert query.limit == 50
    assert query.search == "nut"
    assert query.filters == {"warehouseId": "w2"}


def test_failed_reload_keeps_previous_rows(controller, api):
    api.add("GET", "/api/items", body=_page(_items("a", "b")))
    api.add("GET", "/api/items", status=500, body={"message": "Database unavailable"})

    controller.load()
    controller.load()

    assert [r["name"] for r in controller.records] == ["a", "b"]
    assert controller.error == "Database unavailable"


def test_stale_generation_is_dropped(controller):
    first = controller.begin_fetch()
    second = controller.begin_fetch()

    assert controller.complete_fetch(second, Result.success(_page(_items("new"))))
    assert not controller.complete_fetch(first, Result.success(_page(_items("old"))))

    assert [r["name"] for r in controller.records] == ["new"]
    assert controller.generation == second


def test_late_error_for_old_generation_does_not_set_error(controller):
    first = controller.begin_fetch()
    second = controller.begin_fetch()
    controller.complete_fetch(second, Result.success(_page(_items("x"))))

    controller.complete_fetch(first, Result.failure(ErrorKind.SERVER, "late failure"))

    assert controller.error is None


def test_visible_records_filters_current_page_locally(controller, api):
    records = _items("Steel bolt", "Steel nut") + _items("Copper wire", category="COMPONENT")
    records[0]["supplier"] = {"name": "Daehan"}
    api.add("GET", "/api/items", body=_page(records, total_count=40))
    controller.load()

    assert [r["name"] for r in controller.visible_records("steel")] == ["Steel bolt", "Steel nut"]
    assert [r["name"] for r in controller.visible_records("daehan")] == ["Steel bolt"]
    assert [r["name"] for r in controller.visible_records("", {"category": "COMPONENT"})] == ["Copper wire"]
    assert len(controller.visible_records("", {"category": "ALL"})) == 3
    # Remote filters are the API's job and are not re-applied locally.
    assert len(controller.visible_records("", {"status": "INACTIVE"})) == 3


def test_declined_delete_makes_no_call(controller, api):
    api.add("GET", "/api/items", body=_page(_items("a", "b")))
    controller.load()

    note = controller.delete("id-a", confirmed=False)

    assert note.level == "info"
    assert api.calls("DELETE") == []
    assert controller.find("id-a") is not None


def test_confirmed_delete_removes_record_locally(controller, api):
    api.add("GET", "/api/items", body=_page(_items("a", "b"), total_count=2))
    api.add("DELETE", "/api/items/id-a", body={"status": "success"})
    controller.load()

    note = controller.delete("id-a", confirmed=True)

    assert note.ok
    assert controller.find("id-a") is None
    assert controller.total_count == 1
    assert len(api.calls("GET", "/api/items")) == 1


def test_failed_delete_keeps_record(controller, api):
    api.add("GET", "/api/items", body=_page(_items("a")))
    api.add("DELETE", "/api/items/id-a", status=403, body={"message": "Admins only"})
    controller.load()

    note = controller.delete("id-a", confirmed=True)

    assert note.level == "error"
    assert note.message == "Admins only"
    assert controller.find("id-a") is not None


def test_create_posts_and_refetches(controller, api):
    api.add("POST", "/api/items", status=201, body={"status": "success"})
    api.add("GET", "/api/items", body=_page(_items("fresh")))

    note = controller.save({"code": "F", "name": "fresh"})

    assert note.ok
    assert note.message == "Item created."
    _, _, kwargs = api.calls("POST", "/api/items")[0]
    assert kwargs["json"] == {"code": "F", "name": "fresh"}
    assert [r["name"] for r in controller.records] == ["fresh"]


def test_update_uses_resource_method(auth_client, store, api):
    store.set("tok")
    resource = Resource(
        name="put_items",
        title="Item",
        endpoint="/api/items",
        collection_key="items",
        columns=(),
        update_method="PUT",
    )
    api.add("PUT", "/api/items/id-1", body={"status": "success"})
    api.add("GET", "/api/items", body=_page([]))

    note = PageController(auth_client, resource).save({"name": "x"}, record_id="id-1")

    assert note.message == "Item updated."
    assert len(api.calls("PUT", "/api/items/id-1")) == 1


def test_failed_save_does_not_refetch(controller, api):
    api.add("POST", "/api/items", status=400, body={"message": "Code already exists"})

    note = controller.save({"code": "A"})

    assert note.level == "error"
    assert note.message == "Code already exists"
    assert api.calls("GET", "/api/items") == []


def test_perform_patches_action_and_refetches(controller, api):
    api.add("PATCH", "/api/items/id-1/approve", body={"status": "success"})
    api.add("GET", "/api/items", body=_page([]))

    note = controller.perform("id-1", "approve", {"comments": "ok"}, success_message="Approved.")

    assert note.message == "Approved."
    _, _, kwargs = api.calls("PATCH", "/api/items/id-1/approve")[0]
    assert kwargs["json"] == {"comments": "ok"}
    assert len(api.calls("GET", "/api/items")) == 1


def test_session_expired_after_401(controller, store, api):
    api.add("GET", "/api/items", status=401, body={"message": "jwt expired"})

    controller.load()

    assert controller.session_expired
    assert store.get() is None


def test_fetch_record_unwraps_item_key(controller, api):
    api.add("GET", "/api/items/id-9", body={"status": "success", "data": {"item": {"_id": "id-9", "name": "Gear"}}})

    result = controller.fetch_record("id-9")

    assert result.ok
    assert result.value == {"_id": "id-9", "name": "Gear"}


def test_transform_applies_to_list_rows(auth_client, store, api):
    store.set("tok")
    resource = Resource(
        name="upper_items",
        title="Item",
        endpoint="/api/items",
        collection_key="items",
        columns=(),
        transform=lambda r: {**r, "name": r["name"].upper()},
    )
    api.add("GET", "/api/items", body=_page(_items("gear")))

    controller = PageController(auth_client, resource)
    controller.load()

    assert controller.records[0]["name"] == "GEAR"


def test_snapshot_survives_to_next_controller(auth_client, store, api):
    store.set("tok")
    snapshots = StaleSnapshotStore(8)
    api.add("GET", "/api/items", body=_page(_items("a", "b"), total_count=12, total_pages=2))
    api.add("GET", "/api/items", status=502, body=None)

    PageController(auth_client, ITEMS, snapshots=snapshots, session_id="s1").load()
    later = PageController(auth_client, ITEMS, snapshots=snapshots, session_id="s1")
    later.load()

    assert [r["name"] for r in later.records] == ["a", "b"]
    assert later.total_count == 12
    assert later.error

    other_visitor = PageController(auth_client, ITEMS, snapshots=snapshots, session_id="s2")
    assert other_visitor.records == []
