"""Tests for CMDBCategory and CMDBCategoryInfo."""

import pytest

from cmdbrpc.category import CMDBCategory
from cmdbrpc.category_info import CMDBCategoryInfo
from cmdbrpc.error import ApplicationFault

OK = {"success": True, "message": "Category entry successfully saved"}


@pytest.fixture
def category(api):
    return CMDBCategory(api)


class TestSingleEntries:

    @pytest.mark.asyncio
    async def test_create(self, category, transport):
        transport.routes["cmdb.category.create"] = {"id": "7", **OK}
        entry_id = await category.create(42, "C__CATG__IP", {"ipv4_address": "10.0.0.1"})

        assert entry_id == 7
        method, params = transport.calls()[0]
        assert method == "cmdb.category.create"
        assert params["objID"] == 42
        assert params["category"] == "C__CATG__IP"
        assert params["data"] == {"ipv4_address": "10.0.0.1"}

    @pytest.mark.asyncio
    async def test_create_unsuccessful(self, category, transport):
        transport.routes["cmdb.category.create"] = {"success": False, "message": "Invalid IP"}
        with pytest.raises(ApplicationFault, match="Bad result: Invalid IP"):
            await category.create(42, "C__CATG__IP", {"ipv4_address": "x"})

    @pytest.mark.asyncio
    async def test_create_without_id(self, category, transport):
        transport.routes["cmdb.category.create"] = {"success": True}
        with pytest.raises(ApplicationFault, match="Bad result"):
            await category.create(42, "C__CATG__IP", {})

    @pytest.mark.asyncio
    async def test_read_one_by_id(self, category, transport):
        transport.routes["cmdb.category.read"] = [{"id": "1"}, {"id": "2", "title": "b"}]
        assert await category.read_one_by_id(42, "C__CATG__IP", 2) == {"id": "2", "title": "b"}

    @pytest.mark.asyncio
    async def test_read_one_by_id_missing(self, category, transport):
        transport.routes["cmdb.category.read"] = [{"id": "1"}]
        with pytest.raises(ApplicationFault, match="No entry with identifier 5"):
            await category.read_one_by_id(42, "C__CATG__IP", 5)

    @pytest.mark.asyncio
    async def test_read_one_by_id_without_ids(self, category, transport):
        transport.routes["cmdb.category.read"] = [{"title": "a"}]
        with pytest.raises(ApplicationFault, match="contain no identifier"):
            await category.read_one_by_id(42, "C__CATG__IP", 1)

    @pytest.mark.asyncio
    async def test_read_first(self, category, transport):
        transport.routes["cmdb.category.read"] = [{"id": "1"}, {"id": "2"}]
        assert await category.read_first(42, "C__CATG__GLOBAL") == {"id": "1"}

        transport.routes["cmdb.category.read"] = []
        assert await category.read_first(42, "C__CATG__GLOBAL") is None

    @pytest.mark.asyncio
    async def test_update_with_entry_id(self, category, transport):
        transport.routes["cmdb.category.update"] = OK
        await category.update(42, "C__CATG__IP", {"hostname": "h"}, entry_id=3)
        _, params = transport.calls()[0]
        assert params["data"] == {"hostname": "h", "category_id": 3}

    @pytest.mark.asyncio
    async def test_update_unsuccessful(self, category, transport):
        transport.routes["cmdb.category.update"] = {"success": False}
        with pytest.raises(ApplicationFault, match="^Bad result$"):
            await category.update(42, "C__CATG__GLOBAL", {"title": "x"})

    @pytest.mark.asyncio
    async def test_archive(self, category, transport):
        transport.routes["cmdb.category.delete"] = OK
        await category.archive(42, "C__CATG__IP", 3)
        assert transport.calls() == [
            ("cmdb.category.delete", {
                "objID": 42, "category": "C__CATG__IP", "cateID": 3, "apikey": "c1ia5q",
            }),
        ]

    @pytest.mark.asyncio
    async def test_delete_archives_twice(self, category, transport):
        transport.routes["cmdb.category.delete"] = OK
        await category.delete(42, "C__CATG__IP", 3)

        calls = transport.calls()
        assert [method for method, _ in calls] == ["cmdb.category.delete"] * 2
        assert calls[0][1] == calls[1][1]
        assert transport.send_count == 2

    @pytest.mark.asyncio
    async def test_purge(self, category, transport):
        transport.routes["cmdb.category.quickpurge"] = OK
        await category.purge(42, "C__CATG__IP", 3)
        assert transport.calls()[0][0] == "cmdb.category.quickpurge"


class TestBatches:

    @pytest.mark.asyncio
    async def test_batch_create_crosses_objects_and_attributes(self, category, transport):
        transport.routes["cmdb.category.create"] = {"id": None, **OK}
        ids = await category.batch_create(
            [1, 2],
            "C__CATG__CONTACT",
            [{"contact": 10}, {"contact": 11}],
        )

        assert ids == [None, None, None, None]
        assert transport.send_count == 1
        pairs = [(params["objID"], params["data"]["contact"]) for _, params in transport.calls()]
        assert pairs == [(1, 10), (1, 11), (2, 10), (2, 11)]

    @pytest.mark.asyncio
    async def test_batch_create_failure(self, category, transport):
        def create(params):
            if params["objID"] == 2:
                return {"success": False, "message": "Object 2 is archived"}
            return {"id": "5", **OK}

        transport.routes["cmdb.category.create"] = create
        with pytest.raises(ApplicationFault, match="Object 2 is archived"):
            await category.batch_create([1, 2], "C__CATG__IP", [{}])

    @pytest.mark.asyncio
    async def test_batch_read_keeps_order(self, category, transport):
        transport.routes["cmdb.category.read"] = lambda params: [
            {"id": "1", "source": f"{params['objID']}/{params['category']}"}
        ]
        transport.rewrite = lambda responses: list(reversed(responses))

        result = await category.batch_read([1, 2], ["C__CATG__GLOBAL", "C__CATG__IP"])

        assert [entries[0]["source"] for entries in result] == [
            "1/C__CATG__GLOBAL",
            "1/C__CATG__IP",
            "2/C__CATG__GLOBAL",
            "2/C__CATG__IP",
        ]

    @pytest.mark.asyncio
    async def test_batch_update(self, category, transport):
        transport.routes["cmdb.category.update"] = OK
        results = await category.batch_update([1, 2, 3], "C__CATG__GLOBAL", {"purpose": 2})
        assert len(results) == 3
        assert [params["objID"] for _, params in transport.calls()] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_clear(self, category, transport):
        entries = {
            "C__CATG__IP": [{"id": "1"}, {"id": "2"}],
            "C__CATG__CONTACT": [{"id": "9"}],
        }
        transport.routes["cmdb.category.read"] = lambda params: entries[params["category"]]
        transport.routes["cmdb.category.delete"] = OK
        transport.rewrite = lambda responses: list(reversed(responses))

        count = await category.clear(42, ["C__CATG__IP", "C__CATG__CONTACT"])

        assert count == 3
        assert transport.send_count == 2
        deletes = [
            (params["category"], params["cateID"])
            for method, params in transport.calls()
            if method == "cmdb.category.delete"
        ]
        assert deletes == [("C__CATG__IP", 1), ("C__CATG__IP", 2), ("C__CATG__CONTACT", 9)]

    @pytest.mark.asyncio
    async def test_clear_empty_categories(self, category, transport):
        transport.routes["cmdb.category.read"] = []
        assert await category.clear(42, ["C__CATG__IP"]) == 0
        assert transport.send_count == 1


class TestCategoryInfo:

    @pytest.mark.asyncio
    async def test_read(self, api, transport):
        transport.routes["cmdb.category_info"] = {"title": {"title": "Title"}}
        info = await CMDBCategoryInfo(api).read("C__CATG__GLOBAL")
        assert info == {"title": {"title": "Title"}}
        assert transport.calls()[0][1]["category"] == "C__CATG__GLOBAL"

    @pytest.mark.asyncio
    async def test_batch_read(self, api, transport):
        transport.routes["cmdb.category_info"] = lambda params: {"const": params["category"]}
        categories = ["C__CATG__GLOBAL", "C__CATG__IP", "C__CATS__PERSON_MASTER"]

        result = await CMDBCategoryInfo(api).batch_read(categories)

        assert [info["const"] for info in result] == categories
        assert transport.send_count == 1
