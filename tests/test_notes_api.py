"""
Noteful Backend — Note Endpoint Tests
=======================================

What we test:
    ✅ create/get/update/delete with camelCase payloads
    ✅ folderId/tags reference errors and their messages
    ✅ list filters (searchTerm, folderId, tagId) and malformed filter ids
    ✅ folder and tag deletion as seen through the notes API
"""

import pytest

from noteful.models.common import new_identifier


@pytest.fixture
def api(client, alice_headers):
    """Small helper bound to alice's token."""

    class Api:
        async def post(self, url, json):
            return await client.post(url, json=json, headers=alice_headers)

        async def put(self, url, json):
            return await client.put(url, json=json, headers=alice_headers)

        async def get(self, url, **params):
            return await client.get(url, params=params, headers=alice_headers)

        async def delete(self, url):
            return await client.delete(url, headers=alice_headers)

        async def make(self, url, **body):
            response = await self.post(url, body)
            assert response.status_code == 201, response.text
            return response.json()

    return Api()


class TestNoteCrud:
    @pytest.mark.asyncio
    async def test_minimal_note(self, api, alice):
        response = await api.post("/api/notes", {"title": "T"})

        assert response.status_code == 201
        note = response.json()
        assert note["title"] == "T"
        assert note["folderId"] is None
        assert note["tags"] == []
        assert note["userId"] == alice.id
        assert response.headers["Location"] == f"/api/notes/{note['id']}"

    @pytest.mark.asyncio
    async def test_note_with_folder_and_tags(self, api):
        folder = await api.make("/api/folders", name="Work")
        tag = await api.make("/api/tags", name="todo")

        note = await api.make("/api/notes", title="Report", content="Q3", folderId=folder["id"], tags=[tag["id"]])

        assert note["folderId"] == folder["id"]
        assert note["tags"] == [tag["id"]]

        fetched = (await api.get(f"/api/notes/{note['id']}")).json()
        assert fetched == note

    @pytest.mark.asyncio
    async def test_missing_title(self, api):
        response = await api.post("/api/notes", {"content": "orphan"})

        assert response.status_code == 400
        assert response.json()["message"] == "Missing `title` in request body"

    @pytest.mark.asyncio
    async def test_update_then_read(self, api):
        note = await api.make("/api/notes", title="Draft", content="v1")

        updated = await api.put(f"/api/notes/{note['id']}", {"title": "X"})
        assert updated.status_code == 200

        fetched = (await api.get(f"/api/notes/{note['id']}")).json()
        assert fetched["title"] == "X"
        assert fetched["content"] == "v1"
        assert fetched["createdAt"] == note["createdAt"]
        assert fetched["updatedAt"] != note["updatedAt"]

    @pytest.mark.asyncio
    async def test_update_with_null_folder_clears_it(self, api):
        folder = await api.make("/api/folders", name="Inbox")
        note = await api.make("/api/notes", title="T", folderId=folder["id"])

        updated = (await api.put(f"/api/notes/{note['id']}", {"title": "T", "folderId": None})).json()
        assert updated["folderId"] is None

    @pytest.mark.asyncio
    async def test_delete(self, api):
        note = await api.make("/api/notes", title="Bye")

        assert (await api.delete(f"/api/notes/{note['id']}")).status_code == 204
        assert (await api.get(f"/api/notes/{note['id']}")).status_code == 404
        assert (await api.delete(f"/api/notes/{note['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_and_unknown_ids(self, api):
        assert (await api.get("/api/notes/123")).json()["message"] == "The `id` is not valid"
        assert (await api.get(f"/api/notes/{new_identifier()}")).status_code == 404


class TestReferenceErrors:
    @pytest.mark.asyncio
    async def test_unknown_folder(self, api):
        response = await api.post("/api/notes", {"title": "T", "folderId": new_identifier()})

        assert response.status_code == 400
        assert response.json()["message"] == "The `folderId` is not valid"

    @pytest.mark.asyncio
    async def test_foreign_folder(self, api, client, bob_headers):
        bobs = (await client.post("/api/folders", json={"name": "B"}, headers=bob_headers)).json()

        response = await api.post("/api/notes", {"title": "T", "folderId": bobs["id"]})
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "tags",
        [["<bad-id>"], [new_identifier()], [123], "not-a-list"],
        ids=["malformed", "unknown", "non-string", "not-array"],
    )
    @pytest.mark.asyncio
    async def test_invalid_tags_on_update(self, api, tags):
        note = await api.make("/api/notes", title="T")

        response = await api.put(f"/api/notes/{note['id']}", {"title": "T", "tags": tags})

        assert response.status_code == 400
        assert response.json()["message"] == "The `tags` array contains an invalid `id`"
        unchanged = (await api.get(f"/api/notes/{note['id']}")).json()
        assert unchanged["tags"] == []


class TestNoteList:
    @pytest.mark.asyncio
    async def test_filters(self, api):
        work = await api.make("/api/folders", name="Work")
        todo = await api.make("/api/tags", name="todo")
        report = await api.make("/api/notes", title="Quarterly report", folderId=work["id"])
        call = await api.make("/api/notes", title="Call plumber", tags=[todo["id"]])
        await api.make("/api/notes", title="Poem", content="a REPORT of rain")

        by_search = (await api.get("/api/notes", searchTerm="report")).json()
        assert len(by_search) == 2
        assert report["id"] in {n["id"] for n in by_search}

        by_folder = (await api.get("/api/notes", folderId=work["id"])).json()
        assert [n["id"] for n in by_folder] == [report["id"]]

        by_tag = (await api.get("/api/notes", tagId=todo["id"])).json()
        assert [n["id"] for n in by_tag] == [call["id"]]

    @pytest.mark.parametrize("param,message", [
        ("folderId", "The `folderId` is not valid"),
        ("tagId", "The `tagId` is not valid"),
    ])
    @pytest.mark.asyncio
    async def test_malformed_filter_ids(self, api, param, message):
        response = await api.get("/api/notes", **{param: "nope"})

        assert response.status_code == 400
        assert response.json()["message"] == message

    @pytest.mark.asyncio
    async def test_isolation(self, api, client, bob_headers):
        await api.make("/api/notes", title="Alice only")

        response = await client.get("/api/notes", headers=bob_headers)
        assert response.json() == []


class TestCascades:
    @pytest.mark.asyncio
    async def test_deleting_folder_keeps_its_notes(self, api):
        folder = await api.make("/api/folders", name="Trip")
        notes = [await api.make("/api/notes", title=f"Day {i}", folderId=folder["id"]) for i in range(3)]

        assert (await api.delete(f"/api/folders/{folder['id']}")).status_code == 204

        listed = (await api.get("/api/notes")).json()
        assert {n["id"] for n in listed} == {n["id"] for n in notes}
        assert all(n["folderId"] is None for n in listed)

    @pytest.mark.asyncio
    async def test_deleting_tag_removes_only_that_tag(self, api):
        urgent = await api.make("/api/tags", name="urgent")
        home = await api.make("/api/tags", name="home")
        note = await api.make("/api/notes", title="Fix sink", tags=[urgent["id"], home["id"]])

        assert (await api.delete(f"/api/tags/{urgent['id']}")).status_code == 204

        fetched = (await api.get(f"/api/notes/{note['id']}")).json()
        assert fetched["tags"] == [home["id"]]
