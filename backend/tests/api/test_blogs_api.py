"""Blogs: staff publish, anyone reads."""


async def test_volunteer_publishes_blog(client, make_user, auth_headers):
    volunteer = await make_user("v@example.com", role="volunteer")

    res = await client.post(
        "/blogs", json={"title": "Why donate", "content": "Because.", "author": "x@example.com"}, headers=auth_headers(volunteer)
    )

    assert res.status_code == 201
    assert res.json()["author"] == "v@example.com"
    assert res.json()["status"] == "published"


async def test_donor_cannot_publish(client, make_user, auth_headers):
    donor = await make_user("d@example.com")
    res = await client.post("/blogs", json={"title": "T", "content": "C"}, headers=auth_headers(donor))
    assert res.status_code == 403


async def test_public_list_shows_published_newest_first(client, db, make_user, auth_headers):
    admin = await make_user("admin@example.com", role="admin")
    await db["blogs"].insert_one({"author": "x@example.com", "title": "Draft", "content": "c", "status": "draft"})
    await client.post("/blogs", json={"title": "First", "content": "c"}, headers=auth_headers(admin))
    await client.post("/blogs", json={"title": "Second", "content": "c"}, headers=auth_headers(admin))

    res = await client.get("/blogs")

    assert res.status_code == 200
    assert [blog["title"] for blog in res.json()] == ["Second", "First"]
