from unittest import mock

import requests

PROFILE = {
    "bio": "Backend developer",
    "location": "Lisbon",
    "skills": "python, mongodb ,fastapi",
    "hobbies": "chess,climbing",
    "twitter": "https://twitter.com/a1",
    "website": "https://a1.dev",
}

BLOG = {
    "title": "First post",
    "content": "Hello there",
    "published": "2019-03-01T10:00:00",
    "description": "A short hello",
}


def me(client, token):
    return client.get("/api/profile/me", headers={"x-auth-token": token})


def test_create_profile(client, register):
    token = register()
    res = client.post("/api/profile", json=PROFILE, headers={"x-auth-token": token})
    assert res.status_code == 200
    profile = res.json()
    assert profile["skills"] == ["python", "mongodb", "fastapi"]
    assert profile["hobbies"] == ["chess", "climbing"]
    assert profile["social"] == {"twitter": "https://twitter.com/a1"}
    assert profile["website"] == "https://a1.dev"
    assert profile["blogpost"] == []

    res = me(client, token)
    assert res.status_code == 200
    owner = res.json()["user"]
    assert owner["username"] == "a1"
    assert owner["name"] == "A"
    assert "email" not in owner


def test_profile_requires_auth(client):
    res = client.post("/api/profile", json=PROFILE)
    assert res.status_code == 401


def test_profile_validation(client, register):
    token = register()
    res = client.post("/api/profile", json={"bio": "  "}, headers={"x-auth-token": token})
    assert res.status_code == 400
    assert [e["msg"] for e in res.json()["errors"]] == [
        "Bio field is required",
        "Please enter your location",
        "Please list your skills",
        "Please list your hobbies",
    ]


def test_upsert_keeps_owner_and_single_profile(client, register, db):
    token = register()
    headers = {"x-auth-token": token}
    first = client.post("/api/profile", json=PROFILE, headers=headers).json()
    second = client.post("/api/profile", json=dict(PROFILE, bio="Changed", user="000000000000000000000000"),
                         headers=headers).json()

    assert second["id"] == first["id"]
    assert second["user"] == first["user"]
    assert second["bio"] == "Changed"
    assert db["profiles"].count_documents({}) == 1


def test_no_profile(client, register):
    token = register()
    res = me(client, token)
    assert res.status_code == 404
    assert res.json() == {"msg": "There is no profile for this user"}


def test_public_profiles(client, register):
    token = register()
    client.post("/api/profile", json=PROFILE, headers={"x-auth-token": token})
    account_id = client.get("/api/auth", headers={"x-auth-token": token}).json()["id"]

    profiles = client.get("/api/profile").json()
    assert len(profiles) == 1
    assert profiles[0]["user"]["id"] == account_id

    for path in (f"/api/profile/{account_id}", f"/api/profile/user/{account_id}"):
        res = client.get(path)
        assert res.status_code == 200
        assert res.json()["bio"] == "Backend developer"

    for missing in ("5c7d3f0a9b1e4a0012345678", "not-an-id"):
        res = client.get(f"/api/profile/{missing}")
        assert res.status_code == 404
        assert res.json() == {"msg": "Profile not found"}


def test_delete_account_cascades(client, register, db):
    token = register()
    headers = {"x-auth-token": token}
    client.post("/api/profile", json=PROFILE, headers=headers)
    client.post("/api/posts", json={"content": "hi"}, headers=headers)

    other = register(username="b2")
    client.post("/api/posts", json={"content": "still here"}, headers={"x-auth-token": other})

    res = client.delete("/api/profile", headers=headers)
    assert res.status_code == 200
    assert res.json() == {"msg": "User deleted"}

    assert db["users"].count_documents({}) == 1
    assert db["profiles"].count_documents({}) == 0
    assert [p["content"] for p in db["posts"].find()] == ["still here"]


def test_blog_entries(client, register):
    token = register()
    headers = {"x-auth-token": token}
    client.post("/api/profile", json=PROFILE, headers=headers)

    client.put("/api/profile/blogpost", json=BLOG, headers=headers)
    res = client.put("/api/profile/blogpost", json=dict(BLOG, title="Second"), headers=headers)
    assert res.status_code == 200
    entries = res.json()["blogpost"]
    assert [e["title"] for e in entries] == ["Second", "First post"]
    assert all("id" in e for e in entries)

    res = client.delete(f"/api/profile/blogpost/{entries[1]['id']}", headers=headers)
    assert res.status_code == 200
    assert [e["title"] for e in res.json()["blogpost"]] == ["Second"]


def test_blog_entry_not_found(client, register):
    token = register()
    headers = {"x-auth-token": token}
    client.post("/api/profile", json=PROFILE, headers=headers)
    client.put("/api/profile/blogpost", json=BLOG, headers=headers)

    res = client.delete("/api/profile/blogpost/5c7d3f0a9b1e4a0012345678", headers=headers)
    assert res.status_code == 404
    assert res.json() == {"msg": "Blog post not found"}
    assert len(me(client, token).json()["blogpost"]) == 1


def test_blog_entry_only_in_own_profile(client, register):
    owner = register(username="a1")
    client.post("/api/profile", json=PROFILE, headers={"x-auth-token": owner})
    entry_id = client.put("/api/profile/blogpost", json=BLOG,
                          headers={"x-auth-token": owner}).json()["blogpost"][0]["id"]

    intruder = register(username="b2")
    client.post("/api/profile", json=PROFILE, headers={"x-auth-token": intruder})
    res = client.delete(f"/api/profile/blogpost/{entry_id}", headers={"x-auth-token": intruder})
    assert res.status_code == 404
    assert len(me(client, owner).json()["blogpost"]) == 1


def test_blog_entry_validation(client, register):
    token = register()
    headers = {"x-auth-token": token}
    client.post("/api/profile", json=PROFILE, headers=headers)
    res = client.put("/api/profile/blogpost", json={"title": "x"}, headers=headers)
    assert res.status_code == 400
    assert [e["param"] for e in res.json()["errors"]] == ["content", "published", "description"]


def test_github(client):
    upstream = mock.Mock(status_code=200)
    upstream.json.return_value = [{"name": "repo"}]
    with mock.patch("github_client.requests.get", return_value=upstream) as get:
        res = client.get("/api/profile/github/octocat")
    assert res.status_code == 200
    assert res.json() == [{"name": "repo"}]
    assert get.call_args[0][0] == "https://api.github.com/users/octocat/repos"


def test_github_not_found(client):
    with mock.patch("github_client.requests.get", return_value=mock.Mock(status_code=404)):
        res = client.get("/api/profile/github/nobody")
    assert res.status_code == 404
    assert res.json() == {"msg": "No Github profile found"}

    with mock.patch("github_client.requests.get", side_effect=requests.ConnectionError("down")):
        res = client.get("/api/profile/github/nobody")
    assert res.status_code == 404


def test_github_username_is_one_path_segment(client):
    upstream = mock.Mock(status_code=200)
    upstream.json.return_value = []
    with mock.patch("github_client.requests.get", return_value=upstream) as get:
        res = client.get("/api/profile/github/a%3Fb%23c")
    assert res.status_code == 200
    assert get.call_args[0][0] == "https://api.github.com/users/a%3Fb%23c/repos"
