from fastapi.testclient import TestClient

HTML = {"Accept": "text/html"}


def _create_thread(client: TestClient, forum_id: int, title: str, content: str = "body") -> dict:
    response = client.post(f"/f/{forum_id}/threads", data={"title": title, "content": content})
    assert response.status_code == 200
    return response.json()


def test_list_forums_returns_created_forums_in_id_order(client: TestClient, forum: dict) -> None:
    second = client.post("/forums", data={"name": "Off topic"}).json()

    payload = client.get("/").json()
    assert [f["id"] for f in payload["forums"]] == [forum["id"], second["id"]]
    assert payload["forums"][0]["description"] == "Anything goes"


def test_home_page_renders_html(client: TestClient, forum: dict) -> None:
    response = client.get("/", headers=HTML)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "General" in response.text
    assert f'href="/f/{forum["id"]}"' in response.text


def test_create_forum_from_html_form_redirects(client: TestClient) -> None:
    response = client.post("/forums", data={"name": "News"}, headers=HTML, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"].startswith("/f/")


def test_create_forum_with_duplicate_slug_is_rejected(client: TestClient) -> None:
    assert client.post("/forums", data={"name": "One", "slug": "dup"}).status_code == 200
    response = client.post("/forums", data={"name": "Two", "slug": "dup"})
    assert response.status_code == 400


def test_forum_page_lists_threads_newest_first_with_reply_counts(client: TestClient, forum: dict) -> None:
    older = _create_thread(client, forum["id"], "Older")
    newer = _create_thread(client, forum["id"], "Newer")
    client.post(f"/thread/{older['id']}/replies", data={"content": "first"})
    client.post(f"/thread/{older['id']}/replies", data={"content": "second"})

    payload = client.get(f"/f/{forum['id']}").json()
    assert payload["total"] == 2
    assert [t["id"] for t in payload["threads"]] == [newer["id"], older["id"]]
    assert [t["reply_count"] for t in payload["threads"]] == [0, 2]
    assert payload["pagination"] == {"page": 1, "total_pages": 1, "page_size": 10}


def test_forum_page_splits_threads_across_pages(client: TestClient, forum: dict) -> None:
    for n in range(12):
        _create_thread(client, forum["id"], f"Thread {n}")

    second_page = client.get(f"/f/{forum['id']}", params={"page": 2}).json()
    assert second_page["pagination"]["total_pages"] == 2
    assert [t["title"] for t in second_page["threads"]] == ["Thread 1", "Thread 0"]


def test_forum_page_past_the_end_redirects_to_last_page(client: TestClient, forum: dict) -> None:
    for n in range(11):
        _create_thread(client, forum["id"], f"Thread {n}")

    response = client.get(f"/f/{forum['id']}", params={"page": 99}, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == f"/f/{forum['id']}?page=2"


def test_empty_forum_past_the_end_redirects_to_first_page(client: TestClient, forum: dict) -> None:
    response = client.get(f"/f/{forum['id']}", params={"page": 5}, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == f"/f/{forum['id']}?page=1"


def test_forum_page_below_first_page_shows_first_page(client: TestClient, forum: dict) -> None:
    _create_thread(client, forum["id"], "Only")

    payload = client.get(f"/f/{forum['id']}", params={"page": -3}).json()
    assert payload["pagination"]["page"] == 1
    assert [t["title"] for t in payload["threads"]] == ["Only"]


def test_forum_page_renders_html(client: TestClient, forum: dict) -> None:
    thread = _create_thread(client, forum["id"], "Welcome")

    response = client.get(f"/f/{forum['id']}", headers=HTML)
    assert response.status_code == 200
    assert "Welcome" in response.text
    assert f'href="/thread/{thread["id"]}"' in response.text


def test_unknown_forum_is_not_found(client: TestClient) -> None:
    assert client.get("/f/999").status_code == 404
    assert client.get("/f/999/new").status_code == 404


def test_non_numeric_forum_id_is_rejected(client: TestClient) -> None:
    assert client.get("/f/abc").status_code == 422


def test_new_thread_form_renders(client: TestClient, forum: dict) -> None:
    response = client.get(f"/f/{forum['id']}/new")
    assert response.status_code == 200
    assert f'action="/f/{forum["id"]}/threads"' in response.text


def test_create_thread_sanitizes_title_and_wraps_body(client: TestClient, forum: dict) -> None:
    thread = _create_thread(client, forum["id"], "<b>Hello</b> there", content="<i>hi</i><img src=x>")
    assert thread["title"] == "Hello there"
    assert thread["content"] == '<pre class="responsive"><i>hi</i></pre>'
    assert thread["author"] is None


def test_create_thread_from_html_form_redirects_to_thread(client: TestClient, forum: dict) -> None:
    response = client.post(
        f"/f/{forum['id']}/threads",
        data={"title": "Hi", "content": "body"},
        headers=HTML,
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"].startswith("/thread/")


def test_create_thread_requires_title_and_content(client: TestClient, forum: dict) -> None:
    assert client.post(f"/f/{forum['id']}/threads", data={"title": "", "content": "x"}).status_code == 422
    assert client.post(f"/f/{forum['id']}/threads", data={"title": "x", "content": "   "}).status_code == 422
    assert client.post(f"/f/{forum['id']}/threads", data={"title": "x"}).status_code == 422


def test_create_thread_with_title_that_is_only_markup_is_rejected(client: TestClient, forum: dict) -> None:
    response = client.post(f"/f/{forum['id']}/threads", data={"title": "<b></b>", "content": "x"})
    assert response.status_code == 400


def test_create_thread_in_unknown_forum_is_not_found(client: TestClient) -> None:
    response = client.post("/f/999/threads", data={"title": "Hi", "content": "body"})
    assert response.status_code == 404


def test_forum_page_with_non_numeric_page_shows_first_page(client: TestClient, forum: dict) -> None:
    _create_thread(client, forum["id"], "Only")

    response = client.get(f"/f/{forum['id']}", params={"page": "abc"}, follow_redirects=False)
    assert response.status_code == 200
    assert response.json()["pagination"]["page"] == 1


def test_forum_page_with_huge_page_redirects_to_last_page(client: TestClient, forum: dict) -> None:
    _create_thread(client, forum["id"], "Only")

    response = client.get(f"/f/{forum['id']}", params={"page": str(10**18)}, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == f"/f/{forum['id']}?page=1"
