from conftest import FakeAPIError, FakeLLMClient, activities_json, text_response


def test_health(make_client):
    response = make_client(FakeLLMClient()).get("/api/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "OK"
    assert body["service"] == "Family Activity Finder API"
    assert body["timestamp"].endswith("Z")


def test_search_returns_formatted_activities(make_client, search_criteria):
    llm = FakeLLMClient(text_response(activities_json("A", "B", "C", "D", "E", "F")))

    response = make_client(llm).post("/api/activities", json=search_criteria)

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert [a["title"] for a in body["activities"]] == ["A", "B", "C", "D", "E"]
    assert body["activities"][0]["ageAppropriate"] is True
    assert body["activities"][0]["emoji"] == "🎯"
    assert body["searchCriteria"] == search_criteria
    assert body["searchMode"] == "web_search"
    assert "timestamp" in body


def test_unparseable_reply_still_succeeds(make_client, search_criteria):
    llm = FakeLLMClient(text_response("Sorry, I could not find anything."))

    body = make_client(llm).post("/api/activities", json=search_criteria).get_json()

    assert body["success"] is True
    assert len(body["activities"]) == 1
    assert body["activities"][0]["title"] == "Activity Search Results"


def test_missing_fields_return_400(make_client, search_criteria):
    llm = FakeLLMClient()
    criteria = dict(search_criteria)
    del criteria["city"]

    response = make_client(llm).post("/api/activities", json=criteria)

    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "Missing required fields"
    assert body["required"] == ["city", "state", "ages", "availability", "distance"]
    assert body["missing"] == ["city"]
    assert llm.calls == []


def test_out_of_range_distance_returns_400(make_client, search_criteria):
    response = make_client(FakeLLMClient()).post("/api/activities", json=dict(search_criteria, distance=80))

    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "Invalid search criteria"
    assert "between 1 and 50" in body["message"]


def test_upstream_status_is_mirrored(make_client, search_criteria):
    llm = FakeLLMClient(FakeAPIError("Overloaded", status_code=529))

    response = make_client(llm).post("/api/activities", json=search_criteria)

    assert response.status_code == 529
    body = response.get_json()
    assert body["error"] == "Failed to generate activities"
    assert body["message"] == "Overloaded"


def test_upstream_error_without_status_is_500(make_client, search_criteria):
    llm = FakeLLMClient(RuntimeError("connection reset"))

    response = make_client(llm).post("/api/activities", json=search_criteria)

    assert response.status_code == 500
    assert response.get_json()["message"] == "connection reset"


def test_timeout_is_reported_distinctly(make_client, search_criteria):
    llm = FakeLLMClient(text_response(activities_json("Late")), delay=1.0)

    response = make_client(llm, REQUEST_TIMEOUT=0.2).post("/api/activities", json=search_criteria)

    assert response.status_code == 504
    assert "timed out" in response.get_json()["message"]


def test_prompt_variables(make_client):
    body = make_client(FakeLLMClient()).get("/api/prompt/variables").get_json()

    assert body["variables"] == ["city", "state", "ages", "availability", "distance", "preferences"]


def test_unknown_route_returns_json_404(make_client):
    response = make_client(FakeLLMClient()).get("/api/nope")

    assert response.status_code == 404
    body = response.get_json()
    assert body["error"] == "Not found"
    assert body["message"] == "Route /api/nope not found"
