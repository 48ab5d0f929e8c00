"""API endpoint tests."""


def _create_recipe(client, name="Fluffy", thickness="regular"):
    response = client.post(
        "/api/v1/recipes",
        json={"name": name, "description": "Test batter", "batter_thickness": thickness},
    )
    assert response.status_code == 201
    return response.json()


def _current_recipe(client):
    response = client.get("/api/v1/recipes/current")
    assert response.status_code == 200
    return response.json()


def test_health_check(client):
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_recipes_includes_default(client):
    """Test that listing recipes always shows the default recipe."""
    response = client.get("/api/v1/recipes")
    assert response.status_code == 200
    recipes = response.json()
    assert len(recipes) == 1
    assert recipes[0]["name"] == "Basic Pancakes"
    assert recipes[0]["is_default"] is True


def test_create_recipe(client):
    """Test creating a recipe with a thickness profile."""
    data = _create_recipe(client, "Thick Stack", "thick")

    assert data["name"] == "Thick Stack"
    assert data["batter_thickness"] == "thick"
    assert data["default_base_time"] == 110
    assert data["second_side_ratio"] == 0.75
    assert _current_recipe(client)["id"] == data["id"]


def test_create_recipe_validation(client):
    """Test rejected recipe payloads."""
    response = client.post("/api/v1/recipes", json={"name": "", "batter_thickness": "regular"})
    assert response.status_code == 422

    response = client.post("/api/v1/recipes", json={"name": "Goo", "batter_thickness": "runny"})
    assert response.status_code == 422


def test_duplicate_recipe_name(client):
    """Test that a reused recipe name conflicts."""
    _create_recipe(client)
    response = client.post("/api/v1/recipes", json={"name": "Fluffy"})
    assert response.status_code == 409


def test_get_and_update_recipe(client):
    """Test reading and editing a recipe."""
    recipe = _create_recipe(client)

    response = client.get(f"/api/v1/recipes/{recipe['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Fluffy"

    response = client.put(
        f"/api/v1/recipes/{recipe['id']}",
        json={"name": "Fluffier", "batter_thickness": "thin"},
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Fluffier"
    assert response.json()["default_base_time"] == 70

    assert client.get("/api/v1/recipes/9999").status_code == 404


def test_default_recipe_is_protected(client):
    """Test that the default recipe cannot be edited or deleted."""
    default = _current_recipe(client)
    assert default["is_default"] is True

    response = client.put(f"/api/v1/recipes/{default['id']}", json={"name": "Mine now"})
    assert response.status_code == 409

    response = client.delete(f"/api/v1/recipes/{default['id']}")
    assert response.status_code == 409
    assert "default" in response.json()["detail"]


def test_select_current_recipe(client):
    """Test switching the current recipe."""
    default = _current_recipe(client)
    recipe = _create_recipe(client)

    response = client.put("/api/v1/recipes/current", json={"recipe_id": default["id"]})
    assert response.status_code == 200
    assert _current_recipe(client)["id"] == default["id"]

    response = client.put("/api/v1/recipes/current", json={"recipe_id": recipe["id"]})
    assert response.status_code == 200
    assert _current_recipe(client)["id"] == recipe["id"]

    response = client.put("/api/v1/recipes/current", json={"recipe_id": 9999})
    assert response.status_code == 404


def test_delete_recipe_cascades(client):
    """Test deleting a recipe removes its data and resets the current recipe."""
    default = _current_recipe(client)
    recipe = _create_recipe(client)
    client.post(
        f"/api/v1/recipes/{recipe['id']}/ratings",
        json={"temperature": 5, "first_side_time": 60, "second_side_time": 50, "rating": "good"},
    )

    response = client.delete(f"/api/v1/recipes/{recipe['id']}")
    assert response.status_code == 204

    assert client.get(f"/api/v1/recipes/{recipe['id']}").status_code == 404
    assert client.get(f"/api/v1/recipes/{recipe['id']}/history").status_code == 404
    assert _current_recipe(client)["id"] == default["id"]
    assert client.delete(f"/api/v1/recipes/{recipe['id']}").status_code == 404


def test_rate_pancake(client):
    """Test that rating a pancake stores it and updates the recommendation."""
    recipe = _create_recipe(client)

    response = client.post(
        f"/api/v1/recipes/{recipe['id']}/ratings",
        json={"temperature": 5, "first_side_time": 60, "second_side_time": 50, "rating": "good"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["record"]["rating"] == "good"
    assert data["record"]["recipe_id"] == recipe["id"]
    assert data["recommendation"]["first_side_time"] == 78
    assert data["recommendation"]["second_side_time"] == 63
    assert data["recommendation"]["data_points"] == 1

    response = client.get(f"/api/v1/recipes/{recipe['id']}/recommendations/5")
    assert response.json()["first_side_time"] == 78


def test_rate_pancake_untimed(client):
    """Test that an untimed first side is stored without learning."""
    recipe = _create_recipe(client)

    response = client.post(
        f"/api/v1/recipes/{recipe['id']}/ratings",
        json={"temperature": 5, "first_side_time": 0, "rating": "mid"},
    )

    assert response.status_code == 201
    assert response.json()["recommendation"] is None


def test_rate_pancake_validation(client):
    """Test rejected rating payloads."""
    recipe = _create_recipe(client)
    url = f"/api/v1/recipes/{recipe['id']}/ratings"

    bad_payloads = [
        {"temperature": 10, "first_side_time": 60, "second_side_time": 50, "rating": "good"},
        {"temperature": 5, "first_side_time": 60, "second_side_time": 50, "rating": "great"},
        {"temperature": 5, "first_side_time": -1, "second_side_time": 50, "rating": "good"},
    ]
    for payload in bad_payloads:
        assert client.post(url, json=payload).status_code == 422

    response = client.post(
        "/api/v1/recipes/9999/ratings",
        json={"temperature": 5, "first_side_time": 60, "second_side_time": 50, "rating": "good"},
    )
    assert response.status_code == 404


def test_recommendations(client):
    """Test listing, reading and resetting recommendations."""
    recipe = _create_recipe(client)
    base = f"/api/v1/recipes/{recipe['id']}/recommendations"

    response = client.get(base)
    assert response.status_code == 200
    data = response.json()
    assert [item["temperature"] for item in data] == list(range(1, 10))
    assert data[4]["first_side_time"] == 90
    assert data[4]["second_side_time"] == 72

    assert client.get(f"{base}/10").status_code == 422
    assert client.get("/api/v1/recipes/9999/recommendations").status_code == 404

    client.post(
        f"/api/v1/recipes/{recipe['id']}/ratings",
        json={"temperature": 5, "first_side_time": 60, "second_side_time": 50, "rating": "good"},
    )
    response = client.post(f"{base}/reset")
    assert response.status_code == 200
    assert response.json()[4]["first_side_time"] == 90
    assert response.json()[4]["data_points"] == 0


def test_history_endpoints(client):
    """Test listing, deleting and clearing history."""
    recipe = _create_recipe(client)
    url = f"/api/v1/recipes/{recipe['id']}/ratings"
    for first in (60, 65, 70):
        client.post(
            url,
            json={"temperature": 5, "first_side_time": first, "second_side_time": 50,
                  "rating": "good"},
        )

    response = client.get(f"/api/v1/recipes/{recipe['id']}/history?limit=2")
    assert response.status_code == 200
    history = response.json()
    assert [item["first_side_time"] for item in history] == [70, 65]

    response = client.delete(f"/api/v1/history/{history[0]['id']}")
    assert response.status_code == 204
    assert client.delete(f"/api/v1/history/{history[0]['id']}").status_code == 404

    response = client.delete(f"/api/v1/recipes/{recipe['id']}/history")
    assert response.status_code == 200
    assert len(response.json()) == 9
    assert client.get(f"/api/v1/recipes/{recipe['id']}/history").json() == []


def test_statistics(client):
    """Test per-recipe and global statistics."""
    recipe = _create_recipe(client)
    url = f"/api/v1/recipes/{recipe['id']}/ratings"
    for rating in ("good", "good", "bad"):
        client.post(
            url,
            json={"temperature": 6, "first_side_time": 70, "second_side_time": 55,
                  "rating": rating},
        )

    response = client.get(f"/api/v1/statistics?recipe_id={recipe['id']}")
    assert response.status_code == 200
    stats = response.json()
    assert stats["total_pancakes"] == 3
    assert stats["good_pancakes"] == 2
    assert stats["best_temperature"] == 6
    assert stats["popular_temperature"] == 6
    assert stats["temperature_counts"] == {"6": 3}

    response = client.get("/api/v1/statistics")
    assert response.status_code == 200
    assert response.json()["recipe_id"] is None
    assert response.json()["total_pancakes"] == 3

    assert client.get("/api/v1/statistics?recipe_id=9999").status_code == 404


def test_stage(client):
    """Test the pancake stage endpoint."""
    response = client.get("/api/v1/stage?elapsed=45&recommended=90")
    assert response.status_code == 200
    assert response.json()["stage"] == "medium"

    response = client.get("/api/v1/stage?elapsed=5&recommended=0")
    assert response.json()["stage"] == "burnt"


def test_preferences(client):
    """Test getting and setting preferences."""
    response = client.get("/api/v1/preferences/theme")
    assert response.status_code == 200
    assert response.json()["value"] is None

    response = client.put("/api/v1/preferences/theme", json={"value": "dark"})
    assert response.status_code == 200
    assert client.get("/api/v1/preferences/theme").json()["value"] == "dark"


def test_current_recipe_preference_is_validated(client):
    """Test that currentRecipeId can only point at an existing recipe."""
    recipe = _create_recipe(client)
    default = next(r for r in client.get("/api/v1/recipes").json() if r["is_default"])

    response = client.put("/api/v1/preferences/currentRecipeId", json={"value": default["id"]})
    assert response.status_code == 200
    assert _current_recipe(client)["id"] == default["id"]

    assert (
        client.put("/api/v1/preferences/currentRecipeId", json={"value": 9999}).status_code
        == 404
    )
    assert (
        client.put("/api/v1/preferences/currentRecipeId", json={"value": "abc"}).status_code
        == 422
    )
    assert recipe["id"] != default["id"]
