import pytest

USER = {
    "name": "Robin",
    "email": "robin@example.com",
    "dob": "1994-01-01",
    "sex": "MALE",
    "weight": 80.0,
    "height": 180.0,
    "activity_level": "MODERATELY_ACTIVE",
    "goal": 75.0,
    "goal_type": "LOSE",
    "weekly_goal": 0.5,
}


async def _log(client, user_id, day, at, name, kcal, meal_type):
    resp = await client.post(
        "/meals",
        params={"user_id": user_id},
        json={
            "entry_date": day,
            "entry_time": at,
            "food_name": name,
            "calories": kcal,
            "meal_type": meal_type,
        },
    )
    assert resp.status_code == 201, resp.text


@pytest.mark.asyncio
async def test_dashboard_for_today(client):
    user_id = (await client.post("/users", json=USER)).json()["id"]
    await _log(client, user_id, "2024-12-24", "08:00:00", "Oatmeal", 150, "BREAKFAST")
    await _log(client, user_id, "2024-12-24", "12:30:00", "Salad", 350, "LUNCH")
    await _log(client, user_id, "2024-12-24", "07:30:00", "Coffee", 5, "BREAKFAST")
    await _log(client, user_id, "2024-12-23", "19:00:00", "Pizza", 900, "DINNER")
    await client.post(
        "/weights", params={"user_id": user_id}, json={"entry_date": "2024-12-24", "weight": 80.0}
    )

    resp = await client.get("/dashboard", params={"user_id": user_id})
    assert resp.status_code == 200, resp.text
    body = resp.json()

    assert body["day"] == "2024-12-24"
    assert body["user_name"] == "Robin"
    assert body["goal_type"] == "LOSE"
    assert body["allowed_daily_intake"] == 2209
    assert body["consumed_calories"] == 505
    assert body["remaining_calories"] == 2209 - 505
    assert body["today_weight"] == 80.0
    assert body["goal_weight"] == 75.0
    assert body["total_meals_count"] == 3
    assert [m["food_name"] for m in body["meals_by_type"]["BREAKFAST"]] == ["Coffee", "Oatmeal"]
    assert body["meals_by_type"]["LUNCH"][0]["entry_time"] == "12:30"
    assert "DINNER" not in body["meals_by_type"]
    assert body["metrics"] == {"bmi": 24.69, "bmr": 1780.0, "tdee": 2759, "allowed_daily_intake": 2209}


@pytest.mark.asyncio
async def test_dashboard_for_other_day_without_data(client):
    user_id = (await client.post("/users", json=USER)).json()["id"]
    body = (await client.get("/dashboard", params={"user_id": user_id, "day": "2024-12-01"})).json()
    assert body["consumed_calories"] == 0
    assert body["remaining_calories"] == body["allowed_daily_intake"]
    assert body["today_weight"] is None
    assert body["meals_by_type"] == {}


@pytest.mark.asyncio
async def test_dashboard_unknown_user(client):
    resp = await client.get("/dashboard", params={"user_id": 404})
    assert resp.status_code == 404
