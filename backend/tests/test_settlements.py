import pytest


@pytest.fixture
def trip():
    return {
        "expenses": [
            {"payer_id": "A", "total": 30.0, "shares": [
                {"participant_id": "B", "amount": 15.0},
                {"participant_id": "C", "amount": 15.0},
            ]},
            {"payer_id": "B", "total": 20.0, "shares": [
                {"participant_id": "A", "amount": 10.0},
                {"participant_id": "C", "amount": 10.0},
            ]},
        ],
    }


def test_simplify(client):
    res = client.post("/api/settlements/simplify", json={"balances": {"A": 60, "B": -20, "C": -40}})
    assert res.status_code == 200
    assert res.json()["settlements"] == [
        {"from_id": "C", "to_id": "A", "amount": 40.0},
        {"from_id": "B", "to_id": "A", "amount": 20.0},
    ]


def test_group_balances(client, trip):
    res = client.post("/api/settlements/group", json=trip)
    assert res.status_code == 200
    data = res.json()
    assert data["balances"] == [
        {"participant_id": "A", "balance": 20.0},
        {"participant_id": "B", "balance": 5.0},
        {"participant_id": "C", "balance": -25.0},
    ]
    assert len(data["settlements"]) == 2
    assert data["settlements"][0] == {"from_id": "C", "to_id": "A", "amount": 20.0}


def test_group_balances_with_payment(client, trip):
    trip["payments"] = [{"from_id": "C", "to_id": "A", "amount": 20.0}]
    res = client.post("/api/settlements/group", json=trip)
    assert res.status_code == 200
    assert res.json()["settlements"] == [{"from_id": "C", "to_id": "B", "amount": 5.0}]


def test_group_balances_unknown_member(client, trip):
    trip["members"] = ["A", "B"]
    res = client.post("/api/settlements/group", json=trip)
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_INPUT"
    assert "not a group member" in res.json()["detail"]


def test_group_balances_negative_share(client, trip):
    trip["expenses"][0]["shares"][0]["amount"] = -15.0
    res = client.post("/api/settlements/group", json=trip)
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_INPUT"


def test_group_balances_malformed_body(client):
    res = client.post("/api/settlements/group", json={"expenses": [{"total": 10}]})
    assert res.status_code == 422
