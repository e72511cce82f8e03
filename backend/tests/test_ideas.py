"""Idea API tests: submission, scoring, listing, updates, deletion and owner scoping."""

import uuid

import pytest

from conftest import IDEA_PAYLOAD, register, submit_idea
from ideascore.services.scoring_engine import score_idea


def _expected_score(payload):
    return score_idea({
        "problem": payload["problem"],
        "solution": payload["solution"],
        "target_market": payload["targetMarket"],
        "business_model": payload["businessModel"],
        "competition": payload["competition"],
        "team": payload["team"],
    })


# ===================================================================== #
#  Create                                                                 #
# ===================================================================== #

class TestCreateIdea:
    def test_requires_auth(self, client):
        resp = client.post("/api/ideas", json=IDEA_PAYLOAD)
        assert resp.status_code == 401
        assert resp.json()["message"] == "Authentication required"

    def test_create_scores_synchronously(self, client):
        user = register(client)
        resp = client.post("/api/ideas", json=IDEA_PAYLOAD)
        assert resp.status_code == 201
        idea = resp.json()
        expected = _expected_score(IDEA_PAYLOAD)

        assert idea["userId"] == user["id"]
        assert idea["title"] == "MealMate"
        assert idea["targetMarket"] == IDEA_PAYLOAD["targetMarket"]
        assert idea["viabilityScore"] == expected.viability_score
        assert idea["feedback"] == expected.feedback
        assert idea["status"] == "completed"
        assert idea["isBookmarked"] is False
        assert idea["createdAt"] and idea["updatedAt"]

    def test_feedback_details_match_text(self, client):
        register(client)
        idea = submit_idea(client)
        details = idea["feedbackDetails"]
        expected = _expected_score(IDEA_PAYLOAD)
        assert details["category"] == expected.category
        assert details["strengths"] == expected.strengths
        assert details["improvements"] == expected.improvements
        assert details["nextSteps"] == expected.next_steps

    def test_client_cannot_set_score(self, client):
        register(client)
        idea = submit_idea(client, viabilityScore=100, feedback="great", status="draft")
        expected = _expected_score(IDEA_PAYLOAD)
        assert idea["viabilityScore"] == expected.viability_score
        assert idea["feedback"] == expected.feedback
        assert idea["status"] == "completed"

    def test_bookmark_on_create(self, client):
        register(client)
        assert submit_idea(client)["isBookmarked"] is False
        idea = submit_idea(client, isBookmarked=True)
        assert idea["isBookmarked"] is True
        assert client.get(f"/api/ideas/{idea['id']}").json()["isBookmarked"] is True

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("problem", "too short", "Problem description must be at least 10 characters"),
            ("solution", "short", "Solution description must be at least 10 characters"),
            ("targetMarket", "kids", "Target market must be at least 5 characters"),
            ("team", "solo", "Team description must be at least 5 characters"),
            ("businessModel", "ads", "Business model must be at least 10 characters"),
            ("competition", "none", "Competition analysis must be at least 10 characters"),
            ("title", "   ", "Title is required"),
        ],
    )
    def test_validation_messages(self, client, field, value, message):
        register(client)
        body = dict(IDEA_PAYLOAD, **{field: value})
        resp = client.post("/api/ideas", json=body)
        assert resp.status_code == 400
        assert resp.json()["message"] == message

    def test_missing_field(self, client):
        register(client)
        body = {k: v for k, v in IDEA_PAYLOAD.items() if k != "team"}
        resp = client.post("/api/ideas", json=body)
        assert resp.status_code == 400
        assert "team" in resp.json()["message"]

    def test_minimum_lengths_accepted(self, client):
        register(client)
        idea = submit_idea(
            client,
            problem="x" * 10,
            solution="x" * 10,
            targetMarket="x" * 5,
            team="x" * 5,
            businessModel="x" * 10,
            competition="x" * 10,
        )
        # 6 + 6 + 5 + 4 + 3 + 2
        assert idea["viabilityScore"] == 26
        assert idea["feedbackDetails"]["strengths"] == []


# ===================================================================== #
#  Read                                                                   #
# ===================================================================== #

class TestReadIdeas:
    def test_list_requires_auth(self, client):
        assert client.get("/api/ideas").status_code == 401

    def test_list_empty(self, client):
        register(client)
        resp = client.get("/api/ideas")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_list_newest_updated_first(self, client):
        register(client)
        first = submit_idea(client, title="First")
        second = submit_idea(client, title="Second")
        assert [i["id"] for i in client.get("/api/ideas").json()] == [second["id"], first["id"]]

        client.put(f"/api/ideas/{first['id']}", json={"isBookmarked": True})
        assert [i["id"] for i in client.get("/api/ideas").json()] == [first["id"], second["id"]]

    def test_get_one(self, client):
        register(client)
        idea = submit_idea(client)
        resp = client.get(f"/api/ideas/{idea['id']}")
        assert resp.status_code == 200
        assert resp.json() == idea

    def test_get_missing(self, client):
        register(client)
        assert client.get(f"/api/ideas/{uuid.uuid4()}").status_code == 404

    def test_get_malformed_id(self, client):
        register(client)
        resp = client.get("/api/ideas/not-a-uuid")
        assert resp.status_code == 404
        assert resp.json()["message"] == "Idea not found"


# ===================================================================== #
#  Update                                                                 #
# ===================================================================== #

class TestUpdateIdea:
    def test_scored_field_triggers_rescore(self, client):
        register(client)
        idea = submit_idea(client)
        longer = "x" * 400
        resp = client.put(f"/api/ideas/{idea['id']}", json={"solution": longer})
        assert resp.status_code == 200
        updated = resp.json()

        expected = _expected_score(dict(IDEA_PAYLOAD, solution=longer))
        assert updated["solution"] == longer
        assert updated["viabilityScore"] == expected.viability_score
        assert updated["feedback"] == expected.feedback
        assert updated["viabilityScore"] > idea["viabilityScore"]
        assert updated["updatedAt"] >= idea["updatedAt"]
        assert updated["createdAt"] == idea["createdAt"]

    def test_unscored_update_keeps_score(self, client):
        register(client)
        idea = submit_idea(client)
        resp = client.put(f"/api/ideas/{idea['id']}", json={"title": "Renamed", "isBookmarked": True})
        assert resp.status_code == 200
        updated = resp.json()
        assert updated["title"] == "Renamed"
        assert updated["isBookmarked"] is True
        assert updated["viabilityScore"] == idea["viabilityScore"]
        assert updated["feedback"] == idea["feedback"]
        assert updated["updatedAt"] >= idea["updatedAt"]

    def test_archive(self, client):
        register(client)
        idea = submit_idea(client)
        updated = client.put(f"/api/ideas/{idea['id']}", json={"status": "archived"}).json()
        assert updated["status"] == "archived"
        assert updated["viabilityScore"] == idea["viabilityScore"]

    def test_same_values_twice_is_idempotent(self, client):
        register(client)
        idea = submit_idea(client)
        body = {"problem": "A much more detailed problem statement " * 3}
        first = client.put(f"/api/ideas/{idea['id']}", json=body).json()
        second = client.put(f"/api/ideas/{idea['id']}", json=body).json()
        assert first["viabilityScore"] == second["viabilityScore"]
        assert first["feedback"] == second["feedback"]

    def test_score_fields_in_body_ignored(self, client):
        register(client)
        idea = submit_idea(client)
        updated = client.put(f"/api/ideas/{idea['id']}", json={"viabilityScore": 99}).json()
        assert updated["viabilityScore"] == idea["viabilityScore"]

    def test_update_validation(self, client):
        register(client)
        idea = submit_idea(client)
        resp = client.put(f"/api/ideas/{idea['id']}", json={"problem": "short"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Problem description must be at least 10 characters"

    @pytest.mark.parametrize("body", [{"problem": None}, {"isBookmarked": None}, {"status": "deleted"}])
    def test_update_rejects_bad_values(self, client, body):
        register(client)
        idea = submit_idea(client)
        assert client.put(f"/api/ideas/{idea['id']}", json=body).status_code == 400

    def test_update_missing(self, client):
        register(client)
        resp = client.put(f"/api/ideas/{uuid.uuid4()}", json={"title": "Nope"})
        assert resp.status_code == 404


# ===================================================================== #
#  Delete                                                                 #
# ===================================================================== #

class TestDeleteIdea:
    def test_delete(self, client):
        register(client)
        idea = submit_idea(client)
        resp = client.delete(f"/api/ideas/{idea['id']}")
        assert resp.status_code == 204
        assert resp.content == b""
        assert client.get(f"/api/ideas/{idea['id']}").status_code == 404
        assert client.delete(f"/api/ideas/{idea['id']}").status_code == 404

    def test_delete_requires_auth(self, client):
        assert client.delete(f"/api/ideas/{uuid.uuid4()}").status_code == 401


# ===================================================================== #
#  Owner scoping                                                          #
# ===================================================================== #

class TestOwnership:
    def test_other_user_sees_not_found(self, client, other_client):
        register(client)
        idea = submit_idea(client)
        register(other_client)
        url = f"/api/ideas/{idea['id']}"

        assert other_client.get(url).status_code == 404
        assert other_client.put(url, json={"title": "Hijacked"}).status_code == 404
        assert other_client.delete(url).status_code == 404
        assert other_client.get("/api/ideas").json() == []

        # Owner's idea is untouched
        assert client.get(url).json() == idea

    def test_lists_are_separate(self, client, other_client):
        register(client)
        register(other_client)
        mine = submit_idea(client, title="Mine")
        theirs = submit_idea(other_client, title="Theirs")
        assert [i["id"] for i in client.get("/api/ideas").json()] == [mine["id"]]
        assert [i["id"] for i in other_client.get("/api/ideas").json()] == [theirs["id"]]
