"""
Integration tests for challenge generation and answer evaluation.
"""
import uuid
from unittest.mock import patch

import pytest

from learning_app.models import Problem
from learning_app.services.challenge_service import ChallengeService, ChallengeServiceError


GENERATED_PROBLEMS = [
    {
        "type": "multiple_choice",
        "text": "Which structure does depth first search rely on?",
        "difficulty": "Easy",
        "options": ["Queue", "Stack"],
        "column_a": None,
        "column_b": None,
        "solution": 1,
    },
    {
        "type": "connection",
        "text": "How does breadth first search relate to shortest paths on a social network?",
        "difficulty": "Hard",
        "options": None,
        "column_a": None,
        "column_b": None,
        "solution": None,
    },
]


def _evaluation(is_correct=True, feedback="Well reasoned.", next_step="Compare with Dijkstra."):
    return {"is_correct": is_correct, "feedback": feedback, "next_step": next_step}


class TestGenerateChallenge:
    """Test POST /api/challenge/generate endpoint."""

    @patch.object(ChallengeService, "generate_problems")
    def test_generate_problems(self, mock_generate, client, sample_source, make_session):
        mock_generate.return_value = GENERATED_PROBLEMS
        session = make_session(sample_source, start_time=0, end_time=300)

        response = client.post("/api/challenge/generate", json={"session_id": str(session.id)})

        assert response.status_code == 200
        data = response.json()
        assert data["session_id"] == str(session.id)
        assert [p["type"] for p in data["problems"]] == ["multiple_choice", "connection"]
        assert data["problems"][0]["options"] == ["Queue", "Stack"]
        assert "solution" not in data["problems"][0]
        assert data["progress"]["step"] == "problem"
        assert data["progress"]["current_problem_id"] == data["problems"][0]["id"]

        mock_generate.assert_called_once_with(
            "Graph Search Explained",
            sample_source.transcript,
            0,
            300
        )

    @patch.object(ChallengeService, "generate_problems")
    def test_generate_is_idempotent(self, mock_generate, client, sample_source, make_session, make_problems):
        session = make_session(sample_source)
        problems = make_problems(session)

        response = client.post("/api/challenge/generate", json={"session_id": str(session.id)})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["problems"]] == [str(p.id) for p in problems]
        mock_generate.assert_not_called()

    @patch.object(ChallengeService, "generate_problems")
    def test_generate_failure(self, mock_generate, client, sample_source, make_session):
        mock_generate.side_effect = ChallengeServiceError("Failed to generate challenges: All providers failed")
        session = make_session(sample_source)

        response = client.post("/api/challenge/generate", json={"session_id": str(session.id)})

        assert response.status_code == 500
        assert response.json()["detail"].startswith("Failed to generate challenges")

        progress = client.get(f"/api/sessions/{session.id}/progress").json()
        assert progress["problems"] == []

    def test_generate_missing_session_id(self, client):
        response = client.post("/api/challenge/generate", json={})

        assert response.status_code == 400

    def test_generate_unknown_session(self, client):
        response = client.post("/api/challenge/generate", json={"session_id": str(uuid.uuid4())})

        assert response.status_code == 404
        assert response.json()["detail"] == "Session not found"


class TestEvaluateAnswer:
    """Test POST /api/challenge/evaluate endpoint."""

    @patch.object(ChallengeService, "evaluate_answer")
    def test_structured_answer_graded_against_solution(self, mock_evaluate, client, sample_source, make_session, make_problems):
        """The stored solution decides correctness; the LLM writes the feedback."""
        mock_evaluate.return_value = _evaluation(is_correct=False)
        session = make_session(sample_source)
        problems = make_problems(session)

        response = client.post("/api/challenge/evaluate", json={"problem_id": str(problems[0].id), "answer": 1})

        assert response.status_code == 200
        data = response.json()
        assert data["is_correct"] is True
        assert data["feedback"] == "Well reasoned."
        assert data["next_step"] == "Compare with Dijkstra."
        assert data["problem"]["user_answer"] == "Selected: Queue (option B)"
        assert data["problem"]["evaluated_at"] is not None
        assert data["progress"]["step"] == "problem"
        assert data["progress"]["current_index"] == 1
        assert data["progress"]["current_problem_id"] == str(problems[1].id)
        assert data["session_status"] == "challenging"

        question, answer, reference = mock_evaluate.call_args[0]
        assert question == problems[0].text
        assert answer == "Selected: Queue (option B)"
        assert reference == "Selected: Queue (option B)"

    @patch.object(ChallengeService, "evaluate_answer")
    def test_wrong_structured_answer(self, mock_evaluate, client, sample_source, make_session, make_problems):
        mock_evaluate.return_value = _evaluation(is_correct=True)
        session = make_session(sample_source)
        problems = make_problems(session)

        data = client.post("/api/challenge/evaluate", json={"problem_id": str(problems[0].id), "answer": 0}).json()

        assert data["is_correct"] is False

    @patch.object(ChallengeService, "evaluate_answer")
    def test_full_challenge_completes_session(self, mock_evaluate, client, sample_source, make_session, make_problems):
        mock_evaluate.return_value = _evaluation(is_correct=True)
        session = make_session(sample_source)
        problems = make_problems(session)

        client.post("/api/challenge/evaluate", json={"problem_id": str(problems[0].id), "answer": 1})
        client.post("/api/challenge/evaluate", json={"problem_id": str(problems[1].id), "answer": False})
        response = client.post("/api/challenge/evaluate", json={
            "problem_id": str(problems[2].id),
            "answer": "Model stations as nodes and run breadth first search."
        })

        assert response.status_code == 200
        data = response.json()
        assert data["is_correct"] is True
        assert data["session_status"] == "completed"
        assert data["progress"]["step"] == "complete"
        assert data["progress"]["progress_value"] == 100.0
        assert data["progress"]["current_problem_id"] is None

        free_text_call = mock_evaluate.call_args_list[2][0]
        assert free_text_call[2] is None

        checkpoint = client.get("/api/sessions", params={"viewer_id": "viewer-1", "source_id": str(sample_source.id)})
        assert checkpoint.json()["last_checkpoint"] == 300

    @patch.object(ChallengeService, "evaluate_answer")
    def test_out_of_order_answer(self, mock_evaluate, client, sample_source, make_session, make_problems):
        session = make_session(sample_source)
        problems = make_problems(session)

        response = client.post("/api/challenge/evaluate", json={"problem_id": str(problems[1].id), "answer": True})

        assert response.status_code == 409
        mock_evaluate.assert_not_called()

    @patch.object(ChallengeService, "evaluate_answer")
    def test_already_evaluated(self, mock_evaluate, client, sample_source, make_session, make_problems):
        mock_evaluate.return_value = _evaluation()
        session = make_session(sample_source)
        problems = make_problems(session)
        client.post("/api/challenge/evaluate", json={"problem_id": str(problems[0].id), "answer": 1})

        response = client.post("/api/challenge/evaluate", json={"problem_id": str(problems[0].id), "answer": 0})

        assert response.status_code == 409
        assert response.json()["detail"] == "Problem already evaluated"

    @patch.object(ChallengeService, "evaluate_answer")
    def test_invalid_answer_for_type(self, mock_evaluate, client, sample_source, make_session, make_problems):
        session = make_session(sample_source)
        problems = make_problems(session)

        response = client.post("/api/challenge/evaluate", json={"problem_id": str(problems[0].id), "answer": 7})

        assert response.status_code == 400
        mock_evaluate.assert_not_called()

    @patch.object(ChallengeService, "evaluate_answer")
    def test_evaluation_failure_keeps_problem_open(self, mock_evaluate, client, sample_source, make_session, make_problems):
        mock_evaluate.side_effect = ChallengeServiceError("Failed to evaluate answer: All providers failed")
        session = make_session(sample_source)
        problems = make_problems(session)

        response = client.post("/api/challenge/evaluate", json={"problem_id": str(problems[0].id), "answer": 1})

        assert response.status_code == 500
        progress = client.get(f"/api/sessions/{session.id}/progress").json()["progress"]
        assert progress["step"] == "problem"
        assert progress["current_index"] == 0

    @pytest.mark.parametrize("answer", [["x", "y"], 1.5, [0, 7], {"0": 1}, "0, 1, 2"])
    @patch.object(ChallengeService, "evaluate_answer")
    def test_malformed_ordering_answer(self, mock_evaluate, answer, client, db_session, sample_source, make_session):
        """Answers of the wrong shape are rejected with 400, not a validation error."""
        session = make_session(sample_source)
        problem = Problem(
            session_id=session.id,
            position=0,
            type="ordering",
            text="Order the steps of breadth first search.",
            options=["Dequeue a node", "Enqueue the start node", "Enqueue unvisited neighbours"],
            solution=[1, 0, 2]
        )
        db_session.add(problem)
        db_session.commit()

        response = client.post("/api/challenge/evaluate", json={"problem_id": str(problem.id), "answer": answer})

        assert response.status_code == 400
        assert response.json()["detail"] == "Answer is not valid for this question type"
        mock_evaluate.assert_not_called()

    def test_missing_answer(self, client, sample_source, make_session, make_problems):
        session = make_session(sample_source)
        problems = make_problems(session)

        response = client.post("/api/challenge/evaluate", json={"problem_id": str(problems[0].id)})

        assert response.status_code == 400
        assert response.json()["detail"] == "problem_id and answer are required"

    def test_unknown_problem(self, client):
        response = client.post("/api/challenge/evaluate", json={"problem_id": str(uuid.uuid4()), "answer": 1})

        assert response.status_code == 404
        assert response.json()["detail"] == "Problem not found"
