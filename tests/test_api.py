import unittest

try:
    from api import app
except ModuleNotFoundError:
    app = None

try:
    from fastapi.testclient import TestClient
except (ImportError, RuntimeError):
    TestClient = None


@unittest.skipIf(app is None or TestClient is None, "fastapi stack is not available in this environment")
class TestApiIntegration(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def test_health_endpoint(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_create_session_returns_initial_round(self) -> None:
        response = self.client.post("/sessions", json={"seed": 1})

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertIn("session_id", body)
        state = body["state"]
        self.assertEqual(state["values"], [7, 14, 21, 28, 35, 42, 49, 56, 63, 70])
        self.assertEqual(state["blanks_count"], 1)
        self.assertEqual(len(state["blank_indexes"]), 1)
        self.assertEqual(state["cell_states"], ["unanswered"] * 10)
        self.assertEqual(state["score"], 0)
        self.assertEqual(state["scoring_policy"], "per_round")

    def test_create_session_rejects_invalid_grid(self) -> None:
        response = self.client.post("/sessions", json={"rows": 0})
        self.assertEqual(response.status_code, 422)

    def test_check_and_complete_round_flow(self) -> None:
        session_id, state = self._create_session(blanks_count=2, seed=4)

        results = []
        for index in state["blank_indexes"]:
            response = self.client.post(
                f"/sessions/{session_id}/check",
                json={"index": index, "value": str(state["values"][index])},
            )
            self.assertEqual(response.status_code, 200)
            results.append(response.json())

        self.assertTrue(all(result["correct"] for result in results))
        self.assertTrue(all(result["just_solved"] for result in results))
        self.assertFalse(results[0]["round_complete"])
        self.assertTrue(results[-1]["round_complete"])

        first = self.client.post(f"/sessions/{session_id}/complete")
        second = self.client.post(f"/sessions/{session_id}/complete")
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json()["score"], 1)
        self.assertEqual(second.json()["score"], 1)
        self.assertTrue(second.json()["round_completed"])

    def test_check_reports_wrong_answer(self) -> None:
        session_id, _ = self._create_session(seed=4)
        response = self.client.post(f"/sessions/{session_id}/check", json={"index": 0, "value": "7abc"})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["correct"])
        self.assertEqual(body["correct_value"], 7)

    def test_check_rejects_out_of_range_index(self) -> None:
        session_id, _ = self._create_session(seed=4)
        response = self.client.post(f"/sessions/{session_id}/check", json={"index": 10, "value": "7"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("detail", response.json())

    def test_check_rejects_boolean_index(self) -> None:
        session_id, _ = self._create_session(seed=4)
        response = self.client.post(f"/sessions/{session_id}/check", json={"index": True, "value": "14"})

        self.assertEqual(response.status_code, 422)
        state = self.client.get(f"/sessions/{session_id}").json()
        self.assertEqual(state["cell_states"], ["unanswered"] * 10)

    def test_oversized_digit_strings_are_handled_as_bad_input(self) -> None:
        session_id, _ = self._create_session(seed=4)

        check_response = self.client.post(f"/sessions/{session_id}/check", json={"index": 0, "value": "1" * 5000})
        self.assertEqual(check_response.status_code, 200)
        self.assertFalse(check_response.json()["correct"])

        table_response = self.client.post(f"/sessions/{session_id}/table", json={"table": "9" * 5000})
        self.assertEqual(table_response.status_code, 200)
        self.assertEqual(table_response.json()["table"], 7)

    def test_complete_rejects_unfinished_round(self) -> None:
        session_id, _ = self._create_session(seed=4)
        response = self.client.post(f"/sessions/{session_id}/complete")
        self.assertEqual(response.status_code, 400)

    def test_table_blanks_and_new_round_endpoints(self) -> None:
        session_id, _ = self._create_session(seed=4)

        table_response = self.client.post(f"/sessions/{session_id}/table", json={"table": 0})
        self.assertEqual(table_response.status_code, 200)
        self.assertEqual(table_response.json()["table"], 7)

        table_response = self.client.post(f"/sessions/{session_id}/table", json={"table": "3"})
        self.assertEqual(table_response.json()["values"][:3], [3, 6, 9])

        blanks_response = self.client.post(f"/sessions/{session_id}/blanks", json={"blanks_count": 25})
        self.assertEqual(blanks_response.status_code, 200)
        self.assertEqual(blanks_response.json()["fixed_blanks_count"], 10)

        round_response = self.client.post(f"/sessions/{session_id}/rounds")
        self.assertEqual(round_response.status_code, 200)
        self.assertEqual(len(round_response.json()["blank_indexes"]), 10)

    def test_reset_score_keeps_round(self) -> None:
        session_id, state = self._create_session(blanks_count=1, seed=4)
        index = state["blank_indexes"][0]
        self.client.post(f"/sessions/{session_id}/check", json={"index": index, "value": state["values"][index]})
        self.client.post(f"/sessions/{session_id}/complete")

        response = self.client.post(f"/sessions/{session_id}/score/reset")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["score"], 0)
        self.assertEqual(body["blank_indexes"], [index])
        self.assertEqual(body["cell_states"][index], "correct")

    def test_unknown_and_deleted_sessions_return_404(self) -> None:
        self.assertEqual(self.client.get("/sessions/missing").status_code, 404)

        session_id, _ = self._create_session(seed=4)
        self.assertEqual(self.client.get(f"/sessions/{session_id}").status_code, 200)
        self.assertEqual(self.client.delete(f"/sessions/{session_id}").status_code, 204)
        self.assertEqual(self.client.get(f"/sessions/{session_id}").status_code, 404)
        self.assertEqual(self.client.delete(f"/sessions/{session_id}").status_code, 404)

    def _create_session(self, **config: object) -> tuple[str, dict]:
        response = self.client.post("/sessions", json=config)
        self.assertEqual(response.status_code, 201)
        body = response.json()
        return body["session_id"], body["state"]


if __name__ == "__main__":
    unittest.main()
