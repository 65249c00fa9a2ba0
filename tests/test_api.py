"""
Tests for the layout HTTP API.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from py_voronoid.api.main import app, layouts, settings


ITEMS = [
    {"label": "Cancer", "value": 50, "category": "oncology"},
    {"label": "Dementia", "value": 30, "category": "degenerative"},
    {"label": "Liver", "value": 20, "category": "digestive"},
]


class TestLayoutAPI:
    """Test layout endpoints."""

    def setup_method(self):
        """Set up test client."""
        layouts.clear()
        self.client = TestClient(app)

    def create(self, **extra):
        response = self.client.post("/layouts", json={"items": ITEMS, "seed": "api", **extra})
        assert response.status_code == 200
        return response.json()

    def test_root_and_health(self):
        assert self.client.get("/").json()["status"] == "running"
        assert self.client.get("/health").json() == {"status": "healthy", "layouts": 0}

    def test_categories(self):
        data = self.client.get("/categories").json()

        assert len(data) == 7
        assert {"key": "other", "label": "Other", "color": "#6c757d"} in data

    def test_create_layout(self):
        data = self.create()

        assert data["status"] in ("converged", "exhausted")
        assert data["width"] == 1200
        assert data["height"] == 850
        assert len(data["cells"]) == 3
        assert len(data["seeds"]) == 3
        assert [m["label"] for m in data["metadata"]] == ["Cancer", "Dementia", "Liver"]
        assert data["layout_id"] in layouts

    def test_same_seed_same_layout(self):
        a = self.create()
        b = self.create()

        assert a["seeds"] == b["seeds"]
        assert a["layout_id"] != b["layout_id"]

    def test_portrait(self):
        data = self.create(orientation="portrait")

        assert (data["width"], data["height"]) == (850, 1200)

    @pytest.mark.parametrize("payload", [
        {"items": []},
        {"items": [{"label": "a", "value": 0}]},
        {"items": [{"label": "a", "value": -1}]},
        {"items": [{"label": "a", "value": 1}], "width": 50},
    ])
    def test_invalid_requests(self, payload):
        assert self.client.post("/layouts", json=payload).status_code == 422

    def test_get_layout(self):
        created = self.create()

        response = self.client.get(f"/layouts/{created['layout_id']}")

        assert response.status_code == 200
        assert response.json()["seeds"] == created["seeds"]

    def test_unknown_layout(self):
        assert self.client.get("/layouts/missing").status_code == 404
        assert self.client.delete("/layouts/missing").status_code == 404

    def test_move_and_reoptimize(self):
        layout_id = self.create()["layout_id"]

        moved = self.client.post(f"/layouts/{layout_id}/seeds/1", json={"x": 500, "y": 400})
        assert moved.status_code == 200
        assert moved.json()["seeds"][1] == [500, 400]
        assert moved.json()["status_text"] == "Dragging..."

        response = self.client.post(f"/layouts/{layout_id}/reoptimize", json={"locked_index": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["seeds"][1] == [500, 400]
        assert data["status_text"].startswith("Done (")

    def test_bad_seed_index(self):
        layout_id = self.create()["layout_id"]

        response = self.client.post(f"/layouts/{layout_id}/seeds/9", json={"x": 1, "y": 1})

        assert response.status_code == 400

    @patch('py_voronoid.api.main.LayoutEngine.move_seed', return_value=None)
    def test_move_during_run(self, mock_move):
        """Test that a rejected drag maps to a conflict."""
        layout_id = self.create()["layout_id"]

        response = self.client.post(f"/layouts/{layout_id}/seeds/0", json={"x": 1, "y": 1})

        assert response.status_code == 409
        mock_move.assert_called_once()

    def test_delete(self):
        layout_id = self.create()["layout_id"]

        assert self.client.delete(f"/layouts/{layout_id}").json() == {"deleted": layout_id}
        assert self.client.get(f"/layouts/{layout_id}").status_code == 404

    def test_eviction(self, monkeypatch):
        monkeypatch.setattr(settings, "max_concurrent_layouts", 1)
        first = self.create()["layout_id"]
        second = self.create()["layout_id"]

        assert first not in layouts
        assert second in layouts
