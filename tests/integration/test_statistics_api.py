"""Integration tests for the statistics endpoints."""

import pytest

STATS = "/api/v1/estadisticas"


@pytest.fixture
def populated(api_client, admin_headers, register_account, ticket_payload):
    """Six tickets: three pending, two in progress, one resolved."""
    _, user_headers = register_account("sara")
    ids = []
    for tipo in ["hardware", "hardware", "software", "software", "network", "hardware"]:
        response = api_client.post("/api/v1/tickets", json=ticket_payload(tipo=tipo), headers=user_headers)
        ids.append(response.json()["id"])

    api_client.post(f"/api/v1/tickets/{ids[0]}/asignar", headers=admin_headers)
    api_client.post(f"/api/v1/tickets/{ids[1]}/asignar", headers=admin_headers)
    api_client.put(f"/api/v1/tickets/{ids[2]}", json={"estado": "resolved"}, headers=admin_headers)
    return user_headers


class TestStatistics:
    @pytest.mark.integration
    def test_summary(self, api_client, admin_headers, populated):
        response = api_client.get(STATS, headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "total": 6,
            "pending_count": 3,
            "in_progress_count": 2,
            "resolved_count": 1,
        }

    @pytest.mark.integration
    def test_summary_of_empty_store(self, api_client, admin_headers):
        response = api_client.get(STATS, headers=admin_headers)

        assert response.json()["total"] == 0

    @pytest.mark.integration
    def test_by_type(self, api_client, admin_headers, populated):
        response = api_client.get(f"{STATS}/tipos", headers=admin_headers)

        assert response.json() == [
            {"tipo": "hardware", "cantidad": 3},
            {"tipo": "software", "cantidad": 2},
            {"tipo": "network", "cantidad": 1},
        ]

    @pytest.mark.integration
    @pytest.mark.parametrize("path", [STATS, f"{STATS}/tipos"])
    def test_users_are_forbidden(self, api_client, populated, path):
        response = api_client.get(path, headers=populated)

        assert response.status_code == 403
