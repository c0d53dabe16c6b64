import pytest
from fastapi.testclient import TestClient


def create(client: TestClient, **payload):
    payload.setdefault("originalUrl", "https://www.google.com/")
    return client.post("/api/v1/urls/", json=payload)


class TestURLEndpoints:
    """Test short URL endpoints"""

    def test_create_short_url(self, client: TestClient):
        """Test creating a short URL"""
        response = create(client)
        assert response.status_code == 201

        data = response.json()
        assert len(data["shortCode"]) == 6
        assert data["shortUrl"].endswith(f"/{data['shortCode']}")
        assert data["originalUrl"] == "https://www.google.com/"
        assert data["validityMinutes"] == 30
        assert data["clicks"] == []
        assert data["isExpired"] is False

    def test_create_with_snake_case_fields(self, client: TestClient):
        response = client.post(
            "/api/v1/urls/",
            json={"original_url": "https://www.python.org", "custom_short_code": "python"},
        )
        assert response.status_code == 201
        assert response.json()["shortCode"] == "python"

    def test_invalid_url(self, client: TestClient):
        """Domain validation errors come back verbatim"""
        response = create(client, originalUrl="not-a-valid-url")
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid URL format"}

    def test_invalid_short_code(self, client: TestClient):
        response = create(client, originalUrl="https://x.com", customShortCode="ab")
        assert response.status_code == 400
        assert response.json()["detail"] == (
            "Invalid shortcode format. Use 3-20 alphanumeric characters only."
        )

    def test_short_code_taken(self, client: TestClient):
        create(client, customShortCode="abc123")

        response = create(client, originalUrl="https://x.com", customShortCode="abc123")
        assert response.status_code == 409
        assert response.json()["detail"] == (
            "Shortcode already exists. Please choose a different one."
        )

    def test_non_positive_validity_rejected(self, client: TestClient):
        response = create(client, validityMinutes=0)
        assert response.status_code == 422

    def test_write_failure_is_500(self, client: TestClient, storage):
        storage.quota = 10

        response = create(client)
        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to save URL data"}

    def test_list_urls(self, client: TestClient):
        create(client, originalUrl="https://a.com")
        create(client, originalUrl="https://b.com")

        response = client.get("/api/v1/urls/")
        assert response.status_code == 200
        assert [u["originalUrl"] for u in response.json()] == ["https://a.com", "https://b.com"]

    def test_get_url_info(self, client: TestClient):
        """Test getting URL information"""
        short_code = create(client).json()["shortCode"]

        response = client.get(f"/api/v1/urls/{short_code}")
        assert response.status_code == 200
        assert response.json()["shortCode"] == short_code

    def test_get_nonexistent_url(self, client: TestClient):
        response = client.get("/api/v1/urls/nonexistent")
        assert response.status_code == 404

    def test_expiry_reported_at_read_time(self, client: TestClient, clock):
        short_code = create(client, validityMinutes=1).json()["shortCode"]
        clock.advance(seconds=61)

        response = client.get(f"/api/v1/urls/{short_code}")
        assert response.json()["isExpired"] is True

    def test_delete_url(self, client: TestClient):
        """Deleting by id is idempotent"""
        data = create(client).json()

        response = client.delete(f"/api/v1/urls/{data['id']}")
        assert response.status_code == 204
        assert client.get(f"/api/v1/urls/{data['shortCode']}").status_code == 404

        response = client.delete(f"/api/v1/urls/{data['id']}")
        assert response.status_code == 204

    def test_clear_expired(self, client: TestClient, clock):
        create(client, originalUrl="https://a.com", validityMinutes=1)
        create(client, originalUrl="https://b.com", validityMinutes=1)
        create(client, originalUrl="https://c.com", validityMinutes=60)
        clock.advance(minutes=2)

        response = client.delete("/api/v1/urls/expired")
        assert response.status_code == 200
        assert response.json() == {"removed": 2}
        assert len(client.get("/api/v1/urls/").json()) == 1

    def test_summary(self, client: TestClient, clock):
        create(client, validityMinutes=1)
        create(client, validityMinutes=60)
        clock.advance(minutes=2)

        response = client.get("/api/v1/summary")
        assert response.json() == {
            "totalUrls": 2,
            "activeUrls": 1,
            "expiredUrls": 1,
            "totalClicks": 0,
        }


class TestBatchEndpoint:

    def test_batch_success(self, client: TestClient):
        response = client.post("/api/v1/urls/batch", json={"urls": [
            {"originalUrl": "https://a.com"},
            {"originalUrl": "https://b.com", "customShortCode": "bbb"},
        ]})
        assert response.status_code == 201
        assert [u["originalUrl"] for u in response.json()] == ["https://a.com", "https://b.com"]

    def test_batch_partial_failure(self, client: TestClient):
        response = client.post("/api/v1/urls/batch", json={"urls": [
            {"originalUrl": "https://first.com"},
            {"originalUrl": "not a url"},
            {"originalUrl": "https://third.com"},
        ]})
        assert response.status_code == 400

        data = response.json()
        assert data["detail"] == "URL 2: Invalid URL format"
        assert data["failures"] == [{"position": 2, "reason": "Invalid URL format"}]
        assert [u["originalUrl"] for u in data["created"]] == [
            "https://first.com", "https://third.com"
        ]

        stored = client.get("/api/v1/urls/").json()
        assert [u["originalUrl"] for u in stored] == ["https://first.com", "https://third.com"]

    def test_empty_batch_rejected(self, client: TestClient):
        response = client.post("/api/v1/urls/batch", json={"urls": []})
        assert response.status_code == 422


class TestRedirect:
    """Lookup, expiry check, click tracking, then redirect"""

    def test_redirect_url(self, client: TestClient):
        short_code = create(client, originalUrl="https://www.github.com/").json()["shortCode"]

        response = client.get(f"/{short_code}", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

    def test_redirect_records_click(self, client: TestClient):
        short_code = create(client).json()["shortCode"]

        client.get(f"/{short_code}", follow_redirects=False)
        client.get(
            f"/{short_code}",
            headers={"referer": "https://twitter.com", "user-agent": "pytest-browser"},
            follow_redirects=False,
        )

        stats = client.get(f"/api/v1/urls/{short_code}/stats").json()
        assert stats["totalClicks"] == 2
        assert stats["clicksBySource"] == {"direct": 1, "https://twitter.com": 1}

        clicks = client.get(f"/api/v1/urls/{short_code}").json()["clicks"]
        assert clicks[1]["userAgent"] == "pytest-browser"
        assert clicks[1]["ipAddress"] == "xxx.xxx.xxx.xxx"

    def test_redirect_nonexistent_url(self, client: TestClient):
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404

    def test_expired_url_not_tracked(self, client: TestClient, clock):
        short_code = create(client, validityMinutes=1).json()["shortCode"]
        clock.advance(minutes=2)

        response = client.get(f"/{short_code}", follow_redirects=False)
        assert response.status_code == 410
        assert response.json()["detail"] == "This short URL has expired"

        assert client.get(f"/api/v1/urls/{short_code}/stats").json()["totalClicks"] == 0

    def test_stats_nonexistent(self, client: TestClient):
        assert client.get("/api/v1/urls/nonexistent/stats").status_code == 404

    @pytest.mark.parametrize("code", ["health", "docs", "redoc", "openapi"])
    def test_code_named_like_app_route_redirects(self, client: TestClient, code):
        """App routes live under /api, so no valid short code is shadowed"""
        create(client, originalUrl="https://x.com", customShortCode=code)

        response = client.get(f"/{code}", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://x.com"

        stats = client.get(f"/api/v1/urls/{code}/stats").json()
        assert stats["totalClicks"] == 1

    @pytest.mark.parametrize("code", ["summary", "expired", "batch"])
    def test_code_named_like_urls_route_is_readable(self, client: TestClient, code):
        created = create(client, originalUrl="https://y.com", customShortCode=code).json()

        response = client.get(f"/api/v1/urls/{code}")
        assert response.status_code == 200
        assert response.json()["id"] == created["id"]


class TestLogEndpoints:

    def test_logs_recorded(self, client: TestClient):
        create(client, customShortCode="logme")

        response = client.get("/api/v1/logs/")
        assert response.status_code == 200
        messages = [e["message"] for e in response.json()]
        assert "Short URL created successfully" in messages

    def test_filter_and_clear(self, client: TestClient):
        client.get("/nonexistent", follow_redirects=False)

        warnings = client.get("/api/v1/logs/", params={"level": "warn"}).json()
        assert [e["message"] for e in warnings] == ["Short URL not found"]
        assert warnings[0]["context"] == {"short_code": "nonexistent"}

        assert client.delete("/api/v1/logs/").status_code == 204
        assert client.get("/api/v1/logs/").json() == []


class TestInfoEndpoints:

    def test_root(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert "version" in response.json()

    def test_health(self, client: TestClient):
        assert client.get("/api/health").json()["status"] == "healthy"
