from __future__ import annotations

import logging

import pytest
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_api_responses_carry_strict_csp():
    r = APIClient().get("/api/v1/courses/categories")
    assert r.status_code == 200
    csp = r.headers.get("Content-Security-Policy", "")
    assert "default-src 'self'" in csp
    assert "'unsafe-inline'" not in csp
    assert "frame-ancestors 'none'" in csp


@pytest.mark.django_db
def test_docs_page_allows_swagger_assets():
    r = APIClient().get("/api-docs/")
    assert r.status_code == 200
    csp = r.headers["Content-Security-Policy"]
    assert "https://cdn.jsdelivr.net" in csp


@pytest.mark.django_db
def test_unknown_path_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="coursebooking.access"):
        r = APIClient().get("/api/v1/nothing-here")
    assert r.status_code == 404
    assert "Path /api/v1/nothing-here not found." in caplog.text
    assert "GET /api/v1/nothing-here 404" in caplog.text
