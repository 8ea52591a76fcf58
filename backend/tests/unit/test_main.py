"""
Unit tests for main FastAPI application.

Tests the root endpoints, health checks, lifespan and global exception handlers.
"""

import pytest
from unittest.mock import Mock, patch
from fastapi.testclient import TestClient
from fastapi import Request

from main import (
    app,
    root,
    health_check,
    global_exception_handler,
    value_error_handler,
    lifespan
)


class TestRootEndpoints:
    """Test root API endpoints."""

    def test_root_endpoint(self):
        """Test the root endpoint returns correct information."""
        client = TestClient(app)
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Template Editor API"
        assert data["version"] == "1.0.0"
        assert data["status"] == "running"

    def test_health_endpoint(self):
        """Test the health check endpoint."""
        client = TestClient(app)
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_root_function_directly(self):
        """Test the root function directly."""
        result = await root()
        assert result == {
            "message": "Template Editor API",
            "version": "1.0.0",
            "status": "running"
        }

    @pytest.mark.asyncio
    async def test_health_check_function_directly(self):
        result = await health_check()
        assert result == {"status": "healthy"}


class TestExceptionHandlers:
    """Test global exception handlers."""

    @pytest.mark.asyncio
    async def test_global_exception_handler(self):
        """Test handling of unhandled exceptions."""
        mock_request = Mock(spec=Request)

        with patch('main.logger') as mock_logger:
            response = await global_exception_handler(mock_request, RuntimeError("Test error"))

            assert response.status_code == 500
            assert b"Internal server error" in response.body
            assert b"internal_error" in response.body
            mock_logger.exception.assert_called_once()

    @pytest.mark.asyncio
    async def test_value_error_handler(self):
        """Test ValueError is reported as a 400 with its message."""
        mock_request = Mock(spec=Request)

        with patch('main.logger') as mock_logger:
            response = await value_error_handler(mock_request, ValueError("name cannot be null"))

            assert response.status_code == 400
            assert b"name cannot be null" in response.body
            assert b"validation_error" in response.body
            mock_logger.warning.assert_called_once()


class TestLifespan:
    """Test application startup and shutdown."""

    @pytest.mark.asyncio
    async def test_lifespan_creates_tables_when_enabled(self):
        with patch('main.AUTO_CREATE_TABLES', True), patch('main.create_tables') as mock_create:
            async with lifespan(app):
                mock_create.assert_called_once()

    @pytest.mark.asyncio
    async def test_lifespan_skips_tables_when_disabled(self):
        with patch('main.AUTO_CREATE_TABLES', False), patch('main.create_tables') as mock_create:
            async with lifespan(app):
                pass
            mock_create.assert_not_called()
