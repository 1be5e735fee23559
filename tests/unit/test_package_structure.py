"""
Unit tests for validating package structure and imports.
"""

from pathlib import Path

import pytest


def test_package_imports():
    """Test that all main package modules can be imported."""
    import lightshuttle

    assert hasattr(lightshuttle, '__version__')
    assert lightshuttle.__version__ == "0.1.0"

    assert hasattr(lightshuttle, 'RuntimeClient')
    assert hasattr(lightshuttle, 'ContainerConfig')
    assert hasattr(lightshuttle, 'get_logger')


def test_api_module():
    """Test API module imports."""
    from lightshuttle.api import run_server
    from lightshuttle.api.app import create_app

    assert callable(run_server)
    assert callable(create_app)


def test_core_module():
    """Test core module imports."""
    from lightshuttle.core import Recreator, RuntimeClient, list_apps

    assert hasattr(Recreator, 'recreate')
    assert hasattr(RuntimeClient, 'run')
    assert callable(list_apps)


def test_auth_module():
    """Test auth module imports."""
    from lightshuttle.auth import build_authenticator, load_key_store

    assert callable(build_authenticator)
    assert callable(load_key_store)


def test_monitoring_module():
    """Test monitoring module imports."""
    from lightshuttle.monitoring import RequestMetrics

    assert hasattr(RequestMetrics, 'observe')


def test_utils_module():
    """Test utils module imports."""
    from lightshuttle.utils import get_logger, logger

    assert callable(get_logger)
    assert hasattr(logger, 'info')


def test_cli_module():
    """Test CLI module imports."""
    from lightshuttle.cli import main

    assert callable(main)


def test_project_structure():
    """Test that the project follows src-layout."""
    project_root = Path(__file__).parent.parent.parent

    assert (project_root / "src").exists()
    assert (project_root / "src" / "lightshuttle").exists()
    assert (project_root / "tests").exists()
    assert (project_root / "pyproject.toml").exists()
    assert (project_root / "README.md").exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
