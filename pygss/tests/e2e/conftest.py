"""Fixtures for e2e tests."""

import logging
import shutil
from pathlib import Path

import pytest

from pygss.tests.e2e.test_helpers import RepoContext, create_repo_context

logger = logging.getLogger(__name__)


@pytest.fixture
def repo_ctx(tmp_path: Path) -> RepoContext:
    """A fresh bare remote and working clone per test."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    ctx = create_repo_context(str(tmp_path))
    logger.info(f"Created test repository in {ctx.repo_dir}")
    return ctx
