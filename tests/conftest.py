import pytest
import tempfile
import shutil
from pathlib import Path


@pytest.fixture
def temp_workspace():
    """Create a temporary directory for test files."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def sample_repo(temp_workspace):
    """Create a sample repository structure for testing."""
    repo_root = temp_workspace / "sample_repo"
    repo_root.mkdir()

    # Create directory structure
    (repo_root / "src").mkdir()
    (repo_root / "src" / "utils").mkdir()
    (repo_root / "tests").mkdir()
    (repo_root / "docs").mkdir()
    (repo_root / ".git").mkdir()
    (repo_root / "node_modules").mkdir()

    # Create files
    (repo_root / "README.md").write_text("# Sample Repository\n\nTest repository for repo2clip\n")
    (repo_root / "setup.py").write_text("from setuptools import setup\n\nsetup(name='sample')\n")
    (repo_root / "src" / "__init__.py").write_text("")
    (repo_root / "src" / "main.py").write_text("def main():\n    print('Hello, World!')\n")
    (repo_root / "src" / "utils" / "helpers.py").write_text("def helper():\n    return 42\n")
    (repo_root / "tests" / "test_main.py").write_text("def test_main():\n    assert True\n")
    (repo_root / "docs" / "guide.md").write_text("# Guide\n")
    (repo_root / ".git" / "config").write_text("[core]\n    repositoryformatversion = 0\n")
    (repo_root / "node_modules" / "package.json").write_text('{"name": "test"}')
    (repo_root / ".env").write_text("SECRET=1\n")
    (repo_root / ".gitignore").write_text("*.log\nbuild/\n")
    (repo_root / "debug.log").write_text("log line\n")

    # Create binary file
    (repo_root / "image.png").write_bytes(b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR')

    return repo_root


@pytest.fixture
def budget_repo(temp_workspace):
    """Two small text files around a binary one."""
    root = temp_workspace / "budget_repo"
    root.mkdir()
    (root / "a.txt").write_text("0123456789")
    (root / "b.png").write_bytes(b'\x89PNG\r\n\x1a\n\x00\x00')
    (root / "c.txt").write_text("abcdefghij")
    return root
