import os

import pytest
from repo2clip.core.models import AdmissionReason, FilterConfig
from repo2clip.core.resolver import PathResolver


def resolve_paths(config, roots=(".",)):
    resolver = PathResolver(config)
    return [c.path for c in resolver.resolve(list(roots))]


class TestPrimaryWalk:
    @pytest.fixture(autouse=True)
    def in_repo(self, sample_repo, monkeypatch):
        monkeypatch.chdir(sample_repo)

    def test_default_candidates(self):
        assert resolve_paths(FilterConfig()) == [
            "README.md",
            "docs/guide.md",
            "image.png",
            "setup.py",
            "src/__init__.py",
            "src/main.py",
            "src/utils/helpers.py",
            "tests/test_main.py",
        ]

    def test_candidates_are_matched(self):
        candidates = PathResolver(FilterConfig()).resolve(["."])
        assert all(c.reason is AdmissionReason.MATCHED for c in candidates)
        assert all(os.path.isabs(c.abs_path) for c in candidates)

    def test_gitignore_disabled(self):
        paths = resolve_paths(FilterConfig(use_gitignore=False))
        assert "debug.log" in paths

    def test_hidden_files_included_but_env_and_git_never(self):
        paths = resolve_paths(FilterConfig(include_hidden=True))
        assert ".gitignore" in paths
        assert ".env" not in paths
        assert ".git/config" not in paths

    def test_auto_excluded_directories(self):
        assert "node_modules/package.json" not in resolve_paths(FilterConfig())
        paths = resolve_paths(FilterConfig(auto_exclude=False))
        assert "node_modules/package.json" in paths

    def test_include_extensions(self):
        paths = resolve_paths(FilterConfig(include_extensions=frozenset({"md"})))
        assert paths == ["README.md", "docs/guide.md"]

    def test_depth_one_is_root_files_only(self):
        assert resolve_paths(FilterConfig(max_depth=1)) == ["README.md", "image.png", "setup.py"]

    def test_depth_two(self):
        paths = resolve_paths(FilterConfig(max_depth=2))
        assert "src/main.py" in paths
        assert "src/utils/helpers.py" not in paths

    def test_depth_zero_finds_nothing(self):
        assert resolve_paths(FilterConfig(max_depth=0)) == []

    def test_nested_gitignore(self, sample_repo):
        (sample_repo / "src" / ".gitignore").write_text("*.tmp\n")
        (sample_repo / "src" / "scratch.tmp").write_text("x")
        (sample_repo / "top.tmp").write_text("y")

        paths = resolve_paths(FilterConfig())

        assert "src/scratch.tmp" not in paths
        assert "top.tmp" in paths

    def test_ignored_directory_is_pruned(self, sample_repo):
        (sample_repo / "build").mkdir()
        (sample_repo / "build" / "out.js").write_text("x")

        paths = resolve_paths(FilterConfig(auto_exclude=False))

        assert "build/out.js" not in paths

    def test_file_root(self):
        assert resolve_paths(FilterConfig(), ["src/main.py"]) == ["src/main.py"]

    def test_multiple_roots_are_deduplicated(self):
        paths = resolve_paths(FilterConfig(), [".", "src", "src/main.py"])
        assert paths.count("src/main.py") == 1

    def test_missing_root_is_reported(self):
        resolver = PathResolver(FilterConfig())

        candidates = resolver.resolve(["does-not-exist", "src"])

        assert [c.path for c in candidates] == ["src/__init__.py", "src/main.py", "src/utils/helpers.py"]
        assert len(resolver.errors) == 1
        assert "Could not process entry" in resolver.errors[0]

    def test_output_file_skipped(self, sample_repo):
        (sample_repo / "out.txt").write_text("previous run")
        (sample_repo / "out_001.txt").write_text("unrelated file")
        (sample_repo / "out_2024.txt").write_text("yearly report")

        paths = resolve_paths(FilterConfig(output_path="out.txt"))

        assert "out.txt" not in paths
        assert "out_001.txt" in paths
        assert "out_2024.txt" in paths

    def test_output_chunks_skipped_when_chunking(self, sample_repo):
        (sample_repo / "out.txt").write_text("previous run")
        (sample_repo / "out_001.txt").write_text("previous chunk")
        (sample_repo / "out_1.txt").write_text("kept")
        (sample_repo / "out_notes.txt").write_text("kept")

        resolver = PathResolver(FilterConfig(output_path="out.txt"), chunked_output=True)
        paths = [c.path for c in resolver.resolve(["."])]

        assert "out.txt" not in paths
        assert "out_001.txt" not in paths
        assert "out_1.txt" in paths
        assert "out_notes.txt" in paths

    def test_parent_gitignore_applies_to_subdirectory_root(self, sample_repo):
        (sample_repo / "src" / "extra.log").write_text("log line\n")

        paths = resolve_paths(FilterConfig(), ["src"])

        assert "src/extra.log" not in paths
        assert "src/main.py" in paths

    def test_gitignore_outside_repository_ignored(self, sample_repo):
        (sample_repo.parent / ".gitignore").write_text("*.py\n")

        assert "src/main.py" in resolve_paths(FilterConfig(), ["src"])
        assert "src/main.py" in resolve_paths(FilterConfig())

    def test_parent_gitignore_not_applied_when_disabled(self, sample_repo):
        (sample_repo / "src" / "extra.log").write_text("log line\n")

        paths = resolve_paths(FilterConfig(use_gitignore=False), ["src"])

        assert "src/extra.log" in paths


class TestOverrideWalk:
    @pytest.fixture(autouse=True)
    def in_repo(self, sample_repo, monkeypatch):
        monkeypatch.chdir(sample_repo)

    def test_rescues_ignored_file(self):
        candidates = PathResolver(FilterConfig(unignore=("*.log",))).resolve(["."])
        by_path = {c.path: c for c in candidates}

        assert "debug.log" in by_path
        assert by_path["debug.log"].reason is AdmissionReason.RESCUED
        assert by_path["README.md"].reason is AdmissionReason.MATCHED

    def test_rescue_inside_ignored_directory(self, sample_repo):
        (sample_repo / "build").mkdir()
        (sample_repo / "build" / "bundle.js").write_text("x")
        (sample_repo / "build" / "other.css").write_text("y")

        paths = resolve_paths(FilterConfig(unignore=("build/*.js",)))

        assert "build/bundle.js" in paths
        assert "build/other.css" not in paths

    def test_rescue_ignores_extension_filters(self):
        config = FilterConfig(unignore=("*.log",), include_extensions=frozenset({"py"}))
        paths = resolve_paths(config)
        assert "debug.log" in paths
        assert "README.md" not in paths

    def test_exclude_patterns_beat_overrides(self):
        paths = resolve_paths(FilterConfig(unignore=(".env", "*.log"), exclude_patterns=("debug.log",)))
        assert ".env" not in paths
        assert "debug.log" not in paths

    def test_vcs_directories_never_rescued(self):
        paths = resolve_paths(FilterConfig(unignore=("config",)))
        assert ".git/config" not in paths

    def test_rescue_respects_depth(self, sample_repo):
        (sample_repo / "logs").mkdir()
        (sample_repo / "logs" / "deep.log").write_text("x")

        paths = resolve_paths(FilterConfig(unignore=("*.log",), max_depth=1))

        assert "debug.log" in paths
        assert "logs/deep.log" not in paths

    def test_no_duplicates_between_walks(self):
        paths = resolve_paths(FilterConfig(unignore=("*.py", "*.log")))
        assert len(paths) == len(set(paths))
        assert paths == sorted(paths)
