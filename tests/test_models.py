import pytest
from repo2clip.core.errors import ConfigurationError
from repo2clip.core.models import (
    Budget,
    Config,
    ExtractionResult,
    FileNode,
    FileSkip,
    FilterConfig,
    LoadedFile,
    OutputTarget,
    RenderedArtifact,
    RenderOptions,
    SkipReason,
    check_glob,
    normalize_extensions,
)


class TestNormalizeExtensions:
    def test_accepts_common_spellings(self):
        assert normalize_extensions(["py", ".MD", " txt "]) == frozenset({"py", "md", "txt"})

    def test_accepts_compound_extensions(self):
        assert normalize_extensions(["tar.gz"]) == frozenset({"tar.gz"})

    @pytest.mark.parametrize("token", ["", "*.py", "a/b", ".", "py thon"])
    def test_rejects_malformed_tokens(self, token):
        with pytest.raises(ConfigurationError):
            normalize_extensions([token])


class TestCheckGlob:
    @pytest.mark.parametrize("pattern", ["*.log", "src/**/*.py", "[ab].txt", r"\[literal"])
    def test_valid_patterns(self, pattern):
        check_glob(pattern)

    @pytest.mark.parametrize("pattern", ["", "   ", "!keep.txt", "[abc"])
    def test_invalid_patterns(self, pattern):
        with pytest.raises(ConfigurationError):
            check_glob(pattern)


class TestFilterConfig:
    def test_env_is_always_excluded(self):
        config = FilterConfig(exclude_patterns=("*.tmp",))
        assert ".env" in config.exclude_patterns
        assert "*.tmp" in config.exclude_patterns

    def test_env_not_duplicated(self):
        config = FilterConfig(exclude_patterns=(".env",))
        assert config.exclude_patterns.count(".env") == 1

    def test_has_overrides(self):
        assert FilterConfig().has_overrides is False
        assert FilterConfig(unignore=["*.log"]).has_overrides is True

    def test_negative_depth_rejected(self):
        with pytest.raises(ConfigurationError):
            FilterConfig(max_depth=-1).validate()

    def test_bad_unignore_rejected(self):
        with pytest.raises(ConfigurationError):
            FilterConfig(unignore=("[oops",)).validate()


class TestConfigValidation:
    def test_defaults_are_valid(self):
        Config().validate()

    def test_zero_budget_rejected(self):
        with pytest.raises(ConfigurationError):
            Config(budget=Budget(max_bytes=0)).validate()
        with pytest.raises(ConfigurationError):
            Config(budget=Budget(max_tokens=0)).validate()

    def test_unknown_layout_rejected(self):
        with pytest.raises(ConfigurationError, match="Unknown output layout"):
            Config(render=RenderOptions(layout="yaml")).validate()

    def test_chunking_requires_file(self):
        with pytest.raises(ConfigurationError):
            Config(output=OutputTarget(chunk_size=100)).validate()

    def test_append_requires_file(self):
        with pytest.raises(ConfigurationError):
            Config(output=OutputTarget(append=True)).validate()

    def test_zero_jobs_rejected(self):
        with pytest.raises(ConfigurationError):
            Config(jobs=0).validate()

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)


class TestResultModels:
    def test_loaded_file_extension(self):
        assert LoadedFile("src/Main.PY", "", 0, 0).extension == "py"
        assert LoadedFile("Makefile", "", 0, 0).extension == ""

    def test_file_skip_str(self):
        assert str(FileSkip("a.bin", SkipReason.BINARY)) == "a.bin: binary"
        skip = FileSkip("c.txt", SkipReason.BUDGET, "10 bytes, ~3 tokens")
        assert str(skip) == "c.txt: budget exceeded (10 bytes, ~3 tokens)"

    def test_extraction_totals_and_breakdown(self):
        result = ExtractionResult(files=[
            LoadedFile("b.py", "x", 10, 3),
            LoadedFile("a.md", "y", 5, 2),
            LoadedFile("c.py", "z", 1, 1),
            LoadedFile("LICENSE", "w", 4, 1),
        ])
        assert result.total_files == 4
        assert result.total_bytes == 20
        assert result.total_tokens == 7

        breakdown = result.extension_breakdown()
        assert list(breakdown) == ["", "md", "py"]
        assert breakdown["py"].files == 2
        assert breakdown["py"].bytes == 11
        assert breakdown["py"].tokens == 4

    def test_extraction_has_errors(self):
        result = ExtractionResult()
        assert result.has_errors() is False
        result.errors.append("x: unreadable")
        assert result.has_errors() is True

    def test_rendered_artifact_byte_size_is_utf8(self):
        artifact = RenderedArtifact(text="héllo", token_count=2)
        assert artifact.byte_size == 6
        assert artifact.data == "héllo".encode("utf-8")

    def test_file_node_kinds(self):
        assert FileNode("a", "a", "file").is_file()
        assert FileNode("d", "d", "dir").is_directory()
