"""
Static lookup tables used by the formatters.

Recognizing a new extension is a data change here, never a code change.
"""

import os
from types import MappingProxyType
from typing import Mapping

NO_EXTENSION = "no extension"
OTHER = "other"

LANGUAGES: Mapping[str, str] = MappingProxyType({
    "py": "python", "pyi": "python", "js": "javascript", "mjs": "javascript",
    "cjs": "javascript", "jsx": "jsx", "ts": "typescript", "tsx": "tsx",
    "rs": "rust", "go": "go", "java": "java", "kt": "kotlin", "kts": "kotlin",
    "scala": "scala", "c": "c", "h": "c", "cc": "cpp", "cpp": "cpp",
    "cxx": "cpp", "hpp": "cpp", "hh": "cpp", "cs": "csharp", "swift": "swift",
    "rb": "ruby", "php": "php", "pl": "perl", "lua": "lua", "r": "r",
    "dart": "dart", "ex": "elixir", "exs": "elixir", "erl": "erlang",
    "hs": "haskell", "clj": "clojure", "sh": "bash", "bash": "bash",
    "zsh": "zsh", "fish": "fish", "ps1": "powershell", "bat": "batch",
    "sql": "sql", "html": "html", "htm": "html", "xml": "xml", "svg": "xml",
    "vue": "vue", "svelte": "svelte", "css": "css", "scss": "scss",
    "sass": "sass", "less": "less", "json": "json", "jsonc": "json",
    "yaml": "yaml", "yml": "yaml", "toml": "toml", "ini": "ini", "cfg": "ini",
    "md": "markdown", "markdown": "markdown", "rst": "rst", "tex": "latex",
    "proto": "protobuf", "graphql": "graphql", "gql": "graphql",
    "tf": "hcl", "hcl": "hcl", "nix": "nix", "zig": "zig", "vim": "vim",
    "dockerfile": "dockerfile", "cmake": "cmake", "mk": "makefile",
})

FILENAME_LANGUAGES: Mapping[str, str] = MappingProxyType({
    "Dockerfile": "dockerfile",
    "Makefile": "makefile",
    "GNUmakefile": "makefile",
    "CMakeLists.txt": "cmake",
    "Gemfile": "ruby",
    "Rakefile": "ruby",
    "Jenkinsfile": "groovy",
})

CATEGORIES: Mapping[str, str] = MappingProxyType({
    **{ext: "source code" for ext in (
        "py", "pyi", "js", "mjs", "cjs", "jsx", "ts", "tsx", "rs", "go", "java",
        "kt", "kts", "scala", "c", "h", "cc", "cpp", "cxx", "hpp", "hh", "cs",
        "swift", "rb", "php", "pl", "lua", "r", "dart", "ex", "exs", "erl",
        "hs", "clj", "zig", "vue", "svelte", "sql", "proto", "graphql", "gql",
    )},
    **{ext: "scripts" for ext in ("sh", "bash", "zsh", "fish", "ps1", "bat", "cmd")},
    **{ext: "stylesheets" for ext in ("css", "scss", "sass", "less", "styl")},
    **{ext: "markup" for ext in ("html", "htm", "xml", "svg", "xhtml")},
    **{ext: "configuration" for ext in (
        "json", "jsonc", "yaml", "yml", "toml", "ini", "cfg", "conf", "env",
        "properties", "tf", "hcl", "nix", "lock",
    )},
    **{ext: "documentation" for ext in ("md", "markdown", "rst", "txt", "adoc", "tex")},
    **{ext: "data" for ext in ("csv", "tsv", "jsonl", "ndjson")},
})


def _extension(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[1].lstrip(".").lower()


def language_for(path: str) -> str:
    """Fence label for a file, or '' when the extension is not recognized."""
    name = os.path.basename(path)
    if name in FILENAME_LANGUAGES:
        return FILENAME_LANGUAGES[name]
    return LANGUAGES.get(_extension(path), "")


def category_for(path: str) -> str:
    """Grouping category for a file."""
    extension = _extension(path)
    if not extension:
        return NO_EXTENSION
    return CATEGORIES.get(extension, OTHER)
