"""Concrete layouts: plain text, markdown and JSON."""

import json
import re
from typing import Any, Dict, List

from .base import Document, FileEntry, Formatter

_BACKTICK_RUN = re.compile(r'`{3,}')


def _fence_for(content: str) -> str:
    """A backtick fence longer than any fence inside the content."""
    longest = max((len(run) for run in _BACKTICK_RUN.findall(content)), default=0)
    return '`' * max(3, longest + 1)


def _group_title(name: str, count: int) -> str:
    return f"{name} ({count} file{'s' if count != 1 else ''})"


class PlainFormatter(Formatter):
    """``--- <path> ---`` header followed by the raw content, per file."""

    def serialize(self, document: Document) -> str:
        parts: List[str] = []

        if document.structure is not None:
            parts.append(f"--- Directory structure ---\n{document.structure}\n\n")

        if document.dependencies:
            lines = ["--- Dependencies ---"]
            for manifest in document.dependencies:
                lines.append(f"{manifest.manifest}:")
                lines.extend(f"  {dep}" for dep in manifest.dependencies)
            parts.append("\n".join(lines) + "\n\n")

        for group in document.groups:
            if group.name is not None:
                parts.append(f"=== {_group_title(group.name, len(group.files))} ===\n\n")
            for entry in group.files:
                parts.append(f"--- {entry.path} ---\n{entry.content}\n\n")

        return "".join(parts)


class MarkdownFormatter(Formatter):
    """A heading per file followed by a fenced block tagged with its language."""

    def serialize(self, document: Document) -> str:
        parts: List[str] = []
        file_heading = "###" if document.is_grouped else "##"

        if document.structure is not None:
            fence = _fence_for(document.structure)
            parts.append(f"## Directory structure\n\n{fence}text\n{document.structure}\n{fence}\n\n")

        if document.dependencies:
            lines = ["## Dependencies", ""]
            for manifest in document.dependencies:
                lines.append(f"### {manifest.manifest}")
                lines.append("")
                lines.extend(f"- {dep}" for dep in manifest.dependencies)
                lines.append("")
            parts.append("\n".join(lines) + "\n")

        for group in document.groups:
            if group.name is not None:
                parts.append(f"## {_group_title(group.name, len(group.files))}\n\n")
            for entry in group.files:
                parts.append(self._file_block(entry, file_heading))

        return "".join(parts)

    @staticmethod
    def _file_block(entry: FileEntry, heading: str) -> str:
        fence = _fence_for(entry.content)
        body = entry.content if entry.content.endswith("\n") or not entry.content else entry.content + "\n"
        return f"{heading} {entry.path}\n\n{fence}{entry.language}\n{body}{fence}\n\n"


class JsonFormatter(Formatter):
    """Ordered file entries plus aggregate totals, as a JSON document."""

    def serialize(self, document: Document) -> str:
        payload: Dict[str, Any] = {}

        if document.structure is not None:
            payload["structure"] = document.structure
        if document.dependencies is not None:
            payload["dependencies"] = [
                {"manifest": m.manifest, "dependencies": m.dependencies}
                for m in document.dependencies
            ]

        files = []
        for group in document.groups:
            for entry in group.files:
                item: Dict[str, Any] = {
                    "path": entry.path,
                    "content": entry.content,
                    "tokens": entry.tokens,
                    "bytes": entry.bytes,
                }
                if group.name is not None:
                    item["category"] = group.name
                files.append(item)

        payload["files"] = files
        payload["total_files"] = document.total_files
        payload["total_bytes"] = document.total_bytes
        payload["total_tokens"] = document.total_tokens
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
