"""Format API responses as markdown for LLM consumption.

Each formatter ends with a short "Next steps" list naming the tools that
usually follow, so the client can chain calls without guessing.
"""


def _next_steps(steps: list[str]) -> str:
    return "\n".join(["", "**Next steps:**"] + [f"- {step}" for step in steps])


def format_project_list(projects: list[dict]) -> str:
    """Format the project list with file counts and sizes."""
    if not projects:
        return "No projects found. Use `memory_bank_write` to create the first file of a project."

    lines = [f"Found {len(projects)} project(s):\n"]
    for p in projects:
        updated = (p.get("updated_at") or "")[:10]
        lines.append(
            f"- **{p.get('name', '')}**: {p.get('file_count', 0)} file(s), "
            f"{p.get('total_size', 0)} bytes, updated {updated}"
        )
    lines.append(_next_steps(["Use `memory_bank_list_project_files` to see a project's files"]))
    return "\n".join(lines)


def format_file_list(project_name: str, files: list[dict]) -> str:
    """Format a project's files as a markdown list."""
    if not files:
        return f"No files found in project '{project_name}'."

    lines = [f"Found {len(files)} file(s) in project '{project_name}':\n"]
    for f in files:
        meta = f.get("metadata") or {}
        version = meta.get("version")
        updated = (f.get("updated_at") or "")[:19]
        suffix = f", version {version}" if version else ""
        lines.append(f"- `{f.get('name', '')}` ({f.get('size', 0)} bytes{suffix}, updated {updated})")
    lines.append(_next_steps([
        "Use `memory_bank_read` to read a file",
        "Use `memory_bank_version_history` to see how a file evolved",
    ]))
    return "\n".join(lines)


def format_file(f: dict) -> str:
    """Format a file with a metadata header and its content."""
    meta = f.get("metadata") or {}
    header = [f"# {f.get('project_name', '')}/{f.get('name', '')}\n"]
    if meta.get("version"):
        header.append(f"**Version:** {meta['version']}  ")
    header.append(f"**Size:** {f.get('size', 0)} bytes  ")
    header.append(f"**Updated:** {f.get('updated_at', '')}  ")
    if meta.get("summary"):
        header.append(f"\n> {meta['summary']}\n")
    header.append("\n---\n")
    header.append(f.get("content", ""))
    return "\n".join(header)


def format_write_result(f: dict, action: str) -> str:
    """Format the result of a write or update."""
    meta = f.get("metadata") or {}
    lines = [f"{action} `{f.get('name', '')}` in project '{f.get('project_name', '')}'."]
    if meta.get("version"):
        lines.append(f"- **Version:** {meta['version']}")
    lines.append(f"- **Size:** {f.get('size', 0)} bytes")
    lines.append(f"- **Checksum:** `{f.get('checksum', '')}`")
    lines.append(_next_steps([
        "Use `memory_bank_version_history` to see all versions of this file",
        "Use `memory_bank_update` for further changes (each update creates a version)",
    ]))
    return "\n".join(lines)


def format_version_history(history: dict) -> str:
    """Format a version history table, newest first."""
    versions = history.get("versions", [])
    file_name = history.get("file_name", "")
    if not versions:
        return f"No versions found for file {file_name} in project {history.get('project_name', '')}."

    lines = [f"Found {history.get('total_versions', len(versions))} versions for file {file_name}\n"]
    lines.append("| Version | Created | Size | Lines | Change |")
    lines.append("|---|---|---|---|---|")
    for v in versions:
        meta = v.get("metadata") or {}
        change = meta.get("change_description") or ""
        if meta.get("is_auto_save"):
            change = f"{change} (auto-save)".strip()
        lines.append(
            f"| {v.get('version')} | {(v.get('created_at') or '')[:19]} | {v.get('size', 0)} B "
            f"| {meta.get('line_count') if meta.get('line_count') is not None else ''} | {change} |"
        )
    lines.append(_next_steps([
        "Use `memory_bank_read_version` to view a specific version's content",
        "Use `memory_bank_compare_versions` to compare two versions",
        "Use `memory_bank_revert_file_to_version` to restore an older version",
    ]))
    return "\n".join(lines)


def format_version(version: dict) -> str:
    """Format one version with metadata and full content."""
    meta = version.get("metadata") or {}
    lines = [f"# {version.get('file_name', '')} (version {version.get('version')})\n"]
    lines.append(f"**Project:** {version.get('project_name', '')}  ")
    lines.append(f"**Created:** {version.get('created_at', '')}  ")
    lines.append(f"**Size:** {version.get('size', 0)} bytes  ")
    lines.append(f"**Checksum:** `{version.get('checksum', '')}`  ")
    if meta.get("change_description"):
        lines.append(f"**Change:** {meta['change_description']}  ")
    lines.append("\n---\n")
    lines.append(version.get("content", ""))
    lines.append("\n---")
    lines.append(_next_steps([
        "Use `memory_bank_revert_file_to_version` to restore this version as current",
        "Use `memory_bank_compare_versions` to compare with other versions",
    ]))
    return "\n".join(lines)


def format_comparison(result: dict) -> str:
    """Format a positional diff as a list of line changes."""
    comparison = result.get("comparison") or {}
    differences = comparison.get("differences", [])
    v1, v2 = result.get("version1"), result.get("version2")
    header = (
        f"Compared versions {v1} and {v2} of file '{result.get('file_name', '')}' "
        f"in project '{result.get('project_name', '')}'"
    )
    if not differences:
        return f"{header}: no differences."

    markers = {"addition": "+", "deletion": "-", "modification": "~"}
    lines = [f"{header}: {len(differences)} difference(s).\n", "```diff"]
    for d in differences:
        lines.append(f"{markers.get(d.get('type'), '?')} line {d.get('line')}: {d.get('content', '')}")
    lines.append("```")
    lines.append(
        "\nLines are compared by position: an inserted or removed line shifts "
        "every following line and shows up as a run of modifications."
    )
    return "\n".join(lines)


def format_revert_result(result: dict) -> str:
    """Format a successful revert."""
    lines = [
        f"Reverted {result.get('file_name', '')} to version {result.get('reverted_to_version')}.",
        f"- **New version:** {result.get('new_version')}",
        f"- **Timestamp:** {result.get('timestamp', '')}",
        "",
        "Reverting created a new version with the old content; the previous "
        "current content is preserved in the version history.",
    ]
    lines.append(_next_steps([
        "Use `memory_bank_read` to view the reverted content",
        "Use `memory_bank_version_history` to see the new version history",
    ]))
    return "\n".join(lines)


def format_cleanup_result(result: dict) -> str:
    """Format a cleanup summary."""
    return (
        f"Cleaned up old versions in project '{result.get('project_name', '')}': "
        f"{result.get('deleted_versions', 0)} version(s) deleted, "
        f"keeping at most {result.get('max_versions_per_file')} per file."
    )
