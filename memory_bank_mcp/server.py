"""Memory bank MCP server: project files with version history for AI editors.

Exposes file tools (list, read, write, update, delete) and version tools
(history, read version, compare, revert, cleanup) over stdio transport.
Argument names are camelCase to match existing memory bank clients.
"""

from typing import Optional

from mcp.server.fastmcp import FastMCP

from .api_client import MemoryBankClient
from .formatters import (
    format_cleanup_result,
    format_comparison,
    format_file,
    format_file_list,
    format_project_list,
    format_revert_result,
    format_version,
    format_version_history,
    format_write_result,
)

mcp = FastMCP("Memory Bank")
client = MemoryBankClient()


def _require_positive(name: str, value: int) -> Optional[str]:
    """Return an error message if ``value`` is not a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return f"Invalid {name}: must be a positive integer, got {value!r}"
    return None


# -- Projects and files -----------------------------------------------------


@mcp.tool()
async def memory_bank_list_projects() -> str:
    """List all projects in the memory bank with file counts and sizes."""
    try:
        projects = await client.list_projects()
        return format_project_list(projects)
    except Exception as e:
        return f"Error listing projects: {e}"


@mcp.tool()
async def memory_bank_list_project_files(projectName: str) -> str:
    """List the files of a project, most recently updated first.

    Args:
        projectName: Project name
    """
    try:
        files = await client.list_files(projectName)
        return format_file_list(projectName, files)
    except Exception as e:
        return f"Error listing files: {e}"


@mcp.tool()
async def memory_bank_read(projectName: str, fileName: str) -> str:
    """Read the current content of a file.

    Args:
        projectName: Project name
        fileName: File name (e.g. "activeContext.md")
    """
    try:
        f = await client.read_file(projectName, fileName)
        if f is None:
            return (
                f"File '{fileName}' not found in project '{projectName}'. "
                "Use memory_bank_list_project_files to see available files."
            )
        return format_file(f)
    except Exception as e:
        return f"Error reading file: {e}"


@mcp.tool()
async def memory_bank_write(projectName: str, fileName: str, content: str) -> str:
    """Create a new file. The project is created on first write.

    Fails if the file already exists; use memory_bank_update to change it.
    The write is recorded as version 1 of the file.

    Args:
        projectName: Project name
        fileName: File name, must end in an allowed extension (e.g. .md)
        content: Full file content
    """
    try:
        f = await client.write_file(projectName, fileName, content)
        return format_write_result(f, "Created")
    except Exception as e:
        return f"Error writing file: {e}"


@mcp.tool()
async def memory_bank_update(
    projectName: str,
    fileName: str,
    content: str,
    changeDescription: Optional[str] = None,
) -> str:
    """Replace the content of an existing file, recording a new version.

    Args:
        projectName: Project name
        fileName: File name
        content: New full content (replaces existing)
        changeDescription: Optional note stored with the new version
    """
    try:
        f = await client.update_file(projectName, fileName, content, changeDescription)
        return format_write_result(f, "Updated")
    except Exception as e:
        return f"Error updating file: {e}"


@mcp.tool()
async def memory_bank_delete_file(projectName: str, fileName: str) -> str:
    """Delete a file together with its whole version history.

    Args:
        projectName: Project name
        fileName: File name
    """
    try:
        deleted = await client.delete_file(projectName, fileName)
        if not deleted:
            return f"File '{fileName}' not found in project '{projectName}'."
        return f"Deleted '{fileName}' and all of its versions from project '{projectName}'."
    except Exception as e:
        return f"Error deleting file: {e}"


@mcp.tool()
async def memory_bank_delete_project(projectName: str) -> str:
    """Delete a project, all of its files and every stored version.

    Args:
        projectName: Project name
    """
    try:
        deleted = await client.delete_project(projectName)
        if not deleted:
            return f"Project '{projectName}' not found."
        return f"Deleted project '{projectName}' with all files and versions."
    except Exception as e:
        return f"Error deleting project: {e}"


# -- Versions ---------------------------------------------------------------


@mcp.tool()
async def memory_bank_version_history(projectName: str, fileName: str) -> str:
    """Show the version history of a file, newest first.

    Args:
        projectName: Project name
        fileName: File name
    """
    try:
        history = await client.get_versions(projectName, fileName)
        return format_version_history(history)
    except Exception as e:
        return f"Error getting version history: {e}"


@mcp.tool()
async def memory_bank_read_version(projectName: str, fileName: str, version: int) -> str:
    """Read the full content of one historical version of a file.

    Args:
        projectName: Project name
        fileName: File name
        version: Version number (1 is the first write)
    """
    invalid = _require_positive("version", version)
    if invalid:
        return invalid
    try:
        v = await client.get_version(projectName, fileName, version)
        if v is None:
            return f"Version {version} not found for file {fileName} in project {projectName}"
        return format_version(v)
    except Exception as e:
        return f"Error reading version: {e}"


@mcp.tool()
async def memory_bank_revert_file_to_version(projectName: str, fileName: str, version: int) -> str:
    """Restore an earlier version's content as the file's current content.

    History is never rewritten: the revert is recorded as a new version
    whose content equals the target version.

    Args:
        projectName: Project name
        fileName: File name
        version: Version number to restore
    """
    invalid = _require_positive("version", version)
    if invalid:
        return invalid
    try:
        result = await client.revert_to_version(projectName, fileName, version)
        if result is None:
            return f"Cannot revert: Version {version} not found for file {fileName} in project {projectName}"
        return format_revert_result(result)
    except Exception as e:
        return f"Error reverting file: {e}"


@mcp.tool()
async def memory_bank_compare_versions(
    projectName: str,
    fileName: str,
    version1: int,
    version2: int,
) -> str:
    """Compare two versions of a file line by line.

    Lines are paired by position, so an inserted line shows up as a run
    of modifications after it.

    Args:
        projectName: Project name
        fileName: File name
        version1: Base version number
        version2: Version number to compare against the base
    """
    for name, value in (("version1", version1), ("version2", version2)):
        invalid = _require_positive(name, value)
        if invalid:
            return invalid
    try:
        result = await client.compare_versions(projectName, fileName, version1, version2)
        if result is None:
            return "Could not compare file versions"
        return format_comparison(result)
    except Exception as e:
        return f"Error comparing versions: {e}"


@mcp.tool()
async def memory_bank_cleanup_old_versions(
    projectName: str,
    maxVersionsPerFile: Optional[int] = None,
) -> str:
    """Delete old versions across every file of a project.

    Keeps the newest versions of each file; when age-based cleanup is
    enabled on the server, versions older than the retention period are
    removed as well.

    Args:
        projectName: Project name
        maxVersionsPerFile: Versions to keep per file (server default if omitted)
    """
    if maxVersionsPerFile is not None:
        invalid = _require_positive("maxVersionsPerFile", maxVersionsPerFile)
        if invalid:
            return invalid
    try:
        result = await client.cleanup_old_versions(projectName, maxVersionsPerFile)
        return format_cleanup_result(result)
    except Exception as e:
        return f"Error cleaning up versions: {e}"


def main() -> None:
    """Entry point: runs the MCP server over stdio."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
