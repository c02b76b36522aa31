"""
Path-template resolution for locating the listing that belongs to a
source file, with the variables debug/task configurations usually offer:

    ${workspaceFolder}/build/${fileBasenameNoExtension}.s
"""
import fnmatch
import os
import posixpath
import re
from typing import Dict, Mapping, Optional

RE_VARIABLE = re.compile(r"\$\{(.*?)\}")


def path_variables(file_path: str, workspace_folder: str) -> Dict[str, str]:
    parsed_dir, parsed_base = posixpath.split(file_path)
    name, ext = posixpath.splitext(parsed_base)
    workspace = workspace_folder.rstrip("/") or "/"
    return {
        # the folder opened as the workspace
        "workspaceFolder": workspace,
        # its name without any slashes
        "workspaceFolderBasename": posixpath.basename(workspace),
        # the current file
        "file": file_path,
        # the current file relative to workspaceFolder
        "relativeFile": posixpath.relpath(file_path, workspace),
        "fileBasename": parsed_base,
        "fileBasenameNoExtension": name,
        "fileDirname": parsed_dir,
        "fileExtname": ext,
        "pathSeparator": "/",
    }


def resolve_path(template: str, variables: Mapping[str, str]) -> str:
    """
    Substitute ${name} placeholders; unknown names stay as written.
    The result is normalized, reducing '.' and '..' parts.
    """
    def substitute(match: re.Match) -> str:
        value = variables.get(match.group(1))
        return value if value is not None else match.group(0)

    return posixpath.normpath(RE_VARIABLE.sub(substitute, template))


def default_disassembly_path(file_path: str) -> str:
    """foo/bar.c -> foo/bar.S"""
    root, ext = posixpath.splitext(file_path)
    return (root if ext else file_path) + ".S"


def disassembly_path_for(
    file_path: str,
    associations: Optional[Mapping[str, str]] = None,
    workspace_folder: Optional[str] = None,
) -> str:
    """
    Find the listing for a source file: the first association whose glob
    matches wins; without one (or without a workspace) the extension is
    swapped for '.S'.
    """
    file_path = file_path.replace(os.sep, "/")
    if not associations or workspace_folder is None:
        return default_disassembly_path(file_path)

    workspace_folder = workspace_folder.replace(os.sep, "/")
    variables = path_variables(file_path, workspace_folder)
    for pattern, template in associations.items():
        if fnmatch.fnmatch(file_path, pattern) or fnmatch.fnmatch(posixpath.basename(file_path), pattern):
            return resolve_path(template, variables)
    return default_disassembly_path(file_path)
