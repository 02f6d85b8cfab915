"""``depsync report``: which libraries are shared, and where they drift."""

from __future__ import annotations

import os
from typing import Dict, Iterable, List

import render
from cli_config import Settings
from constants import ExitCodes
from versioning.coordinates import find_git_coordinates, find_registry_coordinates
from versioning.models import FileContent
from workspace import find_dep_files, load_contents

Matrix = Dict[str, Dict[str, str]]


def build_matrix(contents: Iterable[FileContent]) -> Matrix:
    """Library -> project -> declared version (``tag sha`` for git deps)."""
    matrix: Matrix = {}
    for content in contents:
        for coordinate in find_registry_coordinates(content.text):
            matrix.setdefault(coordinate.library, {})[content.project] = coordinate.version
        for coordinate in find_git_coordinates(content.text):
            matrix.setdefault(coordinate.library, {})[content.project] = f"{coordinate.tag} {coordinate.sha}"
    return matrix


def shared_libraries(matrix: Matrix) -> Matrix:
    """Only libraries declared by more than one project, sorted by name."""
    return {lib: matrix[lib] for lib in sorted(matrix) if len(matrix[lib]) > 1}


def drifted_libraries(matrix: Matrix) -> List[str]:
    """Libraries whose projects disagree on the version."""
    return [lib for lib, versions in matrix.items() if len(set(versions.values())) > 1]


def run_report(settings: Settings) -> int:
    """Print the shared-library matrix."""
    root_dir = os.path.realpath(settings.root)
    contents = load_contents(find_dep_files(root_dir, settings.skip_dirs, settings.depth))
    shared = shared_libraries(build_matrix(contents))
    drifted = drifted_libraries(shared)
    projects = sorted({project for versions in shared.values() for project in versions})

    render.heading("Dependency Matrix")
    render.heading(f"{len(shared)} libraries shared, {len(drifted)} with version drift")
    if shared:
        render.show(render.matrix_table(shared, projects, drifted))
    return ExitCodes.SUCCESS.value
