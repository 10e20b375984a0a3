"""Copy project resources to the build output directory."""

import locale
import logging
import os
import shutil
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..errors import ResourcesError
from ..project import MavenProject, Resource, resolve_expressions
from .filtering import (
    DEFAULT_NON_FILTERED_EXTENSIONS,
    filter_text,
    is_filtered_extension,
    load_properties,
    path_matches,
)


def filter_values(project: MavenProject, filters: Sequence[str]) -> Dict[str, str]:
    """Collect token values for filtering.

    Filter files are loaded in order, later files winning. Project
    properties and ``project.*`` values override the filter files. Values
    referring to other values, such as a property set to
    ``${project.version}``, are resolved.
    """
    values: Dict[str, str] = {}
    for filter_file in filters:
        path = Path(project.resolve(filter_file))
        if not path.is_absolute():
            path = project.basedir / path
        values.update(load_properties(path))
    values.update(project.expression_values())
    return {key: resolve_expressions(value, values) for key, value in values.items()}


def _is_selected(relative: str, resource: Resource) -> bool:
    if resource.includes and not path_matches(relative, resource.includes):
        return False
    return not path_matches(relative, resource.excludes)


def _is_stale(source: Path, target: Path) -> bool:
    return not target.exists() or source.stat().st_mtime > target.stat().st_mtime


class ResourcesCopier:
    """Copies resource directories, replacing tokens in filtered ones."""

    def __init__(self, project: MavenProject, output_directory: Path,
                 encoding: Optional[str] = None,
                 filters: Optional[Sequence[str]] = None,
                 extra_filters: Optional[Sequence[str]] = None,
                 escape_string: Optional[str] = None,
                 overwrite: bool = False,
                 include_empty_dirs: bool = False,
                 non_filtered_extensions: Optional[Sequence[str]] = None,
                 logger: Optional[logging.Logger] = None):
        self.project = project
        self.output_directory = Path(output_directory)
        self.encoding = encoding or project.source_encoding
        self.filters = list(project.filters if filters is None else filters)
        self.extra_filters = list(extra_filters or [])
        self.escape_string = escape_string
        self.overwrite = overwrite
        self.include_empty_dirs = include_empty_dirs
        self.non_filtered_extensions = list(DEFAULT_NON_FILTERED_EXTENSIONS) + list(non_filtered_extensions or [])
        self.logger = logger or logging.getLogger(__name__)

    def all_filters(self) -> List[str]:
        # Extra filters come first so the build filters win on conflicts
        return self.extra_filters + self.filters

    def copy(self, resources: Optional[Sequence[Resource]] = None) -> List[Path]:
        """Copy resources (the project's by default).

        Returns:
            Paths of the files written

        Raises:
            ResourcesError: If a filter file or resource can't be processed
        """
        resources = self.project.resources if resources is None else resources

        encoding = self.encoding
        if not encoding and any(r.filtering for r in resources):
            encoding = locale.getpreferredencoding(False)
            self.logger.warning(
                f"File encoding has not been set, using platform encoding {encoding}, "
                "i.e. build is platform dependent!")

        values = filter_values(self.project, self.all_filters()) if any(r.filtering for r in resources) else {}

        copied = []
        for resource in resources:
            copied.extend(self._copy_resource(resource, values, encoding))
        return copied

    def _copy_resource(self, resource: Resource, values: Dict[str, str], encoding: Optional[str]) -> List[Path]:
        source_dir = Path(resource.directory)
        if not source_dir.is_absolute():
            source_dir = self.project.basedir / source_dir
        if not source_dir.is_dir():
            self.logger.info(f"skip non existing resourceDirectory {source_dir}")
            return []

        target_dir = self.output_directory
        if resource.target_path:
            target_dir = target_dir / resource.target_path

        copied = []
        for root, dirs, files in os.walk(source_dir):
            dirs.sort()
            root_path = Path(root)
            relative_root = root_path.relative_to(source_dir)

            if self.include_empty_dirs and not files and not dirs:
                relative = relative_root.as_posix()
                if relative != "." and _is_selected(relative + "/", resource):
                    (target_dir / relative_root).mkdir(parents=True, exist_ok=True)

            for name in sorted(files):
                relative = (relative_root / name).as_posix()
                if not _is_selected(relative, resource):
                    continue
                source = root_path / name
                target = target_dir / relative
                if not self.overwrite and not _is_stale(source, target):
                    self.logger.debug(f"{relative} wasn't copied because it has already been packaged.")
                    continue
                filtering = resource.filtering and is_filtered_extension(source, self.non_filtered_extensions)
                self._copy_file(source, target, values if filtering else None, encoding)
                copied.append(target)

        self.logger.info(f"Copying {len(copied)} resource{'s' if len(copied) != 1 else ''}")
        return copied

    def _copy_file(self, source: Path, target: Path, values: Optional[Dict[str, str]], encoding: Optional[str]) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if values is None:
                shutil.copy2(source, target)
            else:
                # Line endings are kept as they are in the source
                with source.open(encoding=encoding, newline="") as f:
                    text = f.read()
                with target.open("w", encoding=encoding, newline="") as f:
                    f.write(filter_text(text, values, self.escape_string))
        except (OSError, UnicodeError) as e:
            raise ResourcesError(f"Error copying resource {source}: {e}") from e


def copy_resources(project: MavenProject, output_directory: Path, **options) -> List[Path]:
    """Copy the project's resources to output_directory.

    Keyword options are passed to :class:`ResourcesCopier`.
    """
    return ResourcesCopier(project, output_directory, **options).copy()
