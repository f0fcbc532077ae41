"""Template source collection.

Resolves a file or directory path into an ordered list of ``TemplateSource``
records. A single unreadable file never aborts the walk; it is logged and
reported back as skipped.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import TemplateNotFoundError, UnreadableFileError
from ..logging_config import get_logger
from ..models import SkippedFile, TemplateSource
from .dialects import classify_dialect

logger = get_logger(__name__)


@dataclass
class CollectionResult:
    sources: list[TemplateSource] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)


def _exists(path: Path) -> bool:
    try:
        return path.exists()
    except (OSError, ValueError):
        # name too long, embedded NUL
        return False


def resolve_path(path: Union[str, Path], base_dir: Optional[Union[str, Path]] = None) -> Path:
    """Resolve a template path, trying ``base_dir`` for relative paths.

    Raises:
        TemplateNotFoundError: If neither candidate exists.
    """
    candidate = Path(path)
    if _exists(candidate):
        return candidate
    if base_dir is not None and not candidate.is_absolute():
        under_base = Path(base_dir) / candidate
        if _exists(under_base):
            return under_base
    raise TemplateNotFoundError(str(path))


def read_template(filepath: Path, hint: Optional[str] = "auto") -> TemplateSource:
    """Read one template file and classify its dialect.

    Raises:
        UnreadableFileError: If the file cannot be read.
    """
    try:
        with open(filepath, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()
        stat = filepath.stat()
    except OSError as e:
        raise UnreadableFileError(filepath, str(e))

    return TemplateSource(
        path=str(filepath),
        dialect=classify_dialect(str(filepath), text, hint),
        text=text,
        size_bytes=stat.st_size,
        mtime=stat.st_mtime,
    )


def _matches_suffix(filepath: Path, suffixes: tuple[str, ...]) -> bool:
    return filepath.name.lower().endswith(suffixes)


def _in_skipped_dir(filepath: Path, root: Path, skip_dirs: tuple[str, ...]) -> bool:
    try:
        parts = filepath.relative_to(root).parts[:-1]
    except ValueError:
        parts = filepath.parts[:-1]
    return any(part in skip_dirs for part in parts)


def collect_templates(
    path: Union[str, Path],
    base_dir: Optional[Union[str, Path]] = None,
    config: AnalysisConfig = DEFAULT_CONFIG,
    hint: Optional[str] = "auto",
) -> CollectionResult:
    """
    Collect template sources from a file or directory.

    Args:
        path: File or directory to collect
        base_dir: Base directory for relative paths (defaults to config.views_root)
        config: Suffix, skip-directory and size settings
        hint: Template type hint passed to the dialect classifier

    Returns:
        Sources sorted by path, plus any skipped files

    Raises:
        TemplateNotFoundError: If the path resolves to nothing
    """
    root = resolve_path(path, base_dir if base_dir is not None else config.views_root)
    result = CollectionResult()

    if root.is_file():
        candidates = [root]
    else:
        candidates = sorted(
            p
            for p in root.rglob("*")
            if _matches_suffix(p, config.template_suffixes)
            and not _in_skipped_dir(p, root, config.skip_dirs)
        )

    for filepath in candidates:
        if not filepath.is_file():
            continue

        try:
            size = filepath.stat().st_size
        except OSError as e:
            logger.warning(f"Cannot stat {filepath}: {e}")
            result.skipped.append(SkippedFile(str(filepath), str(e)))
            continue
        if size > config.max_file_size_bytes:
            logger.debug(f"Skipped (size): {filepath} ({size} bytes)")
            result.skipped.append(SkippedFile(str(filepath), f"larger than {config.max_file_size_mb} MB"))
            continue

        try:
            result.sources.append(read_template(filepath, hint))
            logger.debug(f"Collected: {filepath}")
        except UnreadableFileError as e:
            logger.warning(f"Access error for {filepath}: {e.reason}")
            result.skipped.append(SkippedFile(str(filepath), e.reason))

    logger.debug(
        f"Collection complete: {len(result.sources)} collected, {len(result.skipped)} skipped"
    )
    return result
