import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Mapping, Sequence, Union

from minifold.core.errors import FileSystemError
from minifold.utils.logger import get_logger


PathLike = Union[str, Path]


# ============================================================================
# File Processor
# ============================================================================


class FileProcessor:
    """Handles file operations for inputs, outputs and scratch files."""

    @staticmethod
    def base_name(file_path: PathLike) -> str:
        """Return the file name without directory and last extension."""
        return os.path.splitext(os.path.basename(str(file_path)))[0]

    @staticmethod
    def read_file(file_path: PathLike) -> str:
        """Read a text file, raising FileSystemError on failure."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise FileSystemError(file_path, f"Cannot read input file ({e.strerror or e})") from e

    @staticmethod
    def read_files(file_paths: Sequence[PathLike]) -> str:
        """Read several files and join their content in order."""
        return "\n".join(FileProcessor.read_file(path) for path in file_paths)

    @staticmethod
    def write_file(file_path: PathLike, content: str) -> Path:
        """
        Write content to a file, creating the parent directory if needed.

        Args:
            file_path: Destination path
            content: Text to write

        Returns:
            Path of the written file
        """
        path = Path(file_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise FileSystemError(path, f"Cannot write output file ({e.strerror or e})") from e
        get_logger().debug(f"Wrote {len(content)} characters to {path}")
        return path

    @staticmethod
    def delete_file(file_path: PathLike) -> None:
        """Delete a file if it exists."""
        try:
            Path(file_path).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise FileSystemError(file_path, f"Cannot delete file ({e.strerror or e})") from e

    @staticmethod
    @contextmanager
    def staged_content(content: str, suffix: str = "") -> Iterator[Path]:
        """
        Stage in-memory content as a uniquely named scratch file.

        The file is removed when the block exits, whether or not it raised.
        If the block raised, a failure to remove the file is logged and the
        original error propagates.

        Args:
            content: Text to stage
            suffix: File suffix (e.g. ".js") for tools that sniff extensions

        Yields:
            Path to the scratch file
        """
        try:
            fd, name = tempfile.mkstemp(prefix="minifold-", suffix=suffix)
        except OSError as e:
            raise FileSystemError(tempfile.gettempdir(), "Cannot create scratch file") from e

        path = Path(name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            get_logger().debug(f"Staged {len(content)} characters in {path}")
            yield path
        except BaseException:
            # Keep the in-flight error; a cleanup failure is only logged
            try:
                FileProcessor.delete_file(path)
            except FileSystemError as e:
                get_logger().warning(str(e))
            raise
        FileProcessor.delete_file(path)

    @staticmethod
    def build_args(options: Mapping[str, Any], prefix: str = "--") -> List[str]:
        """
        Turn an options mapping into command-line arguments.

        ``True`` becomes a bare flag, ``False``/``None`` are dropped, lists
        repeat the flag for each value and anything else becomes ``flag value``.

        Args:
            options: Option names mapped to values
            prefix: Prefix put in front of each option name

        Returns:
            List of arguments
        """
        args: List[str] = []
        for key, value in options.items():
            flag = f"{prefix}{key}"
            if value is None or value is False:
                continue
            if value is True:
                args.append(flag)
            elif isinstance(value, (list, tuple)):
                for item in value:
                    args.extend([flag, str(item)])
            else:
                args.extend([flag, str(value)])
        return args
