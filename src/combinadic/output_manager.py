# output_manager.py

import os

from combinadic.fmt import strip_ansi
from combinadic.workspace import workspace_dir


def resolve_output_path(path: str, workspace_root: str) -> str:
    """
    Resolve user-provided output path.

    Rules:
    - '~' expanded to user home
    - Absolute paths unchanged
    - Relative paths are relative to workspace_root
    """
    if not path:
        raise ValueError("Output path is empty")

    path = os.path.expanduser(path)

    if os.path.isabs(path):
        return os.path.normpath(path)

    return os.path.normpath(os.path.join(workspace_root, path))


def validate_output_setting(output_file: str | None) -> str | None:
    """
    - None / "" => ok (screen only)
    - trailing "/" => ok (per-query directory mode)
    - path/to/file => must not use a forbidden name or extension
    Returns the output_file, or raises ValueError.
    """
    FORBIDDEN_FILENAMES = {
        ".gitignore", "LICENSE", "pyproject.toml",
        # Windows reserved device names (case-insensitive on Windows)
        "con", "prn", "aux", "nul",
        "com1", "com2", "com3", "com4", "com5", "com6", "com7", "com8", "com9",
        "lpt1", "lpt2", "lpt3", "lpt4", "lpt5", "lpt6", "lpt7", "lpt8", "lpt9",
    }
    FORBIDDEN_EXTENSIONS = {".py", ".md", ".toml"}

    if not output_file:
        return output_file
    if output_file in (".", "./") or output_file.endswith("/"):
        return output_file

    basename = os.path.basename(output_file)
    name_no_ext, ext = os.path.splitext(basename)
    if basename.lower() in FORBIDDEN_FILENAMES or name_no_ext.lower() in FORBIDDEN_FILENAMES:
        raise ValueError(f"Forbidden output filename: {basename}")
    if ext.lower() in FORBIDDEN_EXTENSIONS:
        raise ValueError(f"Forbidden output file extension: {ext.lower()}")
    return output_file


class OutputManager:
    """
    Handles all printing/output, including to screen and/or file.

    Usage:
        # Split mode (one file per query, e.g. exports/13C5.txt):
        om = OutputManager(output_file="exports/", name="13C5")
        om.write("Hello")   # prints and buffers; file written on close()
        om.close()

        # Single file (append all runs to one file):
        om = OutputManager(output_file="exports/all.txt")
        om.write("Hello")
        om.close()
    """

    def __init__(self, output_file: str | None = None, quiet: bool = False, name: str | None = None):
        """
        Parameters:
            output_file:
                None or ""       => screen only
                endswith "/"     => one file per query in that directory
                path/to/file.txt => append all runs to this file
            quiet: if True, no output to screen (only to file)
            name: file stem used in per-query mode
        """
        self.quiet = quiet
        self.output_file = output_file or ""
        self.name = name
        self._buffer: list[str] = []
        self._closed = False

        self._mode: str = "none"     # "none" | "split" | "single"
        self._path: str | None = None

        workspace = str(workspace_dir())
        if self.output_file in (".", "./") or self.output_file.endswith("/"):
            if not name:
                raise ValueError("A name must be provided when outputting to a directory.")
            directory = resolve_output_path(self.output_file, workspace)
            os.makedirs(directory, exist_ok=True)
            self._mode = "split"
            self._path = os.path.join(directory, f"{name}.txt")
        elif self.output_file:
            path = resolve_output_path(self.output_file, workspace)
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            self._mode = "single"
            self._path = path

    def write(self, *args, sep: str = " ", end: str = "\n") -> None:
        """Write to screen and file (if configured)."""
        text = sep.join(str(a) for a in args) + end
        self._buffer.append(text)

        if not self.quiet:
            print(text, end="")

        if self._mode == "single" and self._path:
            with open(self._path, "a", encoding="utf-8") as fh:
                fh.write(strip_ansi(text))
        # "split" mode writes once on close(), so the file is not truncated per call.

    def write_screen(self, *args, sep: str = " ", end: str = "\n", flush: bool = True) -> None:
        """Write only to the screen, never to the file."""
        if self.quiet:
            return
        print(*args, sep=sep, end=end, flush=flush)

    def close(self) -> None:
        """Flush buffered output to the per-query file, or add a run separator."""
        if self._closed:
            return
        self._closed = True
        if not self._buffer:
            return
        if self._mode == "split" and self._path:
            with open(self._path, "w", encoding="utf-8") as fh:
                fh.write(strip_ansi("".join(self._buffer)))
        elif self._mode == "single" and self._path:
            with open(self._path, "a", encoding="utf-8") as fh:
                fh.write("\n")  # one empty line between runs

    def __enter__(self) -> "OutputManager":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
