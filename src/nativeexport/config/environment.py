"""
dotenv support.

``NATIVEEXPORT_*`` overrides may be kept in a project ``.env`` file instead
of the shell. The file is read into os.environ at most once per process;
variables already set in the shell are left untouched.
"""

from pathlib import Path

from dotenv import load_dotenv

_dotenv_loaded: bool = False


def ensure_dotenv_loaded(env_file: str = ".env") -> bool:
    """Read ``env_file`` into os.environ unless that already happened.

    Args:
        env_file: dotenv file, relative to the working directory or absolute

    Returns:
        False only when this call looked for the file and found none
    """
    global _dotenv_loaded
    if _dotenv_loaded:
        return True
    _dotenv_loaded = True

    path = Path(env_file)
    if not path.is_file():
        return False
    load_dotenv(path, override=False)
    return True


def reset_environment() -> None:
    """Allow the next load to read the dotenv file again."""
    global _dotenv_loaded
    _dotenv_loaded = False
