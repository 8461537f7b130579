"""Lexical safety gate over generated code.

This is advisory filtering on the text of the script, not isolation: it
constrains which facilities the model output may mention. It does not look at
arguments or targets, so an accepted script can still be destructive (for
example ``shutil.rmtree`` on an unintended path).
"""

from typing import Iterable

from aicc.domain.models.validation_verdict import ValidationVerdict

NO_SAFE_OPERATION = "no recognized safe operation"

# Any match rejects the script outright, whatever else it contains.
DENYLIST: tuple[str, ...] = (
    # dynamic evaluation / execution
    "eval(",
    "exec(",
    # process invocation
    "subprocess",
    "os.system",
    "os.popen",
    "os.spawn",
    "posix_spawn",
    "os.exec",
    "os.fork",
    "pty.spawn",
    # dynamic module loading
    "__import__",
    "importlib",
    "runpy",
    # namespace introspection
    "globals(",
    "locals(",
    "vars(",
    # dynamic compilation
    "compile(",
    # interactive reads
    "input(",
    "getpass",
    "sys.stdin",
)

# At least one marker must be present for the script to be accepted.
ALLOWLIST: tuple[str, ...] = (
    "import os",
    "import shutil",
    "import pathlib",
    "from pathlib import",
    "import glob",
    "import zipfile",
    "import tarfile",
    "os.path",
    "os.makedirs",
    "os.mkdir",
    "os.remove",
    "os.rename",
    "os.listdir",
    "shutil.",
    "shutil.move",
    "shutil.copy",
    "shutil.rmtree",
    "shutil.make_archive",
    "shutil.unpack_archive",
    "pathlib.",
    "path(",
    "glob.glob",
    "zipfile.",
    "tarfile.",
)


class CodeValidator:
    """Denylist/allowlist gate with case-insensitive substring matching.

    Policy:
        1. Any denylist token present -> reject, reason is the token.
        2. Otherwise accept iff at least one allowlist marker is present.
        3. Otherwise reject with "no recognized safe operation".
    """

    def __init__(
        self,
        denylist: Iterable[str] = DENYLIST,
        allowlist: Iterable[str] = ALLOWLIST,
    ) -> None:
        self._denylist = tuple(token.lower() for token in denylist)
        self._allowlist = tuple(marker.lower() for marker in allowlist)

    @property
    def denylist(self) -> tuple[str, ...]:
        return self._denylist

    @property
    def allowlist(self) -> tuple[str, ...]:
        return self._allowlist

    def validate(self, code: str) -> ValidationVerdict:
        lowered = code.lower()

        for token in self._denylist:
            if token in lowered:
                return ValidationVerdict.reject(token)

        if any(marker in lowered for marker in self._allowlist):
            return ValidationVerdict.accept()

        return ValidationVerdict.reject(NO_SAFE_OPERATION)
