"""External process execution"""

import asyncio
import logging
import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of an external command"""
    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)

    @property
    def error_output(self) -> str:
        """Best description of a failure for error messages"""
        output = self.stderr.strip() or self.stdout.strip()
        return output or f"exit code {self.returncode}"


class ProcessRunner(ABC):
    """Capability to run a command in a working directory"""

    @abstractmethod
    async def run(self, command: Sequence[str], cwd: Optional[Path] = None) -> ProcessResult:
        """
        Run a command to completion

        Args:
            command: Program and arguments
            cwd: Working directory

        Returns:
            ProcessResult with exit code and captured output
        """
        pass


class AsyncProcessRunner(ProcessRunner):
    """Runs commands as asyncio subprocesses"""

    async def run(self, command: Sequence[str], cwd: Optional[Path] = None) -> ProcessResult:
        command = [str(part) for part in command]
        logger.debug(f"Running {shlex.join(command)} in {cwd or '.'}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(cwd) if cwd else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except FileNotFoundError:
            return ProcessResult(command, 127, "", f"command not found: {command[0]}")

        stdout, stderr = await process.communicate()
        result = ProcessResult(
            command=command,
            returncode=process.returncode,
            stdout=stdout.decode(errors='replace'),
            stderr=stderr.decode(errors='replace')
        )

        if result.success:
            logger.debug(f"{result.command_line} finished")
        else:
            logger.debug(f"{result.command_line} exited with {result.returncode}: {result.error_output}")

        return result
